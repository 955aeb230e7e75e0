"""
Transcript panel parsing and assembly.

Parsing is strict: an entry that is missing its timestamp or text element (or
has two of them) fails the whole parse. Skipping it would shift every later
offset. Assembly is lenient about a few empty lines but refuses panels that are
mostly empty, which is what a half rendered panel looks like.
"""

from __future__ import annotations

from typing import Iterable, List, Optional

from tube2tldr.config import PageSelectors
from tube2tldr.errors import (
    EmptyTranscriptError,
    InvalidInputError,
    StructuralParseError,
    TooManyEmptyLinesError,
)
from tube2tldr.models import (
    RawTranscriptEntry,
    Transcript,
    TranscriptLine,
    timestamp_to_seconds,
)
from tube2tldr.page import PageNode, PageTree

# Maximum number of contiguous empty lines tolerated in a transcript panel.
MAX_EMPTY_CONTIGUOUS_LINES = 5

__all__ = [
    "MAX_EMPTY_CONTIGUOUS_LINES",
    "TranscriptAssembler",
    "TranscriptParser",
    "timestamp_to_seconds",
]


class TranscriptParser:
    """Read (text, timestamp) pairs out of the revealed transcript panel."""

    def __init__(self, page: PageTree, selectors: Optional[PageSelectors] = None):
        self.page = page
        self.selectors = selectors or PageSelectors()

    def entry_elements(self) -> List[PageNode]:
        return self.page.find_by_tag(self.selectors.entry_tag)

    def count_entries(self) -> int:
        return len(self.entry_elements())

    def _single(self, entry: PageNode, ndx: int, tag: str, class_name: Optional[str] = None) -> PageNode:
        found = entry.find_all(tag, class_name)
        what = f"{tag}.{class_name}" if class_name else tag
        if not found:
            raise StructuralParseError(f"Transcript entry {ndx}: no {what} element found")
        if len(found) > 1:
            raise StructuralParseError(f"Transcript entry {ndx}: multiple {what} elements found")
        return found[0]

    def parse_entry(self, entry: PageNode, ndx: int) -> RawTranscriptEntry:
        timestamp_node = self._single(
            entry, ndx, self.selectors.timestamp_tag, self.selectors.timestamp_class
        )
        timestamp_label = timestamp_node.text().strip()
        try:
            offset_seconds = timestamp_to_seconds(timestamp_label)
        except StructuralParseError as e:
            raise StructuralParseError(f"Transcript entry {ndx}: {e}") from e

        text_node = self._single(entry, ndx, self.selectors.text_tag)
        return RawTranscriptEntry(
            text=text_node.text().strip(),
            timestamp_label=timestamp_label,
            offset_seconds=offset_seconds,
        )

    def parse_all(self) -> List[RawTranscriptEntry]:
        return [self.parse_entry(entry, ndx) for ndx, entry in enumerate(self.entry_elements())]


class TranscriptAssembler:
    """Fold raw panel entries into a validated Transcript."""

    def __init__(self, max_empty_lines: int = MAX_EMPTY_CONTIGUOUS_LINES):
        if max_empty_lines < 0:
            raise InvalidInputError("max_empty_lines cannot be negative")
        self.max_empty_lines = max_empty_lines

    def assemble(self, video_id: str, entries: Iterable[RawTranscriptEntry]) -> Transcript:
        if not isinstance(video_id, str) or not video_id.strip():
            raise InvalidInputError("video_id cannot be empty")

        transcript = Transcript(video_id=video_id)
        contiguous_empty = 0

        for ndx, entry in enumerate(entries):
            if not isinstance(entry, RawTranscriptEntry):
                raise InvalidInputError(f"Entry {ndx} is not a RawTranscriptEntry")

            # A few empty lines do show up in real transcripts.
            text = (entry.text or "").strip()
            if not text:
                contiguous_empty += 1
                if contiguous_empty > self.max_empty_lines:
                    raise TooManyEmptyLinesError(
                        f"More than {self.max_empty_lines} contiguous empty transcript lines "
                        f"(at entry {ndx})"
                    )
                continue

            contiguous_empty = 0
            transcript.add_line(
                TranscriptLine(
                    text=text,
                    timestamp_label=entry.timestamp_label,
                    offset_seconds=entry.offset_seconds,
                )
            )

        if not transcript.lines:
            raise EmptyTranscriptError(f"No transcript lines found for video {video_id}")
        return transcript.validate()
