"""Data models for transcripts and summaries."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List

from tube2tldr.errors import (
    EmptyTranscriptError,
    InvalidInputError,
    StructuralParseError,
)


def timestamp_to_seconds(timestamp_label: str) -> int:
    """
    Convert a caption timestamp like "1:02:03" or "02:03" to seconds.

    Groups are base-60 positional, most significant first, and there can be
    any number of them.
    """
    if not timestamp_label or not timestamp_label.strip():
        raise StructuralParseError("Empty timestamp")

    total = 0
    for piece in timestamp_label.strip().split(":"):
        piece = piece.strip()
        if not (piece.isascii() and piece.isdigit()):
            raise StructuralParseError(f"Invalid timestamp string {timestamp_label!r}")
        total = total * 60 + int(piece)
    return total


@dataclass(frozen=True)
class RawTranscriptEntry:
    """One transcript panel entry as parsed, before validation."""

    text: str
    timestamp_label: str
    offset_seconds: int


@dataclass(frozen=True)
class TranscriptLine:
    """A single non-empty caption line with its timestamp."""

    text: str
    timestamp_label: str
    offset_seconds: int

    def __post_init__(self):
        if not isinstance(self.text, str) or not self.text.strip():
            raise InvalidInputError("Transcript line text cannot be empty")
        if self.text != self.text.strip():
            raise InvalidInputError("Transcript line text must be trimmed")
        if not isinstance(self.timestamp_label, str) or not self.timestamp_label.strip():
            raise InvalidInputError("Transcript line timestamp label cannot be empty")
        if (
            isinstance(self.offset_seconds, bool)
            or not isinstance(self.offset_seconds, int)
            or self.offset_seconds < 0
        ):
            raise InvalidInputError(
                f"offset_seconds must be a non-negative integer, got {self.offset_seconds!r}"
            )
        try:
            expected = timestamp_to_seconds(self.timestamp_label)
        except StructuralParseError as e:
            raise InvalidInputError(str(e)) from e
        if expected != self.offset_seconds:
            raise InvalidInputError(
                f"offset_seconds {self.offset_seconds} does not match "
                f"timestamp {self.timestamp_label!r} ({expected})"
            )

    def to_dict(self) -> Dict[str, Any]:
        """Convert TranscriptLine to a dictionary for JSON serialization."""
        return asdict(self)


@dataclass
class Transcript:
    """
    Ordered transcript of one video.

    Built append-only while scanning parser output, then validated as a whole
    before being handed on.
    """

    video_id: str
    lines: List[TranscriptLine] = field(default_factory=list)

    def __post_init__(self):
        if not isinstance(self.video_id, str) or not self.video_id.strip():
            raise InvalidInputError("video_id cannot be empty")

    def add_line(self, line: TranscriptLine) -> None:
        if not isinstance(line, TranscriptLine):
            raise InvalidInputError(f"Expected a TranscriptLine, got {type(line).__name__}")
        self.lines.append(line)

    def validate(self) -> "Transcript":
        if not self.lines:
            raise EmptyTranscriptError(f"Transcript for video {self.video_id} has no lines")
        for ndx, line in enumerate(self.lines):
            if not isinstance(line, TranscriptLine):
                raise InvalidInputError(f"Line {ndx} is not a TranscriptLine")
        return self

    @property
    def duration_seconds(self) -> int:
        return self.lines[-1].offset_seconds if self.lines else 0

    def to_text(self) -> str:
        """Flatten the transcript into a single stream of text."""
        return " ".join(line.text for line in self.lines)

    def to_timestamped_text(self) -> str:
        return "\n".join(f"[{line.timestamp_label}] {line.text}" for line in self.lines)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "video_id": self.video_id,
            "lines": [line.to_dict() for line in self.lines],
        }


@dataclass(frozen=True)
class SummarizationUnit:
    """One chunk and the summary produced for it."""

    input_text: str
    summary_text: str


@dataclass
class ReductionResult:
    """
    All reduction passes of a summarisation run, first level first.

    Each level is the ordered list of units produced by one pass; its joined
    summaries are the input of the next level.
    """

    levels: List[List[SummarizationUnit]] = field(default_factory=list)

    @property
    def level_texts(self) -> List[str]:
        return [" ".join(unit.summary_text for unit in level) for level in self.levels]

    @property
    def first_level(self) -> str:
        texts = self.level_texts
        return texts[0] if texts else ""

    @property
    def final(self) -> str:
        texts = self.level_texts
        return texts[-1] if texts else ""
