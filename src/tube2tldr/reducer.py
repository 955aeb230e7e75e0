"""
Chunked hierarchical summarisation.

A reduction pass chunks the text, summarises every chunk in order and joins
the chunk summaries. When a pass produced more than one chunk its joined
summaries are reduced again ("summary of summaries"), until a pass fits in a
single chunk. For typical transcripts that means exactly two levels.
"""

from __future__ import annotations

import threading
from typing import Callable, List, Optional

from tube2tldr.chunk import DEFAULT_MAX_WORDS_PER_CHUNK, chunk_text, count_words, ensure_sentence_end
from tube2tldr.errors import (
    InvalidInputError,
    SummarizationCallError,
    SummarizationCancelled,
    Tube2TldrError,
)
from tube2tldr.models import ReductionResult, SummarizationUnit

SummarizeFn = Callable[[str], str]
StatusFn = Callable[[str], None]
LevelFn = Callable[[int, str], None]


class CancellationToken:
    """Cooperative cancellation, checked between chunks."""

    def __init__(self):
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def raise_if_cancelled(self) -> None:
        if self._event.is_set():
            raise SummarizationCancelled("Summarisation run was cancelled")


class SummarizationReducer:
    """Map-reduce style summarisation over word-budgeted chunks."""

    def __init__(self, max_words_per_chunk: int = DEFAULT_MAX_WORDS_PER_CHUNK, max_levels: int = 8):
        if isinstance(max_words_per_chunk, bool) or not isinstance(max_words_per_chunk, int) or max_words_per_chunk < 1:
            raise InvalidInputError("max_words_per_chunk must be a positive integer")
        if max_levels < 1:
            raise InvalidInputError("max_levels must be at least 1")
        self.max_words_per_chunk = max_words_per_chunk
        self.max_levels = max_levels

    def summarize_pass(
        self,
        text: str,
        summarize_fn: SummarizeFn,
        status_fn: Optional[StatusFn] = None,
        cancel: Optional[CancellationToken] = None,
        level: int = 1,
    ) -> List[SummarizationUnit]:
        """One reduction pass: chunk, then summarise each chunk in order."""
        status = status_fn or (lambda _msg: None)
        chunks = chunk_text(text, self.max_words_per_chunk)
        units: List[SummarizationUnit] = []

        for ndx, chunk in enumerate(chunks, 1):
            if cancel is not None:
                cancel.raise_if_cancelled()

            chunk = ensure_sentence_end(chunk)
            status(f"Level {level}: summarising chunk {ndx}/{len(chunks)} ({count_words(chunk)} words)...")
            try:
                summary = summarize_fn(chunk)
            except Tube2TldrError:
                raise
            except Exception as e:
                raise SummarizationCallError(f"Summarising chunk {ndx}/{len(chunks)} failed: {e}") from e

            if not isinstance(summary, str) or not summary.strip():
                raise SummarizationCallError(f"Empty summary returned for chunk {ndx}/{len(chunks)}")

            units.append(SummarizationUnit(input_text=chunk, summary_text=ensure_sentence_end(summary)))
            status(f"Level {level}: chunk {ndx}/{len(chunks)} done.")

        return units

    def reduce_levels(
        self,
        text: str,
        summarize_fn: SummarizeFn,
        status_fn: Optional[StatusFn] = None,
        on_level: Optional[LevelFn] = None,
        cancel: Optional[CancellationToken] = None,
    ) -> ReductionResult:
        """Reduce until a pass fits in one chunk; returns every level."""
        if not isinstance(text, str) or not text.strip():
            raise InvalidInputError("Text to summarise cannot be empty")

        status = status_fn or (lambda _msg: None)
        result = ReductionResult()
        current = text

        while True:
            level = len(result.levels) + 1
            units = self.summarize_pass(current, summarize_fn, status, cancel, level)
            if not units:
                break

            result.levels.append(units)
            level_text = result.level_texts[-1]
            if on_level is not None:
                on_level(level, level_text)

            if len(units) == 1:
                break
            if level >= self.max_levels:
                status(f"Warning: stopped after {self.max_levels} reduction levels.")
                break
            current = level_text

        return result

    def reduce(
        self,
        text: str,
        summarize_fn: SummarizeFn,
        status_fn: Optional[StatusFn] = None,
        on_level: Optional[LevelFn] = None,
        cancel: Optional[CancellationToken] = None,
    ) -> str:
        """Summarise ``text`` and return the final (deepest) summary."""
        return self.reduce_levels(text, summarize_fn, status_fn, on_level, cancel).final
