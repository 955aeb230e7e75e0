"""Summarisation pipeline: availability probe plus one session per chunk call."""

from __future__ import annotations

from typing import Callable, Optional

from tube2tldr.config import Settings
from tube2tldr.errors import SummarizationUnavailableError
from tube2tldr.models import ReductionResult
from tube2tldr.reducer import CancellationToken, LevelFn, SummarizationReducer
from tube2tldr.summariser import Availability, SummarizerCapability, SummaryOptions


class SummaryPipeline:
    """
    Drives the reducer against a summarisation capability.

    Calls are strictly sequential. A fresh session is created for every chunk
    and destroyed right after; the capability makes no promise about
    concurrent or long-lived sessions.
    """

    def __init__(
        self,
        capability: SummarizerCapability,
        options: Optional[SummaryOptions] = None,
        settings: Optional[Settings] = None,
        status_fn: Optional[Callable[[str], None]] = None,
    ):
        self.capability = capability
        self.settings = settings or Settings()
        self.options = options or SummaryOptions.from_settings(self.settings)
        self.reducer = SummarizationReducer(
            max_words_per_chunk=self.settings.max_words_per_chunk,
            max_levels=self.settings.max_levels,
        )
        self.status_fn = status_fn
        self._availability: Optional[Availability] = None

    def _status(self, message: str) -> None:
        if self.status_fn is not None:
            self.status_fn(message)
        elif self.settings.verbose:
            print(f"    {message}")

    def _download_progress(self, loaded: int, total: int) -> None:
        if total:
            self._status(f"Downloading summarisation model: {loaded / total:.0%}")
        else:
            self._status(f"Downloading summarisation model: {loaded:,} bytes")

    def check_available(self) -> Availability:
        availability = self.capability.availability()
        if availability is Availability.NO:
            raise SummarizationUnavailableError("Summarisation is not available on this system")
        if availability is Availability.AFTER_DOWNLOAD:
            self._status("The summarisation model has to be downloaded first.")
        self._availability = availability
        return availability

    def summarize_chunk(self, text: str) -> str:
        progress = self._download_progress if self._availability is Availability.AFTER_DOWNLOAD else None
        session = self.capability.create(self.options, on_download_progress=progress)
        try:
            return session.summarize(text)
        finally:
            session.destroy()

    def run_levels(
        self,
        text: str,
        cancel: Optional[CancellationToken] = None,
        on_level: Optional[LevelFn] = None,
    ) -> ReductionResult:
        self.check_available()
        return self.reducer.reduce_levels(
            text,
            self.summarize_chunk,
            status_fn=self._status,
            on_level=on_level,
            cancel=cancel,
        )

    def run(
        self,
        text: str,
        cancel: Optional[CancellationToken] = None,
        on_level: Optional[LevelFn] = None,
    ) -> str:
        return self.run_levels(text, cancel=cancel, on_level=on_level).final
