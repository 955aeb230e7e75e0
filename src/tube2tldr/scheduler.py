"""
Debounced re-summarisation.

Every input change reschedules the run: a pending run is dropped, an
in-flight run is asked to stop at its next chunk boundary, and a new run is
armed after the debounce delay. Runs never overlap.
"""

from __future__ import annotations

import threading
from typing import Callable, Optional

from tube2tldr.errors import SummarizationCancelled
from tube2tldr.reducer import CancellationToken, LevelFn

RunFn = Callable[[str, CancellationToken, LevelFn], str]


class SummaryScheduler:
    def __init__(
        self,
        run_fn: RunFn,
        debounce_seconds: float = 1.0,
        on_status: Optional[Callable[[str], None]] = None,
        on_summary: Optional[Callable[[str], None]] = None,
        on_error: Optional[Callable[[Exception], None]] = None,
        on_level: Optional[LevelFn] = None,
        timer_factory=threading.Timer,
    ):
        """
        Args:
            run_fn: Runs the pipeline for a text, honouring the cancellation token
                and reporting each finished level to the callback it is given
            debounce_seconds: Quiet period before a run starts
            on_status: Receives progress text
            on_summary: Receives each completed (final) summary
            on_error: Receives failures; the previous summary is kept
            on_level: Receives every level as soon as it is ready, first level first
            timer_factory: threading.Timer compatible factory
        """
        self.run_fn = run_fn
        self.debounce_seconds = debounce_seconds
        self.on_status = on_status or (lambda _msg: None)
        self.on_summary = on_summary or (lambda _summary: None)
        self.on_error = on_error or (lambda _exc: None)
        self.on_level = on_level or (lambda _level, _text: None)
        self._timer_factory = timer_factory

        self._state_lock = threading.Lock()
        self._run_lock = threading.Lock()
        self._timer = None
        self._token: Optional[CancellationToken] = None
        self.last_summary: Optional[str] = None
        self.last_error: Optional[Exception] = None

    def submit(self, text: str) -> None:
        """(Re)schedule a summarisation run for ``text``."""
        with self._state_lock:
            self._cancel_locked()
            token = CancellationToken()
            timer = self._timer_factory(self.debounce_seconds, self._run, args=(text, token))
            timer.daemon = True
            self._token = token
            self._timer = timer
            timer.start()

    def cancel(self) -> None:
        with self._state_lock:
            self._cancel_locked()

    def _cancel_locked(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
        if self._token is not None:
            self._token.cancel()
        self._timer = None
        self._token = None

    def wait(self, timeout: Optional[float] = None) -> None:
        """Block until the most recently scheduled run has finished."""
        timer = self._timer
        if timer is not None:
            timer.join(timeout)

    def _run(self, text: str, token: CancellationToken) -> None:
        with self._run_lock:
            if token.cancelled:
                return

            def publish_level(level: int, level_text: str) -> None:
                if not token.cancelled:
                    self.on_level(level, level_text)

            self.on_status("Generating summary...")
            try:
                summary = self.run_fn(text, token, publish_level)
            except SummarizationCancelled:
                self.on_status("Summary superseded by newer input.")
                return
            except Exception as e:
                # Timer thread: every failure goes to on_error
                self.last_error = e
                self.on_error(e)
                return

            if token.cancelled:
                return
            self.last_error = None
            self.last_summary = summary
            self.on_summary(summary)
