"""Page side transcript grabber: answers GrabTranscript commands with messages."""

from __future__ import annotations

import time
from typing import Any, Callable, Dict, Optional, Union

from tube2tldr.chunk import format_ts
from tube2tldr.config import Settings
from tube2tldr.errors import (
    AmbiguousUIStateError,
    InvalidInputError,
    PageAccessError,
    StructuralParseError,
    TranscriptQualityError,
)
from tube2tldr.messages import (
    Command,
    GrabTranscript,
    Message,
    Status,
    TranscriptAcquired,
    TranscriptUnavailable,
    message_from_dict,
)
from tube2tldr.models import Transcript
from tube2tldr.page import PageTree
from tube2tldr.reveal import TranscriptRevealStateMachine
from tube2tldr.transcript import TranscriptAssembler, TranscriptParser
from tube2tldr.video import extract_video_id

EmitFn = Callable[[Message], None]

# Errors that mean "no usable transcript on this page", not a crash.
ACQUISITION_ERRORS = (
    AmbiguousUIStateError,
    InvalidInputError,
    PageAccessError,
    StructuralParseError,
    TranscriptQualityError,
)


class TranscriptGrabber:
    def __init__(
        self,
        page: PageTree,
        settings: Optional[Settings] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.page = page
        self.settings = settings or Settings()
        self.sleep = sleep

    def grab(self, emit: Optional[EmitFn] = None) -> Optional[Transcript]:
        """
        Reveal, parse and assemble the transcript of the current page.

        Returns None when no transcript trigger could be found. Acquisition
        errors propagate; ``handle`` turns them into messages.
        """
        emit = emit or (lambda _message: None)

        def status(text: str) -> None:
            emit(Status(text))

        video_id = extract_video_id(self.page.url)

        machine = TranscriptRevealStateMachine(
            self.page, self.settings, sleep=self.sleep, status_fn=status
        )
        outcome = machine.run()
        if not outcome.found:
            return None

        entries = TranscriptParser(self.page, self.settings.selectors).parse_all()
        status(f"Parsed {len(entries)} transcript entries.")

        transcript = TranscriptAssembler(self.settings.max_empty_lines).assemble(video_id, entries)
        status(
            f"Transcript for video {video_id}: {len(transcript.lines)} lines, "
            f"up to {format_ts(transcript.duration_seconds)}."
        )
        return transcript

    def handle(self, command: Union[Command, Dict[str, Any]], emit: EmitFn) -> Optional[Transcript]:
        """
        Answer one command with status messages and exactly one result message.

        ``command`` may also be given in its wire form, e.g. ``{"type": "grab-transcript", ...}``.
        """
        if isinstance(command, dict):
            command = message_from_dict(command)
        if not isinstance(command, GrabTranscript):
            raise InvalidInputError(f"Unsupported command: {command!r}")

        emit(Status(command.text))
        try:
            transcript = self.grab(emit)
        except ACQUISITION_ERRORS as e:
            emit(TranscriptUnavailable(f"Unable to grab the transcript: {e}"))
            return None

        if transcript is None:
            emit(
                TranscriptUnavailable(
                    "No transcript is available for this video (captions may be disabled)."
                )
            )
            return None

        emit(TranscriptAcquired(transcript.to_text()))
        return transcript
