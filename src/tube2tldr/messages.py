"""
Messages exchanged between the summary front end and the page side grabber.

The set is closed: one inbound command and three outbound results. On the
wire they are plain dicts tagged with ``type``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Union

from tube2tldr.errors import InvalidInputError


@dataclass(frozen=True)
class GrabTranscript:
    """Ask the page side to grab the transcript of the current video."""

    kind = "grab-transcript"
    text: str = "Requesting video transcript."


@dataclass(frozen=True)
class Status:
    kind = "status"
    text: str


@dataclass(frozen=True)
class TranscriptUnavailable:
    kind = "transcript-unavailable"
    text: str


@dataclass(frozen=True)
class TranscriptAcquired:
    """Carries the flattened transcript text."""

    kind = "transcript-acquired"
    text: str


Command = GrabTranscript
Message = Union[Status, TranscriptUnavailable, TranscriptAcquired]

_KINDS = {cls.kind: cls for cls in (GrabTranscript, Status, TranscriptUnavailable, TranscriptAcquired)}


def to_dict(message: Union[Command, Message]) -> Dict[str, Any]:
    return {"type": message.kind, "text": message.text}


def message_from_dict(data: Dict[str, Any]) -> Union[Command, Message]:
    if not isinstance(data, dict):
        raise InvalidInputError(f"Message must be a dict, got {type(data).__name__}")
    kind = data.get("type")
    cls = _KINDS.get(kind)
    if cls is None:
        raise InvalidInputError(f"Unknown message type: {kind!r}")
    text = data.get("text")
    if not isinstance(text, str):
        raise InvalidInputError(f"Message {kind!r} has no text")
    return cls(text=text)
