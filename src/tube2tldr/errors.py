"""
Exception hierarchy.

Acquisition errors are turned into "transcript unavailable" status text by the
grabber. Summarisation errors propagate to whoever owns the run (the scheduler
or the CLI).
"""


class Tube2TldrError(Exception):
    """Base class for all errors raised by tube2tldr."""


class InvalidInputError(Tube2TldrError, ValueError):
    """Empty or malformed argument to a public operation."""


class AmbiguousUIStateError(Tube2TldrError):
    """More than one visible control matches a label expected to be unique."""


class StructuralParseError(Tube2TldrError):
    """A transcript entry is missing a required part or has it twice."""


class PageAccessError(Tube2TldrError):
    """The browser failed while reading or changing the page (stale element, closed window)."""


class TranscriptQualityError(Tube2TldrError):
    """The parsed transcript is not usable."""


class TooManyEmptyLinesError(TranscriptQualityError):
    pass


class EmptyTranscriptError(TranscriptQualityError):
    pass


class SummarizationError(Tube2TldrError):
    """Base class for summarisation failures."""


class SummarizationUnavailableError(SummarizationError):
    """The summarisation capability reports it cannot be used."""


class SummarizationCallError(SummarizationError):
    """A single summarise call failed; the run is aborted."""


class SummarizationCancelled(SummarizationError):
    """The run was cancelled between chunks."""
