"""Exception and warning types raised by flowtrace."""

from __future__ import annotations


class FlowtraceError(Exception):
    """Base class for flowtrace errors."""


class MalformedHistoryError(FlowtraceError, ValueError):
    """Raised when a raw history payload is not a well-formed record set."""

    def __init__(self, source: str, reason: str) -> None:
        self.source = source
        self.reason = reason
        super().__init__(f"Malformed {source} payload: {reason}")


class DiagramParseError(FlowtraceError, ValueError):
    """Raised when a process diagram document cannot be parsed."""


class SourceError(FlowtraceError):
    """Raised when a history source fails to deliver a payload."""


class UnresolvedReferenceWarning(UserWarning):
    """An edge target or task owner could not be found in the current graph.

    Usually means the history belongs to an older process definition than the
    diagram being displayed. Never fatal; the affected element is left
    unmarked or unlabeled.
    """
