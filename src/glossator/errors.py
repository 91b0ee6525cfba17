"""Exception taxonomy for dictionary loading, automaton building and scanning."""
from __future__ import annotations


class GlossatorError(Exception):
    """Base class for all glossator errors."""


class MalformedEntry(GlossatorError, ValueError):
    """Raised when a dictionary record cannot be turned into an entry.

    Loading treats this as per-record: the record is skipped and logged.
    """

    def __init__(self, key: object, reason: str) -> None:
        self.key = key
        self.reason = reason
        super().__init__(f"malformed dictionary entry {key!r}: {reason}")


class EmptyPatternError(GlossatorError, ValueError):
    """Raised when a zero-length pattern is added to an automaton."""


class NotBuiltError(GlossatorError, RuntimeError):
    """Raised when an automaton is scanned before ``build()``."""


class AutomatonSealedError(GlossatorError, RuntimeError):
    """Raised when a pattern is added to an automaton that is already built."""


class ScanInputTooLarge(GlossatorError, ValueError):
    """Raised when text exceeds the caller-imposed length ceiling."""

    def __init__(self, length: int, limit: int) -> None:
        self.length = length
        self.limit = limit
        super().__init__(f"text length {length} exceeds limit {limit}")
