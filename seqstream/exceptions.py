"""
Exceptions raised by seqstream.

Every error derives from SequenceError, so callers can catch a single type
when they do not care about the exact failure.
"""

from typing import Optional


class SequenceError(Exception):
    """Exception raised for sequence-related errors."""

    def __init__(self, message: str, record_id: Optional[str] = None) -> None:
        self.message = message
        self.record_id = record_id
        super().__init__(message)

    def __str__(self) -> str:
        if self.record_id is not None:
            return f"error when parsing seq: {self.record_id} ({self.message})"
        return self.message


class InvalidSymbolError(SequenceError):
    """Raised when a symbol is not a member of the alphabet."""

    def __init__(self, position: int, symbol: str, alphabet: str) -> None:
        self.position = position
        self.symbol = symbol
        self.alphabet = alphabet
        super().__init__(f"invalid {alphabet} letter '{symbol}' at position {position}")


class LengthMismatchError(SequenceError):
    """Raised when sequence and quality lengths differ."""

    def __init__(self, seq_length: int, qual_length: int) -> None:
        self.seq_length = seq_length
        self.qual_length = qual_length
        super().__init__(
            f"unmatched length of sequence ({seq_length}) and quality ({qual_length})"
        )


class ConfigurationError(SequenceError):
    """Raised when a reader is configured with unusable options."""


class ReadCancelledError(SequenceError):
    """Attached to the last chunk of a cancelled reading session."""

    def __init__(self) -> None:
        super().__init__("reading canceled")
