"""Exception hierarchy for parsenip.

Tokenizer failures derive from ``LexError`` and tree-building failures from
``ParseError``. The two families never overlap so callers can tell which stage
rejected a document.
"""

from typing import Optional


class ParsenipError(Exception):
    """Base exception for all parsenip errors."""


class LexError(ParsenipError):
    """Raised when the tokenizer cannot scan the input."""

    def __init__(self, message: str, offset: Optional[int] = None) -> None:
        super().__init__(message)
        self.offset = offset


class UnterminatedTagError(LexError):
    """Input ended while a tag was still open (``<div`` with no ``>``)."""

    def __init__(self, offset: int) -> None:
        super().__init__(
            f"Malformed markup: tag opened at offset {offset} is never terminated",
            offset,
        )


class EmptyTagError(LexError):
    """A tag was closed without a name, such as ``<>`` or ``</>``."""

    def __init__(self, offset: int) -> None:
        super().__init__(
            f"Malformed markup: tag at offset {offset} has no name", offset
        )


class ParseError(ParsenipError):
    """Raised when a token stream cannot be assembled into a tree."""


class MalformedMarkupError(ParseError):
    """Token structure is impossible for a strictly nested document."""


class UnmatchedTagError(ParseError):
    """An opening tag has no matching closing tag in the remaining stream."""

    def __init__(self, name: str, index: int) -> None:
        super().__init__(f"Unmatched tag <{name}> at token {index}")
        self.name = name
        self.index = index


class InvariantViolationError(ParseError):
    """An internal precondition failed; indicates a bug, not bad input."""

    def __init__(self, detail: str) -> None:
        super().__init__(f"Invariant violation: {detail}")
        self.detail = detail


class MalformedAttributeError(ParseError):
    """Raw attribute text could not be split into key/value groups."""

    def __init__(self, raw: str, detail: str) -> None:
        super().__init__(f"Malformed attributes {raw!r}: {detail}")
        self.raw = raw
        self.detail = detail
