"""Markup tokenization with a two-state scanner.

This module converts raw markup text into a flat, document-ordered sequence of
structural tokens: opening tags, closing tags, self-closing tags, and runs of
text between tags.
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import List, Optional

from parsenip.shared import (
    EmptyTagError,
    TokenizationConfig,
    UnterminatedTagError,
    get_logger,
)

TAG_OPEN = "<"
TAG_CLOSE = ">"
SLASH = "/"


class TokenType(Enum):
    """Structural token types produced by the tokenizer."""

    OPEN = auto()         # <name attrs>
    CLOSE = auto()        # </name>
    SELF_CLOSE = auto()   # <name attrs/>
    INNER = auto()        # text between tags


class ScannerState(Enum):
    """State machine states for the scanner."""

    OUTSIDE = auto()      # Accumulating text
    INSIDE_TAG = auto()   # Accumulating raw tag content between < and >


@dataclass(frozen=True)
class Token:
    """A single structural token.

    ``value`` is the element name for tag tokens and the text for ``INNER``
    tokens. ``raw_attributes`` is the unparsed text after the element name and
    is always empty for ``CLOSE`` and ``INNER`` tokens.
    """

    type: TokenType
    value: str
    raw_attributes: str = ""

    @classmethod
    def open(cls, name: str, raw_attributes: str = "") -> "Token":
        return cls(TokenType.OPEN, name, raw_attributes)

    @classmethod
    def close(cls, name: str) -> "Token":
        return cls(TokenType.CLOSE, name)

    @classmethod
    def self_close(cls, name: str, raw_attributes: str = "") -> "Token":
        return cls(TokenType.SELF_CLOSE, name, raw_attributes)

    @classmethod
    def inner(cls, text: str) -> "Token":
        return cls(TokenType.INNER, text)

    @property
    def is_element_start(self) -> bool:
        """Whether this token starts an element (``OPEN`` or ``SELF_CLOSE``)."""
        return self.type in (TokenType.OPEN, TokenType.SELF_CLOSE)

    def __str__(self) -> str:
        if self.type == TokenType.OPEN:
            return f"Open({self.value!r}, {self.raw_attributes!r})"
        if self.type == TokenType.CLOSE:
            return f"Close({self.value!r})"
        if self.type == TokenType.SELF_CLOSE:
            return f"SelfClose({self.value!r}, {self.raw_attributes!r})"
        return f"Inner({self.value!r})"


def _split_tag(content: str) -> List[str]:
    """Split tag content into ``[name, rest]``; ``rest`` may be empty."""
    parts = content.strip().split(None, 1)
    if not parts:
        return ["", ""]
    if len(parts) == 1:
        return [parts[0], ""]
    return [parts[0], parts[1].strip()]


class MarkupTokenizer:
    """Scanner that turns markup text into a list of tokens.

    The scanner has two states. Outside a tag it accumulates text; inside a tag
    it accumulates everything up to the next ``>`` and classifies it once the
    tag closes. The only failure modes are a tag that is never terminated and
    a tag that has no name.

    A ``>`` outside a tag is ordinary text and never produces a tag token.
    """

    def __init__(
        self,
        config: Optional[TokenizationConfig] = None,
        correlation_id: Optional[str] = None
    ) -> None:
        self.config = config or TokenizationConfig()
        self.correlation_id = correlation_id
        self.logger = get_logger(__name__, correlation_id, "tokenizer")

    def tokenize(self, text: str) -> List[Token]:
        """Tokenize markup text.

        Args:
            text: Complete markup document

        Returns:
            Tokens in document order; empty for empty or whitespace-only input

        Raises:
            UnterminatedTagError: Input ended inside a tag
            EmptyTagError: A tag had no element name
        """
        source = text.strip() if self.config.trim_input else text
        tokens: List[Token] = []
        tag_buffer: List[str] = []
        text_buffer: List[str] = []
        state = ScannerState.OUTSIDE
        tag_start = 0

        for offset, char in enumerate(source):
            if char == TAG_OPEN:
                if state == ScannerState.OUTSIDE:
                    self._flush_text(text_buffer, tokens)
                    state = ScannerState.INSIDE_TAG
                    tag_start = offset
            elif char == TAG_CLOSE and state == ScannerState.INSIDE_TAG:
                tokens.append(self._classify("".join(tag_buffer), tag_start))
                tag_buffer.clear()
                state = ScannerState.OUTSIDE
            elif state == ScannerState.INSIDE_TAG:
                tag_buffer.append(char)
            else:
                text_buffer.append(char)

        if state == ScannerState.INSIDE_TAG:
            raise UnterminatedTagError(tag_start)

        self._flush_text(text_buffer, tokens)

        self.logger.debug(
            "Tokenization completed",
            extra={"characters": len(source), "token_count": len(tokens)}
        )
        return tokens

    def _flush_text(self, text_buffer: List[str], tokens: List[Token]) -> None:
        if not text_buffer:
            return
        text = "".join(text_buffer)
        text_buffer.clear()
        if self.config.drop_whitespace_text and not text.strip():
            return
        tokens.append(Token.inner(text))

    def _classify(self, raw: str, offset: int) -> Token:
        content = raw.strip()
        if content.endswith(SLASH):
            name, rest = _split_tag(content[:-1])
            kind = Token.self_close
        elif content.startswith(SLASH):
            name, rest = content[1:].strip(), ""
            kind = None
        else:
            name, rest = _split_tag(content)
            kind = Token.open

        if not name:
            raise EmptyTagError(offset)
        if kind is None:
            return Token.close(name)
        return kind(name, rest)


def tokenize(text: str, config: Optional[TokenizationConfig] = None) -> List[Token]:
    """Tokenize markup text with a throwaway ``MarkupTokenizer``."""
    return MarkupTokenizer(config).tokenize(text)
