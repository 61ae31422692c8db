"""Tokenization engine for parsenip.

Key Components:
    MarkupTokenizer: Scanner converting markup text into structural tokens
    Token: A single open, close, self-closing, or text token
    TokenType: Enumeration of the four token kinds
    ScannerState: The scanner's two states
    tokenize: Convenience function wrapping MarkupTokenizer
"""

from .tokenizer import (
    MarkupTokenizer,
    ScannerState,
    Token,
    TokenType,
    tokenize,
)

__all__ = [
    "MarkupTokenizer",
    "ScannerState",
    "Token",
    "TokenType",
    "tokenize",
]
