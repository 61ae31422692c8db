"""parsenip: a small, strictly nested markup parser.

Markup text is tokenized into open, close, self-closing, and text tokens, then
assembled into a tree of ``Node`` objects without recursion, so document depth
is never limited by the interpreter's call stack.

Progressive API Disclosure:
- Level 1: Simple functions - parse(), parse_string(), parse_file()
- Level 2: Configured parser - MarkupParser class
- Level 3: Individual stages - tokenize(), build_tree(), find_closing(), plan_spans()
"""

__version__ = "0.1.0"
__author__ = "parsenip developers"

from .api import MarkupParser, ParseResult, parse, parse_file, parse_string
from .shared import (
    LexError,
    ParseError,
    ParsenipError,
    ParserConfig,
    TokenizationConfig,
    TreeConfig,
)
from .tokenization import Token, TokenType, tokenize
from .tree import Children, ChildrenKind, Node, Tag, build_tree, find_closing, plan_spans

__all__ = [
    # Version and metadata
    "__author__",
    "__version__",

    # Level 1: Simple parsing functions
    "parse",
    "parse_string",
    "parse_file",

    # Level 2: Configured parser
    "MarkupParser",
    "ParseResult",

    # Level 3: Individual stages
    "tokenize",
    "build_tree",
    "find_closing",
    "plan_spans",

    # Data model
    "Token",
    "TokenType",
    "Node",
    "Tag",
    "Children",
    "ChildrenKind",

    # Configuration and errors
    "ParserConfig",
    "TokenizationConfig",
    "TreeConfig",
    "ParsenipError",
    "LexError",
    "ParseError",
]
