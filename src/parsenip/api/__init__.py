"""Public parsing API for parsenip.

Level 1 functions (``parse``, ``parse_string``, ``parse_file``) cover most
uses; ``MarkupParser`` gives stage-by-stage control with a shared configuration.
"""

from .parser import (
    MarkupParser,
    ParseResult,
    parse,
    parse_file,
    parse_string,
    trace_spans,
    trace_tokens,
)

__all__ = [
    "MarkupParser",
    "ParseResult",
    "parse",
    "parse_file",
    "parse_string",
    "trace_spans",
    "trace_tokens",
]
