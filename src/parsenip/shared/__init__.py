"""Shared utilities for parsenip.

This module provides configuration objects, the exception hierarchy, result
types, and logging helpers used across the tokenization, tree, API, and CLI
layers.
"""

from .config import (
    ConfigError,
    ConfigValidationError,
    ParserConfig,
    TokenizationConfig,
    TreeConfig,
)
from .errors import (
    EmptyTagError,
    InvariantViolationError,
    LexError,
    MalformedAttributeError,
    MalformedMarkupError,
    ParseError,
    ParsenipError,
    UnmatchedTagError,
    UnterminatedTagError,
)
from .logging import (
    CorrelationLogger,
    configure_logging,
    get_logger,
)
from .result import (
    DiagnosticEntry,
    DiagnosticSeverity,
    PerformanceMetrics,
    current_memory_bytes,
)

__all__ = [
    "ConfigError",
    "ConfigValidationError",
    "ParserConfig",
    "TokenizationConfig",
    "TreeConfig",
    "EmptyTagError",
    "InvariantViolationError",
    "LexError",
    "MalformedAttributeError",
    "MalformedMarkupError",
    "ParseError",
    "ParsenipError",
    "UnmatchedTagError",
    "UnterminatedTagError",
    "CorrelationLogger",
    "configure_logging",
    "get_logger",
    "DiagnosticEntry",
    "DiagnosticSeverity",
    "PerformanceMetrics",
    "current_memory_bytes",
]
