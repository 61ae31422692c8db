"""Parser API with progressive disclosure.

Level 1: ``parse`` returns the root node and raises on bad markup;
``parse_string`` and ``parse_file`` never raise for bad markup and return a
``ParseResult`` instead.

Level 2: ``MarkupParser`` exposes each stage separately and carries a
``ParserConfig`` and correlation ID across calls.
"""

import logging
import time
import uuid
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Union

from parsenip.shared import (
    DiagnosticEntry,
    DiagnosticSeverity,
    InvariantViolationError,
    LexError,
    ParseError,
    ParserConfig,
    PerformanceMetrics,
    current_memory_bytes,
    get_logger,
)
from parsenip.tokenization import MarkupTokenizer, Token
from parsenip.tree import Node, TreeBuilder, plan_spans

MS_PER_SECOND = 1000
PREVIEW_LENGTH = 60

STAGE_READ = "read"
STAGE_TOKENIZE = "tokenize"
STAGE_BUILD = "build"


@dataclass
class ParseResult:
    """Outcome of one parse: the tree or the error, plus diagnostics and metrics."""

    root: Optional[Node] = None
    tokens: List[Token] = field(default_factory=list)
    success: bool = True
    error: Optional[Exception] = None
    error_stage: Optional[str] = None
    diagnostics: List[DiagnosticEntry] = field(default_factory=list)
    performance: PerformanceMetrics = field(default_factory=PerformanceMetrics)
    correlation_id: Optional[str] = None
    source: Optional[str] = None

    @property
    def element_count(self) -> int:
        """Total number of elements in the tree."""
        return self.root.count() if self.root else 0

    @property
    def max_depth(self) -> int:
        """Number of nesting levels in the tree."""
        return self.root.depth() if self.root else 0

    @property
    def processing_time_ms(self) -> float:
        return self.performance.processing_time_ms

    def add_diagnostic(
        self,
        severity: DiagnosticSeverity,
        message: str,
        component: str,
        position: Optional[Dict[str, int]] = None,
        details: Optional[Dict[str, Any]] = None
    ) -> None:
        """Add diagnostic entry to result."""
        self.diagnostics.append(
            DiagnosticEntry(
                severity=severity,
                message=message,
                component=component,
                position=position,
                details=details,
                correlation_id=self.correlation_id,
            )
        )

    def get_diagnostics_by_severity(
        self, severity: DiagnosticSeverity
    ) -> List[DiagnosticEntry]:
        """Get diagnostics of specific severity level."""
        return [diag for diag in self.diagnostics if diag.severity == severity]

    def has_errors(self) -> bool:
        """Check if result contains any error diagnostics."""
        return any(
            diag.severity in (DiagnosticSeverity.ERROR, DiagnosticSeverity.CRITICAL)
            for diag in self.diagnostics
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert result to a JSON-ready dictionary.

        The tree is included as a flat ``elements`` list (see
        ``Node.to_records``) so that deep documents serialize without
        recursion.
        """
        result: Dict[str, Any] = {
            "success": self.success,
            "element_count": self.element_count,
            "max_depth": self.max_depth,
            "performance": self.performance.to_dict(),
            "diagnostics": [diag.to_dict() for diag in self.diagnostics],
        }
        if self.source is not None:
            result["source"] = self.source
        if self.error is not None:
            result["error"] = str(self.error)
            result["error_type"] = type(self.error).__name__
            result["error_stage"] = self.error_stage
        if self.root is not None:
            result["elements"] = self.root.to_records()
        return result


class MarkupParser:
    """Configured parser running the tokenize and build stages.

    Examples:
        >>> parser = MarkupParser(ParserConfig.lenient())
        >>> result = parser.parse("<ul>\\n  <li>A</li>\\n</ul>")
        >>> result.root.children.single.inner
        'A'
    """

    def __init__(
        self,
        config: Optional[ParserConfig] = None,
        correlation_id: Optional[str] = None
    ) -> None:
        self.config = config or ParserConfig()
        self.correlation_id = correlation_id or uuid.uuid4().hex[:12]
        self.logger = get_logger(__name__, self.correlation_id, "markup_parser")
        self.tokenizer = MarkupTokenizer(self.config.tokenization, self.correlation_id)
        self.builder = TreeBuilder(self.config.tree, self.correlation_id)

    def tokenize(self, text: str) -> List[Token]:
        """Run only the tokenizer stage; raises ``LexError`` on failure."""
        return self.tokenizer.tokenize(text)

    def build(self, tokens: Sequence[Token]) -> Optional[Node]:
        """Run only the tree-building stage; raises ``ParseError`` on failure."""
        return self.builder.build(tokens)

    def parse(self, text: str, source: Optional[str] = None) -> ParseResult:
        """Tokenize and build ``text``, capturing failures in the result."""
        start_time = time.perf_counter()
        start_memory = current_memory_bytes()
        result = ParseResult(correlation_id=self.correlation_id, source=source)
        result.performance.characters_processed = len(text)

        self.logger.info(
            "Starting parse",
            extra={"characters": len(text), "preview": text[:PREVIEW_LENGTH]}
        )

        try:
            result.tokens = self.tokenize(text)
            result.performance.tokens_generated = len(result.tokens)
            trace_tokens(self.logger, result.tokens)
            trace_spans(self.logger, result.tokens)
            result.root = self.build(result.tokens)
            result.performance.elements_built = self.builder.elements_built
        except LexError as e:
            self._record_failure(result, e, STAGE_TOKENIZE, DiagnosticSeverity.ERROR)
        except InvariantViolationError as e:
            self._record_failure(result, e, STAGE_BUILD, DiagnosticSeverity.CRITICAL)
        except ParseError as e:
            self._record_failure(result, e, STAGE_BUILD, DiagnosticSeverity.ERROR)
        else:
            self._record_success(result)

        result.performance.processing_time_ms = (
            (time.perf_counter() - start_time) * MS_PER_SECOND
        )
        result.performance.memory_used_bytes = max(
            0, current_memory_bytes() - start_memory
        )
        return result

    def parse_file(self, path: Union[str, Path]) -> ParseResult:
        """Read ``path`` as UTF-8 and parse it."""
        file_path = Path(path)
        try:
            text = file_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            result = ParseResult(correlation_id=self.correlation_id, source=str(file_path))
            self._record_failure(result, e, STAGE_READ, DiagnosticSeverity.ERROR)
            return result
        return self.parse(text, source=str(file_path))

    def _record_success(self, result: ParseResult) -> None:
        if result.root is None:
            result.add_diagnostic(
                DiagnosticSeverity.INFO,
                "No tokens provided - document has no root element",
                "tree_builder",
            )
        if self.builder.trailing_tokens:
            result.add_diagnostic(
                DiagnosticSeverity.WARNING,
                "Content after the root element was ignored",
                "tree_builder",
                details={"trailing_tokens": self.builder.trailing_tokens},
            )
        self.logger.info(
            "Parse completed",
            extra={
                "token_count": len(result.tokens),
                "element_count": result.performance.elements_built,
            }
        )

    def _record_failure(
        self,
        result: ParseResult,
        error: Exception,
        stage: str,
        severity: DiagnosticSeverity
    ) -> None:
        result.success = False
        result.root = None
        result.error = error
        result.error_stage = stage

        position = None
        offset = getattr(error, "offset", None)
        if offset is not None:
            position = {"offset": offset}

        result.add_diagnostic(
            severity,
            str(error),
            stage,
            position=position,
            details={"exception_type": type(error).__name__},
        )
        if severity == DiagnosticSeverity.CRITICAL:
            self.logger.exception("Parse failed on an internal invariant")
        else:
            self.logger.warning(
                "Parse failed",
                extra={"stage": stage, "error_type": type(error).__name__}
            )


def trace_tokens(logger, tokens: Sequence[Token]) -> None:
    """Dump the token stream at DEBUG level."""
    if not logger.is_enabled_for(logging.DEBUG):
        return
    for index, token in enumerate(tokens):
        logger.debug(f"token {index}: {token}")


def trace_spans(logger, tokens: Sequence[Token]) -> None:
    """Dump the breadth-first span plan at DEBUG level.

    Planning errors are left for the build stage to raise.
    """
    if not logger.is_enabled_for(logging.DEBUG):
        return
    if not tokens or not tokens[0].is_element_start:
        return
    try:
        plan = plan_spans(tokens, 0)
    except ParseError as e:
        logger.debug(f"span plan unavailable: {e}")
        return
    logger.debug("span plan: " + " ".join(f"{s.start}..{s.end}" for s in plan))


def parse(text: str, config: Optional[ParserConfig] = None) -> Optional[Node]:
    """Parse markup and return its root node.

    Raises:
        LexError: The tokenizer rejected the input
        ParseError: The token stream could not be assembled into a tree

    Examples:
        >>> root = parse("<div><h1>Hi</h1></div>")
        >>> root.children.single.inner
        'Hi'
    """
    parser = MarkupParser(config)
    return parser.build(parser.tokenize(text))


def parse_string(
    text: str,
    config: Optional[ParserConfig] = None,
    correlation_id: Optional[str] = None
) -> ParseResult:
    """Parse markup, reporting failures in the returned ``ParseResult``."""
    return MarkupParser(config, correlation_id).parse(text)


def parse_file(
    path: Union[str, Path],
    config: Optional[ParserConfig] = None,
    correlation_id: Optional[str] = None
) -> ParseResult:
    """Parse a UTF-8 markup file, reporting failures in the returned ``ParseResult``."""
    return MarkupParser(config, correlation_id).parse_file(path)
