"""Diagnostic and metrics types shared by the API and CLI layers."""

import time
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Dict, Optional

import psutil


class DiagnosticSeverity(Enum):
    """Severity levels for diagnostic entries."""

    DEBUG = auto()
    INFO = auto()
    WARNING = auto()
    ERROR = auto()      # Stage failed on the input
    CRITICAL = auto()   # Internal invariant broken


@dataclass
class DiagnosticEntry:
    """Single diagnostic entry with context information."""

    severity: DiagnosticSeverity
    message: str
    component: str
    position: Optional[Dict[str, int]] = None
    details: Optional[Dict[str, Any]] = None
    timestamp: float = field(default_factory=time.time)
    correlation_id: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate diagnostic entry."""
        if not self.message:
            raise ValueError("Diagnostic message cannot be empty")
        if not self.component:
            raise ValueError("Diagnostic component cannot be empty")

    def to_dict(self) -> Dict[str, Any]:
        """Convert diagnostic to a JSON-ready dictionary."""
        result: Dict[str, Any] = {
            "severity": self.severity.name,
            "message": self.message,
            "component": self.component,
        }
        if self.position:
            result["position"] = dict(self.position)
        if self.details:
            result["details"] = dict(self.details)
        return result


@dataclass
class PerformanceMetrics:
    """Performance metrics for one parse operation."""

    processing_time_ms: float = 0.0
    memory_used_bytes: int = 0
    characters_processed: int = 0
    tokens_generated: int = 0
    elements_built: int = 0

    @property
    def characters_per_second(self) -> float:
        """Calculate characters processed per second."""
        if self.processing_time_ms <= 0:
            return 0.0
        return (self.characters_processed * 1000.0) / self.processing_time_ms

    @property
    def tokens_per_second(self) -> float:
        """Calculate tokens generated per second."""
        if self.processing_time_ms <= 0:
            return 0.0
        return (self.tokens_generated * 1000.0) / self.processing_time_ms

    @property
    def memory_per_character(self) -> float:
        """Calculate memory usage per character."""
        if self.characters_processed == 0:
            return 0.0
        return self.memory_used_bytes / self.characters_processed

    def to_dict(self) -> Dict[str, Any]:
        """Convert metrics to a JSON-ready dictionary."""
        return {
            "processing_time_ms": self.processing_time_ms,
            "memory_used_bytes": self.memory_used_bytes,
            "characters_processed": self.characters_processed,
            "tokens_generated": self.tokens_generated,
            "elements_built": self.elements_built,
            "characters_per_second": self.characters_per_second,
            "tokens_per_second": self.tokens_per_second,
            "memory_per_character": self.memory_per_character,
        }


def current_memory_bytes() -> int:
    """Resident set size of the current process."""
    return psutil.Process().memory_info().rss
