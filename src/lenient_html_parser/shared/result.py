"""Diagnostic and metric types shared by every parsing stage.

Structural problems in the markup are recovered locally and reported as
diagnostics rather than raised; these types carry those reports from the
stage that noticed them to the final :class:`ParseResult`.
"""

import time
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Dict, Optional


class DiagnosticSeverity(Enum):
    """How serious a reported markup problem is."""

    DEBUG = auto()      # Scanner and builder trace
    INFO = auto()       # Expected fix-ups such as reclassified tags
    WARNING = auto()    # Markup problems that were recovered
    ERROR = auto()      # Problems that lost content
    CRITICAL = auto()   # The parse was aborted


@dataclass
class DiagnosticEntry:
    """One markup problem, where it was found and which stage reported it."""

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
        """Convert the entry to a JSON-friendly dictionary."""
        return {
            "severity": self.severity.name,
            "message": self.message,
            "component": self.component,
            "position": self.position,
            "details": self.details,
        }


@dataclass
class PerformanceMetrics:
    """Performance metrics for a single parse."""

    processing_time_ms: float = 0.0
    characters_processed: int = 0
    tokens_generated: int = 0
    tokens_removed: int = 0
    tokens_reclassified: int = 0
    elements_created: int = 0

    @property
    def characters_per_second(self) -> float:
        """Calculate characters processed per second."""
        if self.processing_time_ms <= 0:
            return 0.0
        return (self.characters_processed * 1000.0) / self.processing_time_ms

    @property
    def recovery_operations(self) -> int:
        """Total number of tokens touched by balance repair."""
        return self.tokens_removed + self.tokens_reclassified

    def to_dict(self) -> Dict[str, Any]:
        return {
            "processing_time_ms": self.processing_time_ms,
            "characters_processed": self.characters_processed,
            "tokens_generated": self.tokens_generated,
            "tokens_removed": self.tokens_removed,
            "tokens_reclassified": self.tokens_reclassified,
            "elements_created": self.elements_created,
        }
