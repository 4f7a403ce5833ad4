"""Shared utilities for lenient HTML parsing.

This module provides configuration objects, diagnostic types, the exception
hierarchy and logging helpers used across all processing layers.
"""

from .config import (
    ConfigError,
    ConfigValidationError,
    FetchConfig,
    GlobalConfig,
    ParserConfig,
    RepairConfig,
    ScanConfig,
    TreeConfig,
)
from .errors import (
    FetchError,
    HTMLParserError,
    MalformedMarkup,
    UnterminatedScan,
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
)

__all__ = [
    "ConfigError",
    "ConfigValidationError",
    "FetchConfig",
    "GlobalConfig",
    "ParserConfig",
    "RepairConfig",
    "ScanConfig",
    "TreeConfig",
    "FetchError",
    "HTMLParserError",
    "MalformedMarkup",
    "UnterminatedScan",
    "CorrelationLogger",
    "configure_logging",
    "get_logger",
    "DiagnosticEntry",
    "DiagnosticSeverity",
    "PerformanceMetrics",
]
