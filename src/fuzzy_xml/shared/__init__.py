"""Shared utilities for fuzzy XML parsing.

This module provides the configuration object, diagnostic and metric types,
logging helpers and depth-safe JSON helpers used across the scanning, tree
and API layers.
"""

from .config import (
    ConfigError,
    ConfigValidationError,
    ParserConfig,
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
from .serialization import dump_json, load_json

__all__ = [
    "ConfigError",
    "ConfigValidationError",
    "ParserConfig",
    "CorrelationLogger",
    "configure_logging",
    "get_logger",
    "DiagnosticEntry",
    "DiagnosticSeverity",
    "PerformanceMetrics",
    "dump_json",
    "load_json",
]
