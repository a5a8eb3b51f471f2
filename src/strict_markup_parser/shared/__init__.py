"""Shared utilities for strict markup parsing.

This module provides configuration objects, the error taxonomy, performance
metrics, and logging helpers used across all pipeline stages.
"""

from .config import (
    ConfigError,
    ConfigValidationError,
    GlobalConfig,
    ParserConfig,
    ScannerConfig,
    TrailingContentPolicy,
    TreeConfig,
)
from .errors import (
    MarkupError,
    MarkupParseError,
    MismatchedEndTagError,
    NestingTooDeepError,
    UnexpectedLeafError,
    UnexpectedTokenError,
    UnflushedBufferError,
    UnterminatedElementError,
)
from .logging import (
    CorrelationLogger,
    get_logger,
)
from .result import PerformanceMetrics

__all__ = [
    "ConfigError",
    "ConfigValidationError",
    "GlobalConfig",
    "ParserConfig",
    "ScannerConfig",
    "TrailingContentPolicy",
    "TreeConfig",
    "MarkupError",
    "MarkupParseError",
    "MismatchedEndTagError",
    "NestingTooDeepError",
    "UnexpectedLeafError",
    "UnexpectedTokenError",
    "UnflushedBufferError",
    "UnterminatedElementError",
    "CorrelationLogger",
    "get_logger",
    "PerformanceMetrics",
]
