"""Developer tools for strict markup parsing."""

from .profiling import (
    ParseProfiler,
    ProfilingReport,
    ProfilingSession,
    StagePerformance,
)

__all__ = [
    "ParseProfiler",
    "ProfilingReport",
    "ProfilingSession",
    "StagePerformance",
]
