"""Stage-level performance profiling for strict markup parsing.

The pipeline is lazy, so its stages cannot be timed apart within one pass.
The profiler instead runs three passes over the same markup, each stopping
one stage later (scan only, scan + leaves, full parse), and records wall
time and process memory for each with psutil.
"""

import time
import uuid
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional

import psutil

from strict_markup_parser.api.parser import MarkupParser
from strict_markup_parser.shared import ParserConfig, get_logger

STAGES = ("scan", "leaves", "tree")


@dataclass
class StagePerformance:
    """Timing and memory for one pass that ran the pipeline through a stage."""

    stage: str
    start_time: float
    end_time: float
    memory_start: int  # bytes (RSS)
    memory_end: int  # bytes (RSS)
    items_produced: int = 0

    @property
    def duration_ms(self) -> float:
        """Processing duration in milliseconds."""
        return (self.end_time - self.start_time) * 1000

    @property
    def memory_delta(self) -> int:
        """Memory usage change in bytes."""
        return self.memory_end - self.memory_start

    @property
    def items_per_second(self) -> float:
        """Tokens, leaves or elements produced per second."""
        duration_s = self.end_time - self.start_time
        return self.items_produced / duration_s if duration_s > 0 else 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "stage": self.stage,
            "duration_ms": self.duration_ms,
            "memory_delta": self.memory_delta,
            "items_produced": self.items_produced,
            "items_per_second": self.items_per_second,
        }


@dataclass
class ProfilingSession:
    """All stage measurements for one input."""

    session_id: str
    input_size: int  # characters
    stages: List[StagePerformance] = field(default_factory=list)

    def stage(self, name: str) -> Optional[StagePerformance]:
        """Get the measurement for ``name``, if recorded."""
        return next((s for s in self.stages if s.stage == name), None)

    @property
    def total_duration_ms(self) -> float:
        """Duration of the full parse pass."""
        tree = self.stage("tree")
        return tree.duration_ms if tree else 0.0

    @property
    def stage_costs_ms(self) -> Dict[str, float]:
        """Estimated time spent in each stage alone.

        Each pass includes the stages before it, so a stage's own cost is
        its pass time minus the previous pass time (floored at zero).
        """
        costs: Dict[str, float] = {}
        previous = 0.0
        for stage in self.stages:
            costs[stage.stage] = max(0.0, stage.duration_ms - previous)
            previous = stage.duration_ms
        return costs

    def to_dict(self) -> Dict[str, Any]:
        return {
            "session_id": self.session_id,
            "input_size": self.input_size,
            "total_duration_ms": self.total_duration_ms,
            "stage_costs_ms": self.stage_costs_ms,
            "stages": [stage.to_dict() for stage in self.stages],
        }


@dataclass
class ProfilingReport:
    """Summary over every session a profiler has recorded."""

    sessions: List[ProfilingSession]

    @property
    def session_count(self) -> int:
        return len(self.sessions)

    @property
    def average_duration_ms(self) -> float:
        """Average full parse duration across sessions."""
        if not self.sessions:
            return 0.0
        return sum(s.total_duration_ms for s in self.sessions) / len(self.sessions)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "session_count": self.session_count,
            "average_duration_ms": self.average_duration_ms,
            "sessions": [session.to_dict() for session in self.sessions],
        }


class ParseProfiler:
    """Profile the scanner, leaf builder and tree builder separately.

    Examples:
        >>> profiler = ParseProfiler()
        >>> session = profiler.profile('<ul><li>a</li><li>b</li></ul>')
        >>> sorted(session.stage_costs_ms)
        ['leaves', 'scan', 'tree']
    """

    def __init__(self, config: Optional[ParserConfig] = None) -> None:
        self.parser = MarkupParser(config)
        self.sessions: List[ProfilingSession] = []
        self.logger = get_logger(__name__, None, "parse_profiler")
        self._process = psutil.Process()

    def _memory(self) -> int:
        return self._process.memory_info().rss

    @contextmanager
    def _measure(
        self, session: ProfilingSession, stage: str
    ) -> Iterator[StagePerformance]:
        measurement = StagePerformance(
            stage=stage,
            start_time=time.perf_counter(),
            end_time=0.0,
            memory_start=self._memory(),
            memory_end=0,
        )
        yield measurement
        measurement.end_time = time.perf_counter()
        measurement.memory_end = self._memory()
        session.stages.append(measurement)

    def profile(self, markup: str, session_id: Optional[str] = None) -> ProfilingSession:
        """Run the three profiling passes over ``markup``.

        Raises:
            MarkupParseError: If ``markup`` is not valid markup
        """
        if not isinstance(markup, str):
            raise TypeError("Profiling needs the markup as a str to replay it")

        session = ProfilingSession(session_id or uuid.uuid4().hex, len(markup))

        with self._measure(session, "scan") as stage:
            stage.items_produced = sum(1 for _ in self.parser.tokens(markup))
        with self._measure(session, "leaves") as stage:
            stage.items_produced = sum(1 for _ in self.parser.leaves(markup))
        with self._measure(session, "tree") as stage:
            result = self.parser.parse(markup)
            stage.items_produced = result.performance.elements_created

        self.sessions.append(session)
        self.logger.info(
            "Profiled parse",
            extra={
                "session_id": session.session_id,
                "input_size": session.input_size,
                "stage_costs_ms": session.stage_costs_ms,
            }
        )
        return session

    def generate_report(self) -> ProfilingReport:
        """Summarize all recorded sessions."""
        return ProfilingReport(list(self.sessions))
