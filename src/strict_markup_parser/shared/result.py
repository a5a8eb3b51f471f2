"""Performance metrics for strict markup parsing."""

from dataclasses import asdict, dataclass
from typing import Any, Dict


@dataclass
class PerformanceMetrics:
    """Counters and timing collected over one pass of the pipeline."""

    processing_time_ms: float = 0.0
    characters_processed: int = 0
    tokens_generated: int = 0
    leaves_generated: int = 0
    synthetic_end_tags: int = 0
    elements_created: int = 0
    text_nodes_created: int = 0
    max_depth: int = 0

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
    def tokens_per_leaf(self) -> float:
        """Average number of tokens grouped into one leaf."""
        if self.leaves_generated == 0:
            return 0.0
        return self.tokens_generated / self.leaves_generated

    def to_dict(self) -> Dict[str, Any]:
        """Convert metrics, including derived rates, to a dictionary."""
        result = asdict(self)
        result.update({
            "characters_per_second": self.characters_per_second,
            "tokens_per_second": self.tokens_per_second,
            "tokens_per_leaf": self.tokens_per_leaf,
        })
        return result
