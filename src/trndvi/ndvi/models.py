"""Record types passed between pipeline stages.

All records are frozen: a stage hands its output to the next stage
without any shared mutable state. ``None`` is the single missing-value
marker ("unavailable") for every optional numeric field.
"""

from dataclasses import dataclass, asdict
from datetime import date
from typing import Hashable, Literal, Optional

Classification = Literal["improvement", "decline", "stable"]


@dataclass(frozen=True)
class Observation:
    """One cell value at one date. ``value`` is None when missing."""
    cell_id: Hashable
    date: date
    value: Optional[float]


@dataclass(frozen=True)
class PeriodSummary:
    """Statistics across all cells for one date, ignoring missing values.

    When ``valid_count == 0`` every statistic is None.
    """
    date: date
    mean: Optional[float]
    median: Optional[float]
    min: Optional[float]
    max: Optional[float]
    stddev: Optional[float]
    valid_count: int

    @property
    def has_data(self) -> bool:
        return self.valid_count > 0


@dataclass(frozen=True)
class TrendAssessment:
    """Baseline-to-latest change over the whole reporting window."""
    period_start: date
    period_end: date
    total_observations: int
    cell_count: int
    baseline: Optional[float]
    latest: Optional[float]
    total_change: Optional[float]
    mean_change_per_period: Optional[float]
    classification: Classification

    def as_dict(self) -> dict:
        return asdict(self)
