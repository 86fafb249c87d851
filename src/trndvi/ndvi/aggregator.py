"""Per-period summary statistics across all cells.

Observations are grouped by date with one accumulator per date. Missing
values are counted towards nothing: they are skipped by every statistic
and excluded from ``valid_count``. A date whose observations are all
missing yields a summary with every statistic set to None.
"""

import logging
from typing import TYPE_CHECKING, Dict, List, Optional, Sequence

import numpy as np
import pandas as pd

from trndvi.ndvi.models import Observation, PeriodSummary

if TYPE_CHECKING:
    from trndvi.schemas import InternalConfig

__all__ = ['PeriodAggregator', 'summarize_values', 'summaries_to_frame']

logger = logging.getLogger(__name__)


def summarize_values(day, values: Sequence[Optional[float]]) -> PeriodSummary:
    """Summarize one date's values, ignoring None."""
    valid = np.array([v for v in values if v is not None], dtype="float64")

    if valid.size == 0:
        return PeriodSummary(
            date=day, mean=None, median=None, min=None, max=None, stddev=None, valid_count=0
        )

    return PeriodSummary(
        date=day,
        mean=float(np.mean(valid)),
        median=float(np.median(valid)),
        min=float(np.min(valid)),
        max=float(np.max(valid)),
        stddev=float(np.std(valid, ddof=0)),  # population standard deviation
        valid_count=int(valid.size),
    )


class PeriodAggregator:
    """Group observations by date and compute summary statistics.

    Statistics per date: mean, median, min, max, population standard
    deviation and the count of non-missing values.

    The aggregator is pure: it holds no state between calls, so running it
    twice on the same observations yields identical summaries.

    Examples
    --------
    >>> aggregator = PeriodAggregator(config)
    >>> summaries = aggregator.aggregate(observations)
    >>> [s.date for s in summaries] == sorted(s.date for s in summaries)
    True
    """

    def __init__(self, config: "InternalConfig" = None):
        self.config = config

    def aggregate(self, observations: Sequence[Observation]) -> List[PeriodSummary]:
        """Compute one PeriodSummary per distinct date, sorted ascending.

        Parameters
        ----------
        observations : sequence of Observation
            Output of the reshaper.

        Returns
        -------
        list of PeriodSummary
            Sorted by date ascending. Empty if there are no observations.
        """
        groups: Dict = {}
        for obs in observations:
            groups.setdefault(obs.date, []).append(obs.value)

        summaries = [summarize_values(day, groups[day]) for day in sorted(groups)]

        empty = [s.date.isoformat() for s in summaries if not s.has_data]
        if empty:
            logger.warning("%d period(s) with no valid data: %s", len(empty), ", ".join(empty))
        logger.debug("Aggregated %d observations into %d periods", len(observations), len(summaries))

        return summaries


def summaries_to_frame(summaries: Sequence[PeriodSummary]) -> pd.DataFrame:
    """Table with columns ``date, mean, median, min, max, stddev, valid_count``.

    Unavailable statistics become NaN.
    """
    stats = ("mean", "median", "min", "max", "stddev")
    columns = {"date": [s.date.isoformat() for s in summaries]}
    for name in stats:
        columns[name] = pd.Series(
            [np.nan if getattr(s, name) is None else getattr(s, name) for s in summaries],
            dtype="float64",
        )
    columns["valid_count"] = pd.Series([s.valid_count for s in summaries], dtype="int64")
    return pd.DataFrame(columns)
