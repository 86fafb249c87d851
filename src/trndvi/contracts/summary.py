"""Aggregate stage contract.

Enforces the guarantee that summaries are one per distinct date, sorted
ascending, with counts bounded by the number of cells and no statistics
invented for empty periods.
"""

from typing import Sequence
from trndvi.contracts.base import require

_STAT_FIELDS = ("mean", "median", "min", "max", "stddev")


def assert_period_summaries(summaries: Sequence, cell_count: int, dates: set | None = None) -> None:
    """Enforce aggregate stage contract.

    Parameters
    ----------
    summaries : sequence of PeriodSummary
        Output from PeriodAggregator.aggregate()

    cell_count : int
        Total number of cells in the wide table.

    dates : set of date, optional
        Distinct observation dates; when given, summary dates must match exactly.

    Raises
    ------
    ContractViolation
        If any invariant is violated
    """
    summary_dates = [s.date for s in summaries]
    require(
        all(a < b for a, b in zip(summary_dates, summary_dates[1:])),
        "Aggregate contract violated: summary dates are not strictly ascending",
        stage="aggregate",
    )

    if dates is not None:
        require(
            set(summary_dates) == set(dates),
            "Aggregate contract violated: summary dates differ from observation dates",
            stage="aggregate",
        )

    for s in summaries:
        require(
            0 <= s.valid_count <= cell_count,
            f"Aggregate contract violated: {s.date} valid_count={s.valid_count} "
            f"outside [0, {cell_count}]",
            stage="aggregate",
        )
        if s.valid_count == 0:
            require(
                all(getattr(s, name) is None for name in _STAT_FIELDS),
                f"Aggregate contract violated: {s.date} has no data but reports statistics",
                stage="aggregate",
            )
