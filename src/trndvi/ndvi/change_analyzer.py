"""Baseline-to-latest change and trend classification.

The analyzer turns the date-ascending sequence of per-period means into a
single TrendAssessment. It runs once per pipeline run; the summary table
and the key-findings table are both rendered from that one result.
"""

import logging
from typing import TYPE_CHECKING, List, Optional, Sequence

import pandas as pd

from trndvi.contracts import InsufficientDataError, require
from trndvi.ndvi.models import PeriodSummary, TrendAssessment

if TYPE_CHECKING:
    from trndvi.schemas import InternalConfig

__all__ = ['ChangeAnalyzer', 'classify_change', 'assessment_to_frame', 'key_findings']

logger = logging.getLogger(__name__)

NO_DATA = "no data"


def classify_change(total_change: Optional[float], improvement_threshold: float,
                    decline_threshold: float) -> str:
    """Classify a total change against fixed thresholds (strict comparisons).

    An unavailable change cannot cross either threshold and is "stable".
    """
    if total_change is None:
        return "stable"
    if total_change > improvement_threshold:
        return "improvement"
    if total_change < decline_threshold:
        return "decline"
    return "stable"


def mean_of_differences(values: Sequence[Optional[float]]) -> Optional[float]:
    """Mean of successive differences, skipping pairs with a missing operand."""
    diffs = [
        later - earlier
        for earlier, later in zip(values, values[1:])
        if earlier is not None and later is not None
    ]
    if not diffs:
        return None
    return sum(diffs) / len(diffs)


class ChangeAnalyzer:
    """Compute the TrendAssessment for a sequence of period summaries.

    Configuration
    =============
    - `analyzer.improvement_threshold` : change above this is "improvement"
    - `analyzer.decline_threshold` : change below this is "decline"

    Examples
    --------
    >>> analyzer = ChangeAnalyzer(config)
    >>> assessment = analyzer.assess(summaries, cell_count=len(wide))
    >>> assessment.classification
    'improvement'
    """

    def __init__(self, config: "InternalConfig"):
        self.config = config
        self.improvement_threshold = config.analyzer.improvement_threshold
        self.decline_threshold = config.analyzer.decline_threshold

    def assess(self, summaries: Sequence[PeriodSummary],
               cell_count: Optional[int] = None) -> TrendAssessment:
        """Derive baseline, latest, change and classification.

        Parameters
        ----------
        summaries : sequence of PeriodSummary
            Date-ascending output of the aggregator.
        cell_count : int, optional
            Number of cells in the wide table. Defaults to the largest
            valid_count, which is a lower bound when cells have gaps.

        Returns
        -------
        TrendAssessment

        Raises
        ------
        InsufficientDataError
            If ``summaries`` is empty.
        ContractViolation
            If summaries are not strictly ascending by date.
        """
        if not summaries:
            raise InsufficientDataError("cannot assess change without any period summaries")

        dates = [s.date for s in summaries]
        require(
            all(a < b for a, b in zip(dates, dates[1:])),
            "Change analysis requires summaries sorted by date ascending",
            stage="change",
        )

        means: List[Optional[float]] = [s.mean for s in summaries]
        baseline = means[0]
        latest = means[-1]

        if baseline is None or latest is None:
            total_change = None
            logger.warning(
                "Total change unavailable: %s period has no valid data",
                "baseline" if baseline is None else "latest",
            )
        else:
            total_change = latest - baseline

        if cell_count is None:
            cell_count = max(s.valid_count for s in summaries)

        assessment = TrendAssessment(
            period_start=dates[0],
            period_end=dates[-1],
            total_observations=sum(s.valid_count for s in summaries),
            cell_count=cell_count,
            baseline=baseline,
            latest=latest,
            total_change=total_change,
            mean_change_per_period=mean_of_differences(means),
            classification=classify_change(
                total_change, self.improvement_threshold, self.decline_threshold
            ),
        )

        logger.info(
            "Trend %s: baseline=%s latest=%s change=%s over %d periods",
            assessment.classification, baseline, latest, total_change, len(summaries),
        )
        return assessment


def assessment_to_frame(assessment: TrendAssessment) -> pd.DataFrame:
    """One-row table of the assessment (dates as ISO strings, NaN for unavailable)."""
    record = assessment.as_dict()
    record["period_start"] = assessment.period_start.isoformat()
    record["period_end"] = assessment.period_end.isoformat()
    for name in ("baseline", "latest", "total_change", "mean_change_per_period"):
        if record[name] is None:
            record[name] = float("nan")
    return pd.DataFrame([record])


def _fmt(value: Optional[float], precision: int = 2) -> str:
    if value is None:
        return NO_DATA
    return f"{value:.{precision}f}"


def key_findings(assessment: TrendAssessment) -> pd.DataFrame:
    """Human-readable ``metric, value`` rows rendered from one assessment."""
    rows = [
        ("Analysis period",
         f"{assessment.period_start.isoformat()} to {assessment.period_end.isoformat()}"),
        ("Grid cells", str(assessment.cell_count)),
        ("Valid observations", str(assessment.total_observations)),
        ("Baseline NDVI", _fmt(assessment.baseline)),
        ("Latest NDVI", _fmt(assessment.latest)),
        ("Total change", _fmt(assessment.total_change)),
        ("Mean change per period", _fmt(assessment.mean_change_per_period)),
        ("Trend", assessment.classification),
    ]
    return pd.DataFrame(rows, columns=["metric", "value"])
