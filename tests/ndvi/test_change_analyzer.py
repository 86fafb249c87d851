"""Baseline/latest change and trend classification."""

from datetime import date

import numpy as np
import pytest

from trndvi.contracts import ContractViolation, InsufficientDataError
from trndvi.ndvi.change_analyzer import (
    ChangeAnalyzer,
    assessment_to_frame,
    classify_change,
    key_findings,
    mean_of_differences,
)
from trndvi.ndvi.models import PeriodSummary

pytestmark = pytest.mark.unit


def make_summaries(means, valid_count=3):
    """One summary per month of 2020 with the given means (None = no data)."""
    summaries = []
    for month, mean in enumerate(means, start=1):
        if mean is None:
            summaries.append(PeriodSummary(date(2020, month, 1), None, None, None, None, None, 0))
        else:
            summaries.append(PeriodSummary(date(2020, month, 1), mean, mean, mean, mean, 0.0, valid_count))
    return summaries


@pytest.fixture
def analyzer(internal_config):
    return ChangeAnalyzer(internal_config)


class TestAssess:

    def test_improvement_example(self, analyzer):
        assessment = analyzer.assess(make_summaries([10.0, 20.0, 15.0, 70.0]))

        assert assessment.baseline == 10.0
        assert assessment.latest == 70.0
        assert assessment.total_change == 60.0
        assert assessment.mean_change_per_period == pytest.approx(20.0)
        assert assessment.classification == "improvement"
        assert assessment.period_start == date(2020, 1, 1)
        assert assessment.period_end == date(2020, 4, 1)

    def test_single_summary_is_stable(self, analyzer):
        assessment = analyzer.assess(make_summaries([42.0]))

        assert assessment.baseline == 42.0
        assert assessment.latest == 42.0
        assert assessment.total_change == 0.0
        assert assessment.mean_change_per_period is None
        assert assessment.classification == "stable"

    def test_decline(self, analyzer):
        assessment = analyzer.assess(make_summaries([4500.0, 4400.0, 4300.0]))

        assert assessment.total_change == -200.0
        assert assessment.classification == "decline"

    def test_change_at_threshold_is_stable(self, analyzer):
        """Thresholds are strict: exactly +50 does not count as improvement."""
        assert analyzer.assess(make_summaries([100.0, 150.0])).classification == "stable"
        assert analyzer.assess(make_summaries([100.0, 50.0])).classification == "stable"

    def test_empty_raises_insufficient_data(self, analyzer):
        with pytest.raises(InsufficientDataError) as exc_info:
            analyzer.assess([])
        assert exc_info.value.stage == "change"

    def test_unsorted_summaries_violate_contract(self, analyzer):
        summaries = make_summaries([1.0, 2.0])

        with pytest.raises(ContractViolation, match="sorted"):
            analyzer.assess(list(reversed(summaries)))

    def test_missing_baseline_propagates(self, analyzer):
        assessment = analyzer.assess(make_summaries([None, 20.0, 90.0]))

        assert assessment.baseline is None
        assert assessment.total_change is None
        assert assessment.mean_change_per_period == pytest.approx(70.0)
        assert assessment.classification == "stable"

    def test_missing_latest_propagates(self, analyzer):
        assessment = analyzer.assess(make_summaries([20.0, None]))

        assert assessment.latest is None
        assert assessment.total_change is None
        assert assessment.mean_change_per_period is None

    def test_counts(self, analyzer):
        summaries = make_summaries([1.0, None, 2.0], valid_count=4)

        assessment = analyzer.assess(summaries, cell_count=5)

        assert assessment.total_observations == 8
        assert assessment.cell_count == 5

    def test_cell_count_defaults_to_largest_valid_count(self, analyzer):
        assessment = analyzer.assess(make_summaries([1.0, 2.0], valid_count=4))

        assert assessment.cell_count == 4

    def test_configured_thresholds(self, make_config):
        config = make_config(IMPROVEMENT_THRESHOLD=0.05, DECLINE_THRESHOLD=-0.05)

        assessment = ChangeAnalyzer(config).assess(make_summaries([0.40, 0.47]))

        assert assessment.classification == "improvement"


@pytest.mark.parametrize("change,expected", [
    (60.0, "improvement"),
    (-60.0, "decline"),
    (0.0, "stable"),
    (None, "stable"),
])
def test_classify_change(change, expected):
    assert classify_change(change, 50.0, -50.0) == expected


def test_mean_of_differences_skips_missing_pairs():
    assert mean_of_differences([1.0, None, 5.0, 8.0]) == 3.0
    assert mean_of_differences([None, None]) is None


class TestReportTables:

    def test_key_findings_reuse_the_assessment(self, analyzer):
        assessment = analyzer.assess(make_summaries([10.0, 20.0, 15.0, 70.0]), cell_count=3)

        findings = dict(key_findings(assessment).values.tolist())

        assert findings["Analysis period"] == "2020-01-01 to 2020-04-01"
        assert findings["Grid cells"] == "3"
        assert findings["Valid observations"] == "12"
        assert findings["Baseline NDVI"] == "10.00"
        assert findings["Latest NDVI"] == "70.00"
        assert findings["Total change"] == "60.00"
        assert findings["Mean change per period"] == "20.00"
        assert findings["Trend"] == "improvement"

    def test_key_findings_show_missing_values(self, analyzer):
        findings = dict(key_findings(analyzer.assess(make_summaries([None, 5.0]))).values.tolist())

        assert findings["Baseline NDVI"] == "no data"
        assert findings["Total change"] == "no data"

    def test_assessment_frame_is_one_row(self, analyzer):
        frame = assessment_to_frame(analyzer.assess(make_summaries([42.0])))

        assert len(frame) == 1
        assert frame.loc[0, "period_start"] == "2020-01-01"
        assert frame.loc[0, "classification"] == "stable"
        assert np.isnan(frame.loc[0, "mean_change_per_period"])
