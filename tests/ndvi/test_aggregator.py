"""Per-period summary statistics."""

from datetime import date

import numpy as np
import pytest

from trndvi.ndvi.aggregator import PeriodAggregator, summaries_to_frame, summarize_values
from trndvi.ndvi.models import Observation

pytestmark = pytest.mark.unit

JAN = date(2020, 1, 1)
FEB = date(2020, 2, 1)


@pytest.fixture
def aggregator(internal_config):
    return PeriodAggregator(internal_config)


@pytest.fixture
def example_observations():
    return [
        Observation("A", JAN, 0.5),
        Observation("B", JAN, None),
        Observation("A", FEB, 0.6),
        Observation("B", FEB, 0.7),
    ]


class TestAggregate:

    def test_example_summaries(self, aggregator, example_observations):
        jan, feb = aggregator.aggregate(example_observations)

        assert jan.date == JAN
        assert jan.mean == 0.5
        assert jan.median == 0.5
        assert jan.min == 0.5
        assert jan.max == 0.5
        assert jan.stddev == 0.0
        assert jan.valid_count == 1

        assert feb.date == FEB
        assert feb.mean == pytest.approx(0.65)
        assert feb.median == pytest.approx(0.65)
        assert feb.min == 0.6
        assert feb.max == 0.7
        assert feb.stddev == pytest.approx(0.05)
        assert feb.valid_count == 2

    def test_population_standard_deviation(self, aggregator):
        observations = [Observation(i, JAN, v) for i, v in enumerate([2.0, 4.0, 4.0, 4.0, 5.0, 5.0, 7.0, 9.0])]

        (summary,) = aggregator.aggregate(observations)

        assert summary.stddev == pytest.approx(2.0)

    def test_all_missing_period_has_no_statistics(self, aggregator):
        observations = [Observation("A", JAN, None), Observation("B", JAN, None)]

        (summary,) = aggregator.aggregate(observations)

        assert summary.valid_count == 0
        assert summary.mean is None
        assert summary.median is None
        assert summary.min is None
        assert summary.max is None
        assert summary.stddev is None
        assert not summary.has_data

    def test_sorted_by_date_regardless_of_input_order(self, aggregator, example_observations):
        summaries = aggregator.aggregate(list(reversed(example_observations)))

        assert [s.date for s in summaries] == [JAN, FEB]

    def test_valid_count_bounded_by_cells(self, aggregator, example_observations):
        cells = {obs.cell_id for obs in example_observations}

        for summary in aggregator.aggregate(example_observations):
            assert 0 <= summary.valid_count <= len(cells)

    def test_idempotent(self, aggregator, example_observations):
        assert aggregator.aggregate(example_observations) == aggregator.aggregate(example_observations)

    def test_empty_input(self, aggregator):
        assert aggregator.aggregate([]) == []

    def test_config_is_optional(self, example_observations):
        assert len(PeriodAggregator().aggregate(example_observations)) == 2


def test_summarize_values_ignores_none():
    summary = summarize_values(JAN, [None, 1.0, 3.0, None])

    assert summary.valid_count == 2
    assert summary.mean == 2.0
    assert summary.median == 2.0


def test_summaries_frame_uses_nan_for_missing(aggregator):
    summaries = aggregator.aggregate([Observation("A", JAN, None), Observation("A", FEB, 0.4)])

    frame = summaries_to_frame(summaries)

    assert list(frame.columns) == ["date", "mean", "median", "min", "max", "stddev", "valid_count"]
    assert frame["date"].tolist() == ["2020-01-01", "2020-02-01"]
    assert np.isnan(frame.loc[0, "mean"])
    assert frame.loc[1, "mean"] == 0.4
    assert frame["valid_count"].tolist() == [0, 1]


def test_wide_table_to_summaries(internal_config):
    """Cells A, B: 2020-01-01 -> 10, 20; 2020-02-01 -> missing, 30."""
    import pandas as pd
    from trndvi.ndvi.reshaper import WideTableReshaper

    wide = pd.DataFrame({
        "id": ["A", "B"],
        "2020-01-01": [10.0, 20.0],
        "2020-02-01": [np.nan, 30.0],
    })

    observations = WideTableReshaper(internal_config).reshape(wide)
    assert observations == [
        Observation("A", JAN, 10.0),
        Observation("B", JAN, 20.0),
        Observation("A", FEB, None),
        Observation("B", FEB, 30.0),
    ]

    jan, feb = PeriodAggregator(internal_config).aggregate(observations)
    assert (jan.mean, jan.valid_count) == (15.0, 2)
    assert (feb.mean, feb.valid_count) == (30.0, 1)
