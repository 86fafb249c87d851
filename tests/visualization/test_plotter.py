"""Report figures are written, including series with missing periods."""

from datetime import date

import pytest

from trndvi.ndvi.change_analyzer import ChangeAnalyzer
from trndvi.ndvi.models import PeriodSummary
from trndvi.visualization.plotter import NdviPlotter

pytestmark = pytest.mark.unit


@pytest.fixture
def summaries():
    return [
        PeriodSummary(date(2020, 1, 1), 4000.0, 3990.0, 3900.0, 4100.0, 80.0, 3),
        PeriodSummary(date(2020, 2, 1), None, None, None, None, None, 0),
        PeriodSummary(date(2020, 3, 1), 4200.0, 4200.0, 4100.0, 4300.0, 81.6, 3),
        PeriodSummary(date(2020, 4, 1), 4700.0, 4700.0, 4600.0, 4800.0, 81.6, 2),
    ]


@pytest.fixture
def plotter(internal_config):
    return NdviPlotter(internal_config)


def test_time_series_written(plotter, summaries, internal_config, temp_dir):
    assessment = ChangeAnalyzer(internal_config).assess(summaries, cell_count=3)

    path = plotter.plot_time_series(summaries, assessment, temp_dir / "plots" / "ndvi_timeseries")

    assert path.endswith("ndvi_timeseries.png")
    assert (temp_dir / "plots" / "ndvi_timeseries.png").stat().st_size > 0


def test_time_series_without_baseline(plotter, internal_config, temp_dir):
    summaries = [
        PeriodSummary(date(2020, 1, 1), None, None, None, None, None, 0),
        PeriodSummary(date(2020, 2, 1), 0.5, 0.5, 0.5, 0.5, 0.0, 1),
    ]
    assessment = ChangeAnalyzer(internal_config).assess(summaries)

    path = plotter.plot_time_series(summaries, assessment, temp_dir / "no_baseline")

    assert assessment.baseline is None
    assert path.endswith(".png")


def test_valid_counts_written(plotter, summaries, temp_dir):
    path = plotter.plot_valid_counts(summaries, 3, temp_dir / "counts.tmp")

    assert path == str(temp_dir / "counts.png")


def test_output_format_from_config(make_config, summaries, temp_dir):
    config = make_config(visualization={"output_format": "pdf", "dpi": 72})
    plotter = NdviPlotter(config)

    path = plotter.plot_valid_counts(summaries, 3, temp_dir / "counts")

    assert path.endswith(".pdf")
    assert plotter.dpi == 72
