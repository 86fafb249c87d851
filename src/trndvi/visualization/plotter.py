"""NDVI time-series report figures.

Renders the per-period summary statistics and the trend assessment to
static figures: a time series of mean and median NDVI with min-max and
standard-deviation bands, and a bar chart of valid cells per period.
Unavailable statistics are drawn as gaps.
"""

import logging
from pathlib import Path
from typing import TYPE_CHECKING, List, Optional, Sequence, Tuple

import numpy as np
import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt

from trndvi.ndvi.models import PeriodSummary, TrendAssessment

if TYPE_CHECKING:
    from trndvi.schemas import InternalConfig

__all__ = ['NdviPlotter']

logger = logging.getLogger(__name__)


def _as_array(values: Sequence[Optional[float]]) -> np.ndarray:
    """Float array with NaN in place of None (NaN breaks the plotted line)."""
    return np.array([np.nan if v is None else v for v in values], dtype=float)


class NdviPlotter:
    """Generates report figures from period summaries.

    **Time series** (``plot_time_series``):

    - Mean and median NDVI per period
    - Shaded min-max range and mean +/- 1 standard deviation
    - Dashed baseline and latest reference lines from the assessment
    - Title carries the variable, frequency and trend classification

    **Valid counts** (``plot_valid_counts``):

    - Bars of valid cells per period against the total cell count

    **Configuration:**

    All appearance settings (DPI, figure size, colors, output format) come
    from ``config.visualization``.

    Example usage::

        plotter = NdviPlotter(config)
        path = plotter.plot_time_series(summaries, assessment, plots_dir / "ndvi_timeseries")
    """

    def __init__(self, config: "InternalConfig"):
        viz = config.visualization
        self.dpi = viz.dpi
        self.figsize = tuple(viz.figsize)
        self.output_format = viz.output_format
        self.mean_color = viz.mean_color
        self.median_color = viz.median_color
        self.count_color = viz.count_color
        self.band_alpha = viz.band_alpha
        self.variable = config.loader.variable
        self.freq = config.loader.freq

        logger.info("NdviPlotter initialized (format=%s, dpi=%d)", self.output_format, self.dpi)

    def _setup_figure(self) -> Tuple[plt.Figure, plt.Axes]:
        fig, ax = plt.subplots(figsize=self.figsize, dpi=self.dpi)
        return fig, ax

    def _format_axis(self, ax: plt.Axes, title: str, ylabel: str) -> None:
        """Format axis with labels and title."""
        ax.set_xlabel('Period start', fontsize=11)
        ax.set_ylabel(ylabel, fontsize=11)
        ax.grid(True, alpha=0.2, linestyle=':', linewidth=0.5)
        ax.set_title(title, fontsize=12, fontweight='bold', pad=10)

    def _save_figure(self, fig: plt.Figure, output_path: Path) -> str:
        """Save figure in configured format."""
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)

        # Ensure correct extension
        output_file = output_path.with_suffix(f'.{self.output_format}')

        fig.autofmt_xdate()
        fig.savefig(
            output_file,
            dpi=self.dpi,
            bbox_inches='tight',
            format=self.output_format
        )

        plt.close(fig)
        logger.info("Plot saved: %s", output_file)

        return str(output_file)

    def plot_time_series(
        self,
        summaries: Sequence[PeriodSummary],
        assessment: TrendAssessment,
        output_path: Path,
    ) -> str:
        """Plot mean/median NDVI with spread bands and trend reference lines.

        Parameters
        ----------
        summaries : sequence of PeriodSummary
            Date-ascending summaries.
        assessment : TrendAssessment
            Assessment computed from the same summaries.
        output_path : Path
            Destination; the suffix is replaced by the configured format.

        Returns
        -------
        str
            Path of the written figure.
        """
        dates: List = [s.date for s in summaries]
        mean = _as_array([s.mean for s in summaries])
        median = _as_array([s.median for s in summaries])
        low = _as_array([s.min for s in summaries])
        high = _as_array([s.max for s in summaries])
        std = _as_array([s.stddev for s in summaries])

        fig, ax = self._setup_figure()

        ax.fill_between(dates, low, high, color=self.mean_color,
                        alpha=self.band_alpha / 2, label='Min-max range')
        ax.fill_between(dates, mean - std, mean + std, color=self.mean_color,
                        alpha=self.band_alpha, label='Mean ± 1 sd')
        ax.plot(dates, mean, color=self.mean_color, marker='o', markersize=3,
                linewidth=1.5, label='Mean')
        ax.plot(dates, median, color=self.median_color, linestyle='--',
                linewidth=1.0, label='Median')

        if assessment.baseline is not None:
            ax.axhline(assessment.baseline, color='grey', linestyle=':', linewidth=0.8,
                       label=f'Baseline ({assessment.baseline:.1f})')
        if assessment.latest is not None:
            ax.axhline(assessment.latest, color='black', linestyle=':', linewidth=0.8,
                       label=f'Latest ({assessment.latest:.1f})')

        title = (
            f'{self.variable} ({self.freq})\n'
            f'{assessment.period_start.isoformat()} to {assessment.period_end.isoformat()}: '
            f'{assessment.classification}'
        )
        self._format_axis(ax, title, 'NDVI')
        ax.legend(loc='best', fontsize=9, framealpha=0.9)

        return self._save_figure(fig, output_path)

    def plot_valid_counts(
        self,
        summaries: Sequence[PeriodSummary],
        cell_count: int,
        output_path: Path,
    ) -> str:
        """Bar chart of valid cells per period with the total cell count."""
        dates = [s.date for s in summaries]
        counts = [s.valid_count for s in summaries]

        fig, ax = self._setup_figure()

        # Bar width is in days
        ax.bar(dates, counts, width=10, color=self.count_color, label='Valid cells')
        ax.axhline(cell_count, color='black', linestyle='--', linewidth=0.8,
                   label=f'All cells ({cell_count})')

        self._format_axis(ax, f'{self.variable}: valid cells per period', 'Cells')
        ax.set_ylim(0, max(cell_count, max(counts, default=0)) * 1.05 + 1)
        ax.legend(loc='lower right', fontsize=9, framealpha=0.9)

        return self._save_figure(fig, output_path)
