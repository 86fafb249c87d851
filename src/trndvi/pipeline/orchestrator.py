"""Single-run NDVI report orchestration.

Runs the stages in order (load, reshape, aggregate, change, report),
checks the contract at every stage boundary, records progress in the run
tracker and writes the report tables and figures.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING, Dict, List, Optional

from trndvi.contracts import (
    PipelineError,
    assert_loaded,
    assert_period_summaries,
    assert_reshaped,
)
from trndvi.ndvi.aggregator import PeriodAggregator
from trndvi.ndvi.change_analyzer import ChangeAnalyzer
from trndvi.ndvi.loader import NdviDataLoader, merge_grid
from trndvi.ndvi.models import PeriodSummary, TrendAssessment
from trndvi.ndvi.reshaper import WideTableReshaper
from trndvi.pipeline.report import ReportWriter, variable_slug
from trndvi.pipeline.run_tracker import RunTracker
from trndvi.visualization.plotter import NdviPlotter

if TYPE_CHECKING:
    from trndvi.schemas import InternalConfig

__all__ = ['PipelineOrchestrator', 'PipelineResult']

logger = logging.getLogger(__name__)


@dataclass
class PipelineResult:
    """Outcome of one successful run."""
    run_id: str
    variable: str
    freq: str
    cell_count: int
    summaries: List[PeriodSummary]
    assessment: TrendAssessment
    tables: Dict[str, str] = field(default_factory=dict)
    plots: List[str] = field(default_factory=list)


class PipelineOrchestrator:
    """Runs the NDVI reporting pipeline once for the configured variable.

    **Stages:**

    1. **Load**: read grid and wide table from the geeLite store,
       resampled to the reporting frequency
    2. **Reshape**: wide table -> one observation per (cell, period)
    3. **Aggregate**: per-period mean, median, min, max, stddev, valid count
    4. **Change**: baseline, latest, total change and classification
    5. **Report**: CSV tables, then figures if visualization is enabled

    Every stage fails fast. On failure the run is recorded in the tracker
    with the failing stage and error kind, the error is logged and
    re-raised; nothing is written after the failing stage.

    **Logging:**

    Console plus ``logs/pipeline_<slug>.log``; level from
    ``config.logging.level``.

    Example usage::

        output_dirs = setup_output_directories(config.base_dir)
        orch = PipelineOrchestrator(config, output_dirs)
        result = orch.run()
        print(result.assessment.classification)
    """

    def __init__(self, config: "InternalConfig", output_dirs: Dict[str, Path]):
        """Initialize orchestrator.

        Parameters
        ----------
        config : InternalConfig
            Resolved runtime configuration.
        output_dirs : dict
            Paths from ``setup_output_directories()``: ``base``, ``tables``,
            ``plots``, ``logs``.
        """
        self.config = config
        self.output_dirs = {key: Path(path) for key, path in output_dirs.items()}
        self.slug = variable_slug(config.loader.variable)
        self.run_id = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%S_%fZ")
        self.tracker: Optional[RunTracker] = None

    def _setup_logging(self):
        """Configure root logger with file and console handlers."""
        log_level = getattr(logging, self.config.logging.level, logging.INFO)

        log_dir = self.output_dirs["logs"]
        log_dir.mkdir(parents=True, exist_ok=True)
        log_path = log_dir / f"pipeline_{self.slug}.log"

        formatter = logging.Formatter(
            fmt='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )

        # Clear existing handlers and add new ones
        root = logging.getLogger()
        root.setLevel(log_level)
        for handler in root.handlers[:]:
            root.removeHandler(handler)
            if isinstance(handler, logging.FileHandler):
                handler.close()

        # File handler
        fh = logging.FileHandler(log_path)
        fh.setLevel(log_level)
        fh.setFormatter(formatter)
        root.addHandler(fh)

        # Console handler
        ch = logging.StreamHandler()
        ch.setLevel(log_level)
        ch.setFormatter(formatter)
        root.addHandler(ch)

        logger.info("Logging: level=%s, file=%s", self.config.logging.level, log_path)

    def run(self) -> PipelineResult:
        """Run every stage and write the report.

        Returns
        -------
        PipelineResult

        Raises
        ------
        NotFoundError, SchemaError, InsufficientDataError, ContractViolation
            Propagated from the failing stage after it is recorded.
        """
        self._setup_logging()

        cfg = self.config
        variable = cfg.loader.variable
        id_column = cfg.reshaper.id_column

        logger.info("=" * 60)
        logger.info("NDVI report: %s (%s) run %s", variable, cfg.loader.freq, self.run_id)
        logger.info("=" * 60)

        self.tracker = RunTracker(self.output_dirs["tables"] / "run_tracker.db")
        self.tracker.start_run(self.run_id, variable, cfg.loader.freq, cfg.store.path)

        stage = "load"
        try:
            store = NdviDataLoader(cfg).load([variable])
            wide = store.variables[variable]
            assert_loaded(store.grid, wide, id_column)
            merged = merge_grid(store.grid, wide, id_column)
            cell_count = len(wide)
            self.tracker.mark_stage_complete(self.run_id, "loaded", num_cells=cell_count)

            stage = "reshape"
            reshaper = WideTableReshaper(cfg)
            date_pairs = reshaper.date_columns(wide)
            observations = reshaper.reshape(wide)
            assert_reshaped(observations, list(wide[id_column]), len(date_pairs))
            self.tracker.mark_stage_complete(self.run_id, "reshaped")
            logger.info("Reshaped: %d observations", len(observations))

            stage = "aggregate"
            summaries = PeriodAggregator(cfg).aggregate(observations)
            assert_period_summaries(summaries, cell_count, {day for _, day in date_pairs})
            self.tracker.mark_stage_complete(self.run_id, "aggregated", num_periods=len(summaries))
            logger.info("Aggregated: %d periods", len(summaries))

            stage = "change"
            assessment = ChangeAnalyzer(cfg).assess(summaries, cell_count=cell_count)
            self.tracker.mark_stage_complete(
                self.run_id, "assessed", classification=assessment.classification
            )

            stage = "report"
            # Figures render before tables; a failure removes every file
            # this stage already wrote
            writer = ReportWriter(cfg, self.output_dirs["tables"])
            figures: List[str] = []
            try:
                plots = self._plot(summaries, assessment, cell_count, figures)
                tables = writer.write(observations, summaries, assessment, merged=merged)
            except Exception:
                self._discard(figures + writer.written)
                raise
            self.tracker.mark_stage_complete(self.run_id, "reported")

        except PipelineError as e:
            logger.error("Run %s failed in %s: %s", self.run_id, e.stage, e)
            self.tracker.mark_failed(self.run_id, e.stage, e.kind, e.message)
            raise
        except Exception as e:
            logger.exception("Run %s failed in %s", self.run_id, stage)
            self.tracker.mark_failed(self.run_id, stage, type(e).__name__, str(e))
            raise
        finally:
            self.tracker.close()

        logger.info("Report complete: %s (%s)", assessment.classification, self.run_id)
        return PipelineResult(
            run_id=self.run_id,
            variable=variable,
            freq=cfg.loader.freq,
            cell_count=cell_count,
            summaries=summaries,
            assessment=assessment,
            tables=tables,
            plots=plots,
        )

    def _plot(self, summaries, assessment, cell_count, written: List[str]) -> List[str]:
        """Write figures unless visualization is disabled.

        Each destination is appended to ``written`` before it is saved.
        """
        if not self.config.visualization.enabled:
            logger.info("Visualization disabled, skipping figures")
            return []

        plotter = NdviPlotter(self.config)
        plots_dir = self.output_dirs["plots"]
        suffix = f".{plotter.output_format}"

        series_path = plots_dir / f"{self.slug}_timeseries"
        written.append(str(series_path.with_suffix(suffix)))
        series = plotter.plot_time_series(summaries, assessment, series_path)

        counts_path = plots_dir / f"{self.slug}_valid_counts"
        written.append(str(counts_path.with_suffix(suffix)))
        counts = plotter.plot_valid_counts(summaries, cell_count, counts_path)
        return [series, counts]

    @staticmethod
    def _discard(paths: List[str]) -> None:
        """Remove the files of a report that did not complete."""
        for path in paths:
            Path(path).unlink(missing_ok=True)
        if paths:
            logger.warning("Removed %d partial report file(s)", len(paths))
