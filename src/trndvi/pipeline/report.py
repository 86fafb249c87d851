"""CSV report tables for one reporting run.

All tables go to ``<base_dir>/tables`` and share a file-name prefix
derived from the variable name. Missing values are written as empty
fields, never as zero.
"""

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Dict, List, Optional, Sequence

import pandas as pd

from trndvi.ndvi.aggregator import summaries_to_frame
from trndvi.ndvi.change_analyzer import assessment_to_frame, key_findings
from trndvi.ndvi.models import Observation, PeriodSummary, TrendAssessment
from trndvi.ndvi.reshaper import observations_to_frame

if TYPE_CHECKING:
    from trndvi.schemas import InternalConfig

__all__ = ['ReportWriter', 'variable_slug']

logger = logging.getLogger(__name__)


def variable_slug(variable: str) -> str:
    """File-name prefix for a variable: ``MODIS/061/MOD13A2/NDVI/mean`` -> ``MODIS_061_MOD13A2_NDVI_mean``."""
    return variable.replace("/", "_")


class ReportWriter:
    """Write the report tables of one run.

    Tables written (``<slug>`` is the variable with ``/`` replaced by ``_``):

    - ``<slug>_merged.csv`` : grid joined to the wide table (optional)
    - ``<slug>_observations.csv`` : ``id, date, value``
    - ``<slug>_period_summary.csv`` : one row per period
    - ``<slug>_trend_assessment.csv`` : the single assessment record
    - ``<slug>_key_findings.csv`` : ``metric, value`` rows
    """

    def __init__(self, config: "InternalConfig", tables_dir: Path):
        self.tables_dir = Path(tables_dir)
        self.float_format = config.output.float_format
        self.write_merged = config.output.write_merged
        self.id_column = config.reshaper.id_column
        self.slug = variable_slug(config.loader.variable)
        # Paths written so far, so a failed report can be discarded
        self.written: List[str] = []

    def _write(self, frame: pd.DataFrame, name: str) -> str:
        path = self.tables_dir / f"{self.slug}_{name}.csv"
        path.parent.mkdir(parents=True, exist_ok=True)
        self.written.append(str(path))
        frame.to_csv(path, index=False, float_format=self.float_format, na_rep="")
        logger.info("Table saved: %s (%d rows)", path, len(frame))
        return str(path)

    def write(
        self,
        observations: Sequence[Observation],
        summaries: Sequence[PeriodSummary],
        assessment: TrendAssessment,
        merged: Optional[pd.DataFrame] = None,
    ) -> Dict[str, str]:
        """Write every table and return ``{table name: path}``."""
        written = {}
        if self.write_merged and merged is not None:
            written["merged"] = self._write(merged, "merged")
        written["observations"] = self._write(
            observations_to_frame(observations, self.id_column), "observations"
        )
        written["period_summary"] = self._write(summaries_to_frame(summaries), "period_summary")
        written["trend_assessment"] = self._write(assessment_to_frame(assessment), "trend_assessment")
        written["key_findings"] = self._write(key_findings(assessment), "key_findings")
        return written
