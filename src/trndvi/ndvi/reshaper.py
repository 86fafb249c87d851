"""Convert wide per-cell tables into long-format observations.

A wide table has one row per cell and one column per date. The reshaper
walks it explicitly, date column by date column and, within each date,
cell by cell in table order, emitting one Observation per (cell, date)
pair. Missing values are passed through as ``None``; nothing is
interpolated or dropped.

``pivot_wide`` is the inverse: it rebuilds the wide table from the
observations, with NaN wherever an observation is missing.
"""

import logging
import math
from datetime import date, datetime
from typing import TYPE_CHECKING, Iterable, List, Optional, Sequence

import pandas as pd

from trndvi.contracts import SchemaError
from trndvi.ndvi.models import Observation

if TYPE_CHECKING:
    from trndvi.schemas import InternalConfig

__all__ = ['WideTableReshaper', 'pivot_wide', 'observations_to_frame', 'to_optional_float']

logger = logging.getLogger(__name__)


def to_optional_float(value) -> Optional[float]:
    """Map a table cell to a float, or None when it is missing (None, NaN, NA)."""
    if value is None or value is pd.NA:
        return None
    value = float(value)
    if math.isnan(value):
        return None
    return value


def parse_date_column(name) -> date:
    """Parse a ``YYYY-MM-DD`` column label, raising SchemaError otherwise."""
    if not isinstance(name, str):
        raise SchemaError(f"column {name!r} is not a YYYY-MM-DD date string")
    try:
        day = datetime.strptime(name, "%Y-%m-%d").date()
    except ValueError:
        raise SchemaError(f"column {name!r} is not a YYYY-MM-DD date")
    if day.isoformat() != name:
        raise SchemaError(f"column {name!r} is not a zero-padded YYYY-MM-DD date")
    return day


class WideTableReshaper:
    """Reshape a wide cell x date table into Observations.

    Parameters come from config:

    - `reshaper.id_column` : cell identifier column (default "id")
    - `reshaper.exclude_columns` : non-date metadata columns to skip
      (default ["geometry"])

    Examples
    --------
    >>> reshaper = WideTableReshaper(config)
    >>> observations = reshaper.reshape(wide)
    >>> len(observations) == len(wide) * (wide.shape[1] - 1)
    True
    """

    def __init__(self, config: "InternalConfig"):
        self.config = config
        self.id_column = config.reshaper.id_column
        self.exclude_columns = list(config.reshaper.exclude_columns)

    def date_columns(self, wide: pd.DataFrame, exclude: Optional[Iterable[str]] = None) -> List[tuple]:
        """Return ``(column, date)`` pairs in encountered order.

        Raises
        ------
        SchemaError
            If the id column is missing, a remaining column is not a date,
            or two columns name the same date.
        """
        if self.id_column not in wide.columns:
            raise SchemaError(f"wide table has no '{self.id_column}' column")

        skip = set(self.exclude_columns if exclude is None else exclude)
        skip.add(self.id_column)

        pairs = []
        seen = set()
        for col in wide.columns:
            if col in skip:
                continue
            day = parse_date_column(col)
            if day in seen:
                raise SchemaError(f"date {day.isoformat()} appears in more than one column")
            seen.add(day)
            pairs.append((col, day))
        return pairs

    def reshape(self, wide: pd.DataFrame, exclude: Optional[Iterable[str]] = None) -> List[Observation]:
        """Emit one Observation per (cell, date) pair.

        Parameters
        ----------
        wide : pd.DataFrame
            Rows are cells; columns are the id column, optional metadata
            columns, and one column per ``YYYY-MM-DD`` date.
        exclude : iterable of str, optional
            Metadata column names to skip. Defaults to the configured
            ``exclude_columns``.

        Returns
        -------
        list of Observation
            Ordered by date column, then by cell row.

        Raises
        ------
        SchemaError
            See ``date_columns``. Validation happens before anything is
            emitted, so no partial output is ever returned.
        """
        pairs = self.date_columns(wide, exclude)
        cell_ids = list(wide[self.id_column])

        observations = []
        for col, day in pairs:
            for cell_id, raw in zip(cell_ids, wide[col].tolist()):
                try:
                    value = to_optional_float(raw)
                except (TypeError, ValueError):
                    raise SchemaError(f"non-numeric value {raw!r} for cell {cell_id!r} in column {col!r}")
                observations.append(Observation(cell_id, day, value))

        missing = sum(1 for obs in observations if obs.value is None)
        logger.debug(
            "Reshaped %d cells x %d dates -> %d observations (%d missing)",
            len(cell_ids), len(pairs), len(observations), missing,
        )
        return observations


def pivot_wide(observations: Sequence[Observation], id_column: str = "id") -> pd.DataFrame:
    """Rebuild a wide table from observations.

    Cells and dates keep their first-seen order; date columns are labelled
    ``YYYY-MM-DD`` and missing values become NaN.
    """
    cells = []
    dates = []
    values = {}
    seen_cells = set()
    seen_dates = set()
    for obs in observations:
        if obs.cell_id not in seen_cells:
            seen_cells.add(obs.cell_id)
            cells.append(obs.cell_id)
        if obs.date not in seen_dates:
            seen_dates.add(obs.date)
            dates.append(obs.date)
        values[(obs.cell_id, obs.date)] = obs.value

    columns = {id_column: cells}
    for day in dates:
        column = []
        for cell_id in cells:
            value = values.get((cell_id, day))
            column.append(float("nan") if value is None else value)
        columns[day.isoformat()] = pd.Series(column, dtype="float64")

    return pd.DataFrame(columns)


def observations_to_frame(observations: Sequence[Observation], id_column: str = "id") -> pd.DataFrame:
    """Long-format table with columns ``id, date, value`` (NaN for missing)."""
    return pd.DataFrame(
        {
            id_column: [obs.cell_id for obs in observations],
            "date": [obs.date.isoformat() for obs in observations],
            "value": pd.Series(
                [float("nan") if obs.value is None else obs.value for obs in observations],
                dtype="float64",
            ),
        }
    )
