"""Read per-cell NDVI tables from a geeLite store.

A geeLite store is a directory whose SQLite database (``data/geelite.db``
by default) holds a ``grid`` table of hexagonal cells and one table per
tracked variable, named ``<dataset>/<band>/<statistic>`` (for example
``MODIS/061/MOD13A2/NDVI/mean``). Each variable table is wide: an ``id``
column plus one ``YYYY-MM-DD`` column per acquisition date.

The loader opens the database read-only, checks that the requested tables
exist, and resamples the native date columns to the reporting frequency
with a missing-aware mean (a period where every date is missing stays
missing).
"""

import logging
import sqlite3
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Dict, Iterable, List, Optional

import pandas as pd

from trndvi.contracts import NotFoundError, SchemaError

if TYPE_CHECKING:
    from trndvi.schemas import InternalConfig

__all__ = ['NdviDataLoader', 'LoadedStore', 'resample_wide', 'merge_grid']

logger = logging.getLogger(__name__)

# Reporting frequency -> pandas Period alias
FREQ_TO_PERIOD = {
    "week": "W",
    "month": "M",
    "quarter": "Q",
    "year": "Y",
}


@dataclass
class LoadedStore:
    """Tables read from one store.

    Attributes
    ----------
    grid : pd.DataFrame
        Cell table: ``id``, ``geometry`` and any other grid attributes.
    variables : dict
        Variable name -> wide table (``id`` plus one column per period).
    freq : str
        Reporting frequency the wide tables were resampled to.
    """
    grid: pd.DataFrame
    variables: Dict[str, pd.DataFrame] = field(default_factory=dict)
    freq: str = "day"


def _parse_date_columns(columns: Iterable[str], stage: str = "load") -> Dict[str, pd.Timestamp]:
    parsed = {}
    for col in columns:
        try:
            ts = pd.to_datetime(str(col), format="%Y-%m-%d")
        except (ValueError, TypeError):
            raise SchemaError(f"column {col!r} is not a YYYY-MM-DD date", stage=stage)
        # Unpadded labels ("2020-1-5") would collide with their padded form
        if ts.strftime("%Y-%m-%d") != col:
            raise SchemaError(f"column {col!r} is not a zero-padded YYYY-MM-DD date", stage=stage)
        parsed[col] = ts
    return parsed


def resample_wide(
    wide: pd.DataFrame,
    freq: str,
    id_column: str = "id",
    start: Optional[str] = None,
    exclude: Optional[Iterable[str]] = None,
) -> pd.DataFrame:
    """Resample the date columns of a wide table to a reporting frequency.

    Parameters
    ----------
    wide : pd.DataFrame
        ``id_column`` plus one ``YYYY-MM-DD`` column per native date.
    freq : str
        "day" keeps native dates; "week", "month", "quarter" or "year"
        groups dates into the period containing them.
    id_column : str
        Name of the cell identifier column.
    start : str, optional
        Earliest date to keep (``YYYY-MM-DD``); earlier columns are dropped.
    exclude : iterable of str, optional
        Non-date metadata columns (e.g. ``geometry``) left out of the result.

    Returns
    -------
    pd.DataFrame
        ``id_column`` followed by one float column per period, labelled by
        the period start date and sorted ascending.

    Raises
    ------
    SchemaError
        If the id column is absent or a column is not a date.
    """
    if id_column not in wide.columns:
        raise SchemaError(f"wide table has no '{id_column}' column", stage="load")

    skip = set(exclude or ())
    skip.add(id_column)
    date_cols = [c for c in wide.columns if c not in skip]
    parsed = _parse_date_columns(date_cols)

    if start is not None:
        cutoff = pd.Timestamp(start)
        dropped = [c for c, ts in parsed.items() if ts < cutoff]
        if dropped:
            logger.debug("Dropping %d date column(s) before %s", len(dropped), start)
        parsed = {c: ts for c, ts in parsed.items() if ts >= cutoff}

    # Group native columns by the period label they fall into
    groups: Dict[str, List[str]] = {}
    for col, ts in sorted(parsed.items(), key=lambda item: item[1]):
        if freq == "day":
            label = ts.strftime("%Y-%m-%d")
        else:
            label = ts.to_period(FREQ_TO_PERIOD[freq]).start_time.strftime("%Y-%m-%d")
        groups.setdefault(label, []).append(col)

    columns = {id_column: wide[id_column]}
    for label, cols in groups.items():
        try:
            values = wide[cols].astype("float64")
        except (ValueError, TypeError):
            raise SchemaError(f"non-numeric values in date column(s) {cols}", stage="load")
        # skipna mean over an all-NaN row yields NaN, so empty periods stay missing
        columns[label] = values.mean(axis=1, skipna=True)

    return pd.DataFrame(columns).reset_index(drop=True)


def merge_grid(grid: pd.DataFrame, wide: pd.DataFrame, id_column: str = "id") -> pd.DataFrame:
    """Join the grid to a wide table on the cell id, keeping grid row order."""
    return grid.merge(wide, on=id_column, how="inner")


class NdviDataLoader:
    """Load the grid and per-variable wide tables from a geeLite store.

    Configuration
    =============
    Reads from InternalConfig:

    - `store.path` : geeLite output directory
    - `store.db_relpath` : database path relative to the store directory
    - `store.grid_table` : name of the cell table
    - `store.start` : earliest date kept
    - `loader.freq` : reporting frequency
    - `loader.variable` : default variable to load
    - `reshaper.id_column` : cell identifier column
    - `reshaper.exclude_columns` : metadata columns skipped in variable tables

    Notes
    -----
    - Read-only: the database is opened with ``mode=ro``
    - Missing store or tables raise NotFoundError immediately (no retry)

    Examples
    --------
    >>> loader = NdviDataLoader(config)
    >>> store = loader.load()
    >>> wide = store.variables["MODIS/061/MOD13A2/NDVI/mean"]
    """

    def __init__(self, config: "InternalConfig"):
        self.config = config
        self.store_path = Path(config.store.path)
        self.db_path = self.store_path / config.store.db_relpath
        self.grid_table = config.store.grid_table
        self.start = config.store.start
        self.freq = config.loader.freq
        self.default_variable = config.loader.variable
        self.id_column = config.reshaper.id_column
        self.exclude_columns = list(config.reshaper.exclude_columns)

    def _connect(self) -> sqlite3.Connection:
        if not self.store_path.is_dir():
            raise NotFoundError(f"store directory not found: {self.store_path}")
        if not self.db_path.is_file():
            raise NotFoundError(f"store database not found: {self.db_path}")
        # as_uri() percent-encodes the path so "#" or "%" in it cannot alter the query
        return sqlite3.connect(self.db_path.resolve().as_uri() + "?mode=ro", uri=True)

    @staticmethod
    def _table_names(conn: sqlite3.Connection) -> List[str]:
        rows = conn.execute(
            "SELECT name FROM sqlite_master WHERE type = 'table' ORDER BY name"
        ).fetchall()
        return [row[0] for row in rows]

    @staticmethod
    def _read_table(conn: sqlite3.Connection, name: str) -> pd.DataFrame:
        quoted = name.replace('"', '""')
        return pd.read_sql_query(f'SELECT * FROM "{quoted}"', conn)

    def list_variables(self) -> List[str]:
        """Variable tables present in the store (every table except the grid)."""
        conn = self._connect()
        try:
            return [t for t in self._table_names(conn) if t != self.grid_table]
        finally:
            conn.close()

    def load(self, variables: Optional[List[str]] = None) -> LoadedStore:
        """Read the grid and the requested variables.

        Parameters
        ----------
        variables : list of str, optional
            Variable table names. Defaults to the configured variable.

        Returns
        -------
        LoadedStore
            Grid plus one resampled wide table per variable.

        Raises
        ------
        NotFoundError
            If the store, its database, the grid table or a variable is absent.
        SchemaError
            If a variable table has no id column or a non-date column.
        """
        variables = variables or [self.default_variable]

        conn = self._connect()
        try:
            tables = set(self._table_names(conn))
            if self.grid_table not in tables:
                raise NotFoundError(f"grid table '{self.grid_table}' not found in {self.db_path}")

            missing = [v for v in variables if v not in tables]
            if missing:
                raise NotFoundError(f"variable(s) not found in store: {', '.join(missing)}")

            grid = self._read_table(conn, self.grid_table)
            logger.info("Loaded grid: %d cells from %s", len(grid), self.db_path)

            loaded = {}
            for name in variables:
                raw = self._read_table(conn, name)
                wide = resample_wide(
                    raw, self.freq, self.id_column, start=self.start, exclude=self.exclude_columns
                )
                logger.info(
                    "Loaded %s: %d cells x %d native dates -> %d %s periods",
                    name, len(raw), raw.shape[1] - 1, wide.shape[1] - 1, self.freq,
                )
                loaded[name] = wide
        finally:
            conn.close()

        return LoadedStore(grid=grid, variables=loaded, freq=self.freq)
