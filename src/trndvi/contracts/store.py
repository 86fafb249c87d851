"""Load stage contract.

Enforces the guarantee that after loading, the grid and every wide table
are keyed by a unique cell id, and every wide-table cell exists in the grid.
"""

import pandas as pd
from trndvi.contracts.base import require


def assert_loaded(grid: pd.DataFrame, wide: pd.DataFrame, id_column: str) -> None:
    """Enforce load stage contract.

    Called immediately after loading one variable. Verifies that the loader
    produced tables the reshaper can trust.

    Parameters
    ----------
    grid : pd.DataFrame
        Grid (cell) table from the store.

    wide : pd.DataFrame
        Wide per-variable table (id column plus one column per date).

    id_column : str
        Name of the cell identifier column (from config)

    Raises
    ------
    ContractViolation
        If any invariant is violated
    """
    require(
        id_column in grid.columns,
        f"Load contract violated: grid has no '{id_column}' column",
        stage="load",
    )
    require(
        id_column in wide.columns,
        f"Load contract violated: wide table has no '{id_column}' column",
        stage="load",
    )
    require(
        grid[id_column].is_unique,
        "Load contract violated: grid cell ids are not unique",
        stage="load",
    )
    require(
        wide[id_column].is_unique,
        "Load contract violated: wide table cell ids are not unique",
        stage="load",
    )

    unknown = set(wide[id_column]) - set(grid[id_column])
    require(
        not unknown,
        f"Load contract violated: {len(unknown)} cell id(s) missing from grid "
        f"(e.g. {sorted(map(str, unknown))[:3]})",
        stage="load",
    )
