"""Build small geeLite-style SQLite stores for loader and pipeline tests."""

import sqlite3
from pathlib import Path

import pandas as pd

NDVI_MEAN = "MODIS/061/MOD13A2/NDVI/mean"
NDVI_SD = "MODIS/061/MOD13A2/NDVI/sd"


def make_wide(cell_ids, columns):
    """Wide table: ``id`` plus one column per date.

    ``columns`` maps ``YYYY-MM-DD`` -> list of values (None for missing),
    one per cell.
    """
    data = {"id": list(cell_ids)}
    for day, values in columns.items():
        data[day] = pd.Series(values, dtype="float64")
    return pd.DataFrame(data)


def make_fake_store(root, variables, grid_ids=None, db_relpath="data/geelite.db",
                    grid_table="grid"):
    """Write a store under ``root`` and return its directory.

    Parameters
    ----------
    root : Path
        Store directory (created).
    variables : dict
        Variable table name -> wide DataFrame.
    grid_ids : list, optional
        Cell ids of the grid table. Defaults to the ids of the first
        variable. Pass an empty list to omit the grid table.
    """
    root = Path(root)
    db_path = root / db_relpath
    db_path.parent.mkdir(parents=True, exist_ok=True)

    if grid_ids is None:
        first = next(iter(variables.values()))
        grid_ids = list(first["id"])

    conn = sqlite3.connect(db_path)
    try:
        if grid_ids:
            grid = pd.DataFrame({
                "id": grid_ids,
                "geometry": [f"POLYGON(({i} 0, {i} 1, {i + 1} 1, {i} 0))" for i in range(len(grid_ids))],
            })
            grid.to_sql(grid_table, conn, index=False)
        for name, wide in variables.items():
            wide.to_sql(name, conn, index=False)
        conn.commit()
    finally:
        conn.close()

    return root


def turkey_like_store(root):
    """Three cells, monthly 16-day composites Jan-Apr 2020, with gaps.

    Monthly means across cells rise from 4000 to 4700, an improvement at
    the default thresholds.
    """
    ids = ["832d8afffffffff", "832d89fffffffff", "832d8bfffffffff"]
    mean = make_wide(ids, {
        "2019-12-19": [3000.0, 3000.0, 3000.0],
        "2020-01-01": [3900.0, 4000.0, None],
        "2020-01-17": [4100.0, 4000.0, None],
        "2020-02-02": [4100.0, 4200.0, 4300.0],
        "2020-03-05": [None, None, None],
        "2020-04-06": [4600.0, 4700.0, 4800.0],
    })
    sd = make_wide(ids, {
        "2020-01-01": [100.0, 110.0, 120.0],
        "2020-02-02": [90.0, 95.0, 100.0],
    })
    return make_fake_store(root, {NDVI_MEAN: mean, NDVI_SD: sd})
