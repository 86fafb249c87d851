"""Reshape stage contract.

Enforces the guarantee that the reshaper emitted exactly one observation
per (cell, date) pair, referencing only known cells.
"""

from typing import Sequence
from trndvi.contracts.base import require


def assert_reshaped(observations: Sequence, cell_ids: Sequence, n_dates: int) -> None:
    """Enforce reshape stage contract.

    Parameters
    ----------
    observations : sequence of Observation
        Output from WideTableReshaper.reshape()

    cell_ids : sequence
        Cell ids of the wide table, in row order.

    n_dates : int
        Number of date columns in the wide table.

    Raises
    ------
    ContractViolation
        If the count or the referenced cell ids are wrong
    """
    expected = len(cell_ids) * n_dates
    require(
        len(observations) == expected,
        f"Reshape contract violated: got {len(observations)} observations, "
        f"expected {len(cell_ids)} cells x {n_dates} dates = {expected}",
        stage="reshape",
    )

    known = set(cell_ids)
    require(
        all(obs.cell_id in known for obs in observations),
        "Reshape contract violated: observation references an unknown cell id",
        stage="reshape",
    )
