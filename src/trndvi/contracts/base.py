"""Base contract enforcement utilities.

The require() function is the single enforcement mechanism for all contracts.
"""

from trndvi.contracts.failure import ContractViolation


def require(condition: bool, message: str, stage: str | None = None) -> None:
    """Enforce a pipeline contract.

    This is called at stage boundaries to verify the preceding stage
    produced the guaranteed invariants. It is fail-fast: no recovery,
    no fallback, no silence.

    Parameters
    ----------
    condition : bool
        The invariant that must be true. If False, ContractViolation is raised.

    message : str
        Error message explaining the contract violation (for debugging).

    stage : str, optional
        Stage whose output is being checked.

    Raises
    ------
    ContractViolation
        If condition is False. This indicates a bug in pipeline logic.

    Examples
    --------
    >>> require(len(observations) == n_cells * n_dates, "Reshape contract: wrong count")
    """
    if not condition:
        raise ContractViolation(message, stage=stage)
