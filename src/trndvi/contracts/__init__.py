"""Pipeline contracts: fail-fast enforcement of stage invariants.

This package defines the pipeline's failure types and enforces semantic
guarantees between pipeline stages. Contracts fail immediately when a
stage doesn't produce its promised invariants.

Key principle:
- Pydantic validates config correctness
- Contracts validate pipeline correctness
- Stages raise NotFoundError / SchemaError / InsufficientDataError for bad input
"""

from trndvi.contracts.failure import (
    ContractViolation,
    InsufficientDataError,
    NotFoundError,
    PipelineError,
    SchemaError,
)
from trndvi.contracts.base import require
from trndvi.contracts.store import assert_loaded
from trndvi.contracts.observations import assert_reshaped
from trndvi.contracts.summary import assert_period_summaries

__all__ = [
    "ContractViolation",
    "InsufficientDataError",
    "NotFoundError",
    "PipelineError",
    "SchemaError",
    "require",
    "assert_loaded",
    "assert_reshaped",
    "assert_period_summaries",
]
