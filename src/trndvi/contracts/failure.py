"""Centralized failure types for the NDVI reporting pipeline.

Every stage fails fast and does not attempt partial recovery. All pipeline
failures share one base class so the caller can report the failing stage
and the failure kind uniformly.

Key distinction:
- ValidationError: User/config error (handled by Pydantic)
- NotFoundError / SchemaError / InsufficientDataError: bad or absent input data
- ContractViolation: a stage broke its own output guarantee (programmer error)
"""


class PipelineError(RuntimeError):
    """Base class for errors raised while running the pipeline.

    Parameters
    ----------
    message : str
        Human-readable description of the failure.
    stage : str, optional
        Pipeline stage that raised ("load", "reshape", "aggregate",
        "change", "report"). Subclasses provide a default.
    """

    default_stage = "pipeline"

    def __init__(self, message: str, stage: str | None = None):
        self.stage = stage or self.default_stage
        self.message = message
        super().__init__(f"[{self.stage}] {message}")

    @property
    def kind(self) -> str:
        return type(self).__name__


class NotFoundError(PipelineError):
    """Requested store, grid table or variable does not exist."""
    default_stage = "load"


class SchemaError(PipelineError):
    """Wide table lacks the id column or has a column that is not a date."""
    default_stage = "reshape"


class InsufficientDataError(PipelineError):
    """Change analysis requested on an empty summary sequence."""
    default_stage = "change"


class ContractViolation(PipelineError):
    """Raised when a pipeline contract is violated.

    This indicates a bug in pipeline logic, not bad input data. It means a
    pipeline stage did not produce the invariants it promised.
    """
    default_stage = "contract"
