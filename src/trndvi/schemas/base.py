"""Base Pydantic model with strict defaults for trndvi configs.

All trndvi config schemas inherit from this base to ensure consistent
validation behavior across parameter, user, CLI, and internal configs.
The module-level ``check_*`` helpers are shared by the field validators
of ParamConfig and InternalConfig.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict


class TrndviBaseModel(BaseModel):
    """Base model for all trndvi configuration schemas.

    Enforces strict validation:
    - No extra fields allowed
    - Validates assignments after initialization
    - Strips whitespace from strings
    """

    model_config = ConfigDict(
        extra='forbid',           # Reject unknown fields
        validate_assignment=True, # Validate on field mutation
        use_enum_values=True,     # Convert enums to values
        str_strip_whitespace=True,# Strip whitespace from strings
    )


def check_iso_date(value: str) -> str:
    """Reject anything that is not a ``YYYY-MM-DD`` calendar date."""
    try:
        parsed = datetime.strptime(value, "%Y-%m-%d")
    except (TypeError, ValueError):
        raise ValueError(f"start must be an ISO date (YYYY-MM-DD), got {value!r}")
    if parsed.strftime("%Y-%m-%d") != value:
        raise ValueError(f"start must be an ISO date (YYYY-MM-DD), got {value!r}")
    return value


def check_source(source: dict) -> dict:
    """Validate a ``{dataset: {band: [statistic, ...]}}`` selection."""
    if not source:
        raise ValueError("source must select at least one dataset")
    for dataset, bands in source.items():
        if not dataset:
            raise ValueError("source dataset names must be non-empty")
        if not bands:
            raise ValueError(f"source dataset {dataset!r} selects no bands")
        for band, stats in bands.items():
            if not stats:
                raise ValueError(f"source band {dataset}/{band} selects no statistics")
    return source


def check_variable(variable: str) -> str:
    """A variable is ``<dataset>/<band>/<statistic>``; the dataset may itself contain '/'."""
    parts = variable.split("/")
    if len(parts) < 3 or not all(parts):
        raise ValueError(
            f"variable must look like '<dataset>/<band>/<statistic>', got {variable!r}"
        )
    return variable


def source_variables(source: dict) -> list[str]:
    """Expand a source selection into variable table names."""
    return [
        f"{dataset}/{band}/{stat}"
        for dataset, bands in source.items()
        for band, stats in bands.items()
        for stat in stats
    ]
