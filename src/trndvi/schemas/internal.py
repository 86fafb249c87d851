"""InternalConfig: Authoritative runtime configuration.

This is the ONLY config schema that runtime code sees. It is fully validated,
normalized, and contains NO optional fields that processing code depends on.

All .get() calls, fallback defaults, and validation logic are FORBIDDEN in
runtime code - everything is explicit here.
"""

from typing import Literal, Optional
from pydantic import Field, ConfigDict, field_validator, model_validator
from trndvi.schemas.base import (
    TrndviBaseModel,
    check_iso_date,
    check_source,
    check_variable,
    source_variables,
)


# =============================================================================
# Nested Configuration Models (Runtime)
# =============================================================================

class InternalStoreConfig(TrndviBaseModel):
    """Runtime geeLite store configuration."""
    path: str = Field(min_length=1)
    regions: list[str] = Field(min_length=1)
    source: dict[str, dict[str, list[str]]]
    start: str
    resol: int = Field(gt=0)
    db_relpath: str = Field(min_length=1)
    grid_table: str = Field(min_length=1)

    @field_validator("start")
    @classmethod
    def validate_start(cls, v):
        return check_iso_date(v)

    @field_validator("source")
    @classmethod
    def validate_source(cls, v):
        return check_source(v)


class InternalLoaderConfig(TrndviBaseModel):
    """Runtime loader configuration."""
    freq: Literal["day", "week", "month", "quarter", "year"]
    variable: str

    @field_validator("variable")
    @classmethod
    def validate_variable(cls, v):
        return check_variable(v)


class InternalReshaperConfig(TrndviBaseModel):
    """Runtime reshaper configuration."""
    id_column: str = Field(min_length=1)
    exclude_columns: list[str]


class InternalAnalyzerConfig(TrndviBaseModel):
    """Runtime change analyzer configuration."""
    improvement_threshold: float
    decline_threshold: float

    @model_validator(mode="after")
    def check_threshold_order(self):
        if self.decline_threshold >= self.improvement_threshold:
            raise ValueError(
                "decline_threshold must be lower than improvement_threshold "
                f"({self.decline_threshold} >= {self.improvement_threshold})"
            )
        return self


class InternalVisualizationConfig(TrndviBaseModel):
    """Runtime visualization settings."""
    enabled: bool
    dpi: int
    figsize: tuple[float, float]
    output_format: Literal["png", "pdf", "jpeg"]
    mean_color: str
    median_color: str
    count_color: str
    band_alpha: float = Field(ge=0, le=1.0)


class InternalOutputConfig(TrndviBaseModel):
    """Runtime output configuration."""
    float_format: Optional[str]
    write_merged: bool


class InternalLoggingConfig(TrndviBaseModel):
    """Runtime logging configuration."""
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


# =============================================================================
# Main InternalConfig
# =============================================================================

class InternalConfig(TrndviBaseModel):
    """Authoritative runtime configuration.

    This is the ONLY configuration schema that processing code sees.
    It is fully validated, immutable, and contains explicit values for
    all parameters.

    Usage
    -----
    Runtime modules receive InternalConfig and access fields directly:

        def __init__(self, config: InternalConfig):
            self.freq = config.loader.freq  # NOT .get()
            self.id_column = config.reshaper.id_column

    Rules
    -----
    - NO .get() calls
    - NO fallback defaults
    - NO type checking
    - NO validation

    All of that happens during config resolution, not in runtime code.
    """

    base_dir: str = Field(min_length=1)
    store: InternalStoreConfig
    loader: InternalLoaderConfig
    reshaper: InternalReshaperConfig
    analyzer: InternalAnalyzerConfig
    visualization: InternalVisualizationConfig
    output: InternalOutputConfig
    logging: InternalLoggingConfig

    model_config = ConfigDict(
        extra='forbid',
        validate_assignment=True,
        use_enum_values=True,
        str_strip_whitespace=True,
        frozen=True,  # Immutable after construction
    )

    @model_validator(mode="after")
    def variable_is_selected(self):
        """The reported variable must be one the store was configured to collect."""
        available = source_variables(self.store.source)
        if self.loader.variable not in available:
            raise ValueError(
                f"variable {self.loader.variable!r} is not selected by store.source "
                f"(available: {available})"
            )
        return self

    @model_validator(mode="after")
    def id_column_not_excluded(self):
        if self.reshaper.id_column in self.reshaper.exclude_columns:
            raise ValueError(
                f"id column {self.reshaper.id_column!r} cannot also be an excluded column"
            )
        return self
