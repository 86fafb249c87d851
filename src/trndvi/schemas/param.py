"""ParamConfig: Expert defaults for trndvi pipeline.

This module defines the complete default configuration. ALL pipeline
parameters must have defaults here. No runtime code should define
fallback values - this is the single source of truth for defaults.

The store defaults reproduce the Turkey MODIS NDVI demo: geeLite database
under ``data/tr-geelite``, region ``TR``, MOD13A2 NDVI mean and sd on an
H3 resolution 3 grid, starting 2020-01-01, reported monthly.

Runtime code NEVER reads from ParamConfig directly - it only receives InternalConfig.
"""

from typing import Literal, Optional
from pydantic import Field, field_validator, model_validator
from trndvi.schemas.base import (
    TrndviBaseModel,
    check_iso_date,
    check_source,
    check_variable,
)


# =============================================================================
# Nested Configuration Models
# =============================================================================

class StoreConfig(TrndviBaseModel):
    """geeLite store configuration (mirrors the original set_config call)."""
    path: str = Field("data/tr-geelite", min_length=1, description="geeLite output directory")
    regions: list[str] = Field(default_factory=lambda: ["TR"], min_length=1)
    source: dict[str, dict[str, list[str]]] = Field(
        default_factory=lambda: {"MODIS/061/MOD13A2": {"NDVI": ["mean", "sd"]}}
    )
    start: str = Field("2020-01-01", description="Earliest date (YYYY-MM-DD)")
    resol: int = Field(3, gt=0, description="H3 grid resolution")
    db_relpath: str = Field("data/geelite.db", min_length=1)
    grid_table: str = Field("grid", min_length=1)

    @field_validator("start")
    @classmethod
    def validate_start(cls, v):
        return check_iso_date(v)

    @field_validator("source")
    @classmethod
    def validate_source(cls, v):
        return check_source(v)

    @field_validator("regions", mode="before")
    @classmethod
    def coerce_regions(cls, v):
        """Accept a single region code."""
        if isinstance(v, str):
            return [v]
        return v


class LoaderConfig(TrndviBaseModel):
    """Data loader configuration."""
    freq: Literal["day", "week", "month", "quarter", "year"] = "month"
    variable: str = "MODIS/061/MOD13A2/NDVI/mean"

    @field_validator("freq", mode="before")
    @classmethod
    def normalize_freq(cls, v):
        """Normalize frequency names to lowercase."""
        if isinstance(v, str):
            return v.lower().strip()
        return v

    @field_validator("variable")
    @classmethod
    def validate_variable(cls, v):
        return check_variable(v)


class ReshaperConfig(TrndviBaseModel):
    """Wide-to-long reshaping configuration."""
    id_column: str = Field("id", min_length=1)
    exclude_columns: list[str] = Field(default_factory=lambda: ["geometry"])


class AnalyzerConfig(TrndviBaseModel):
    """Trend classification thresholds in NDVI units (MODIS scale 1e-4)."""
    improvement_threshold: float = 50.0
    decline_threshold: float = -50.0

    @model_validator(mode="after")
    def check_threshold_order(self):
        if self.decline_threshold >= self.improvement_threshold:
            raise ValueError(
                "decline_threshold must be lower than improvement_threshold "
                f"({self.decline_threshold} >= {self.improvement_threshold})"
            )
        return self


class VisualizationConfig(TrndviBaseModel):
    """Visualization settings."""
    enabled: bool = True
    dpi: int = Field(150, ge=50)
    figsize: tuple[float, float] = (12.0, 6.0)
    output_format: Literal["png", "pdf", "jpeg"] = "png"
    mean_color: str = "forestgreen"
    median_color: str = "darkorange"
    count_color: str = "steelblue"
    band_alpha: float = Field(0.2, ge=0, le=1.0)


class OutputConfig(TrndviBaseModel):
    """Output table configuration."""
    float_format: Optional[str] = "%.4f"
    write_merged: bool = True


class LoggingConfig(TrndviBaseModel):
    """Logging configuration."""
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"


# =============================================================================
# Main ParamConfig
# =============================================================================

class ParamConfig(TrndviBaseModel):
    """Complete expert configuration with all defaults.

    This is the single source of truth for all pipeline parameters.
    Every tunable parameter MUST have a default here.

    Usage
    -----
    This config is NOT used directly by runtime code. It serves as the
    base layer in config resolution:

        internal_cfg = resolve_config(param_cfg, user_cfg, cli_cfg)

    Runtime code only sees InternalConfig.
    """

    base_dir: Optional[str] = None
    store: StoreConfig = Field(default_factory=StoreConfig)
    loader: LoaderConfig = Field(default_factory=LoaderConfig)
    reshaper: ReshaperConfig = Field(default_factory=ReshaperConfig)
    analyzer: AnalyzerConfig = Field(default_factory=AnalyzerConfig)
    visualization: VisualizationConfig = Field(default_factory=VisualizationConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
