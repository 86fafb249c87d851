"""UserConfig: Forgiving, minimal user-facing configuration.

This schema accepts user inputs in a variety of formats, with aliases
matching the original geeLite configuration script (PATH, REGIONS, SOURCE,
START, RESOL) plus reporting settings (FREQ, VARIABLE, BASE_DIR).

UserConfig is intentionally minimal - users only specify what they want
to override from the expert defaults. Validation is lenient to accept
both uppercase and lowercase keys, integers where floats are expected, etc.
"""

from typing import Literal, Optional
from pydantic import Field, field_validator
from trndvi.schemas.base import TrndviBaseModel


class UserStoreConfig(TrndviBaseModel):
    """User-facing store config."""
    path: Optional[str] = None
    regions: Optional[list[str]] = None
    source: Optional[dict[str, dict[str, list[str]]]] = None
    start: Optional[str] = None
    resol: Optional[int] = None
    db_relpath: Optional[str] = None
    grid_table: Optional[str] = None

    @field_validator("regions", mode="before")
    @classmethod
    def coerce_regions(cls, v):
        """Accept a single region code."""
        if isinstance(v, str):
            return [v]
        return v


class UserLoaderConfig(TrndviBaseModel):
    """User-facing loader config."""
    freq: Optional[str] = None
    variable: Optional[str] = None

    @field_validator("freq", mode="before")
    @classmethod
    def normalize_freq(cls, v):
        if isinstance(v, str):
            return v.lower().strip()
        return v


class UserAnalyzerConfig(TrndviBaseModel):
    """User-facing analyzer config."""
    improvement_threshold: Optional[float] = None
    decline_threshold: Optional[float] = None


class UserVisualizationConfig(TrndviBaseModel):
    """User-facing visualization config."""
    enabled: Optional[bool] = None
    dpi: Optional[int] = None
    figsize: Optional[tuple[float, float]] = None
    output_format: Optional[str] = None


class UserConfig(TrndviBaseModel):
    """User-facing configuration schema.

    Minimal, forgiving, and uses common aliases. Users only specify
    what they want to override from ParamConfig defaults.

    This config is converted to internal overrides during resolution.

    Usage
    -----
        user_cfg = UserConfig(
            PATH="data/tr-geelite",
            REGIONS="TR",
            START="2020-01-01",
            RESOL=3,
            BASE_DIR="output/tr-ndvi",
        )

        internal = resolve_config(param_cfg, user_cfg, cli_cfg)
    """

    base_dir: Optional[str] = Field(None, alias="BASE_DIR")

    # Store settings (flat aliases from the geeLite config script)
    path: Optional[str] = Field(None, alias="PATH")
    regions: Optional[list[str]] = Field(None, alias="REGIONS")
    source: Optional[dict[str, dict[str, list[str]]]] = Field(None, alias="SOURCE")
    start: Optional[str] = Field(None, alias="START")
    resol: Optional[int] = Field(None, alias="RESOL")

    # Loader settings
    freq: Optional[str] = Field(None, alias="FREQ")
    variable: Optional[str] = Field(None, alias="VARIABLE")

    # Trend thresholds
    improvement_threshold: Optional[float] = Field(None, alias="IMPROVEMENT_THRESHOLD")
    decline_threshold: Optional[float] = Field(None, alias="DECLINE_THRESHOLD")

    log_level: Optional[Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]] = Field(
        None, alias="LOG_LEVEL"
    )

    # Nested overrides (advanced users)
    store: Optional[UserStoreConfig] = None
    loader: Optional[UserLoaderConfig] = None
    analyzer: Optional[UserAnalyzerConfig] = None
    visualization: Optional[UserVisualizationConfig] = None

    model_config = TrndviBaseModel.model_config.copy()
    # Allow forgiving input dictionaries (ignore unknown legacy keys)
    model_config.update({"populate_by_name": True, "extra": "ignore"})

    @field_validator("regions", mode="before")
    @classmethod
    def coerce_regions(cls, v):
        """Accept a single region code ("TR") as well as a list."""
        if isinstance(v, str):
            return [v]
        return v

    @field_validator("freq", mode="before")
    @classmethod
    def normalize_freq(cls, v):
        """Normalize frequency names to lowercase."""
        if isinstance(v, str):
            return v.lower().strip()
        return v

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v):
        if isinstance(v, str):
            return v.upper().strip()
        return v

    def to_internal_overrides(self) -> dict:
        """Convert flat UserConfig to nested InternalConfig structure.

        Returns
        -------
        dict
            Nested dictionary matching InternalConfig structure
        """
        overrides = {}

        if self.base_dir is not None:
            overrides["base_dir"] = str(self.base_dir)

        # Store section
        store = {}
        if self.path is not None:
            store["path"] = self.path
        if self.regions is not None:
            store["regions"] = self.regions
        if self.source is not None:
            store["source"] = self.source
        if self.start is not None:
            store["start"] = self.start
        if self.resol is not None:
            store["resol"] = self.resol

        if self.store is not None:
            store.update(self.store.model_dump(exclude_none=True))

        if store:
            overrides["store"] = store

        # Loader section
        loader = {}
        if self.freq is not None:
            loader["freq"] = self.freq
        if self.variable is not None:
            loader["variable"] = self.variable

        if self.loader is not None:
            loader.update(self.loader.model_dump(exclude_none=True))

        if loader:
            overrides["loader"] = loader

        # Analyzer section
        analyzer = {}
        if self.improvement_threshold is not None:
            analyzer["improvement_threshold"] = self.improvement_threshold
        if self.decline_threshold is not None:
            analyzer["decline_threshold"] = self.decline_threshold

        if self.analyzer is not None:
            analyzer.update(self.analyzer.model_dump(exclude_none=True))

        if analyzer:
            overrides["analyzer"] = analyzer

        if self.visualization is not None:
            visualization = self.visualization.model_dump(exclude_none=True)
            if visualization:
                overrides["visualization"] = visualization

        if self.log_level is not None:
            overrides["logging"] = {"level": self.log_level}

        return overrides
