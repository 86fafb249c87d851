"""CLIConfig: Command-line operational overrides.

Minimal configuration for operational parameters that commonly change
between runs: store path, reported variable, frequency, output directory,
verbosity.

This schema handles command-line arguments parsed by argparse.
"""

from typing import Literal, Optional
from pydantic import field_validator
from trndvi.schemas.base import TrndviBaseModel


class CLIConfig(TrndviBaseModel):
    """Command-line configuration overrides.

    Operational-only settings that override user and param configs.
    Highest priority in config resolution.

    Usage
    -----
        cli_cfg = CLIConfig(
            store_path="/scratch/tr-geelite",
            freq="year",
            base_dir="/scratch/trndvi_output",
        )

        internal = resolve_config(param_cfg, user_cfg, cli_cfg)
    """

    store_path: Optional[str] = None
    variable: Optional[str] = None
    freq: Optional[Literal["day", "week", "month", "quarter", "year"]] = None
    base_dir: Optional[str] = None
    log_level: Optional[Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]] = None

    @field_validator("freq", mode="before")
    @classmethod
    def normalize_freq(cls, v):
        if isinstance(v, str):
            return v.lower().strip()
        return v

    def to_internal_overrides(self) -> dict:
        """Convert CLI config to internal config structure.

        Returns
        -------
        dict
            Nested dictionary matching InternalConfig structure
        """
        overrides = {}

        if self.base_dir is not None:
            overrides["base_dir"] = str(self.base_dir)

        if self.store_path is not None:
            overrides["store"] = {"path": str(self.store_path)}

        loader_overrides = {}
        if self.variable is not None:
            loader_overrides["variable"] = self.variable
        if self.freq is not None:
            loader_overrides["freq"] = self.freq

        if loader_overrides:
            overrides["loader"] = loader_overrides

        if self.log_level is not None:
            overrides["logging"] = {"level": self.log_level}

        return overrides
