"""Pydantic configuration schemas for trndvi pipeline.

This module provides strictly typed configuration models for the NDVI
reporting pipeline. All configuration validation, coercion, and
normalization happens at schema validation time via Pydantic.

Exports
-------
resolve_config : function
    Single entrypoint for configuration resolution
InternalConfig : class
    Fully validated, authoritative runtime configuration
ParamConfig : class
    Expert defaults (complete)
UserConfig : class
    User-facing configuration (forgiving, minimal)
CLIConfig : class
    Command-line operational overrides
"""

from trndvi.schemas.resolve import resolve_config
from trndvi.schemas.internal import InternalConfig
from trndvi.schemas.param import ParamConfig
from trndvi.schemas.user import UserConfig
from trndvi.schemas.cli import CLIConfig

__all__ = [
    'resolve_config',
    'InternalConfig',
    'ParamConfig',
    'UserConfig',
    'CLIConfig',
]
