"""Core NDVI report execution logic.

This module contains the actual report runner, separated from argument parsing.
Scripts are thin wrappers; this is the real implementation.
"""

import json
import shutil
import logging
import importlib.util
from pathlib import Path
from typing import Optional, Dict, Any

from trndvi.setup_directories import setup_output_directories
from trndvi.pipeline.orchestrator import PipelineOrchestrator, PipelineResult
from trndvi.schemas import resolve_config, ParamConfig, UserConfig, CLIConfig


logger = logging.getLogger(__name__)


def load_user_config_dict(config_path: str) -> dict:
    """Load user config dict from Python file.

    Returns the raw dict before Pydantic validation.

    Parameters
    ----------
    config_path : str
        Path to user config Python file containing CONFIG dict.

    Returns
    -------
    dict
        Raw user configuration dictionary.

    Raises
    ------
    FileNotFoundError
        If config file does not exist.
    ValueError
        If no CONFIG dict found in file.
    """
    path = Path(config_path)
    if not path.exists():
        raise FileNotFoundError(f"Config not found: {path}")

    spec = importlib.util.spec_from_file_location("config_module", path)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)

    # Find CONFIG dict
    for name in dir(module):
        if name.startswith('CONFIG'):
            obj = getattr(module, name)
            if isinstance(obj, dict):
                return obj

    raise ValueError(f"No CONFIG dict found in {path}")


def run_report_pipeline(
    user_config_path: str,
    cli_args: Optional[Dict[str, Any]] = None,
    rerun: bool = False,
    verbose: bool = False
) -> PipelineResult:
    """Execute the NDVI report pipeline once.

    This function:
    1. Loads and resolves configuration (Param < User < CLI)
    2. Optionally cleans the output directory if rerun=True
    3. Sets up output directories
    4. Persists the resolved configuration next to the outputs
    5. Runs the pipeline orchestrator

    Parameters
    ----------
    user_config_path : str
        Path to user config file (Python file with CONFIG dict).

    cli_args : dict, optional
        CLI argument overrides. Keys: store_path, variable, freq,
        base_dir, log_level. All optional; None values are ignored.

    rerun : bool, optional
        If True, delete the output directory before running.

    verbose : bool, optional
        If True, enable DEBUG logging and print full resolved config.

    Returns
    -------
    PipelineResult

    Raises
    ------
    FileNotFoundError
        If user_config_path does not exist.
    ValueError
        If configuration validation fails (pydantic ValidationError).
    PipelineError
        If a pipeline stage fails.

    Examples
    --------
    Run with CLI overrides::

        result = run_report_pipeline(
            "scripts/user_config.py",
            cli_args={"freq": "year", "base_dir": "/tmp/tr-ndvi"},
        )
        print(result.assessment.classification)
    """
    param_cfg = ParamConfig()  # Expert defaults

    user_cfg_dict = load_user_config_dict(user_config_path)
    user_cfg = UserConfig.model_validate(user_cfg_dict)

    cli_args = dict(cli_args or {})
    if verbose and cli_args.get("log_level") is None:
        cli_args["log_level"] = "DEBUG"

    # Filter None values
    cli_dict = {k: v for k, v in cli_args.items() if v is not None}
    cli_cfg = CLIConfig.model_validate(cli_dict) if cli_dict else CLIConfig()

    # Resolve to internal config (Param < User < CLI)
    config = resolve_config(param_cfg, user_cfg, cli_cfg)

    if rerun:
        base_dir_path = Path(config.base_dir)
        if base_dir_path.exists():
            print(f"Cleaning output directory: {base_dir_path}")
            shutil.rmtree(base_dir_path)
            print("Output directory cleaned")

    output_dirs = setup_output_directories(config.base_dir)

    print(f"\n{'='*60}")
    print("trndvi NDVI Report")
    print('='*60)
    print(f"Config:   {user_config_path}")
    print(f"Store:    {config.store.path}")
    print(f"Variable: {config.loader.variable}")
    print(f"Freq:     {config.loader.freq}")
    print(f"Output:   {config.base_dir}")
    print('='*60)

    if verbose:
        print("\nFull Internal Configuration:")
        print(json.dumps(config.model_dump(), indent=2))
        print('='*60)

    orchestrator = PipelineOrchestrator(config, output_dirs)

    config_path = output_dirs["base"] / f"config_{orchestrator.run_id}.json"
    config_path.write_text(json.dumps(config.model_dump(), indent=2))
    logger.debug("Resolved configuration saved: %s", config_path)

    result = orchestrator.run()

    print(f"\nTrend: {result.assessment.classification}")
    for name, path in result.tables.items():
        print(f"  {name:18s}: {path}")
    for path in result.plots:
        print(f"  {'plot':18s}: {path}")

    return result
