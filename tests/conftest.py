"""Root-level pytest fixtures for trndvi test suite.

Provides shared configuration fixtures following Pydantic-based architecture.
All tests must use these fixtures instead of creating raw dict configs.
"""

import pytest
from pathlib import Path
import tempfile
import shutil

from trndvi.schemas import ParamConfig, UserConfig, resolve_config

from tests.helpers.fake_store import turkey_like_store


# =============================================================================
# Configuration Fixtures (Pydantic-based)
# =============================================================================

@pytest.fixture
def param_config(temp_dir):
    """Expert configuration with all defaults.

    base_dir has no default, so it points at a temporary directory here.
    """
    return ParamConfig(base_dir=str(temp_dir / "output"))


@pytest.fixture
def internal_config(param_config):
    """Fully validated runtime configuration (no overrides).

    Use this when tests don't care about specific config values and just
    need a valid InternalConfig to pass to constructors.

    Examples
    --------
    >>> def test_reshaper_init(internal_config):
    ...     reshaper = WideTableReshaper(internal_config)
    ...     assert reshaper.id_column == "id"
    """
    return resolve_config(param_config, None, None)


@pytest.fixture
def make_config(param_config):
    """Factory fixture for creating custom test configs.

    Use this when you need to override specific values for a test.
    Returns a callable that accepts UserConfig-compatible kwargs.

    Examples
    --------
    >>> def test_yearly(make_config):
    ...     config = make_config(FREQ="year")
    ...     assert config.loader.freq == "year"
    """
    def _make(**user_overrides):
        """Create InternalConfig with user overrides."""
        if user_overrides:
            user = UserConfig(**user_overrides)
            return resolve_config(param_config, user, None)
        else:
            return resolve_config(param_config, None, None)

    return _make


# =============================================================================
# Directory Fixtures
# =============================================================================

@pytest.fixture
def temp_dir():
    """Temporary directory that is cleaned up after test."""
    d = tempfile.mkdtemp()
    yield Path(d)
    shutil.rmtree(d, ignore_errors=True)


@pytest.fixture
def output_dirs(temp_dir):
    """Standard trndvi output directory structure.

    Returns dict with keys: base, tables, plots, logs
    All directories are created and cleaned up automatically.
    """
    base = temp_dir / "output"
    dirs = {
        "base": base,
        "tables": base / "tables",
        "plots": base / "plots",
        "logs": base / "logs",
    }

    for d in dirs.values():
        d.mkdir(parents=True, exist_ok=True)

    return dirs


# =============================================================================
# Store Fixtures
# =============================================================================

@pytest.fixture
def fake_store(temp_dir):
    """A small geeLite store with NDVI mean and sd tables."""
    return turkey_like_store(temp_dir / "store")


@pytest.fixture
def store_config(make_config, fake_store):
    """Config pointing at ``fake_store``."""
    def _make(**user_overrides):
        return make_config(PATH=str(fake_store), **user_overrides)

    return _make
