import pytest

from trndvi.schemas.user import UserConfig
from trndvi.schemas.cli import CLIConfig
from trndvi.schemas.param import ParamConfig
from trndvi.schemas.resolve import resolve_config

pytestmark = pytest.mark.unit


def test_cli_overrides_do_not_mutate_user():
    user = UserConfig.model_validate({"PATH": "/data/a", "FREQ": "month", "BASE_DIR": "/tmp"})
    cli = CLIConfig.model_validate({"store_path": "/data/b"})

    internal = resolve_config(ParamConfig(), user, cli)

    # CLI should take precedence
    assert internal.store.path == "/data/b"

    # But the original user model should remain unchanged
    assert user.path == "/data/a"


def test_cli_variable_override():
    user = UserConfig(base_dir="/tmp")
    cli = CLIConfig(variable="MODIS/061/MOD13A2/NDVI/sd")

    config = resolve_config(ParamConfig(), user, cli)

    assert config.loader.variable == "MODIS/061/MOD13A2/NDVI/sd"
    assert config.base_dir == "/tmp"  # User value preserved


def test_cli_precedence_no_user_config():
    cli = CLIConfig(base_dir="/tmp/cli", freq="day")

    config = resolve_config(ParamConfig(), None, cli)

    assert config.base_dir == "/tmp/cli"
    assert config.loader.freq == "day"


def test_cli_log_level_override():
    user = UserConfig(BASE_DIR="/tmp", LOG_LEVEL="WARNING")
    cli = CLIConfig(log_level="DEBUG")

    config = resolve_config(ParamConfig(), user, cli)

    assert config.logging.level == "DEBUG"
