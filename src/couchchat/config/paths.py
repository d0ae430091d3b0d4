"""Where couchchat keeps its config and logs.

Everything lives under one home directory, ``~/.couchchat`` unless
COUCHCHAT_HOME points elsewhere.
"""

import os
from functools import lru_cache
from pathlib import Path

ENV_VAR = "COUCHCHAT_HOME"
CONFIG_FILENAME = "config.toml"
SYSTEM_CONFIG_PATH = Path("/etc/couchchat") / CONFIG_FILENAME


@lru_cache(maxsize=1)
def get_couchchat_home() -> Path:
    """COUCHCHAT_HOME if set, otherwise ~/.couchchat."""
    if env_home := os.environ.get(ENV_VAR):
        return Path(env_home).expanduser().resolve()
    return Path.home() / ".couchchat"


def get_config_path() -> Path:
    return get_couchchat_home() / CONFIG_FILENAME


def get_logs_path() -> Path:
    return get_couchchat_home() / "logs"


def config_search_paths() -> list[Path]:
    """Config files tried in order when no path is given."""
    return [Path(CONFIG_FILENAME), get_config_path(), SYSTEM_CONFIG_PATH]
