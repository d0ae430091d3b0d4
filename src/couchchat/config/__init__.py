"""Configuration module."""

from couchchat.config.loader import load_config
from couchchat.config.models import (
    BotConfig,
    CloudantConfig,
    ConfigError,
    CouchChatConfig,
    TelegramConfig,
)
from couchchat.config.paths import (
    get_config_path,
    get_couchchat_home,
    get_logs_path,
)

__all__ = [
    "BotConfig",
    "CloudantConfig",
    "ConfigError",
    "CouchChatConfig",
    "TelegramConfig",
    "get_config_path",
    "get_couchchat_home",
    "get_logs_path",
    "load_config",
]
