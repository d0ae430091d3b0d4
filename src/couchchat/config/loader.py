"""Configuration loading from TOML files and environment variables."""

import json
import logging
import os
import tomllib
from pathlib import Path
from typing import Any

from pydantic import SecretStr

from couchchat.config.models import CouchChatConfig
from couchchat.config.paths import config_search_paths

logger = logging.getLogger(__name__)

# Service binding variables take precedence over the plain ones.
CLOUDANT_ENV_VARS: dict[str, tuple[str, ...]] = {
    "endpoint": (
        "VCAP_SERVICES_CLOUDANTNOSQLDB_0_CREDENTIALS_HOST",
        "CLOUDANT_ENDPOINT",
    ),
    "key": (
        "VCAP_SERVICES_CLOUDANTNOSQLDB_0_CREDENTIALS_USERNAME",
        "CLOUDANT_KEY",
    ),
    "password": (
        "VCAP_SERVICES_CLOUDANTNOSQLDB_0_CREDENTIALS_PASSWORD",
        "CLOUDANT_PASSWORD",
    ),
}


def _first_env(*names: str) -> str | None:
    for name in names:
        if value := os.environ.get(name):
            return value
    return None


def _vcap_cloudant_credentials() -> dict[str, Any] | None:
    """Credentials of a bound cloudantNoSQLDB service, if any."""
    raw = os.environ.get("VCAP_SERVICES")
    if not raw:
        return None
    try:
        services = json.loads(raw)
    except json.JSONDecodeError:
        logger.warning("VCAP_SERVICES is not valid JSON, ignoring it")
        return None
    bindings = services.get("cloudantNoSQLDB") if isinstance(services, dict) else None
    if not bindings:
        return None
    binding = bindings[0] if isinstance(bindings, list) else None
    credentials = binding.get("credentials") if isinstance(binding, dict) else None
    if not isinstance(credentials, dict):
        logger.warning("VCAP_SERVICES has no usable cloudantNoSQLDB binding, ignoring it")
        return None
    return credentials or None


def _resolve_env_settings(config: dict[str, Any]) -> dict[str, Any]:
    """Fill Cloudant and Telegram settings from the environment where not set."""
    cloudant = config.setdefault("cloudant", {})
    for key, env_vars in CLOUDANT_ENV_VARS.items():
        if cloudant.get(key) is None and (value := _first_env(*env_vars)):
            cloudant[key] = SecretStr(value) if key == "password" else value

    # A bound service overrides any other settings.
    if credentials := _vcap_cloudant_credentials():
        username = credentials.get("username")
        cloudant["account"] = username
        cloudant["key"] = username
        if password := credentials.get("password"):
            cloudant["password"] = SecretStr(password)

    if token := os.environ.get("TELEGRAM_BOT_TOKEN"):
        telegram = config.setdefault("telegram", {})
        if telegram.get("bot_token") is None:
            telegram["bot_token"] = SecretStr(token)

    return config


def load_config(path: Path | None = None) -> CouchChatConfig:
    """Load configuration from a TOML file and the environment.

    Args:
        path: Explicit path to config file. If None, searches default locations
            and falls back to environment-only configuration.

    Returns:
        Validated CouchChatConfig instance.

    Raises:
        FileNotFoundError: If an explicit path does not exist.
        ValueError: If config file is invalid.
    """
    if path is not None:
        config_path: Path | None = Path(path).expanduser()
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")
    else:
        config_path = next((p for p in config_search_paths() if p.exists()), None)

    raw_config: dict[str, Any] = {}
    if config_path is not None:
        with config_path.open("rb") as f:
            raw_config = tomllib.load(f)
        logger.debug(f"Loaded configuration from {config_path}")
    else:
        logger.debug("No config file found, using environment only")

    raw_config = _resolve_env_settings(raw_config)

    return CouchChatConfig.model_validate(raw_config)
