"""Configuration models using Pydantic."""

from typing import Literal

from pydantic import BaseModel, Field, SecretStr, field_validator

CLOUDANT_DOMAIN = ".cloudant.com"


def derive_account(endpoint: str | None) -> str | None:
    """Derive the Cloudant account name from an endpoint.

    Strips the ``scheme://`` prefix, a trailing ``:port`` and the
    ``.cloudant.com`` suffix, so ``https://acme.cloudant.com:443`` becomes
    ``acme``.
    """
    if not endpoint:
        return None
    account = endpoint
    if (sep := account.find("://")) >= 0:
        account = account[sep + 3 :]
    account = account.rstrip("/")
    if (port_sep := account.rfind(":")) >= 0:
        account = account[:port_sep]
    return account.replace(CLOUDANT_DOMAIN, "")


class CloudantConfig(BaseModel):
    """Configuration for the Cloudant service.

    Only ``endpoint`` (or ``account``) and ``password`` are required to talk
    to Cloudant. When ``key`` is omitted Cloudant assumes the default user
    associated with the account.
    """

    endpoint: str | None = None
    account: str | None = None
    key: str | None = None
    password: SecretStr | None = None
    view_limit: int = Field(default=20, ge=1)
    timeout: float = 30.0

    def get_account(self) -> str | None:
        """Explicit account (service binding) or the one derived from the endpoint."""
        return self.account or derive_account(self.endpoint)

    def get_api_username(self) -> str | None:
        """User name to send on API calls.

        None when it is the same as the account, since Cloudant then uses
        the account's own credentials.
        """
        account = self.get_account()
        actual = self.key or account
        if actual and account and actual != account:
            return actual
        return None

    def get_base_url(self) -> str | None:
        """Base URL for REST calls.

        Hosted Cloudant endpoints collapse to ``https://{account}.cloudant.com``;
        any other endpoint with an explicit scheme (a local CouchDB, for
        instance) is used as-is.
        """
        account = self.get_account()
        if not account:
            return None
        if self.endpoint and "://" in self.endpoint:
            host = self.endpoint.split("://", 1)[1]
            if CLOUDANT_DOMAIN not in host:
                return self.endpoint.rstrip("/")
        return f"https://{account}{CLOUDANT_DOMAIN}"


class TelegramConfig(BaseModel):
    """Configuration for Telegram provider."""

    bot_token: SecretStr | None = None
    allowed_users: list[str] = []
    allowed_groups: list[str] = []
    group_mode: Literal["mention", "always"] = "mention"


class BotConfig(BaseModel):
    """Chat-facing behaviour."""

    name: str = "couchchat"
    exit_word: str = "exit"

    @field_validator("exit_word")
    @classmethod
    def _normalize_exit_word(cls, value: str) -> str:
        value = value.strip().lower()
        if not value:
            raise ValueError("exit_word must not be empty")
        return value


class ConfigError(Exception):
    """Configuration error."""

    pass


class CouchChatConfig(BaseModel):
    """Root configuration model."""

    cloudant: CloudantConfig = Field(default_factory=CloudantConfig)
    telegram: TelegramConfig | None = None
    bot: BotConfig = Field(default_factory=BotConfig)

    def require_telegram_token(self) -> str:
        """Return the Telegram bot token.

        Raises:
            ConfigError: If Telegram is not configured.
        """
        if self.telegram is None or self.telegram.bot_token is None:
            raise ConfigError(
                "Telegram is not configured. Add [telegram] bot_token or set "
                "TELEGRAM_BOT_TOKEN"
            )
        return self.telegram.bot_token.get_secret_value()
