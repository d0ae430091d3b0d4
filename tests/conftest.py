"""Shared test fixtures and factories."""

import itertools
import re
from collections.abc import Sequence
from pathlib import Path
from typing import Any

import pytest

from couchchat.cloudant.errors import CloudantError
from couchchat.cloudant.types import DatabaseInfo, ViewName, ViewRow
from couchchat.commands.base import CommandContext
from couchchat.commands.entities import EntityRegistry
from couchchat.config.models import CloudantConfig, CouchChatConfig
from couchchat.config.paths import get_couchchat_home
from couchchat.dialog.switchboard import Switchboard
from couchchat.dialog.types import CANCELLED, Answered, PromptOutcome
from couchchat.providers.base import (
    IncomingMessage,
    MessageHandler,
    OutgoingMessage,
    Provider,
)

ENV_VARS = (
    "CLOUDANT_ENDPOINT",
    "CLOUDANT_KEY",
    "CLOUDANT_PASSWORD",
    "VCAP_SERVICES",
    "VCAP_SERVICES_CLOUDANTNOSQLDB_0_CREDENTIALS_HOST",
    "VCAP_SERVICES_CLOUDANTNOSQLDB_0_CREDENTIALS_USERNAME",
    "VCAP_SERVICES_CLOUDANTNOSQLDB_0_CREDENTIALS_PASSWORD",
    "TELEGRAM_BOT_TOKEN",
    "COUCHCHAT_LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path: Path):
    """Keep the developer's Cloudant settings and config files out of tests."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("COUCHCHAT_HOME", str(tmp_path / "home"))
    monkeypatch.chdir(tmp_path)
    get_couchchat_home.cache_clear()
    yield
    get_couchchat_home.cache_clear()


# =============================================================================
# Configuration Fixtures
# =============================================================================


@pytest.fixture
def cloudant_config() -> CloudantConfig:
    return CloudantConfig(endpoint="https://acme.cloudant.com", password="s3cret-pass")


@pytest.fixture
def couchchat_config(cloudant_config: CloudantConfig) -> CouchChatConfig:
    return CouchChatConfig(cloudant=cloudant_config)


@pytest.fixture
def config_toml_content() -> str:
    """Valid TOML config content."""
    return """
[cloudant]
endpoint = "https://acme.cloudant.com"
password = "from-file-password"
view_limit = 5

[telegram]
bot_token = "123456789:ABCdefGHIjklMNOpqrSTUvwxYZ0123456789"
allowed_users = ["@alice"]

[bot]
name = "cloudbot"
exit_word = "Quit"
"""


@pytest.fixture
def config_file(tmp_path: Path, config_toml_content: str) -> Path:
    """Create a temporary config file."""
    config_path = tmp_path / "config.toml"
    config_path.write_text(config_toml_content)
    return config_path


@pytest.fixture
def cli_runner():
    """Create a Typer CLI test runner with colors disabled."""
    from typer.testing import CliRunner

    return CliRunner(env={"NO_COLOR": "1"})


# =============================================================================
# Dialog Fixtures
# =============================================================================


class ScriptedPromptChannel:
    """PromptChannel answering from a list of replies.

    Follows the same rules as a live conversation: the exit word cancels,
    a reply that does not match the pattern causes the prompt to be asked
    again with the next reply.
    """

    def __init__(self, replies: Sequence[str] = (), exit_word: str = "exit"):
        self.replies = list(replies)
        self.exit_word = exit_word
        self.prompts: list[str] = []
        self.patterns: list[re.Pattern[str]] = []

    async def ask(self, text: str, pattern: re.Pattern[str]) -> PromptOutcome:
        while True:
            self.prompts.append(text)
            self.patterns.append(pattern)
            if not self.replies:
                raise AssertionError(f"Unexpected prompt: {text}")
            reply = self.replies.pop(0).strip()
            if reply.lower() == self.exit_word:
                return CANCELLED
            if match := pattern.search(reply):
                return Answered(reply, tuple(g or "" for g in match.groups()))


@pytest.fixture
def scripted_channel():
    """Factory for ScriptedPromptChannel."""
    return ScriptedPromptChannel


# =============================================================================
# Cloudant Fixtures
# =============================================================================


class FakeCloudantClient:
    """In-memory stand-in for CloudantClient that records every call."""

    def __init__(self) -> None:
        self.databases: list[str] = ["animals", "plants"]
        self.info: dict[str, dict[str, Any]] = {
            "animals": {
                "db_name": "animals",
                "doc_count": 12,
                "doc_del_count": 1,
                "disk_size": 148920,
                "sizes": {"file": 148920, "external": 2048, "active": 4096},
                "compact_running": False,
            }
        }
        self.security: dict[str, dict[str, list[str]]] = {
            "animals": {"alice": ["_reader", "_writer"]}
        }
        self.views: dict[str, list[ViewName]] = {
            "animals": [ViewName("zoo", "by_name"), ViewName("farm", "by_legs")]
        }
        self.rows: list[ViewRow] = [
            ViewRow("cat", "cat", {"legs": 4}),
            ViewRow("hen", "hen", {"legs": 2}),
        ]
        self.view_limit = 20
        self.calls: list[tuple[str, tuple[Any, ...]]] = []
        self.failures: dict[str, Exception] = {}

    def _record(self, name: str, *args: Any) -> None:
        self.calls.append((name, args))
        if name in self.failures:
            raise self.failures[name]

    def called(self, name: str) -> list[tuple[Any, ...]]:
        return [args for call, args in self.calls if call == name]

    async def list_databases(self) -> list[str]:
        self._record("list_databases")
        return list(self.databases)

    async def get_database_info(self, database: str) -> DatabaseInfo:
        self._record("get_database_info", database)
        if database not in self.info:
            raise CloudantError(f"not_found: Database {database} does not exist")
        return DatabaseInfo.from_dict(database, self.info[database])

    async def create_database(self, database: str) -> dict[str, Any]:
        self._record("create_database", database)
        self.databases.append(database)
        return {"ok": True}

    async def get_permissions(self, database: str, user: str) -> list[str]:
        self._record("get_permissions", database, user)
        return list(self.security.get(database, {}).get(user, []))

    async def set_permissions(
        self, database: str, user: str, permissions: Sequence[str]
    ) -> dict[str, Any]:
        self._record("set_permissions", database, user, tuple(permissions))
        self.security.setdefault(database, {})[user] = list(permissions)
        return {"ok": True}

    async def list_views(self, database: str) -> list[ViewName]:
        self._record("list_views", database)
        return list(self.views.get(database, []))

    async def run_view(
        self,
        database: str,
        design: str,
        view: str,
        keys: Sequence[str] | None = None,
        limit: int | None = None,
    ) -> list[ViewRow]:
        self._record("run_view", database, design, view, keys)
        if keys:
            return [row for row in self.rows if row.key in keys]
        return list(self.rows)


@pytest.fixture
def fake_client() -> FakeCloudantClient:
    return FakeCloudantClient()


# =============================================================================
# Provider Fixtures
# =============================================================================


class RecordingProvider(Provider):
    """Provider that keeps everything the bot sends."""

    def __init__(self) -> None:
        self.sent: list[OutgoingMessage] = []
        self.handler: MessageHandler | None = None
        self.stopped = False
        self._ids = itertools.count(1)

    @property
    def name(self) -> str:
        return "recording"

    async def start(self, handler: MessageHandler) -> None:
        self.handler = handler

    async def stop(self) -> None:
        self.stopped = True

    async def send(self, message: OutgoingMessage) -> str:
        self.sent.append(message)
        return str(next(self._ids))

    @property
    def texts(self) -> list[str]:
        return [m.text for m in self.sent if m.text]

    @property
    def attachments(self) -> list[Any]:
        return [a for m in self.sent for a in m.attachments]


@pytest.fixture
def provider() -> RecordingProvider:
    return RecordingProvider()


_message_ids = itertools.count(1)


def make_incoming(
    text: str,
    *,
    chat_id: str = "chat-1",
    user_id: str = "user-1",
) -> IncomingMessage:
    """Create an incoming chat message."""
    return IncomingMessage(
        id=str(next(_message_ids)),
        chat_id=chat_id,
        user_id=user_id,
        text=text,
        username="tester",
    )


def make_context(
    text: str,
    provider: RecordingProvider,
    client: FakeCloudantClient,
    *,
    switchboard: Switchboard | None = None,
    entities: EntityRegistry | None = None,
) -> CommandContext:
    return CommandContext(
        make_incoming(text),
        provider.send,
        client,  # type: ignore[arg-type]
        switchboard or Switchboard(),
        entities or EntityRegistry(),
    )
