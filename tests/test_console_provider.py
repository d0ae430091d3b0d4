"""Tests for the terminal provider driving a full dialog."""

import io
from unittest.mock import MagicMock

from rich.console import Console

from couchchat.providers.base import Attachment, OutgoingMessage
from couchchat.providers.console import ConsoleProvider
from couchchat.runtime import Bot


def make_console() -> Console:
    return Console(file=io.StringIO(), width=120, color_system=None)


class TestConsoleProvider:
    async def test_send_prints_text_and_attachments(self):
        console = make_console()
        provider = ConsoleProvider(console, bot_label="cloudbot")

        message_id = await provider.send(
            OutgoingMessage(
                chat_id="console",
                text="Getting the list of Cloudant databases.",
                attachments=[Attachment(title="Cloudant databases", text="animals")],
            )
        )

        output = console.file.getvalue()
        assert message_id.startswith("out-")
        assert "cloudbot:" in output
        assert "Getting the list of Cloudant databases." in output
        assert "Cloudant databases" in output
        assert "animals" in output

    async def test_session_runs_dialog_until_quit(self, fake_client):
        console = make_console()
        console.input = MagicMock(
            side_effect=[
                "cloudant run view animals zoo:by_name",
                "",
                "none",
                "quit",
            ]
        )
        provider = ConsoleProvider(console)
        bot = Bot(provider, fake_client)
        provider.set_ready_check(bot.wait_for_input)

        await bot.start()
        await bot.stop()

        assert fake_client.called("run_view") == [("animals", "zoo", "by_name", None)]
        output = console.file.getvalue()
        assert "Enter the keys to pass to view zoo:by_name" in output
        assert "Goodbye!" in output
        assert console.input.call_count == 4

    async def test_eof_ends_session(self, fake_client):
        console = make_console()
        console.input = MagicMock(side_effect=EOFError)
        provider = ConsoleProvider(console)

        await provider.start(Bot(provider, fake_client).handle_message)

        assert "Welcome" in console.file.getvalue()

    async def test_submit_waits_for_ready_check(self):
        provider = ConsoleProvider(make_console(), chat_id="c", user_id="u")
        seen = []

        async def handler(message):
            seen.append(message.text)

        async def ready(key):
            seen.append(key)

        provider.set_ready_check(ready)
        await provider.submit(handler, "cloudant help")

        assert seen == ["cloudant help", ("c", "u")]
