"""Tests for the permission collection dialog."""

import pytest

from couchchat.dialog.permissions import (
    CAPABILITIES,
    Aborted,
    PermissionCollector,
    Resolved,
    grant_candidates,
)
from couchchat.dialog.types import CATCH_ALL, YES_NO


class TestGrantCandidates:
    def test_marks_current_grants(self):
        candidates = grant_candidates(["_writer", "_admin"])
        assert [c.capability for c in candidates] == list(CAPABILITIES)
        assert [c.already_granted for c in candidates] == [False, True, False, True]

    def test_none_means_nothing_granted(self):
        assert not any(c.already_granted for c in grant_candidates(None))


class TestPermissionCollector:
    """Tests for PermissionCollector.collect."""

    async def test_yes_no_answers_resolve_in_capability_order(self, scripted_channel):
        channel = scripted_channel(["yes", "no", "yes", "no"])
        collector = PermissionCollector(channel, "awards")

        outcome = await collector.collect("test_user01", ["_reader", "_writer"])

        assert outcome == Resolved(user="test_user01", grants=("_reader", "_replicator"))
        assert len(channel.prompts) == 4

    async def test_each_capability_asked_once_in_order(self, scripted_channel):
        channel = scripted_channel(["yes", "yes", "yes", "yes"])
        collector = PermissionCollector(channel, "awards")

        outcome = await collector.collect("bob", [])

        assert isinstance(outcome, Resolved)
        assert outcome.grants == CAPABILITIES
        for prompt, capability in zip(channel.prompts, CAPABILITIES, strict=True):
            assert f"({capability})" in prompt
        assert all(p is YES_NO for p in channel.patterns)

    async def test_keep_and_add_wording(self, scripted_channel):
        channel = scripted_channel(["no", "no", "no", "no"])
        collector = PermissionCollector(channel, "awards")

        await collector.collect("bob", ["_writer"])

        assert "Give user bob" in channel.prompts[0]
        assert "already has write access" in channel.prompts[1]

    async def test_all_no_resolves_to_empty_grants(self, scripted_channel):
        channel = scripted_channel(["no", "NO", "No", "no"])
        collector = PermissionCollector(channel, "awards")

        outcome = await collector.collect("bob", ["_reader"])

        assert outcome == Resolved(user="bob", grants=())
        assert not isinstance(outcome, Aborted)

    @pytest.mark.parametrize("cancel_at", [1, 2, 3, 4])
    async def test_cancel_discards_earlier_answers(self, scripted_channel, cancel_at):
        replies = ["yes"] * (cancel_at - 1) + ["exit"]
        channel = scripted_channel(replies)
        collector = PermissionCollector(channel, "awards")

        outcome = await collector.collect("bob", [])

        assert outcome == Aborted(user="bob")
        assert not outcome.before_user
        assert len(channel.prompts) == cancel_at

    async def test_invalid_reply_asks_same_question_again(self, scripted_channel):
        channel = scripted_channel(["maybe", "", "yes", "no", "no", "no"])
        collector = PermissionCollector(channel, "awards")

        outcome = await collector.collect("bob", [])

        assert outcome == Resolved(user="bob", grants=("_reader",))
        assert channel.prompts[0] == channel.prompts[1] == channel.prompts[2]

    async def test_answer_must_be_exactly_yes_or_no(self, scripted_channel):
        channel = scripted_channel(["yes please", "nope", "YES", "no", "no", "no"])
        collector = PermissionCollector(channel, "awards")

        outcome = await collector.collect("bob", [])

        assert outcome == Resolved(user="bob", grants=("_reader",))
        assert len(channel.prompts) == 6
        assert channel.patterns[0] is YES_NO

    async def test_empty_user_reply_cancels(self, scripted_channel):
        channel = scripted_channel(["   "])
        collector = PermissionCollector(channel, "awards")

        outcome = await collector.collect(None, [])

        assert outcome == Aborted()
        assert outcome.before_user
        assert collector.user is None

    async def test_prompts_for_missing_user(self, scripted_channel):
        channel = scripted_channel(["  carol  ", "no", "yes", "no", "no"])
        collector = PermissionCollector(channel, "awards")

        outcome = await collector.collect(None, [])

        assert outcome == Resolved(user="carol", grants=("_writer",))
        assert collector.user == "carol"
        assert "awards" in channel.prompts[0]
        assert channel.patterns[0] is CATCH_ALL

    async def test_exit_at_user_prompt_skips_lookup(self, scripted_channel):
        channel = scripted_channel(["exit"])
        collector = PermissionCollector(channel, "awards")
        looked_up: list[str] = []

        async def lookup(user: str) -> list[str]:
            looked_up.append(user)
            return []

        outcome = await collector.collect(None, lookup)

        assert outcome == Aborted()
        assert outcome.before_user
        assert looked_up == []

    async def test_custom_exit_word(self, scripted_channel):
        channel = scripted_channel(["quit"], exit_word="quit")
        collector = PermissionCollector(channel, "awards", exit_word="Quit")

        outcome = await collector.collect(None, [])

        assert outcome == Aborted()

    async def test_lookup_receives_resolved_user(self, scripted_channel):
        channel = scripted_channel(["dave", "yes", "yes", "no", "no"])
        collector = PermissionCollector(channel, "awards")

        async def lookup(user: str) -> list[str]:
            assert user == "dave"
            return ["_reader"]

        outcome = await collector.collect("", lookup)

        assert outcome == Resolved(user="dave", grants=("_reader", "_writer"))
        assert "already has read access" in channel.prompts[1]

    async def test_lookup_errors_propagate(self, scripted_channel):
        channel = scripted_channel([])
        collector = PermissionCollector(channel, "awards")

        async def lookup(user: str) -> list[str]:
            raise RuntimeError("boom")

        with pytest.raises(RuntimeError, match="boom"):
            await collector.collect("erin", lookup)
        assert collector.user == "erin"
