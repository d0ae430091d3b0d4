"""Tests for view selection."""

from couchchat.dialog.types import DESIGN_VIEW, Cancelled
from couchchat.dialog.views import ViewReference, ViewSelector, parse_keys


class TestViewReference:
    def test_parse_design_view(self):
        ref = ViewReference.parse("awards", "awards:hasawards")
        assert ref == ViewReference("awards", "awards", "hasawards")
        assert ref.qualified_name == "awards:hasawards"

    def test_parse_rejects_malformed(self):
        assert ViewReference.parse("awards", "hasawards") is None
        assert ViewReference.parse("awards", ":hasawards") is None
        assert ViewReference.parse("awards", "awards:") is None
        assert ViewReference.parse("awards", "a:b c") is None
        assert ViewReference.parse("awards", None) is None

    def test_parse_is_repeatable(self):
        first = ViewReference.parse("awards", "awards:hasawards")
        second = ViewReference.parse("awards", "awards:hasawards")
        assert first == second
        assert hash(first) == hash(second)


class TestParseKeys:
    def test_splits_on_comma_and_following_space(self):
        assert parse_keys("Fred_Johnson, Jack_Johnson,William_Jones") == [
            "Fred_Johnson",
            "Jack_Johnson",
            "William_Jones",
        ]

    def test_keeps_duplicates(self):
        assert parse_keys("a, a") == ["a", "a"]

    def test_empty(self):
        assert parse_keys("") == []


class TestViewSelector:
    """Tests for ViewSelector.resolve_view and resolve_keys."""

    async def test_valid_supplied_view_skips_prompt(self, scripted_channel):
        channel = scripted_channel([])
        selector = ViewSelector(channel, "awards")

        ref = await selector.resolve_view("awards:hasawards")

        assert ref == ViewReference("awards", "awards", "hasawards")
        assert channel.prompts == []

    async def test_supplied_view_resolves_identically_twice(self, scripted_channel):
        selector = ViewSelector(scripted_channel([]), "awards")

        first = await selector.resolve_view("awards:hasawards")
        second = await selector.resolve_view("awards:hasawards")

        assert first == second

    async def test_malformed_view_prompts_once(self, scripted_channel):
        channel = scripted_channel(["awards:hasawards"])
        selector = ViewSelector(channel, "awards")

        ref = await selector.resolve_view("hasawards")

        assert ref == ViewReference("awards", "awards", "hasawards")
        assert len(channel.prompts) == 1
        assert channel.patterns[0] is DESIGN_VIEW

    async def test_mismatched_reply_is_asked_again(self, scripted_channel):
        channel = scripted_channel(["junk", "awards:hasawards"])
        selector = ViewSelector(channel, "awards")

        ref = await selector.resolve_view(None)

        assert ref == ViewReference("awards", "awards", "hasawards")
        assert len(channel.prompts) == 2

    async def test_exit_at_view_prompt_cancels(self, scripted_channel):
        selector = ViewSelector(scripted_channel(["EXIT"]), "awards")

        assert isinstance(await selector.resolve_view(None), Cancelled)

    async def test_none_keys(self, scripted_channel):
        selector = ViewSelector(scripted_channel(["none"]), "awards")
        assert await selector.resolve_keys("awards:hasawards") == []

    async def test_empty_keys(self, scripted_channel):
        selector = ViewSelector(scripted_channel([""]), "awards")
        assert await selector.resolve_keys("awards:hasawards") == []

    async def test_keys_keep_order(self, scripted_channel):
        channel = scripted_channel(["Fred_Johnson, Jack_Johnson, William_Jones"])
        selector = ViewSelector(channel, "awards")

        keys = await selector.resolve_keys("awards:hasawards")

        assert keys == ["Fred_Johnson", "Jack_Johnson", "William_Jones"]
        assert "awards:hasawards" in channel.prompts[0]

    async def test_exit_keys_cancels(self, scripted_channel):
        selector = ViewSelector(scripted_channel(["exit"]), "awards")
        assert isinstance(await selector.resolve_keys("awards:hasawards"), Cancelled)
