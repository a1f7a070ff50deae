"""Tests for channel commands."""

from unittest.mock import patch

import pytest

from firewatch.commands.handler import CommandHandler, build_test_alert
from firewatch.commands.listener import CommandListener, parse_command
from firewatch.monitor.context import build_context


@pytest.fixture
def context(config, source, notifier):
    return build_context(config, source=source, notifier=notifier)


@pytest.fixture
def handler(context):
    return CommandHandler(context)


class FakeDiscord:
    """Stands in for DiscordClient.get_messages."""

    def __init__(self, batches=None, error=None):
        self.batches = list(batches or [])
        self.error = error
        self.calls = []

    async def get_messages(self, channel_id, after=None, limit=50):
        self.calls.append({"channel_id": channel_id, "after": after, "limit": limit})
        if self.error is not None:
            raise self.error
        return self.batches.pop(0) if self.batches else []


def chat(message_id, content, bot=False):
    return {"id": message_id, "content": content, "author": {"id": "u1", "bot": bot}}


class TestCommandHandler:
    """Tests for CommandHandler."""

    @pytest.mark.asyncio
    async def test_test_command_leaves_state_alone(self, handler, context):
        """The test alert is rendered but never tracked or counted."""
        reply = await handler.dispatch("test")

        embed = reply["embeds"][0]
        assert embed["title"] == "TEST - Red Flag Warning"
        assert embed["footer"]["text"] == "TEST ALERT - Not Real"
        assert context.tracker.size == 0
        assert context.stats.alerts_sent == 0

    @pytest.mark.asyncio
    async def test_status_reports_counters(self, handler, context, source, alert_factory):
        source.alerts = [alert_factory("A1"), alert_factory("A2")]
        await context.poller.run()

        reply = await handler.dispatch("STATUS")
        fields = {f["name"]: f["value"] for f in reply["embeds"][0]["fields"]}

        assert fields["Alerts Sent"] == "2"
        assert fields["Tracked Alerts"] == "2"
        assert fields["Last Check"].startswith("<t:")
        assert fields["Poll Interval"] == "60 seconds"

    @pytest.mark.asyncio
    async def test_check_runs_a_cycle(self, handler, context, source, notifier, alert_factory):
        source.alerts = [alert_factory("A1")]

        first = await handler.dispatch("check")
        second = await handler.dispatch("check")

        assert "**1**" in first["embeds"][0]["description"]
        assert second["embeds"][0]["description"] == "No new alerts found."
        assert len(notifier.sent) == 1
        assert context.stats.alerts_sent == 1

    @pytest.mark.asyncio
    async def test_active_bypasses_dedup(self, handler, context, source, notifier, alert_factory):
        """Active lists alerts even when already seen, without delivering them."""
        source.alerts = [alert_factory("A1"), alert_factory("A2", event="Fire Weather Watch")]
        context.tracker.mark_seen("A1")

        reply = await handler.dispatch("active")

        embed = reply["embeds"][0]
        assert embed["title"] == "Active Fire Weather Alerts: 2"
        assert "**Red Flag Warning** (1)" in embed["description"]
        assert notifier.sent == []
        assert context.tracker.size == 1

    @pytest.mark.asyncio
    async def test_unknown_command_gets_help(self, handler):
        reply = await handler.dispatch("weather")

        embed = reply["embeds"][0]
        assert embed["title"] == "Available Commands"
        assert "`!status`" in embed["description"]

    def test_command_names(self, handler):
        assert handler.command_names == ["test", "status", "check", "active"]

    def test_build_test_alert(self):
        alert = build_test_alert()

        assert alert.id.startswith("TEST-")
        assert alert.event == "Red Flag Warning"
        assert alert.expires > alert.effective


class TestParseCommand:
    """Tests for parse_command."""

    def test_parses_prefixed_word(self):
        assert parse_command("!Status", "!") == "status"
        assert parse_command("  !check now please", "!") == "check"

    def test_ignores_other_messages(self):
        assert parse_command("status", "!") is None
        assert parse_command("!", "!") is None
        assert parse_command("", "!") is None
        assert parse_command(None, "!") is None


class TestCommandListener:
    """Tests for CommandListener."""

    @pytest.mark.asyncio
    async def test_first_poll_primes_without_replaying(self, context, handler, notifier):
        """Existing channel history is skipped."""
        discord = FakeDiscord(batches=[[chat("100", "!status")]])
        listener = CommandListener(context, handler, discord)

        handled = await listener.poll_once()

        assert handled == 0
        assert notifier.sent == []
        assert discord.calls[0]["limit"] == 1

    @pytest.mark.asyncio
    async def test_empty_channel_primes_from_zero(self, context, handler):
        discord = FakeDiscord(batches=[[], []])
        listener = CommandListener(context, handler, discord)

        await listener.poll_once()
        await listener.poll_once()

        assert discord.calls[1]["after"] == "0"

    @pytest.mark.asyncio
    async def test_replies_to_commands_in_order(self, context, handler, notifier):
        discord = FakeDiscord(batches=[
            [chat("100", "hello")],
            [chat("103", "!status"), chat("102", "just chatting"), chat("101", "!test")],
            [],
        ])
        listener = CommandListener(context, handler, discord)

        await listener.poll_once()
        handled = await listener.poll_once()
        await listener.poll_once()

        assert handled == 2
        assert listener.commands_handled == 2
        assert discord.calls[1]["after"] == "100"
        assert discord.calls[2]["after"] == "103"

        references = [msg["message_reference"]["message_id"] for _, msg in notifier.sent]
        assert references == ["101", "103"]
        assert notifier.sent[0][1]["embeds"][0]["title"] == "TEST - Red Flag Warning"
        assert notifier.sent[1][1]["embeds"][0]["title"] == "Bot Status"

    @pytest.mark.asyncio
    async def test_ignores_bot_authors(self, context, handler, notifier):
        discord = FakeDiscord(batches=[[chat("100", "x")], [chat("101", "!status", bot=True)]])
        listener = CommandListener(context, handler, discord)

        await listener.poll_once()
        handled = await listener.poll_once()

        assert handled == 0
        assert notifier.sent == []

    @pytest.mark.asyncio
    async def test_failed_reply_is_logged(self, context, handler, notifier):
        notifier.fail = True
        discord = FakeDiscord(batches=[[chat("100", "x")], [chat("101", "!test")]])
        listener = CommandListener(context, handler, discord)

        await listener.poll_once()
        with patch("firewatch.commands.listener.logger") as logger:
            handled = await listener.poll_once()

        assert handled == 1
        logger.error.assert_called_once_with("command_reply_failed", command="test", message_id="101")

    @pytest.mark.asyncio
    async def test_poll_error_is_contained(self, context, handler):
        listener = CommandListener(context, handler, FakeDiscord(error=RuntimeError("offline")))

        assert await listener.poll_once() == 0

    @pytest.mark.asyncio
    async def test_failing_command_does_not_stop_others(self, context, handler, notifier):
        async def broken():
            raise RuntimeError("boom")

        handler._commands["active"] = broken
        discord = FakeDiscord(batches=[[chat("100", "x")], [chat("101", "!active"), chat("102", "!test")]])
        listener = CommandListener(context, handler, discord)

        await listener.poll_once()
        handled = await listener.poll_once()

        assert handled == 1
        assert [msg["message_reference"]["message_id"] for _, msg in notifier.sent] == ["102"]
