"""On-demand bot commands.

Each command returns a message payload ready to post back to the channel.
"""

from __future__ import annotations

from datetime import timedelta
from typing import Any, Awaitable, Callable

from ..adapters.base import AlertRecord
from ..alerts.embeds import (
    alert_message,
    build_active_embed,
    build_check_embed,
    build_help_embed,
    build_status_embed,
)
from ..core.utils import get_logger, utc_now
from ..monitor.context import MonitorContext
from ..monitor.poller import PollTrigger

logger = get_logger(__name__)

Reply = dict[str, Any]


def build_test_alert() -> AlertRecord:
    """Create the synthetic alert used by the test command."""
    now = utc_now()
    return AlertRecord(
        id=f"TEST-{int(now.timestamp() * 1000)}",
        event="Red Flag Warning",
        headline="TEST ALERT - Red Flag Warning",
        description=(
            "This is a TEST alert to verify the bot is working correctly. "
            "This is NOT a real alert.\n\n"
            "If you can see this message, the bot is configured correctly and will "
            "send real alerts when fire weather alerts are issued."
        ),
        area="Test County, Test State",
        severity="Severe",
        urgency="Expected",
        certainty="Observed",
        effective=now,
        expires=now + timedelta(hours=1),
    )


class CommandHandler:
    """Maps command names to replies built from the monitor context.

    Usage:
        handler = CommandHandler(context)
        reply = await handler.dispatch("status")
        await context.notifier.deliver(context.channel_id, reply)
    """

    def __init__(self, context: MonitorContext):
        self.context = context
        self._commands: dict[str, Callable[[], Awaitable[Reply]]] = {
            "test": self.test,
            "status": self.status,
            "check": self.check,
            "active": self.active,
        }

    @property
    def command_names(self) -> list[str]:
        return list(self._commands)

    async def dispatch(self, name: str) -> Reply:
        """Run a command by name.

        Args:
            name: Command name (case-insensitive).

        Returns:
            Reply payload; unknown commands get the help listing.
        """
        command = self._commands.get(name.strip().lower())
        if command is None:
            logger.debug("unknown_command", command=name)
            return {"embeds": [build_help_embed(self.context.config.commands.prefix)]}

        logger.info("command_received", command=name)
        return await command()

    async def test(self) -> Reply:
        """Render a synthetic alert. Never touches the tracker or stats."""
        return alert_message(build_test_alert(), is_test=True)

    async def status(self) -> Reply:
        """Report uptime, counters and monitoring settings."""
        snapshot = self.context.stats.snapshot()
        config = self.context.config
        embed = build_status_embed(
            uptime=snapshot.uptime,
            alerts_sent=snapshot.alerts_sent,
            tracked_count=snapshot.tracked_count,
            last_check_time=snapshot.last_check_time,
            last_alert_time=snapshot.last_alert_time,
            interval_seconds=config.polling.interval_seconds,
            alert_types=config.feed.alert_types,
        )
        return {"embeds": [embed]}

    async def check(self) -> Reply:
        """Run one poll cycle now and report its counts."""
        result = await self.context.poller.run(PollTrigger.MANUAL)
        return {"embeds": [build_check_embed(total=result.total, new=result.new)]}

    async def active(self) -> Reply:
        """List currently-active alerts by type, bypassing dedup."""
        alerts = await self.context.source.fetch()
        return {"embeds": [build_active_embed(alerts)]}
