"""Process-wide state, built once at startup and passed explicitly."""

from __future__ import annotations

from dataclasses import dataclass

from ..adapters.base import AlertSource
from ..adapters.nws import NWSAlertSource
from ..alerts.base import ConsoleNotifier, Notifier
from ..alerts.discord import DiscordClient, DiscordNotifier
from ..core.config import Config, Credentials
from .poller import PollCycle
from .stats import StatsRecorder
from .tracker import DedupTracker

CONSOLE_CHANNEL_ID = "console"


@dataclass
class MonitorContext:
    """Everything the poll job, command handler and listener share.

    Attributes:
        config: Loaded configuration.
        channel_id: Destination channel for alerts and replies.
        source: Alert feed.
        notifier: Delivery channel.
        tracker: Dedup tracker.
        stats: Statistics recorder.
        poller: Poll cycle bound to the above.
        discord: Discord REST client, None in dry-run mode.
    """

    config: Config
    channel_id: str
    source: AlertSource
    notifier: Notifier
    tracker: DedupTracker
    stats: StatsRecorder
    poller: PollCycle
    discord: DiscordClient | None = None

    async def close(self) -> None:
        """Close network resources."""
        await self.source.close()
        await self.notifier.close()


def build_context(
    config: Config,
    credentials: Credentials | None = None,
    source: AlertSource | None = None,
    notifier: Notifier | None = None,
) -> MonitorContext:
    """Wire up the bot's components.

    Without credentials the context runs in dry-run mode: messages are
    printed to the console instead of posted to Discord.

    Args:
        config: Loaded configuration.
        credentials: Discord credentials, or None for dry-run.
        source: Override the alert source (defaults to NWS).
        notifier: Override the notifier.

    Returns:
        Ready-to-use context.
    """
    discord: DiscordClient | None = None

    if notifier is None:
        if credentials is not None:
            discord = DiscordClient(credentials.discord_token, config.discord)
            notifier = DiscordNotifier(discord)
        else:
            notifier = ConsoleNotifier()
    elif isinstance(notifier, DiscordNotifier):
        discord = notifier.client

    channel_id = credentials.discord_channel_id if credentials else CONSOLE_CHANNEL_ID
    source = source or NWSAlertSource(config.feed)

    tracker = DedupTracker(
        high_water_mark=config.polling.high_water_mark,
        retain_count=config.polling.retain_count,
    )
    stats = StatsRecorder(tracker)
    poller = PollCycle(
        source=source,
        notifier=notifier,
        tracker=tracker,
        stats=stats,
        channel_id=channel_id,
        delivery_spacing_seconds=config.polling.delivery_spacing_seconds,
    )

    return MonitorContext(
        config=config,
        channel_id=channel_id,
        source=source,
        notifier=notifier,
        tracker=tracker,
        stats=stats,
        poller=poller,
        discord=discord,
    )
