"""Bot lifecycle: startup announcement, scheduled polling, command listening."""

from __future__ import annotations

import asyncio
from typing import Any

from .alerts.embeds import build_startup_embed
from .commands.handler import CommandHandler
from .commands.listener import CommandListener
from .core.utils import get_logger
from .monitor.context import MonitorContext
from .monitor.poller import PollResult, PollTrigger
from .scheduler.scheduler import Scheduler

logger = get_logger(__name__)

POLL_JOB = "poll_alerts"
COMMAND_JOB = "poll_commands"


def handle_loop_exception(loop: asyncio.AbstractEventLoop, context: dict[str, Any]) -> None:
    """Log faults that escaped every task instead of letting them vanish."""
    exception = context.get("exception")
    logger.error(
        "unhandled_async_error",
        message=context.get("message"),
        error=str(exception) if exception else None,
        exc_info=exception,
    )


class FireWatchBot:
    """Runs the monitor: one startup check, then a timer-driven poll job.

    Usage:
        bot = FireWatchBot(build_context(config, credentials))
        await bot.start()
        ...
        await bot.stop()
    """

    def __init__(self, context: MonitorContext, scheduler: Scheduler | None = None):
        self.context = context
        self.scheduler = scheduler or Scheduler()
        self.handler = CommandHandler(context)

        commands = context.config.commands
        self.listener: CommandListener | None = None
        if commands.enabled and context.discord is not None:
            self.listener = CommandListener(context, self.handler, context.discord)

    async def poll_alerts(self) -> PollResult:
        """Timer-triggered poll; also runs the tracker's eviction pass."""
        return await self.context.poller.run(PollTrigger.TIMER)

    async def announce(self) -> bool:
        """Post the startup message to the alert channel."""
        config = self.context.config
        embed = build_startup_embed(
            alert_types=config.feed.alert_types,
            interval_seconds=config.polling.interval_seconds,
            prefix=config.commands.prefix,
        )
        return await self.context.notifier.deliver(self.context.channel_id, {"embeds": [embed]})

    async def start(self) -> None:
        """Announce, run the first check and start the scheduled jobs."""
        asyncio.get_running_loop().set_exception_handler(handle_loop_exception)

        config = self.context.config
        logger.info(
            "bot_starting",
            channel_id=self.context.channel_id,
            monitoring=config.feed.alert_types,
            interval_seconds=config.polling.interval_seconds,
        )

        if config.discord.startup_message:
            await self.announce()

        await self.context.poller.run(PollTrigger.STARTUP)

        self.scheduler.add_job(
            name=POLL_JOB,
            func=self.poll_alerts,
            interval_seconds=config.polling.interval_seconds,
        )

        if self.listener is not None:
            self.scheduler.add_job(
                name=COMMAND_JOB,
                func=self.listener.poll_once,
                interval_seconds=config.commands.poll_interval_seconds,
                run_immediately=True,
            )

        await self.scheduler.start()

    async def stop(self) -> None:
        """Stop scheduled jobs and close network resources."""
        await self.scheduler.stop()
        await self.context.close()
        logger.info("bot_stopped", **self.summary())

    def summary(self) -> dict[str, Any]:
        """Activity counters for the shutdown log."""
        return {
            "stats": self.context.stats.snapshot().to_dict(),
            "cycles_run": self.context.poller.cycles_run,
            "commands_handled": self.listener.commands_handled if self.listener else 0,
            "notifier": self.context.notifier.get_stats(),
        }
