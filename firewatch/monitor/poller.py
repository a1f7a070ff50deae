"""Poll cycle: fetch, filter new, notify, record.

One cycle runs at a time. Timer ticks and on-demand checks share the same
entry point and queue behind a running cycle rather than interleaving with
it, so the tracker and stats only ever see one writer.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable

from ..adapters.base import AlertRecord, AlertSource
from ..alerts.base import Notifier
from ..alerts.embeds import alert_message
from ..core.utils import get_logger
from .stats import StatsRecorder
from .tracker import DedupTracker

logger = get_logger(__name__)


class PollTrigger(Enum):
    """What started a poll cycle."""

    STARTUP = "startup"
    TIMER = "timer"
    MANUAL = "manual"


@dataclass(frozen=True)
class PollResult:
    """Outcome of one poll cycle.

    Attributes:
        total: Fetched alerts matching the hazard filter.
        new: Alerts seen for the first time and sent to the notifier.
        failed: Of the new alerts, deliveries that failed.
    """

    total: int
    new: int
    failed: int = 0

    @property
    def delivered(self) -> int:
        return self.new - self.failed

    def to_dict(self) -> dict:
        return {"total": self.total, "new": self.new, "failed": self.failed}


class PollCycle:
    """Runs fetch → dedup → notify passes against a single channel.

    Usage:
        poller = PollCycle(source, notifier, tracker, stats, channel_id="123")
        result = await poller.run(PollTrigger.MANUAL)
        print(result.total, result.new)
    """

    def __init__(
        self,
        source: AlertSource,
        notifier: Notifier,
        tracker: DedupTracker,
        stats: StatsRecorder,
        channel_id: str,
        delivery_spacing_seconds: float = 1.0,
        render: Callable[[AlertRecord], dict[str, Any]] = alert_message,
    ):
        """Initialize poll cycle.

        Args:
            source: Alert feed.
            notifier: Delivery channel.
            tracker: Dedup tracker.
            stats: Statistics recorder.
            channel_id: Destination channel ID.
            delivery_spacing_seconds: Pause between successive deliveries.
            render: Turns an alert into a message payload.
        """
        self.source = source
        self.notifier = notifier
        self.tracker = tracker
        self.stats = stats
        self.channel_id = channel_id
        self.delivery_spacing_seconds = delivery_spacing_seconds
        self.render = render

        self._lock = asyncio.Lock()
        self._cycles_run = 0

    @property
    def is_running(self) -> bool:
        """Whether a cycle is currently in progress."""
        return self._lock.locked()

    @property
    def cycles_run(self) -> int:
        return self._cycles_run

    async def run(self, trigger: PollTrigger = PollTrigger.MANUAL) -> PollResult:
        """Run one poll cycle, waiting for any cycle already in progress.

        Args:
            trigger: What requested the cycle. Timer-triggered cycles also
                run the tracker's eviction pass.

        Returns:
            Counts of matching and newly handled alerts.
        """
        if self._lock.locked():
            logger.debug("poll_waiting_for_running_cycle", trigger=trigger.value)

        async with self._lock:
            result = await self._run_locked()

            if trigger is PollTrigger.TIMER:
                self.tracker.evict_if_oversize()

            self._cycles_run += 1

        if result.new > 0:
            logger.info(
                "poll_cycle_sent_alerts",
                trigger=trigger.value,
                new=result.new,
                failed=result.failed,
                total=result.total,
            )
        else:
            logger.debug("poll_cycle_complete", trigger=trigger.value, total=result.total)

        return result

    async def _run_locked(self) -> PollResult:
        try:
            alerts = await self.source.fetch()
        except Exception as e:
            logger.error("poll_fetch_failed", error=str(e))
            alerts = []

        now = self.stats.now()
        self.stats.record_check(now)

        new = 0
        failed = 0

        for alert in alerts:
            if not self.tracker.is_new(alert.id):
                continue

            if new > 0 and self.delivery_spacing_seconds > 0:
                await asyncio.sleep(self.delivery_spacing_seconds)

            self.tracker.mark_seen(alert.id)
            new += 1

            if await self._deliver(alert):
                self.stats.record_delivery(self.stats.now())
            else:
                failed += 1

        return PollResult(total=len(alerts), new=new, failed=failed)

    async def _deliver(self, alert: AlertRecord) -> bool:
        try:
            message = self.render(alert)
            success = await self.notifier.deliver(self.channel_id, message)
        except Exception as e:
            logger.error("alert_delivery_error", alert_id=alert.id, error=str(e))
            return False

        if success:
            logger.info("alert_sent", alert_type=alert.event, headline=alert.headline or alert.id)
        else:
            logger.error("alert_delivery_failed", alert_id=alert.id, alert_type=alert.event)

        return success
