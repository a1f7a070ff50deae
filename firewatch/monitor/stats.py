"""Process lifetime and delivery statistics."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable

from ..core.utils import utc_now
from .tracker import DedupTracker


@dataclass(frozen=True)
class StatsSnapshot:
    """Point-in-time view of bot statistics.

    Attributes:
        uptime: Time since the recorder was created.
        alerts_sent: Alerts successfully delivered.
        tracked_count: Identifiers currently held by the tracker.
        last_check_time: Most recent poll attempt.
        last_alert_time: Most recent successful delivery.
    """

    uptime: timedelta
    alerts_sent: int
    tracked_count: int
    last_check_time: datetime | None
    last_alert_time: datetime | None

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "uptime_seconds": self.uptime.total_seconds(),
            "alerts_sent": self.alerts_sent,
            "tracked_count": self.tracked_count,
            "last_check_time": self.last_check_time.isoformat() if self.last_check_time else None,
            "last_alert_time": self.last_alert_time.isoformat() if self.last_alert_time else None,
        }


class StatsRecorder:
    """Counters and timestamps describing bot activity.

    Mutated only from within a running poll cycle.
    """

    def __init__(
        self,
        tracker: DedupTracker,
        clock: Callable[[], datetime] = utc_now,
    ):
        """Initialize recorder.

        Args:
            tracker: Tracker whose size is reported in snapshots.
            clock: Source of the current time.
        """
        self.tracker = tracker
        self._clock = clock

        self.start_time: datetime = clock()
        self.alerts_sent: int = 0
        self.last_check_time: datetime | None = None
        self.last_alert_time: datetime | None = None

    def now(self) -> datetime:
        """Current time from the injected clock."""
        return self._clock()

    def record_check(self, now: datetime | None = None) -> None:
        """Record a poll attempt, successful or not."""
        self.last_check_time = now or self._clock()

    def record_delivery(self, now: datetime | None = None) -> None:
        """Record one successfully delivered alert."""
        self.alerts_sent += 1
        self.last_alert_time = now or self._clock()

    def snapshot(self, now: datetime | None = None) -> StatsSnapshot:
        """Take a read-only snapshot of the current statistics."""
        now = now or self._clock()
        return StatsSnapshot(
            uptime=now - self.start_time,
            alerts_sent=self.alerts_sent,
            tracked_count=self.tracker.size,
            last_check_time=self.last_check_time,
            last_alert_time=self.last_alert_time,
        )
