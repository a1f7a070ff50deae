"""Shared test fixtures."""

import asyncio
from datetime import datetime, timedelta, timezone

import pytest

from firewatch.adapters.base import AlertRecord, AlertSource
from firewatch.alerts.base import Notifier, NotifierChannel
from firewatch.core.config import FIRE_ALERT_TYPES, Config
from firewatch.monitor.poller import PollCycle
from firewatch.monitor.stats import StatsRecorder
from firewatch.monitor.tracker import DedupTracker


def make_alert(alert_id: str, event: str = "Red Flag Warning", **kwargs) -> AlertRecord:
    """Build an alert with sensible defaults."""
    defaults = {
        "severity": "Severe",
        "urgency": "Expected",
        "certainty": "Likely",
        "description": f"Description for {alert_id}",
        "area": f"Area {alert_id}",
        "effective": datetime(2025, 7, 4, 12, 0, tzinfo=timezone.utc),
        "expires": datetime(2025, 7, 4, 12, 0, tzinfo=timezone.utc) + timedelta(hours=6),
    }
    defaults.update(kwargs)
    return AlertRecord(id=alert_id, event=event, **defaults)


class FakeSource(AlertSource):
    """In-memory alert source that filters like a real one."""

    def __init__(self, alerts=None, alert_types=None):
        super().__init__(alert_types or FIRE_ALERT_TYPES)
        self.alerts = list(alerts or [])
        self.fetch_calls = 0
        self.in_flight = 0
        self.max_in_flight = 0
        self.gate: asyncio.Event | None = None
        self.error: Exception | None = None
        self.closed = False

    async def fetch(self):
        self.fetch_calls += 1
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            if self.gate is not None:
                await self.gate.wait()
            if self.error is not None:
                raise self.error
            return [a for a in self.alerts if self.matches(a)]
        finally:
            self.in_flight -= 1

    async def close(self):
        self.closed = True


class RecordingNotifier(Notifier):
    """Notifier that records messages and can be told to fail."""

    def __init__(self, fail: bool = False, raise_error: bool = False):
        super().__init__()
        self.fail = fail
        self.raise_error = raise_error
        self.sent = []
        self.closed = False

    @property
    def channel(self):
        return NotifierChannel.CONSOLE

    async def send_message(self, channel_id, message):
        if self.raise_error:
            raise RuntimeError("boom")
        if self.fail:
            return False
        self.sent.append((channel_id, message))
        return True

    async def close(self):
        self.closed = True


@pytest.fixture
def alert_factory():
    return make_alert


@pytest.fixture
def source():
    return FakeSource()


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def tracker():
    return DedupTracker(high_water_mark=1000, retain_count=500)


@pytest.fixture
def stats(tracker):
    return StatsRecorder(tracker)


@pytest.fixture
def poller(source, notifier, tracker, stats):
    return PollCycle(
        source=source,
        notifier=notifier,
        tracker=tracker,
        stats=stats,
        channel_id="chan-1",
        delivery_spacing_seconds=0,
    )


@pytest.fixture
def config():
    return Config(polling={"delivery_spacing_seconds": 0})
