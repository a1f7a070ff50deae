"""Alert monitoring core.

This module provides:
- DedupTracker for bounded, insertion-ordered dedup of alert identifiers
- StatsRecorder for activity counters
- PollCycle for serialized fetch/notify passes
- MonitorContext wiring them together
"""

from .context import MonitorContext, build_context
from .poller import PollCycle, PollResult, PollTrigger
from .stats import StatsRecorder, StatsSnapshot
from .tracker import DedupTracker

__all__ = [
    "DedupTracker",
    "MonitorContext",
    "PollCycle",
    "PollResult",
    "PollTrigger",
    "StatsRecorder",
    "StatsSnapshot",
    "build_context",
]
