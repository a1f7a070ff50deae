"""Deduplication of already-notified alerts.

The feed re-lists every active alert on each poll until it expires, so the
bot remembers which identifiers it has already handled. Memory is bounded
by a periodic eviction pass that keeps only the most recent identifiers.
"""

from __future__ import annotations

from collections.abc import Iterator

from ..core.utils import get_logger

logger = get_logger(__name__)


class DedupTracker:
    """Insertion-ordered set of handled alert identifiers.

    Usage:
        tracker = DedupTracker(high_water_mark=1000, retain_count=500)

        if tracker.is_new(alert.id):
            tracker.mark_seen(alert.id)
            ...

        # Once per poll interval
        tracker.evict_if_oversize()
    """

    def __init__(self, high_water_mark: int = 1000, retain_count: int = 500):
        """Initialize tracker.

        Args:
            high_water_mark: Size above which an eviction pass trims the set.
            retain_count: Number of most recent identifiers kept on eviction.
        """
        if retain_count < 0 or high_water_mark < 1:
            raise ValueError("high_water_mark must be >= 1 and retain_count >= 0")
        if retain_count > high_water_mark:
            raise ValueError("retain_count must not exceed high_water_mark")

        self.high_water_mark = high_water_mark
        self.retain_count = retain_count

        # dict preserves insertion order; values are unused
        self._seen: dict[str, None] = {}

    def is_new(self, alert_id: str) -> bool:
        """Check whether an identifier has not been handled yet."""
        return alert_id not in self._seen

    def mark_seen(self, alert_id: str) -> None:
        """Record an identifier as handled.

        Re-marking an identifier keeps its original position.
        """
        self._seen.setdefault(alert_id, None)

    @property
    def size(self) -> int:
        """Number of tracked identifiers."""
        return len(self._seen)

    def evict_if_oversize(self) -> int:
        """Drop the oldest identifiers once the set exceeds the high-water mark.

        Returns:
            Number of identifiers removed.
        """
        if len(self._seen) <= self.high_water_mark:
            return 0

        ordered = list(self._seen)
        removed = len(ordered) - self.retain_count
        self._seen = dict.fromkeys(ordered[removed:])

        logger.info(
            "tracker_evicted",
            removed=removed,
            retained=len(self._seen),
        )
        return removed

    def __contains__(self, alert_id: object) -> bool:
        return alert_id in self._seen

    def __len__(self) -> int:
        return len(self._seen)

    def __iter__(self) -> Iterator[str]:
        """Iterate identifiers from oldest to newest."""
        return iter(list(self._seen))
