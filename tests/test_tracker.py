"""Tests for the dedup tracker."""

import pytest

from firewatch.monitor.tracker import DedupTracker


class TestMembership:
    """Tests for is_new / mark_seen."""

    def test_new_until_marked(self):
        """An identifier is new until it has been marked."""
        tracker = DedupTracker()

        assert tracker.is_new("A1") is True
        tracker.mark_seen("A1")
        assert tracker.is_new("A1") is False
        assert tracker.is_new("A2") is True

    def test_is_new_has_no_side_effect(self):
        """Checking membership should not insert."""
        tracker = DedupTracker()

        tracker.is_new("A1")
        tracker.is_new("A1")

        assert tracker.size == 0

    def test_mark_seen_is_idempotent(self):
        """Marking twice should count once."""
        tracker = DedupTracker()

        tracker.mark_seen("A1")
        tracker.mark_seen("A1")

        assert tracker.size == 1
        assert len(tracker) == 1
        assert "A1" in tracker

    def test_marked_ids_never_report_new(self):
        """Every marked id stays seen; every other id stays new."""
        tracker = DedupTracker()
        marked = [f"id{i}" for i in range(0, 200, 3)]

        for alert_id in marked + marked[:10]:
            tracker.mark_seen(alert_id)

        for i in range(200):
            alert_id = f"id{i}"
            assert tracker.is_new(alert_id) is (alert_id not in marked)

    def test_remark_keeps_original_position(self):
        """Re-marking should not move an id to the newest position."""
        tracker = DedupTracker()

        tracker.mark_seen("a")
        tracker.mark_seen("b")
        tracker.mark_seen("a")

        assert list(tracker) == ["a", "b"]


class TestEviction:
    """Tests for the bounded-size eviction pass."""

    def test_no_eviction_at_high_water_mark(self):
        """A set exactly at the mark should be left alone."""
        tracker = DedupTracker(high_water_mark=10, retain_count=5)
        for i in range(10):
            tracker.mark_seen(f"id{i}")

        removed = tracker.evict_if_oversize()

        assert removed == 0
        assert tracker.size == 10

    def test_eviction_keeps_most_recent(self):
        """Eviction should retain the newest retain_count ids."""
        tracker = DedupTracker(high_water_mark=1000, retain_count=500)
        for i in range(1, 1002):
            tracker.mark_seen(f"id{i}")

        removed = tracker.evict_if_oversize()

        assert removed == 501
        assert tracker.size == 500
        assert list(tracker) == [f"id{i}" for i in range(502, 1002)]
        assert tracker.is_new("id501") is True
        assert tracker.is_new("id1") is True
        assert tracker.is_new("id502") is False
        assert tracker.is_new("id1001") is False

    def test_eviction_after_large_burst(self):
        """Any size above the mark is trimmed to retain_count in one pass."""
        tracker = DedupTracker(high_water_mark=100, retain_count=20)
        for i in range(5000):
            tracker.mark_seen(f"id{i}")

        tracker.evict_if_oversize()

        assert tracker.size == 20
        assert list(tracker) == [f"id{i}" for i in range(4980, 5000)]

    def test_insertion_continues_after_eviction(self):
        """New ids after eviction are appended as newest."""
        tracker = DedupTracker(high_water_mark=3, retain_count=2)
        for alert_id in ["a", "b", "c", "d"]:
            tracker.mark_seen(alert_id)

        tracker.evict_if_oversize()
        tracker.mark_seen("e")

        assert list(tracker) == ["c", "d", "e"]

    def test_evicted_id_is_new_again(self):
        """An evicted id is reported as new on its next appearance."""
        tracker = DedupTracker(high_water_mark=2, retain_count=1)
        for alert_id in ["old", "mid", "new"]:
            tracker.mark_seen(alert_id)

        tracker.evict_if_oversize()

        assert tracker.is_new("old") is True

    def test_zero_retain_clears(self):
        """retain_count of zero should empty the set."""
        tracker = DedupTracker(high_water_mark=1, retain_count=0)
        tracker.mark_seen("a")
        tracker.mark_seen("b")

        assert tracker.evict_if_oversize() == 2
        assert tracker.size == 0


class TestValidation:
    """Tests for constructor validation."""

    def test_retain_above_high_water_mark_raises(self):
        with pytest.raises(ValueError, match="retain_count"):
            DedupTracker(high_water_mark=10, retain_count=11)

    def test_negative_retain_raises(self):
        with pytest.raises(ValueError):
            DedupTracker(high_water_mark=10, retain_count=-1)
