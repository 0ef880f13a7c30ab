"""Tests for the bounded snapshot history."""

import pytest

from contestwatch.history import HistoryBuffer

from conftest import make_snapshot


def _snapshots(n: int):
    return [make_snapshot({"A": float(i)}, taken_at=i) for i in range(1, n + 1)]


class TestHistoryBufferBasics:
    def test_invalid_capacity(self):
        with pytest.raises(ValueError):
            HistoryBuffer(0)

    def test_empty(self):
        history = HistoryBuffer(4)
        assert len(history) == 0
        assert history.capacity == 4
        assert history.newest is None
        assert history.lookback(0) is None
        assert history.snapshots() == ()

    def test_current_available_right_after_push(self):
        history = HistoryBuffer(16)
        snap = make_snapshot({"A": 1.0})
        assert history.push(snap) is None
        assert history.lookback(0) is snap
        assert history.newest is snap

    def test_clear(self):
        history = HistoryBuffer(4)
        for snap in _snapshots(3):
            history.push(snap)
        history.clear()
        assert len(history) == 0
        assert history.lookback(0) is None


class TestBoundedGrowth:
    @pytest.mark.parametrize("capacity", [1, 3, 16])
    def test_length_is_min_of_pushes_and_capacity(self, capacity):
        history = HistoryBuffer(capacity)
        for n, snap in enumerate(_snapshots(capacity * 3), start=1):
            history.push(snap)
            assert len(history) == min(n, capacity)
            assert len(history) <= capacity

    def test_snapshots_oldest_first(self):
        history = HistoryBuffer(3)
        snaps = _snapshots(5)
        for snap in snaps:
            history.push(snap)
        assert history.snapshots() == tuple(snaps[2:])


class TestLookback:
    def test_offsets_count_back_from_newest(self):
        history = HistoryBuffer(16)
        snaps = _snapshots(10)
        for snap in snaps:
            history.push(snap)
        n = len(snaps)
        for k in range(n):
            assert history.lookback(k) is snaps[n - 1 - k]
        for k in range(n, n + 5):
            assert history.lookback(k) is None

    def test_negative_offset_is_absent(self):
        history = HistoryBuffer(4)
        history.push(make_snapshot({"A": 1.0}))
        assert history.lookback(-1) is None

    def test_warm_up(self):
        """Offsets 4 and 8 only resolve once enough cycles have run."""
        history = HistoryBuffer(16)
        snaps = _snapshots(9)
        for n, snap in enumerate(snaps, start=1):
            history.push(snap)
            assert (history.lookback(4) is not None) == (n >= 5)
            assert (history.lookback(8) is not None) == (n >= 9)
        assert history.lookback(4) is snaps[4]
        assert history.lookback(8) is snaps[0]

    def test_two_pushes(self):
        history = HistoryBuffer(16)
        s1 = make_snapshot({"A": 10.0, "B": 5.0})
        s2 = make_snapshot({"A": 12.0, "B": 4.0})
        history.push(s1)
        history.push(s2)
        assert history.lookback(0) is s2
        assert history.lookback(1) is s1
        assert history.lookback(2) is None


class TestEviction:
    def test_no_eviction_until_full(self):
        history = HistoryBuffer(4)
        for snap in _snapshots(4):
            assert history.push(snap) is None

    def test_evicted_is_the_snapshot_aging_out(self):
        capacity = 4
        history = HistoryBuffer(capacity)
        for snap in _snapshots(12):
            oldest_before = history.lookback(capacity - 1)
            evicted = history.push(snap)
            if oldest_before is None:
                assert evicted is None
            else:
                assert evicted is oldest_before

    def test_evicted_is_capacity_cycles_old(self):
        history = HistoryBuffer(16)
        snaps = _snapshots(17)
        evicted = None
        for snap in snaps:
            evicted = history.push(snap)
        assert evicted is snaps[0]
        assert history.lookback(15) is snaps[1]
        assert history.lookback(16) is None
