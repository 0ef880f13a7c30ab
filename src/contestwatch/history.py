"""Bounded in-memory history of instrument snapshots."""

from __future__ import annotations

from collections import deque

from contestwatch.models.snapshot import Snapshot


class HistoryBuffer:
    """FIFO of the most recent snapshots with offset-based lookback.

    Offsets count backwards from the newest snapshot: ``lookback(0)`` is
    the snapshot pushed last, ``lookback(k)`` the one pushed ``k`` cycles
    before it. Pushing beyond ``capacity`` evicts the oldest snapshot and
    hands it back to the caller, which makes it the furthest comparison
    point still reachable (``capacity`` cycles old).

    Not persisted and not shared: one buffer per stream, owned by the
    sampling loop.
    """

    def __init__(self, capacity: int) -> None:
        if capacity <= 0:
            raise ValueError("capacity must be > 0")
        self._capacity = int(capacity)
        self._snapshots: deque[Snapshot] = deque()

    @property
    def capacity(self) -> int:
        return self._capacity

    def __len__(self) -> int:
        return len(self._snapshots)

    def push(self, snapshot: Snapshot) -> Snapshot | None:
        """Append *snapshot* as the newest entry.

        Returns the evicted oldest snapshot when the push overflows the
        capacity, otherwise None.
        """
        self._snapshots.append(snapshot)
        if len(self._snapshots) > self._capacity:
            return self._snapshots.popleft()
        return None

    def lookback(self, offset: int) -> Snapshot | None:
        """Return the snapshot *offset* pushes older than the newest one.

        Returns None while the history is too short to reach *offset*.
        """
        if offset < 0 or offset >= len(self._snapshots):
            return None
        return self._snapshots[-1 - offset]

    @property
    def newest(self) -> Snapshot | None:
        return self.lookback(0)

    def snapshots(self) -> tuple[Snapshot, ...]:
        """All retained snapshots, oldest first."""
        return tuple(self._snapshots)

    def clear(self) -> None:
        self._snapshots.clear()
