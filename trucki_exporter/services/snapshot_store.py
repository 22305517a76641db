# trucki_exporter/services/snapshot_store.py

from __future__ import annotations

import threading
from typing import Optional

from trucki_exporter.models.snapshot import NormalizedSnapshot


class SnapshotStore:
    """
    Holds the most recent successful snapshot.

    Snapshots are frozen, so swapping the reference under the lock is enough
    for readers to always see one complete snapshot.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._current: Optional[NormalizedSnapshot] = None

    def replace(self, snapshot: NormalizedSnapshot) -> None:
        if snapshot is None:
            raise ValueError("SnapshotStore.replace() requires a snapshot")
        with self._lock:
            self._current = snapshot

    def current(self) -> Optional[NormalizedSnapshot]:
        with self._lock:
            return self._current

    @property
    def empty(self) -> bool:
        return self.current() is None
