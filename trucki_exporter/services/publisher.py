# trucki_exporter/services/publisher.py

from __future__ import annotations

import threading
from typing import List, Optional

from trucki_exporter.models.snapshot import NormalizedSnapshot
from trucki_exporter.services.metric_sink import MetricSink
from trucki_exporter.services.snapshot_store import SnapshotStore


class Publisher:
    """
    Projects the store's current snapshot into the sink's gauges.

    Registered as a collector on the sink's registry, so the copy happens
    lazily on every /metrics request. Copy and collect share one lock: two
    concurrent scrapes never interleave their gauge writes.
    """

    def __init__(self, store: SnapshotStore, sink: MetricSink, log, register: bool = True):
        self.store = store
        self.sink = sink
        self.log = log
        self._lock = threading.Lock()
        self._published: Optional[NormalizedSnapshot] = None
        if register:
            sink.registry.register(self)

    # ------------------------------------------------------------------
    def publish(self, snapshot: Optional[NormalizedSnapshot]) -> bool:
        """Write ``snapshot`` into the gauges; None leaves them untouched."""
        if snapshot is None:
            return False
        with self._lock:
            self._write(snapshot)
        return True

    def _write(self, snapshot: NormalizedSnapshot) -> None:
        if snapshot is self._published:
            return
        for field in self.sink.published_fields:
            self.sink.set(field, float(getattr(snapshot, field)))
        self._published = snapshot
        self.log.debug("Published snapshot scraped at %s", snapshot.scraped_at.isoformat())

    # ------------------------------------------------------------------
    # prometheus_client collector protocol
    def describe(self) -> List:
        return list(self.sink.describe())

    def collect(self) -> List:
        with self._lock:
            snapshot = self.store.current()
            if snapshot is not None:
                self._write(snapshot)
            return list(self.sink.collect())
