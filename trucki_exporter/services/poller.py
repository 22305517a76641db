# trucki_exporter/services/poller.py

from __future__ import annotations

import enum
import math
import threading
from datetime import datetime
from typing import Callable, Optional

from trucki_exporter.models.snapshot import NormalizedSnapshot
from trucki_exporter.services.errors import ConfigError, ScrapeError
from trucki_exporter.services.snapshot_store import SnapshotStore


class PollerState(enum.Enum):
    IDLE = "idle"
    SCRAPING = "scraping"


def validate_interval(interval) -> float:
    if isinstance(interval, bool) or not isinstance(interval, (int, float)):
        raise ConfigError(f"Poll interval must be a number of seconds, got {interval!r}")
    if not interval > 0:
        raise ConfigError(
            f"Poll interval must be larger than zero seconds, got {interval}"
        )
    # Event.wait overflows above TIMEOUT_MAX
    if not math.isfinite(interval) or interval > threading.TIMEOUT_MAX:
        raise ConfigError(
            f"Poll interval must be at most {threading.TIMEOUT_MAX:.0f} seconds, got {interval}"
        )
    return float(interval)


class Poller:
    """
    Runs fetch -> decode -> normalize on a fixed interval and folds each
    successful result into the SnapshotStore.

    Cycles never overlap: the wait for the next tick starts once the current
    cycle has finished.
    """

    def __init__(
        self,
        client,
        store: SnapshotStore,
        interval: float,
        log,
        on_success: Optional[Callable[[NormalizedSnapshot], None]] = None,
    ):
        self.client = client
        self.store = store
        self.interval = validate_interval(interval)
        self.log = log
        self.on_success = on_success

        self.state = PollerState.IDLE
        self.cycles = 0
        self.failures = 0
        self.last_success: Optional[datetime] = None
        self.last_error: Optional[str] = None

        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    # ------------------------------------------------------------------
    def run_once(self) -> bool:
        """Run a single cycle. Returns True when the store was updated."""
        self.state = PollerState.SCRAPING
        self.cycles += 1
        try:
            snapshot = self.client.fetch_snapshot()
        except ScrapeError as exc:
            self.failures += 1
            self.last_error = str(exc)
            self.log.warning("Failed to scrape Trucki stick: %s", exc)
            return False
        except Exception as exc:
            self.failures += 1
            self.last_error = str(exc)
            self.log.exception("Unexpected error while scraping Trucki stick: %s", exc)
            return False
        finally:
            self.state = PollerState.IDLE

        self.store.replace(snapshot)
        self.last_success = snapshot.scraped_at
        self.last_error = None
        self.log.debug(
            "Scrape cycle %d ok (ac_power=%s W, failures so far=%d)",
            self.cycles,
            snapshot.ac_power,
            self.failures,
        )

        if self.on_success is not None:
            try:
                self.on_success(snapshot)
            except Exception as exc:
                self.log.exception("Snapshot callback failed: %s", exc)
        return True

    # ------------------------------------------------------------------
    def run_forever(self) -> None:
        self.log.info("Poller started, scraping every %ss", self.interval)
        while not self._stop.is_set():
            self.run_once()
            self._stop.wait(self.interval)
        self.log.info("Poller stopped after %d cycles (%d failed)", self.cycles, self.failures)

    def start(self) -> threading.Thread:
        if self._thread is not None and self._thread.is_alive():
            raise RuntimeError("Poller already running")
        self._stop.clear()
        self._thread = threading.Thread(target=self.run_forever, name="trucki-poller")
        self._thread.start()
        return self._thread

    def stop(self, timeout: Optional[float] = None) -> bool:
        """
        Ask the loop to stop and wait for it. An in-flight scrape finishes or
        times out first. Returns True when the thread has exited.
        """
        self._stop.set()
        if self._thread is None:
            return True
        self._thread.join(timeout)
        return not self._thread.is_alive()

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()
