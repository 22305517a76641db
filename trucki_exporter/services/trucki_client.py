# trucki_exporter/services/trucki_client.py

from __future__ import annotations

import time
from typing import Optional

import requests

from trucki_exporter.config import ExporterConfig
from trucki_exporter.models.snapshot import NormalizedSnapshot, RawSnapshot
from trucki_exporter.services.decoder import decode_snapshot
from trucki_exporter.services.errors import NetworkError, ReadError, UpstreamStatusError
from trucki_exporter.services.normalizer import normalize


LIVE_PATH = "/jsonlive"
CHUNK_SIZE = 4096


class TruckiClient:
    """Fetches the live status document from a single Trucki stick."""

    def __init__(self, cfg: ExporterConfig, log, session: Optional[requests.Session] = None):
        self.cfg = cfg
        self.log = log
        self.session = session or requests.Session()
        self.timeout = cfg.timeout
        self.url = self._build_url(cfg.target)

    # ------------------------------------------------------------------
    @staticmethod
    def _build_url(target: str) -> str:
        base = target.strip().rstrip("/")
        if not base.startswith(("http://", "https://")):
            base = f"http://{base}"
        return f"{base}{LIVE_PATH}"

    # ------------------------------------------------------------------
    def fetch_live(self) -> bytes:
        """Return the raw /jsonlive body. No retries; the poller's next tick is the retry."""
        # requests applies the timeout per socket operation; the deadline caps
        # the whole request.
        deadline = time.monotonic() + self.timeout
        try:
            resp = self.session.get(self.url, timeout=self.timeout, stream=True)
        except (requests.ConnectionError, requests.Timeout) as exc:
            raise NetworkError(f"Request to {self.url} failed: {exc}") from exc
        except requests.RequestException as exc:
            raise NetworkError(f"Request to {self.url} could not be sent: {exc}") from exc

        try:
            if resp.status_code != 200:
                raise UpstreamStatusError(resp.status_code, self.url)
            try:
                body = self._read_body(resp, deadline)
            except (
                requests.exceptions.ChunkedEncodingError,
                requests.exceptions.ContentDecodingError,
                requests.ConnectionError,
                requests.Timeout,
            ) as exc:
                raise ReadError(f"Reading response body from {self.url} failed: {exc}") from exc
        finally:
            resp.close()

        self.log.debug("Fetched %d bytes from %s", len(body), self.url)
        return body

    def _read_body(self, resp, deadline: float) -> bytes:
        chunks = []
        for chunk in resp.iter_content(chunk_size=CHUNK_SIZE):
            chunks.append(chunk)
            if time.monotonic() > deadline:
                raise ReadError(
                    f"Reading response body from {self.url} exceeded {self.timeout:g}s"
                )
        return b"".join(chunks)

    # ------------------------------------------------------------------
    def fetch_raw(self) -> RawSnapshot:
        return decode_snapshot(self.fetch_live())

    def fetch_snapshot(self) -> NormalizedSnapshot:
        """One full fetch -> decode -> normalize cycle."""
        return normalize(self.fetch_raw(), self.log)
