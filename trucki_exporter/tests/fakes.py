# trucki_exporter/tests/fakes.py

import dataclasses
import json
from datetime import datetime, timezone

import requests

from trucki_exporter.models.snapshot import NormalizedSnapshot


LIVE_PAYLOAD = {
    "VGRID": 230.1,
    "VBAT": 52.3,
    "SETACPOWER": 460,
    "TEMP": 41,
    "POWERLIMIT": 600,
    "SUN2ROUNDTRIP": "12 ms",
    "SUN2SETPOINT": 120,
    "SUN2POWERLIMIT": 300,
    "SUN3ROUNDTRIP": "",
    "SUN3SETPOINT": 0,
    "SUN3POWERLIMIT": 0,
    "METERREADOUT": 35,
    "DAYENERGY": 2.41,
    "TOTALENERGY": 812.7,
    "METERDAYENERGY": 4.05,
    "ACPOWER": "450 W",
    "ACPOWERSUN2": "118.5 W",
    "ACPOWERSUN3": "",
    "ZEPCPOWER": "455 W",
    "METERPOWER": "-12.5 W",
    "WIFI": "CONNECTED",
    "RSSI": "Okay",
    "VERSION": "1.3.7",
}


class FakeResponse:
    """Streams ``body`` (or the given ``chunks``); ``read_error`` is raised after them."""

    def __init__(self, status_code=200, body=b"", read_error=None, chunks=None):
        self.status_code = status_code
        self._chunks = list(chunks) if chunks is not None else [body]
        self._read_error = read_error
        self.closed = False

    def iter_content(self, chunk_size=1):
        for chunk in self._chunks:
            if chunk:
                yield chunk
        if self._read_error is not None:
            raise self._read_error

    def close(self):
        self.closed = True


class FakeSession:
    """Returns queued responses (or raises queued exceptions) in order; repeats the last one."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls = []

    def get(self, url, timeout=None, stream=None):
        self.calls.append({"url": url, "timeout": timeout, "stream": stream})
        item = self.responses[0] if len(self.responses) == 1 else self.responses.pop(0)
        if isinstance(item, Exception):
            raise item
        return item


def json_response(payload=None, status_code=200):
    return FakeResponse(status_code=status_code, body=json.dumps(payload or LIVE_PAYLOAD).encode("utf-8"))


def connection_refused():
    return requests.ConnectionError("[Errno 111] Connection refused")


def make_snapshot(value: float, **overrides) -> NormalizedSnapshot:
    """Snapshot whose numeric fields all carry ``value``."""
    fields = {}
    for f in dataclasses.fields(NormalizedSnapshot):
        if f.name == "scraped_at":
            fields[f.name] = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)
        elif f.name in ("wifi_state", "rssi"):
            fields[f.name] = int(value) % 5
        else:
            fields[f.name] = float(value)
    fields.update(overrides)
    return NormalizedSnapshot(**fields)
