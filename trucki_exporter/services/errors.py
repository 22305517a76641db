# trucki_exporter/services/errors.py

from __future__ import annotations


class TruckiExporterError(Exception):
    """Base class for every error raised by the exporter."""


class ConfigError(TruckiExporterError, ValueError):
    """Invalid process configuration; fatal at startup."""


class ScrapeError(TruckiExporterError):
    """A poll cycle failed; the previous snapshot stays in place."""


class NetworkError(ScrapeError):
    """Connection, DNS or timeout failure before a response arrived."""


class UpstreamStatusError(ScrapeError):
    def __init__(self, status_code: int, url: str | None = None):
        self.status_code = status_code
        self.url = url
        where = f" from {url}" if url else ""
        super().__init__(f"Trucki stick returned HTTP {status_code}{where}")


class ReadError(ScrapeError):
    """Response headers arrived but the body could not be read."""


class DecodeError(ScrapeError, ValueError):
    """Body is not valid JSON or does not match the expected field types."""


class FieldParseError(TruckiExporterError, ValueError):
    """A single field could not be converted; never aborts a cycle."""

    def __init__(self, key: str, value, reason: str):
        self.key = key
        self.value = value
        self.reason = reason
        super().__init__(f"{key}: cannot parse {value!r}: {reason}")
