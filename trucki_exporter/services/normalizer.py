# trucki_exporter/services/normalizer.py

from __future__ import annotations

import logging
import math
from datetime import datetime, timezone
from typing import Optional

from trucki_exporter.models.snapshot import NormalizedSnapshot, RawSnapshot
from trucki_exporter.services.errors import FieldParseError


# Reported for a unit string that could not be parsed.
UNKNOWN_VALUE = -1.0

# Ordinal reported when a label is not in its table.
DEFAULT_ORDINAL = 0

# The round-trip gauges are never published; an empty value there is routine.
ROUND_TRIP_LOG_LEVEL = logging.DEBUG

WIFI_STATE_CODES = {
    "DISCONNECTED": 0,
    "CONNECTED": 1,
}

# Case-sensitive. The stick's own firmware also emits "Very Good", which is
# deliberately not listed (see DESIGN.md).
RSSI_CODES = {
    "Unusable": 0,
    "Not good": 1,
    "Okay": 2,
    "Very good": 3,
    "Amazing": 4,
}


def parse_unit_value(text: str, key: str = "value") -> float:
    """
    Parse the leading number of a unit-suffixed string such as "123.4 W".

    Raises FieldParseError for empty input or a non-numeric leading token.
    """
    if not isinstance(text, str):
        raise FieldParseError(key, text, "not a string")

    parts = text.split(None, 1)
    if not parts:
        raise FieldParseError(key, text, "empty")

    try:
        value = float(parts[0])
    except ValueError:
        raise FieldParseError(key, text, "leading token is not a number") from None

    if not math.isfinite(value):
        raise FieldParseError(key, text, "not a finite number")
    return value


def unit_value_or_sentinel(key: str, text: str, log, level: int = logging.WARNING) -> float:
    try:
        return parse_unit_value(text, key)
    except FieldParseError as exc:
        log.log(
            level,
            "Failed to extract number from JSON key '%s': %s",
            key,
            exc.reason,
        )
        return UNKNOWN_VALUE


def _lookup_ordinal(table: dict[str, int], key: str, label: str, log) -> int:
    code: Optional[int] = table.get(label)
    if code is None:
        log.debug("Unmapped %s label %r; reporting %d", key, label, DEFAULT_ORDINAL)
        return DEFAULT_ORDINAL
    return code


def wifi_state_code(label: str, log) -> int:
    return _lookup_ordinal(WIFI_STATE_CODES, "WIFI", label, log)


def rssi_code(label: str, log) -> int:
    return _lookup_ordinal(RSSI_CODES, "RSSI", label, log)


def normalize(raw: RawSnapshot, log, now: datetime | None = None) -> NormalizedSnapshot:
    """Resolve every text field of ``raw``; one bad field never spoils the rest."""
    return NormalizedSnapshot(
        voltage_grid=float(raw.voltage_grid),
        voltage_battery=float(raw.voltage_battery),
        set_ac_power=float(raw.set_ac_power),
        temperature=float(raw.temperature),
        power_limit=float(raw.power_limit),
        sun2_round_trip_ms=unit_value_or_sentinel(
            "SUN2ROUNDTRIP", raw.sun2_round_trip, log, level=ROUND_TRIP_LOG_LEVEL
        ),
        sun2_set_point=float(raw.sun2_set_point),
        sun2_power_limit=float(raw.sun2_power_limit),
        sun3_round_trip_ms=unit_value_or_sentinel(
            "SUN3ROUNDTRIP", raw.sun3_round_trip, log, level=ROUND_TRIP_LOG_LEVEL
        ),
        sun3_set_point=float(raw.sun3_set_point),
        sun3_power_limit=float(raw.sun3_power_limit),
        meter_readout=float(raw.meter_readout),
        day_energy=float(raw.day_energy),
        total_energy=float(raw.total_energy),
        meter_day_energy=float(raw.meter_day_energy),
        ac_power=unit_value_or_sentinel("ACPOWER", raw.ac_power, log),
        ac_power_sun2=unit_value_or_sentinel("ACPOWERSUN2", raw.ac_power_sun2, log),
        ac_power_sun3=unit_value_or_sentinel("ACPOWERSUN3", raw.ac_power_sun3, log),
        zero_export_control_power=unit_value_or_sentinel("ZEPCPOWER", raw.zero_export_control_power, log),
        meter_power=unit_value_or_sentinel("METERPOWER", raw.meter_power, log),
        wifi_state=wifi_state_code(raw.wifi_state, log),
        rssi=rssi_code(raw.rssi, log),
        scraped_at=now or datetime.now(timezone.utc),
    )
