# trucki_exporter/services/decoder.py

from __future__ import annotations

import json
from typing import Any, Dict

from trucki_exporter.models.snapshot import RawSnapshot
from trucki_exporter.services.errors import DecodeError


# JSON key -> (RawSnapshot attribute, expected kind)
FIELD_MAP: Dict[str, tuple[str, str]] = {
    "VGRID": ("voltage_grid", "float"),
    "VBAT": ("voltage_battery", "float"),
    "SETACPOWER": ("set_ac_power", "int"),
    "TEMP": ("temperature", "int"),
    "POWERLIMIT": ("power_limit", "int"),
    "SUN2ROUNDTRIP": ("sun2_round_trip", "str"),
    "SUN2SETPOINT": ("sun2_set_point", "int"),
    "SUN2POWERLIMIT": ("sun2_power_limit", "int"),
    "SUN3ROUNDTRIP": ("sun3_round_trip", "str"),
    "SUN3SETPOINT": ("sun3_set_point", "int"),
    "SUN3POWERLIMIT": ("sun3_power_limit", "int"),
    "METERREADOUT": ("meter_readout", "int"),
    "DAYENERGY": ("day_energy", "float"),
    "TOTALENERGY": ("total_energy", "float"),
    "METERDAYENERGY": ("meter_day_energy", "float"),
    "ACPOWER": ("ac_power", "str"),
    "ACPOWERSUN2": ("ac_power_sun2", "str"),
    "ACPOWERSUN3": ("ac_power_sun3", "str"),
    "ZEPCPOWER": ("zero_export_control_power", "str"),
    "METERPOWER": ("meter_power", "str"),
    "WIFI": ("wifi_state", "str"),
    "RSSI": ("rssi", "str"),
}


def _coerce(key: str, kind: str, value: Any) -> Any:
    # bool is an int subclass in Python but never a number in JSON
    if kind == "float":
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return float(value)
    elif kind == "int":
        if isinstance(value, int) and not isinstance(value, bool):
            return value
    elif isinstance(value, str):
        return value
    raise DecodeError(
        f"JSON key '{key}' has type {type(value).__name__}, expected {kind}"
    )


def _reject_constant(name: str):
    # json accepts NaN and Infinity, which are not JSON
    raise DecodeError(f"Trucki stick returned non-JSON constant {name}")


def decode_snapshot(body: bytes | str) -> RawSnapshot:
    """
    Decode a /jsonlive body into a RawSnapshot.

    Missing keys and nulls keep the zero value of their field; unknown keys
    are ignored. Invalid JSON, a non-object document or a mistyped key raise
    DecodeError.
    """
    try:
        document = json.loads(body, parse_constant=_reject_constant)
    except DecodeError:
        raise
    except (ValueError, UnicodeDecodeError) as exc:
        raise DecodeError(f"Trucki stick returned invalid JSON: {exc}") from exc

    if not isinstance(document, dict):
        raise DecodeError(
            f"Trucki stick returned a JSON {type(document).__name__}, expected an object"
        )

    fields: Dict[str, Any] = {}
    for key, (attr, kind) in FIELD_MAP.items():
        value = document.get(key)
        if value is None:
            continue
        fields[attr] = _coerce(key, kind, value)

    return RawSnapshot(**fields)
