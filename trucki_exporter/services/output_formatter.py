# trucki_exporter/services/output_formatter.py

from __future__ import annotations

import json

from trucki_exporter.models.snapshot import NormalizedSnapshot
from trucki_exporter.services.normalizer import RSSI_CODES, UNKNOWN_VALUE, WIFI_STATE_CODES


def _label_for(table: dict[str, int], code: int) -> str | None:
    for label, value in table.items():
        if value == code:
            return label
    return None


def snapshot_to_dict(snapshot: NormalizedSnapshot) -> dict:
    return {
        "scraped_at": snapshot.scraped_at.isoformat(),
        "voltage_grid_v": snapshot.voltage_grid,
        "voltage_battery_v": snapshot.voltage_battery,
        "set_ac_power_w": snapshot.set_ac_power,
        "temperature_c": snapshot.temperature,
        "power_limit_w": snapshot.power_limit,
        "ac_power_w": snapshot.ac_power,
        "sun2": {
            "ac_power_w": snapshot.ac_power_sun2,
            "set_point_w": snapshot.sun2_set_point,
            "power_limit_w": snapshot.sun2_power_limit,
            "round_trip_ms": snapshot.sun2_round_trip_ms,
        },
        "sun3": {
            "ac_power_w": snapshot.ac_power_sun3,
            "set_point_w": snapshot.sun3_set_point,
            "power_limit_w": snapshot.sun3_power_limit,
            "round_trip_ms": snapshot.sun3_round_trip_ms,
        },
        "zero_export_control_power_w": snapshot.zero_export_control_power,
        "meter": {
            "power_w": snapshot.meter_power,
            "readout_ms": snapshot.meter_readout,
            "day_energy_kwh": snapshot.meter_day_energy,
        },
        "day_energy_kwh": snapshot.day_energy,
        "total_energy_kwh": snapshot.total_energy,
        "wifi_state": snapshot.wifi_state,
        "wifi_rssi": snapshot.rssi,
    }


def emit_json(snapshot: NormalizedSnapshot) -> None:
    print(json.dumps(snapshot_to_dict(snapshot), indent=2))


def _watts(value: float) -> str:
    return "n/a" if value == UNKNOWN_VALUE else f"{value:.0f}W"


def format_human(snapshot: NormalizedSnapshot) -> list[str]:
    wifi = _label_for(WIFI_STATE_CODES, snapshot.wifi_state) or "?"
    rssi = _label_for(RSSI_CODES, snapshot.rssi) or "?"
    lines = [
        f"Trucki @ {snapshot.scraped_at.isoformat()}",
        f"[grid] V={snapshot.voltage_grid:.1f}V  battery={snapshot.voltage_battery:.1f}V  "
        f"temp={snapshot.temperature:.0f}C",
        f"[inverter] AC={_watts(snapshot.ac_power)}  target={snapshot.set_ac_power:.0f}W  "
        f"limit={snapshot.power_limit:.0f}W  zepc={_watts(snapshot.zero_export_control_power)}",
        f"[sun2] AC={_watts(snapshot.ac_power_sun2)}  set_point={snapshot.sun2_set_point:.0f}W  "
        f"limit={snapshot.sun2_power_limit:.0f}W",
        f"[sun3] AC={_watts(snapshot.ac_power_sun3)}  set_point={snapshot.sun3_set_point:.0f}W  "
        f"limit={snapshot.sun3_power_limit:.0f}W",
        f"[meter] P={_watts(snapshot.meter_power)}  readout={snapshot.meter_readout:.0f}ms  "
        f"day={snapshot.meter_day_energy:.2f}kWh",
        f"[energy] day={snapshot.day_energy:.2f}kWh  total={snapshot.total_energy:.2f}kWh",
        f"[wifi] state={wifi} ({snapshot.wifi_state})  rssi={rssi} ({snapshot.rssi})",
    ]
    return lines


def emit_human(snapshot: NormalizedSnapshot) -> None:
    for line in format_human(snapshot):
        print(line)
