# trucki_exporter/models/snapshot.py
from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class RawSnapshot:
    """One decoded /jsonlive payload, typed but not yet normalized."""

    voltage_grid: float = 0.0
    voltage_battery: float = 0.0
    set_ac_power: int = 0
    temperature: int = 0
    power_limit: int = 0
    sun2_round_trip: str = ""     # e.g. "12 ms"
    sun2_set_point: int = 0
    sun2_power_limit: int = 0
    sun3_round_trip: str = ""
    sun3_set_point: int = 0
    sun3_power_limit: int = 0
    meter_readout: int = 0        # ms
    day_energy: float = 0.0       # kWh
    total_energy: float = 0.0
    meter_day_energy: float = 0.0
    ac_power: str = ""            # e.g. "450 W"
    ac_power_sun2: str = ""
    ac_power_sun3: str = ""
    zero_export_control_power: str = ""
    meter_power: str = ""
    wifi_state: str = ""
    rssi: str = ""


@dataclass(frozen=True)
class NormalizedSnapshot:
    voltage_grid: float
    voltage_battery: float
    set_ac_power: float
    temperature: float
    power_limit: float
    sun2_round_trip_ms: float     # carried, never published
    sun2_set_point: float
    sun2_power_limit: float
    sun3_round_trip_ms: float     # carried, never published
    sun3_set_point: float
    sun3_power_limit: float
    meter_readout: float
    day_energy: float
    total_energy: float
    meter_day_energy: float
    ac_power: float
    ac_power_sun2: float
    ac_power_sun3: float
    zero_export_control_power: float
    meter_power: float
    wifi_state: int
    rssi: int
    scraped_at: datetime
