# trucki_exporter/services/metric_sink.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional

from prometheus_client import CollectorRegistry, Gauge
from prometheus_client.gc_collector import GCCollector
from prometheus_client.platform_collector import PlatformCollector
from prometheus_client.process_collector import ProcessCollector


@dataclass(frozen=True)
class GaugeSpec:
    field: str        # NormalizedSnapshot attribute
    name: str
    documentation: str
    published: bool = True


GAUGES: tuple[GaugeSpec, ...] = (
    GaugeSpec("voltage_grid", "trucki_voltage_grid",
              "AC grid voltage (V) measured by the inverter"),
    GaugeSpec("voltage_battery", "trucki_voltage_battery",
              "DC battery voltage (V) measured by the inverter"),
    GaugeSpec("set_ac_power", "trucki_set_ac_power",
              "AC power output target in watts (W) set by Trucki stick"),
    GaugeSpec("temperature", "trucki_inverter_temperature",
              "Temperature of the inverter in celsius (°C)"),
    GaugeSpec("power_limit", "trucki_power_limit",
              "Inverter AC output power limit in watts (W) set by Trucki stick"),
    GaugeSpec("sun2_round_trip_ms", "trucki_sun_2_round_trip",
              "Latency or round trip time for a single packet to a second Lumentree (sun2) "
              "inverter in milliseconds (ms)",
              published=False),
    GaugeSpec("sun2_set_point", "trucki_sun_2_set_point",
              "Set point in watts (W) to grid for a second Lumentree (sun2) inverter"),
    GaugeSpec("sun2_power_limit", "trucki_sun_2_power_limit",
              "Max power limit in watts (W) for a second Lumentree (sun2) inverter"),
    GaugeSpec("sun3_round_trip_ms", "trucki_sun_3_round_trip",
              "Latency or round trip time for a single packet to a third Lumentree (sun3) "
              "inverter in milliseconds (ms)",
              published=False),
    GaugeSpec("sun3_set_point", "trucki_sun_3_set_point",
              "Set point in watts (W) to grid for a third Lumentree (sun3) inverter"),
    GaugeSpec("sun3_power_limit", "trucki_sun_3_power_limit",
              "Max power limit in watts (W) for a third Lumentree (sun3) inverter"),
    GaugeSpec("meter_readout", "trucki_power_meter_readout",
              "Latency or round trip time for a single packet to the power meter in milliseconds (ms)"),
    GaugeSpec("day_energy", "trucki_day_energy_grid_output",
              "Energy output of the Lumentree Sun inverter to the grid based on calendar day "
              "borders (not last 24 hours!) in kilowatthours (kWh)"),
    GaugeSpec("total_energy", "trucki_total_energy_grid_output",
              "Total energy output of the Lumentree Sun inverter to the grid in kilowatthours (kWh)"),
    GaugeSpec("meter_day_energy", "trucki_power_meter_day_energy",
              "Energy consumption measured by the power meter from the grid in kilowatthours (kWh)"),
    GaugeSpec("ac_power", "trucki_inverter_ac_power_output",
              "AC power output to the grid by the inverter in watts (W)"),
    GaugeSpec("ac_power_sun2", "trucki_sun_2_ac_power_output",
              "AC power output from a second Lumentree (sun2) inverter in watts (W)"),
    GaugeSpec("ac_power_sun3", "trucki_sun_3_ac_power_output",
              "AC power output from a third Lumentree (sun3) inverter in watts (W)"),
    GaugeSpec("zero_export_control_power", "trucki_zero_export_control_power",
              "Calculated zero-export-power-control output power calculated by Trucki in watts (W)"),
    GaugeSpec("meter_power", "trucki_power_meter_power",
              "Power consumption measured by the power meter in watts (W)"),
    GaugeSpec("wifi_state", "trucki_wifi_state",
              "WiFi state of the Trucki stick: 0 'DISCONNECTED'; 1 'CONNECTED'"),
    GaugeSpec("rssi", "trucki_wifi_rssi",
              "WiFi RSSI (received signal strength indicator) of the Trucki stick: "
              "0 'Unusable'; 1 'Not good'; 2 'Okay'; 3 'Very good'; 4 'Amazing'"),
)


def new_registry(runtime_collectors: bool = True) -> CollectorRegistry:
    """Fresh registry, optionally carrying the process, platform and GC collectors."""
    registry = CollectorRegistry()
    if runtime_collectors:
        ProcessCollector(registry=registry)
        PlatformCollector(registry=registry)
        GCCollector(registry=registry)
    return registry


class MetricSink:
    """
    The exporter's gauges. They are not registered on their own; the
    Publisher collects them so every exposition reflects one snapshot.
    """

    def __init__(self, registry: Optional[CollectorRegistry] = None):
        self.registry = registry if registry is not None else new_registry()
        self.specs: Dict[str, GaugeSpec] = {spec.field: spec for spec in GAUGES}
        self.gauges: Dict[str, Gauge] = {
            spec.field: Gauge(spec.name, spec.documentation, registry=None)
            for spec in GAUGES
        }

    # ------------------------------------------------------------------
    @property
    def published_fields(self) -> List[str]:
        return [spec.field for spec in GAUGES if spec.published]

    def set(self, field: str, value: float) -> None:
        self.gauges[field].set(value)

    def value(self, field: str) -> float:
        # Gauge has no public getter; collect() is the supported read path.
        for metric in self.gauges[field].collect():
            for sample in metric.samples:
                return sample.value
        return 0.0

    # ------------------------------------------------------------------
    def describe(self) -> Iterable:
        for gauge in self.gauges.values():
            yield from gauge.describe()

    def collect(self) -> Iterable:
        for gauge in self.gauges.values():
            yield from gauge.collect()
