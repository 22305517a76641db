# trucki_exporter/tests/test_decoder.py

import json

import pytest

from trucki_exporter.models.snapshot import RawSnapshot
from trucki_exporter.services.decoder import FIELD_MAP, decode_snapshot
from trucki_exporter.services.errors import DecodeError, ScrapeError
from trucki_exporter.tests.fakes import LIVE_PAYLOAD


def test_decodes_every_known_key():
    raw = decode_snapshot(json.dumps(LIVE_PAYLOAD).encode("utf-8"))

    assert raw.voltage_grid == 230.1
    assert raw.voltage_battery == 52.3
    assert raw.set_ac_power == 460
    assert raw.temperature == 41
    assert raw.sun2_round_trip == "12 ms"
    assert raw.sun2_set_point == 120
    assert raw.meter_readout == 35
    assert raw.total_energy == 812.7
    assert raw.ac_power == "450 W"
    assert raw.meter_power == "-12.5 W"
    assert raw.wifi_state == "CONNECTED"
    assert raw.rssi == "Okay"


def test_field_map_covers_all_upstream_keys():
    assert len(FIELD_MAP) == 22
    attrs = {attr for attr, _ in FIELD_MAP.values()}
    assert attrs == set(RawSnapshot.__dataclass_fields__)


def test_missing_and_null_keys_take_zero_values():
    raw = decode_snapshot(b'{"VGRID": 229.5, "ACPOWER": null}')
    assert raw == RawSnapshot(voltage_grid=229.5)
    assert raw.ac_power == ""
    assert raw.temperature == 0


def test_integer_accepted_for_float_field():
    assert decode_snapshot(b'{"VBAT": 52}').voltage_battery == 52.0


@pytest.mark.parametrize(
    "body",
    [
        b'{"VGRID": "230 V"}',
        b'{"TEMP": 41.5}',
        b'{"TEMP": true}',
        b'{"ACPOWER": 450}',
        b'{"WIFI": ["CONNECTED"]}',
    ],
)
def test_mistyped_key_is_a_decode_error(body):
    with pytest.raises(DecodeError):
        decode_snapshot(body)


@pytest.mark.parametrize("body", [b"", b"not json", b'{"VGRID": 230.1', b"\xff\xfe\x00garbage"])
def test_invalid_json_is_a_decode_error(body):
    with pytest.raises(DecodeError):
        decode_snapshot(body)


@pytest.mark.parametrize(
    "body, constant",
    [
        (b'{"VGRID": NaN}', "NaN"),
        (b'{"VBAT": Infinity}', "Infinity"),
        (b'{"TOTALENERGY": -Infinity}', "-Infinity"),
    ],
)
def test_non_finite_literals_are_a_decode_error(body, constant):
    with pytest.raises(DecodeError, match=constant):
        decode_snapshot(body)


@pytest.mark.parametrize("body", [b"[]", b"42", b'"CONNECTED"', b"null"])
def test_non_object_document_is_a_decode_error(body):
    with pytest.raises(DecodeError):
        decode_snapshot(body)


def test_decode_error_is_a_scrape_error():
    with pytest.raises(ScrapeError):
        decode_snapshot(b"<html>")
