# trucki_exporter/tests/test_config.py

import pytest

from trucki_exporter.config import (
    AppConfig,
    Config,
    ExporterConfig,
    LoggingConfig,
    apply_overrides,
    validate_exporter_config,
)
from trucki_exporter.services.errors import ConfigError

CONF = """
[exporter]
target = 192.168.178.58
port = 9101
listen = 127.0.0.1
interval = 15   # seconds
timeout = 7.5

[logging]
console_level = DEBUG
console_quiet = true
debug_modules = trucki_exporter.services.poller, urllib3
"""


def test_load_full_config(tmp_path):
    conf_path = tmp_path / "trucki.conf"
    conf_path.write_text(CONF)
    cfg = Config.load(str(conf_path))

    assert cfg.exporter == ExporterConfig(
        target="192.168.178.58", port=9101, listen="127.0.0.1", interval=15, timeout=7.5
    )
    assert cfg.logging.console_level == "DEBUG"
    assert cfg.logging.console_quiet is True
    assert cfg.logging.debug_modules == ["trucki_exporter.services.poller", "urllib3"]


def test_defaults_when_sections_missing(tmp_path):
    conf_path = tmp_path / "trucki.conf"
    conf_path.write_text("[other]\nkey = value\n")
    cfg = Config.load(str(conf_path))
    assert cfg.exporter == ExporterConfig()
    assert cfg.exporter.interval == 5
    assert cfg.exporter.timeout == 15.0
    assert cfg.exporter.port == 8080
    assert cfg.exporter.target is None


def test_missing_required_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        Config.load(str(tmp_path / "nope.conf"))


def test_missing_optional_file_gives_defaults(tmp_path):
    cfg = Config.load(str(tmp_path / "nope.conf"), required=False)
    assert cfg == AppConfig(exporter=ExporterConfig(), logging=LoggingConfig())


def test_non_numeric_interval_is_config_error(tmp_path):
    conf_path = tmp_path / "trucki.conf"
    conf_path.write_text("[exporter]\ninterval = often\n")
    with pytest.raises(ConfigError):
        Config.load(str(conf_path))


def test_overrides_win_over_file_values():
    base = AppConfig(exporter=ExporterConfig(target="a", interval=10), logging=LoggingConfig())
    cfg = apply_overrides(base, target="b", interval=None, port=9000)
    assert cfg.exporter.target == "b"
    assert cfg.exporter.interval == 10
    assert cfg.exporter.port == 9000
    assert base.exporter.target == "a"


def test_missing_target_is_fatal():
    with pytest.raises(ConfigError, match="hostname"):
        validate_exporter_config(ExporterConfig(target=None))
    with pytest.raises(ConfigError):
        validate_exporter_config(ExporterConfig(target="   "))


@pytest.mark.parametrize("interval", [0, -3])
def test_non_positive_interval_is_fatal(interval):
    with pytest.raises(ConfigError, match="interval"):
        validate_exporter_config(ExporterConfig(target="t", interval=interval))


def test_interval_above_wait_limit_is_fatal():
    with pytest.raises(ConfigError, match="at most"):
        validate_exporter_config(ExporterConfig(target="t", interval=10_000_000_000))


def test_default_interval_is_flagged():
    cfg = validate_exporter_config(ExporterConfig(target="t"))
    assert cfg.interval_is_default
    assert not ExporterConfig(target="t", interval=6).interval_is_default


@pytest.mark.parametrize("kwargs", [{"port": 70000}, {"port": -1}, {"timeout": 0}])
def test_invalid_port_or_timeout_is_fatal(kwargs):
    with pytest.raises(ConfigError):
        validate_exporter_config(ExporterConfig(target="t", **kwargs))
