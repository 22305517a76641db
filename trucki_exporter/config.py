# trucki_exporter/config.py
from dataclasses import dataclass, field, replace
from pathlib import Path
import configparser
import threading

from trucki_exporter.services.errors import ConfigError


DEFAULT_CONFIG_PATH = "trucki_exporter.conf"
DEFAULT_PORT = 8080
DEFAULT_INTERVAL = 5
DEFAULT_TIMEOUT = 15.0


@dataclass
class ExporterConfig:
    target: str | None = None
    port: int = DEFAULT_PORT
    listen: str = ""
    interval: int = DEFAULT_INTERVAL
    timeout: float = DEFAULT_TIMEOUT

    @property
    def interval_is_default(self) -> bool:
        return self.interval == DEFAULT_INTERVAL


@dataclass
class LoggingConfig:
    console_level: str = "INFO"
    console_quiet: bool = False
    debug_modules: list[str] = field(default_factory=list)


@dataclass
class AppConfig:
    exporter: ExporterConfig
    logging: LoggingConfig


def validate_exporter_config(cfg: ExporterConfig, require_target: bool = True) -> ExporterConfig:
    """Raise ConfigError for anything that must stop the process before polling starts."""
    if require_target and not (cfg.target or "").strip():
        raise ConfigError(
            "No Trucki stick hostname set, please provide the Trucki stick IP address "
            "or hostname with -t/--target or [exporter] target"
        )
    if isinstance(cfg.interval, bool) or not isinstance(cfg.interval, int) or cfg.interval < 1:
        raise ConfigError(
            f"Invalid scrape interval {cfg.interval!r}, please provide a number in seconds "
            "larger than zero"
        )
    if cfg.interval > threading.TIMEOUT_MAX:
        raise ConfigError(
            f"Invalid scrape interval {cfg.interval}, must be at most "
            f"{threading.TIMEOUT_MAX:.0f} seconds"
        )
    if not 0 <= cfg.port <= 65535:
        raise ConfigError(f"Listen port must be between 0 and 65535, got {cfg.port}")
    if not cfg.timeout > 0:
        raise ConfigError(f"Request timeout must be > 0 seconds, got {cfg.timeout}")
    return cfg


class Config:
    def __init__(self, path: str):
        self.path = Path(path)
        self.parser = configparser.ConfigParser(inline_comment_prefixes=("#",))
        read = self.parser.read(self.path)
        if not read:
            raise FileNotFoundError(f"Config file not found: {self.path}")

    @classmethod
    def load(cls, path: str | None, required: bool = True) -> AppConfig:
        """
        Load an INI config file. With ``required=False`` a missing file yields
        the defaults, so the exporter can run from CLI flags alone.
        """
        if path is None or (not required and not Path(path).exists()):
            return AppConfig(exporter=ExporterConfig(), logging=LoggingConfig())

        cfg = cls(path)
        p = cfg.parser

        def _as_bool(value: str) -> bool:
            return value.strip().lower() == "true"

        def _as_int(section: str, key: str, raw: str) -> int:
            try:
                return int(raw)
            except ValueError:
                raise ConfigError(f"[{section}] {key} must be an integer, got {raw!r}") from None

        def _as_float(section: str, key: str, raw: str) -> float:
            try:
                return float(raw)
            except ValueError:
                raise ConfigError(f"[{section}] {key} must be a number, got {raw!r}") from None

        # --- Exporter ---
        exporter_kwargs = {}
        if "exporter" in p:
            exp_sec = p["exporter"]
            if exp_sec.get("target", "").strip():
                exporter_kwargs["target"] = exp_sec["target"].strip()
            if "port" in exp_sec:
                exporter_kwargs["port"] = _as_int("exporter", "port", exp_sec["port"])
            if "listen" in exp_sec:
                exporter_kwargs["listen"] = exp_sec["listen"].strip()
            if "interval" in exp_sec:
                exporter_kwargs["interval"] = _as_int("exporter", "interval", exp_sec["interval"])
            if "timeout" in exp_sec:
                exporter_kwargs["timeout"] = _as_float("exporter", "timeout", exp_sec["timeout"])
        exporter_cfg = ExporterConfig(**exporter_kwargs)

        # --- Logging ---
        logging_kwargs = {}
        if "logging" in p:
            logging_sec = p["logging"]
            if "console_level" in logging_sec:
                logging_kwargs["console_level"] = logging_sec["console_level"]
            if "console_quiet" in logging_sec:
                logging_kwargs["console_quiet"] = _as_bool(logging_sec["console_quiet"])
            if "debug_modules" in logging_sec:
                raw = logging_sec["debug_modules"]
                logging_kwargs["debug_modules"] = [x.strip() for x in raw.split(",") if x.strip()]
        logging_cfg = LoggingConfig(**logging_kwargs)

        return AppConfig(exporter=exporter_cfg, logging=logging_cfg)


def apply_overrides(app_cfg: AppConfig, **overrides) -> AppConfig:
    """Return a copy with every non-None override applied to the exporter section."""
    changes = {k: v for k, v in overrides.items() if v is not None}
    if not changes:
        return app_cfg
    return replace(app_cfg, exporter=replace(app_cfg.exporter, **changes))
