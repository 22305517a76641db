# trucki_exporter/main.py

import configparser
import logging
import signal
import sys
import threading

from .cli import __version__, build_parser
from .config import DEFAULT_CONFIG_PATH, Config, apply_overrides, validate_exporter_config
from .logging import ConsoleLog

from .services.errors import ConfigError, ScrapeError
from .services.metric_sink import MetricSink
from .services.metrics_server import MetricsServer
from .services.output_formatter import emit_human, emit_json
from .services.poller import Poller
from .services.publisher import Publisher
from .services.snapshot_store import SnapshotStore
from .services.trucki_client import TruckiClient


def run_scrape(exporter_cfg, args, log) -> int:
    client = TruckiClient(exporter_cfg, log)
    try:
        snapshot = client.fetch_snapshot()
    except ScrapeError as exc:
        log.error("Failed to scrape Trucki stick: %s", exc)
        return 1

    if args.json:
        emit_json(snapshot)
    else:
        emit_human(snapshot)
    return 0


def run_serve(exporter_cfg, log, stop_event: threading.Event) -> int:
    if exporter_cfg.interval_is_default:
        log.info("No custom scrape interval provided, defaulting to %d seconds", exporter_cfg.interval)

    store = SnapshotStore()
    sink = MetricSink()
    Publisher(store, sink, log)

    client = TruckiClient(exporter_cfg, log)
    poller = Poller(client, store, exporter_cfg.interval, log)
    server = MetricsServer(sink.registry, exporter_cfg.listen, exporter_cfg.port, log)

    try:
        server.start()
    except OSError as exc:
        log.error("Failed to start HTTP server: %s", exc)
        return 1

    log.info(
        "Scraping Trucki stick at %s every %ds (timeout %.0fs)",
        client.url,
        exporter_cfg.interval,
        exporter_cfg.timeout,
    )
    poller.start()

    try:
        stop_event.wait()
    finally:
        log.info("Shutting down HTTP server...")
        server.shutdown()
        log.info("Waiting for poller to finish...")
        if not poller.stop(timeout=exporter_cfg.timeout + 1):
            log.warning("Poller did not finish in time")
        log.info("Exporter shutdown complete")
    return 0


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    config_required = args.config is not None
    try:
        app_cfg = Config.load(args.config or DEFAULT_CONFIG_PATH, required=config_required)
    except (ConfigError, FileNotFoundError, configparser.Error) as exc:
        parser.error(str(exc))

    console_logger = ConsoleLog(
        level="DEBUG" if args.debug else app_cfg.logging.console_level,
        quiet=args.quiet or app_cfg.logging.console_quiet,
        debug_modules=app_cfg.logging.debug_modules,
    )
    log = console_logger.setup()
    if args.debug:
        logging.getLogger("urllib3").setLevel(logging.INFO)

    log.info("trucki-exporter %s (python %s)", __version__, sys.version.split()[0])

    app_cfg = apply_overrides(
        app_cfg,
        target=args.target,
        timeout=args.timeout,
        port=getattr(args, "port", None),
        listen=getattr(args, "listen", None),
        interval=getattr(args, "interval", None),
    )

    try:
        exporter_cfg = validate_exporter_config(app_cfg.exporter)
    except ConfigError as exc:
        log.error("%s", exc)
        return 1

    if args.command == "scrape":
        return run_scrape(exporter_cfg, args, log)

    if args.command == "serve":
        stop_event = threading.Event()

        def _handle_signal(signum, frame):
            log.info("Received signal %s, initiating graceful shutdown...", signum)
            stop_event.set()

        signal.signal(signal.SIGTERM, _handle_signal)
        signal.signal(signal.SIGINT, _handle_signal)
        return run_serve(exporter_cfg, log, stop_event)

    raise ValueError(f"Unsupported command: {args.command}")


if __name__ == "__main__":
    sys.exit(main())
