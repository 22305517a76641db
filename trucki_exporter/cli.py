# trucki_exporter/cli.py
import argparse

from trucki_exporter.config import DEFAULT_CONFIG_PATH

__version__ = "0.1.0"


def _add_target(parser):
    parser.add_argument(
        "-t", "--target",
        help="Trucki stick IP address or hostname, eg. 192.168.178.58",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        help="HTTP timeout in seconds for one scrape (default 15)",
    )


def build_parser():
    parser = argparse.ArgumentParser(
        prog="trucki-exporter",
        description="Prometheus exporter for the Trucki stick"
    )

    parser.add_argument(
        "--config",
        default=None,
        help=f"Path to configuration file (default: {DEFAULT_CONFIG_PATH} if present)"
    )

    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable verbose debug logging"
    )

    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress stdout output"
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    sub = parser.add_subparsers(dest="command", required=True)

    # Long-running exporter
    cmd_serve = sub.add_parser("serve", help="Poll the Trucki stick and serve /metrics")
    _add_target(cmd_serve)
    cmd_serve.add_argument(
        "-p", "--port",
        type=int,
        help="HTTP listen port for /metrics (default 8080)",
    )
    cmd_serve.add_argument(
        "--listen",
        help="Address to bind the metrics server to (default: all interfaces)",
    )
    cmd_serve.add_argument(
        "-i", "--interval",
        type=int,
        help="Scrape interval in seconds (default 5)",
    )

    # One-shot scrape
    cmd_scrape = sub.add_parser(
        "scrape",
        help="Scrape the Trucki stick once and print the normalized values",
    )
    _add_target(cmd_scrape)
    cmd_scrape.add_argument(
        "--json",
        action="store_true",
        help="Emit JSON instead of human-readable text"
    )

    return parser
