from __future__ import annotations

import logging
import sys
from typing import Iterable

# Third-party loggers that are too chatty at DEBUG for a 5 second poll loop.
NOISY_LOGGERS = ("urllib3",)


def _default_logger_name() -> logging.Logger:
    return logging.getLogger("trucki")


class ConsoleLog:
    """Configure console logging for the application."""

    def __init__(self, level: str = "INFO", quiet: bool = False, debug_modules: Iterable[str] | None = None):
        self.level = level.upper()
        self.quiet = quiet
        self.debug_modules = list(debug_modules or [])

    def setup(self) -> logging.Logger:
        # The root level is the console threshold; debug_modules name loggers
        # ("trucki", "urllib3") that are let through at DEBUG regardless.
        root = logging.getLogger()
        root.handlers.clear()
        root.setLevel(getattr(logging, self.level, logging.INFO))

        if not self.quiet:
            handler = logging.StreamHandler(sys.stdout)
            fmt = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
            handler.setFormatter(logging.Formatter(fmt, datefmt="%Y-%m-%d %H:%M:%S"))
            root.addHandler(handler)

        for name in NOISY_LOGGERS:
            if name not in self.debug_modules:
                logging.getLogger(name).setLevel(logging.WARNING)

        for name in self.debug_modules:
            logging.getLogger(name).setLevel(logging.DEBUG)

        return _default_logger_name()


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
