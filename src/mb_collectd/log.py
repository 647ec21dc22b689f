"""Logging configuration for mb-collectd."""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

_FORMATTER = logging.Formatter(fmt="%(asctime)s %(levelname)-8s %(name)s: %(message)s", datefmt="%Y-%m-%d %H:%M:%S")


def setup_logging(log_path: Path, *, debug: bool = False) -> None:
    """Attach a rotating file handler to the package logger, plus stderr output in debug mode.

    Idempotent: does nothing once handlers are attached. The file receives INFO and above,
    or every wire exchange (DEBUG) when debug is set.
    """
    pkg_logger = logging.getLogger("mb_collectd")
    if pkg_logger.handlers:
        return

    file_handler = RotatingFileHandler(log_path, maxBytes=1_000_000, backupCount=3)
    file_handler.setFormatter(_FORMATTER)
    pkg_logger.addHandler(file_handler)

    if debug:
        stderr_handler = logging.StreamHandler(sys.stderr)
        stderr_handler.setFormatter(_FORMATTER)
        pkg_logger.addHandler(stderr_handler)

    pkg_logger.setLevel(logging.DEBUG if debug else logging.INFO)
