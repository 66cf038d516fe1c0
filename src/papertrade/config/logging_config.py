"""Logging setup for the API process."""

import logging
import sys

from papertrade.config.settings import get_settings

# Trades run on the server's worker threads, so the thread name is logged
LOG_FORMAT = "%(asctime)s %(levelname)-7s [%(threadName)s] %(name)s: %(message)s"

_QUIET_LOGGERS = ("sqlalchemy.engine", "yfinance", "urllib3", "peewee")


def setup_logging() -> None:
    """Send application logs to stdout at the configured level."""
    level = getattr(logging, get_settings().log_level.upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stdout)],
    )
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
