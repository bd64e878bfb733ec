"""Logging setup for RegDesk: INFO to stdout, WARNING and above to stderr"""

import logging
import sys

from regdesk.config import config

LOG_FORMAT = "%(asctime)s %(levelname)s [{environment}] %(name)s: %(message)s"

# Chatty libraries kept at WARNING unless the app itself runs at DEBUG
NOISY_LOGGERS = ["httpx", "httpcore", "authlib", "uvicorn.access", "sqlalchemy.engine"]


class BelowWarningFilter(logging.Filter):
    def filter(self, record):
        return record.levelno < logging.WARNING


def _handler(stream, level: int, formatter: logging.Formatter) -> logging.Handler:
    handler = logging.StreamHandler(stream)
    handler.setLevel(level)
    handler.setFormatter(formatter)
    return handler


def setup_logging(level_name: str = None):
    """
    Configure the root logger once for the process.

    Registration and admin events are INFO and go to stdout. Blocked forms
    (WARNING) and backend failures (ERROR) go to stderr so the platform can
    alert on them.
    """
    level_name = (level_name or config.get("log_level") or "INFO").upper()
    level = getattr(logging, level_name, logging.INFO)

    formatter = logging.Formatter(
        LOG_FORMAT.format(environment=config.get("environment", "development"))
    )

    stdout_handler = _handler(sys.stdout, logging.DEBUG, formatter)
    stdout_handler.addFilter(BelowWarningFilter())
    stderr_handler = _handler(sys.stderr, logging.WARNING, formatter)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()
    root_logger.addHandler(stdout_handler)
    root_logger.addHandler(stderr_handler)

    quiet_level = logging.DEBUG if level <= logging.DEBUG else logging.WARNING
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(quiet_level)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
