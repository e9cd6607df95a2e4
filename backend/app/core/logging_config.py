"""
Logging configuration for the marketplace API.
Every module logs through a child of the "backend" logger.
"""
import logging
import sys

from backend.app.core.config import settings

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"

# Third-party loggers that are too chatty at INFO
_QUIET_LOGGERS = ("sqlalchemy.engine", "httpx", "multipart")


def setup_logging(level: str | None = None) -> logging.Logger:
    """Configure stdout logging once at process start. Returns the app logger."""
    level_val = (level or settings.log_level).upper()
    logging.basicConfig(
        level=getattr(logging, level_val, logging.INFO),
        format=LOG_FORMAT,
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
    )
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    return logging.getLogger("backend")


def get_logger(name: str) -> logging.Logger:
    """Logger namespaced under backend, e.g. get_logger("api.jobs")."""
    return logging.getLogger(f"backend.{name}")
