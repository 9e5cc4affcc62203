"""
Logging for the job board backend.

Every module logs through get_logger("<area>.<module>"), which hangs off the
"backend" logger; setup_logging() attaches one stdout handler there and sets
levels for the app and its noisy dependencies.
"""
import logging
import sys

from backend.app.core.config import settings

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Third-party loggers capped at WARNING
_QUIET_LOGGERS = ("sqlalchemy.engine", "botocore", "boto3", "urllib3", "multipart")


def _level(value: str) -> int:
    return getattr(logging, (value or "INFO").upper(), logging.INFO)


def setup_logging(level: str | None = None) -> logging.Logger:
    """Configure the backend logger tree. Safe to call more than once."""
    app_logger = logging.getLogger("backend")
    app_logger.setLevel(_level(level or settings.log_level))
    if not any(getattr(h, "_jobboard", False) for h in app_logger.handlers):
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
        handler._jobboard = True
        app_logger.addHandler(handler)
    app_logger.propagate = False

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    return app_logger


def get_logger(name: str) -> logging.Logger:
    """Logger for a module, e.g. get_logger("services.profile") -> "backend.services.profile"."""
    return logging.getLogger(f"backend.{name}")
