"""
Logging configuration.

Sets up stdlib logging once for the whole application. Every module obtains
its logger through ``get_logger(__name__)`` so that the level and format are
controlled from a single place (``Settings.log_level``).
"""
import logging
import logging.config
from typing import Optional

SIMPLE_FORMAT = "%(levelname)s - %(name)s - %(message)s"
DETAILED_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s"


def build_logging_config(log_level: str = "INFO", debug: bool = False) -> dict:
    """Return the ``dictConfig`` mapping used by :func:`setup_logging`."""
    level = log_level.upper()
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "simple": {"format": SIMPLE_FORMAT},
            "detailed": {"format": DETAILED_FORMAT},
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "level": level,
                "formatter": "detailed" if debug else "simple",
                "stream": "ext://sys.stdout",
            },
        },
        "loggers": {
            "oficina": {
                "level": level,
                "handlers": ["console"],
                "propagate": False,
            },
            "sqlalchemy.engine": {
                "level": "INFO" if debug else "WARNING",
                "handlers": ["console"],
                "propagate": False,
            },
            "uvicorn.access": {
                "level": "INFO",
                "handlers": ["console"],
                "propagate": False,
            },
        },
        "root": {
            "level": "WARNING",
            "handlers": ["console"],
        },
    }


def setup_logging(log_level: Optional[str] = None, debug: Optional[bool] = None) -> None:
    """
    Configure logging for the application.

    Values not given explicitly are read from the application settings.
    """
    if log_level is None or debug is None:
        from oficina.config import get_settings

        settings = get_settings()
        log_level = log_level or settings.log_level
        debug = settings.debug if debug is None else debug

    logging.config.dictConfig(build_logging_config(log_level, debug))


def get_logger(name: str) -> logging.Logger:
    """Get a logger under the ``oficina`` namespace."""
    if not name.startswith("oficina"):
        name = f"oficina.{name}"
    return logging.getLogger(name)