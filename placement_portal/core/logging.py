"""
Logging configuration.

Console logging with either a plain formatter or a JSON formatter
(python-json-logger) selected by the LOG_JSON setting.
"""

import logging
import logging.config

from pythonjsonlogger import jsonlogger

from placement_portal.core.config import get_settings


def build_logging_config(level: str, use_json: bool) -> dict:
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "standard": {
                "format": "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
            },
            "json": {
                "()": jsonlogger.JsonFormatter,
                "format": "%(asctime)s %(levelname)s %(name)s %(message)s",
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "json" if use_json else "standard",
                "level": level,
            },
        },
        "loggers": {
            "placement_portal": {
                "handlers": ["console"],
                "level": level,
                "propagate": False,
            },
            "uvicorn.access": {
                "handlers": ["console"],
                "level": "INFO",
                "propagate": False,
            },
        },
    }


def setup_logging() -> logging.Logger:
    """Configure application logging. Safe to call more than once."""
    settings = get_settings()
    level = settings.log_level.upper()
    logging.config.dictConfig(build_logging_config(level, settings.log_json))
    logger = logging.getLogger("placement_portal")
    logger.debug("Logging initialized with level: %s", level)
    return logger
