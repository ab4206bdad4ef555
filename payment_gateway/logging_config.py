import logging
from logging.config import dictConfig
from typing import Any, Dict


def build_logging_config(level: str = "INFO") -> Dict[str, Any]:
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "default": {
                "()": "uvicorn.logging.DefaultFormatter",
                "fmt": "%(asctime)s | %(name)s:%(lineno)d | %(levelprefix)s %(message)s",
                "use_colors": None,
            },
        },
        "handlers": {
            "default": {
                "formatter": "default",
                "class": "logging.StreamHandler",
                "stream": "ext://sys.stdout",
            },
        },
        "loggers": {
            "payment_gateway": {"handlers": ["default"], "level": level, "propagate": False},
            "uvicorn.error": {"level": level},
            "uvicorn.access": {"level": "WARNING"},
        },
    }


def configure_logging(level: str = "INFO") -> None:
    """Apply the logging configuration; safe to call more than once."""
    dictConfig(build_logging_config(level.upper()))
    logging.getLogger(__name__).debug("Logging configured at level %s", level)
