"""Logging for the viewer service.

Modules log through ``get_logger(__name__)`` and stay silent until the
application calls ``configure_logging`` at startup, which routes the
``zcash_viewer`` logger tree to stderr at the level from ``Settings``.
"""
import logging
import logging.config
from typing import Optional
from zcash_viewer.config import Settings, settings as default_settings

PACKAGE_LOGGER = "zcash_viewer"

_configured = False

logging.getLogger(PACKAGE_LOGGER).addHandler(logging.NullHandler())


def build_logging_config(config: Settings) -> dict:
    """``dictConfig`` schema for the package logger."""
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "plain": {"format": config.log_format},
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "plain",
                "stream": "ext://sys.stderr",
            },
        },
        "loggers": {
            PACKAGE_LOGGER: {
                "handlers": ["console"],
                "level": config.log_level.upper(),
                "propagate": False,
            },
        },
    }


def configure_logging(config: Optional[Settings] = None, force: bool = False):
    """Apply the logging configuration once per process, or again with ``force``."""
    global _configured
    if _configured and not force:
        return
    logging.config.dictConfig(build_logging_config(config or default_settings))
    _configured = True


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
