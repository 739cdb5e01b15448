"""
JSON logging setup for hosts embedding the editor.

The library itself never configures logging; a host calls ``setup_logging``
once at startup. Records carry the ``command_type`` and ``address`` extras
that the dispatcher, executors and navigator attach.
"""

import logging
import logging.config

from pythonjsonlogger import jsonlogger

from xsdedit.config import editor_config


def build_logging_config(level: str | None = None) -> dict:
    """
    Build the dictConfig mapping used by setup_logging.

    Params:
        level: Log level name for the ``xsdedit`` logger; defaults to
            ``XSDEDIT_LOG_LEVEL``

    Returns:
        A ``logging.config.dictConfig`` compatible mapping
    """
    level = (level or editor_config.LOG_LEVEL).upper()
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "json": {
                "()": jsonlogger.JsonFormatter,
                "format": "%(asctime)s %(name)s %(levelname)s %(message)s %(command_type)s %(address)s",
            }
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "json",
                "stream": "ext://sys.stdout",
            }
        },
        "loggers": {
            "xsdedit": {
                "handlers": ["console"],
                "level": level,
                "propagate": False,
            }
        },
    }


def setup_logging(level: str | None = None) -> None:
    """Setup JSON logging for the ``xsdedit`` logger hierarchy."""
    logging.config.dictConfig(build_logging_config(level))
