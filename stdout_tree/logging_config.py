"""Logging configuration for the stdout-tree command line."""

import logging
import logging.config

from .config import resolve_log_level


def setup_logging(log_level: str | None = None) -> None:
    """
    Send log records to stderr; stdout carries the rendered traces.

    Args:
        log_level: DEBUG, INFO, WARNING, ERROR or CRITICAL.
                   Defaults to $STDOUT_TREE_LOG_LEVEL or WARNING.
    """
    logging_config = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "plain": {
                "format": "%(asctime)s %(levelname)s %(name)s: %(message)s",
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "plain",
                "stream": "ext://sys.stderr",
            },
        },
        "root": {
            "level": resolve_log_level(log_level),
            "handlers": ["console"],
        },
    }

    logging.config.dictConfig(logging_config)
