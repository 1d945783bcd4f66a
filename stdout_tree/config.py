"""Configuration defaults and environment lookups."""

import logging
import os

logger = logging.getLogger(__name__)

DEFAULT_TIMING_COLUMN_WIDTH = 0.2
DEFAULT_TERMINAL_WIDTH = 80
DEFAULT_LOG_LEVEL = "WARNING"

TIMING_COLUMN_WIDTH_ENV = "STDOUT_TREE_TIMING_COLUMN_WIDTH"
LOG_LEVEL_ENV = "STDOUT_TREE_LOG_LEVEL"


def resolve_timing_column_width(value: float | None = None) -> float:
    """
    Pick the fraction of the terminal used by the timing column.

    An explicit value wins, then $STDOUT_TREE_TIMING_COLUMN_WIDTH, then the default.
    """
    if value is not None:
        return value
    raw = os.environ.get(TIMING_COLUMN_WIDTH_ENV)
    if not raw:
        return DEFAULT_TIMING_COLUMN_WIDTH
    try:
        return float(raw)
    except ValueError:
        logger.warning(
            "Ignoring %s=%r, expected a number between 0 and 1",
            TIMING_COLUMN_WIDTH_ENV,
            raw,
        )
        return DEFAULT_TIMING_COLUMN_WIDTH


def resolve_log_level(value: str | None = None) -> str:
    if value:
        return value.upper()
    return os.environ.get(LOG_LEVEL_ENV, DEFAULT_LOG_LEVEL).upper()
