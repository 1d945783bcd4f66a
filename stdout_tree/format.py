"""
format.py

Human-friendly durations and proportional timing bars.
All times are integer nanoseconds.
"""

NS_PER_MS = 1_000_000
NS_PER_S = 1_000_000_000

SPAN_FILL = "="
EVENT_FILL = "·"


def format_duration(ns: int) -> str:
    """Convert nanoseconds to a compact string, truncating to whole units."""
    secs = ns // NS_PER_S
    if secs >= 7200:
        return f"{secs // 3600}h"
    elif secs >= 120:
        return f"{secs // 60}m"
    elif secs > 0:
        return f"{secs}s"
    elif ns // NS_PER_MS > 0:
        return f"{ns // NS_PER_MS}ms"
    else:
        return "0"


def _div_round(numerator: int, denominator: int) -> int:
    # exact, halves round up
    return (2 * numerator + denominator) // (2 * denominator)


def format_timing(
    available_width: int,
    parent_start: int,
    parent_duration: int,
    start: int,
    duration: int,
    fill_char: str = SPAN_FILL,
) -> str:
    """
    Draw an item's interval as a bar positioned within the parent interval.

    The result is exactly `available_width` characters long. Every item
    takes at least one character, and an item that would run past the
    end is shifted left instead of being cut.
    """
    if available_width <= 0:
        return ""
    if parent_duration <= 0:
        return fill_char * available_width

    fill_len = min(max(1, _div_round(duration * available_width, parent_duration)), available_width)
    start_len = _div_round((start - parent_start) * available_width, parent_duration)
    start_len = max(0, min(start_len, available_width - fill_len))
    return " " * start_len + fill_char * fill_len + " " * (available_width - start_len - fill_len)
