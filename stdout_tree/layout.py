"""
Column layout for tree lines.

    <label ..................><status><duration><timing bar>
"""

from typing import NamedTuple

# Whitespace between two columns.
COLUMN_GAP = 2

# Longest expected status is an HTTP status code, i.e. 3 digits.
STATUS_WIDTH = 3 + COLUMN_GAP

# Longest expected duration is 3 digits plus a 1-2 character unit, e.g. 999ms.
DURATION_WIDTH = 5 + COLUMN_GAP

MIN_LABEL_WIDTH = 10


class Columns(NamedTuple):
    label_width: int
    status_width: int
    duration_width: int
    timing_width: int

    @property
    def event_label_width(self) -> int:
        """Events have no status or duration, their label spans all three."""
        return self.label_width + self.status_width + self.duration_width

    @property
    def bar_width(self) -> int:
        """Room for the timing bar itself, without the leading gap."""
        return max(0, self.timing_width - COLUMN_GAP)


def compute_columns(terminal_width: int, timing_fraction: float) -> Columns:
    """Split the terminal width, never squeezing the label below MIN_LABEL_WIDTH."""
    max_timing = terminal_width - MIN_LABEL_WIDTH - STATUS_WIDTH - DURATION_WIDTH
    timing_width = int(terminal_width * timing_fraction + 0.5)
    timing_width = max(0, min(timing_width, max_timing))
    return Columns(
        label_width=terminal_width - STATUS_WIDTH - DURATION_WIDTH - timing_width,
        status_width=STATUS_WIDTH,
        duration_width=DURATION_WIDTH,
        timing_width=timing_width,
    )
