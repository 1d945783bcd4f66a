"""Tests for duration formatting and timing bars."""

import pytest

from stdout_tree.format import EVENT_FILL, format_duration, format_timing

from conftest import MS, S


class TestFormatDuration:
    """Tests for format_duration."""

    @pytest.mark.parametrize(
        "ns, expected",
        [
            (0, "0"),
            (1, "0"),
            (999_999, "0"),
            (10 * MS, "10ms"),
            (999 * MS, "999ms"),
            (35 * S, "35s"),
            (119 * S + 999 * MS, "119s"),
            (120 * S, "2m"),
            (7199 * S, "119m"),
            (7200 * S, "2h"),
            (9000 * S, "2h"),
        ],
    )
    def test_units(self, ns, expected):
        assert format_duration(ns) == expected


class TestFormatTiming:
    """Tests for format_timing."""

    def test_proportional_bar(self):
        assert format_timing(15, 0, 10 * S, 1 * S, 2 * S, "=") == "  ===          "

    def test_zero_width(self):
        assert format_timing(0, 0, 10 * S, 1 * S, 2 * S, "=") == ""

    def test_zero_parent_duration_fills_everything(self):
        assert format_timing(15, 5 * S, 0, 5 * S, 0, "=") == "=" * 15

    def test_zero_duration_takes_one_char(self):
        bar = format_timing(15, 0, 10 * S, 5 * S, 0, EVENT_FILL)
        assert len(bar) == 15
        assert bar.count(EVENT_FILL) == 1
        assert bar.index(EVENT_FILL) == 8

    def test_start_before_parent_clamps_to_zero(self):
        assert format_timing(15, 5 * S, 10 * S, 0, 2 * S, "=") == "===" + " " * 12

    def test_start_at_parent_end_shifts_left(self):
        assert format_timing(15, 0, 10 * S, 10 * S, 2 * S, "=") == " " * 12 + "==="

    def test_longer_than_parent_is_capped(self):
        assert format_timing(15, 0, 10 * S, 0, 20 * S, "=") == "=" * 15

    def test_full_parent(self):
        assert format_timing(13, 0, 10 * S, 0, 10 * S, "=") == "=" * 13
