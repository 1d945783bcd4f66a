"""Tests for configuration lookups."""

import logging

from stdout_tree.config import DEFAULT_TIMING_COLUMN_WIDTH, resolve_log_level, resolve_timing_column_width


class TestTimingColumnWidth:
    """Tests for resolve_timing_column_width."""

    def test_explicit_value_wins(self, monkeypatch):
        monkeypatch.setenv("STDOUT_TREE_TIMING_COLUMN_WIDTH", "0.7")
        assert resolve_timing_column_width(0.1) == 0.1

    def test_environment(self, monkeypatch):
        monkeypatch.setenv("STDOUT_TREE_TIMING_COLUMN_WIDTH", "0.7")
        assert resolve_timing_column_width() == 0.7

    def test_default(self, monkeypatch):
        monkeypatch.delenv("STDOUT_TREE_TIMING_COLUMN_WIDTH", raising=False)
        assert resolve_timing_column_width() == DEFAULT_TIMING_COLUMN_WIDTH == 0.2

    def test_invalid_environment(self, monkeypatch, caplog):
        monkeypatch.setenv("STDOUT_TREE_TIMING_COLUMN_WIDTH", "wide")
        with caplog.at_level(logging.WARNING, logger="stdout_tree.config"):
            assert resolve_timing_column_width() == DEFAULT_TIMING_COLUMN_WIDTH
        assert "STDOUT_TREE_TIMING_COLUMN_WIDTH" in caplog.text


class TestLogLevel:
    """Tests for resolve_log_level."""

    def test_levels(self, monkeypatch):
        monkeypatch.delenv("STDOUT_TREE_LOG_LEVEL", raising=False)
        assert resolve_log_level() == "WARNING"
        assert resolve_log_level("debug") == "DEBUG"
        monkeypatch.setenv("STDOUT_TREE_LOG_LEVEL", "info")
        assert resolve_log_level() == "INFO"
