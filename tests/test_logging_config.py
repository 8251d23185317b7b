"""Tests for logging_config.py module."""

import logging

import colorlog
import pytest

from twitchplay.logging_config import (
    ErrorAggregator,
    LoggerConfigurator,
    error_aggregator,
    log_structured_error,
)


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield root
    root.handlers[:] = handlers
    root.setLevel(level)


class TestLoggerConfigurator:
    def test_configure_installs_colored_formatter(self, restore_root_logger, monkeypatch):
        monkeypatch.delenv("DEBUG", raising=False)
        formatter = LoggerConfigurator({"summary_on_exit": False}).configure()
        assert isinstance(formatter, colorlog.ColoredFormatter)
        assert restore_root_logger.level == logging.INFO
        assert any(h.formatter is formatter for h in restore_root_logger.handlers)

    def test_debug_env_enables_debug(self, restore_root_logger, monkeypatch):
        monkeypatch.setenv("DEBUG", "yes")
        LoggerConfigurator({"summary_on_exit": False}).configure()
        assert restore_root_logger.level == logging.DEBUG

    def test_summary_registered_on_exit(self, restore_root_logger, monkeypatch):
        registered = []
        monkeypatch.setattr("twitchplay.logging_config.atexit.register", registered.append)
        configurator = LoggerConfigurator()
        configurator.configure()
        assert registered == [configurator._log_final_error_summary]


class TestErrorAggregator:
    def test_record_and_summarize(self):
        agg = ErrorAggregator()
        agg.record_error("network", "down", {"host": "x"})
        agg.record_error("network", "down again")
        summary = agg.get_error_summary()
        assert summary["network"]["total_count"] == 2
        assert summary["network"]["recent_count"] == 2
        assert summary["network"]["last_occurrence"]["message"] == "down again"

    def test_cap_per_type(self):
        agg = ErrorAggregator(max_per_type=3)
        for i in range(10):
            agg.record_error("send", f"e{i}")
        assert agg.get_error_summary()["send"]["total_count"] == 3

    def test_summary_report(self, caplog):
        agg = ErrorAggregator()
        with caplog.at_level(logging.INFO):
            agg.log_summary_report()
        assert "No errors recorded" in caplog.text
        agg.record_error("auth", "rejected")
        with caplog.at_level(logging.WARNING):
            agg.log_summary_report()
        assert "auth: 1 total" in caplog.text


def test_log_structured_error_records(caplog):
    with caplog.at_level(logging.WARNING):
        log_structured_error(
            "send", "could not send", exception=OSError("pipe"), context={"line": "PRIVMSG"},
            level=logging.WARNING,
        )
    assert "[SEND] could not send | Exception: OSError: pipe | Context: line=PRIVMSG" in caplog.text
    assert error_aggregator.get_error_summary()["send"]["total_count"] == 1
