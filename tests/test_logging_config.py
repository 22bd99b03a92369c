"""Tests for logging configuration."""

import io
import logging

import pytest

from rate_transient.logging_config import PACKAGE_LOGGER, configure_logging, get_logger


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Remove handlers installed by configure_logging after each test."""
    yield
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
        handler.close()
    package_logger.setLevel(logging.NOTSET)


class TestConfigureLogging:
    """Test package logger configuration."""

    def test_module_logger_writes_to_stream(self):
        """Test module loggers use the configured stream and format."""
        stream = io.StringIO()
        configure_logging(level=logging.DEBUG, format_string="%(name)s|%(message)s", stream=stream)

        get_logger("rate_transient.blasingame").debug("kept 4 of 10 points")

        assert stream.getvalue() == "rate_transient.blasingame|kept 4 of 10 points\n"

    def test_level_filters_messages(self):
        """Test messages below the level are dropped."""
        stream = io.StringIO()
        configure_logging(level=logging.WARNING, stream=stream)

        get_logger("rate_transient.rta").info("hidden")

        assert stream.getvalue() == ""

    def test_root_logger_untouched(self):
        """Test handlers are attached to the package logger only."""
        root_handlers = list(logging.getLogger().handlers)

        package_logger = configure_logging(stream=io.StringIO())

        assert package_logger.name == "rate_transient"
        assert logging.getLogger().handlers == root_handlers

    def test_reconfigure_replaces_handlers(self):
        """Test repeated configuration does not duplicate output."""
        stream = io.StringIO()
        configure_logging(stream=io.StringIO())
        configure_logging(format_string="%(message)s", stream=stream)

        get_logger("rate_transient.config").warning("once")

        assert stream.getvalue() == "once\n"
        assert len(logging.getLogger(PACKAGE_LOGGER).handlers) == 1

    def test_log_file(self, tmp_path):
        """Test logging to a file in a new directory."""
        log_file = tmp_path / "logs" / "rta.log"
        configure_logging(level=logging.INFO, stream=io.StringIO(), log_file=log_file)

        get_logger("rate_transient.rta").info("analysis done")

        for handler in logging.getLogger(PACKAGE_LOGGER).handlers:
            handler.flush()
        assert "analysis done" in log_file.read_text()


class TestGetLogger:
    """Test logger naming."""

    def test_package_module_name(self):
        """Test package module names are used as is."""
        assert get_logger("rate_transient.flow_regimes").name == "rate_transient.flow_regimes"

    def test_entry_point_name(self):
        """Test a '__main__' module logs under the package."""
        assert get_logger("__main__").name == "rate_transient.__main__"
