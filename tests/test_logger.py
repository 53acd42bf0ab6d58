"""
Tests for logger functionality.
"""

import logging

import pytest
from jokevault.logger import StructuredLogger, get_logger, reset_logger


class TestStructuredLogger:
    """Test structured logging functionality."""

    def test_logger_creation(self, tmp_path):
        """Logger should be created with default settings."""
        logger = StructuredLogger(
            name="test",
            level="INFO",
            log_dir=tmp_path,
            enable_console=False,
        )

        assert logger.logger.name == "test"
        assert logger.metrics["api_calls"] == 0
        assert logger.logger.handlers == []

    def test_log_methods(self, tmp_path):
        """All log level methods should work."""
        logger = StructuredLogger(
            name="test",
            log_dir=tmp_path,
            enable_console=False,
        )

        # Should not raise exceptions
        logger.debug("Debug message")
        logger.info("Info message")
        logger.warning("Warning message")
        logger.error("Error message")
        logger.critical("Critical message")

    def test_log_with_context(self, caplog):
        """Logging with context should include extra data."""
        logger = StructuredLogger(name="test", enable_console=False)

        with caplog.at_level(logging.INFO):
            logger.info("Message with context", joke_id="abc", count=5)

        assert 'Context: {"joke_id": "abc", "count": 5}' in caplog.text

    def test_console_goes_to_stderr(self, capsys):
        """Diagnostics belong on the error stream."""
        logger = StructuredLogger(name="test-console")
        logger.error("Something bad happened: boom")

        captured = capsys.readouterr()
        assert "Something bad happened: boom" in captured.err
        assert captured.out == ""

    def test_metrics_tracking(self):
        """Metrics should be tracked correctly."""
        logger = StructuredLogger(name="test", enable_console=False)

        logger.record_api_call()
        logger.record_api_call()
        logger.record_fetch()
        logger.record_fetch(explicit=True)
        logger.record_duplicate()
        logger.record_stored(2)
        logger.record_deleted(5)
        logger.record_error("ApiError")
        logger.record_error("ApiError")

        metrics = logger.get_metrics()

        assert metrics["api_calls"] == 2
        assert metrics["jokes_fetched"] == 2
        assert metrics["explicit_accepted"] == 1
        assert metrics["duplicates_skipped"] == 1
        assert metrics["jokes_stored"] == 2
        assert metrics["jokes_deleted"] == 5
        assert metrics["errors_by_type"]["ApiError"] == 2

    def test_get_metrics_returns_copy(self):
        logger = StructuredLogger(name="test", enable_console=False)
        logger.record_error("ApiError")

        metrics = logger.get_metrics()
        metrics["errors_by_type"]["ApiError"] = 99

        assert logger.metrics["errors_by_type"]["ApiError"] == 1

    def test_reset_metrics(self):
        logger = StructuredLogger(name="test", enable_console=False)
        logger.record_api_call()

        logger.reset_metrics()

        assert logger.metrics["api_calls"] == 0

    def test_metrics_summary(self, caplog):
        logger = StructuredLogger(name="test", enable_console=False)
        logger.record_stored(3)
        logger.record_error("TooManyJokesError")

        with caplog.at_level(logging.INFO):
            logger.log_metrics_summary()

        assert "Jokes: 3 stored" in caplog.text
        assert "TooManyJokesError: 1" in caplog.text

    def test_log_file_creation(self, tmp_path):
        """Log file should be created in specified directory."""
        logger = StructuredLogger(
            name="test",
            log_dir=tmp_path,
            enable_file=True,
            enable_console=False,
        )

        logger.info("Test message")

        log_files = list(tmp_path.glob("*.log"))
        assert len(log_files) == 1
        assert log_files[0].name.startswith("test_")
        assert "Test message" in log_files[0].read_text()

    def test_configure_replaces_handlers(self, tmp_path):
        """Reconfiguring should not stack handlers."""
        logger = StructuredLogger(name="test", log_dir=tmp_path, enable_file=True)
        logger.configure(level="DEBUG", log_dir=tmp_path, enable_file=True)

        assert len(logger.logger.handlers) == 2
        assert logger.logger.level == logging.DEBUG

        logger.configure(enable_console=False)
        assert logger.logger.handlers == []

    def test_sql_logging_uses_same_handlers(self):
        logger = StructuredLogger(name="test-sql")
        logger.enable_sql_logging()

        sql_logger = logging.getLogger("sqlalchemy.engine")
        try:
            assert sql_logger.level == logging.INFO
            assert logger.logger.handlers[0] in sql_logger.handlers
        finally:
            for handler in logger.logger.handlers:
                sql_logger.removeHandler(handler)
            sql_logger.setLevel(logging.NOTSET)


class TestGlobalLogger:
    """Test global logger singleton."""

    def test_get_logger_singleton(self):
        """get_logger should return same instance."""
        reset_logger()  # Start fresh

        logger1 = get_logger(enable_console=False)
        logger2 = get_logger()

        assert logger1 is logger2

    def test_reset_logger(self):
        """reset_logger should create new instance."""
        reset_logger()

        logger1 = get_logger(enable_console=False)
        logger1.record_api_call()

        reset_logger()

        logger2 = get_logger(enable_console=False)

        # Should be different instance with fresh metrics
        assert logger2 is not logger1
        assert logger2.metrics["api_calls"] == 0
