"""Tests for logging helpers."""
import logging

from statement_categoriser.utils.logger import log_categorisation_audit, setup_logger


class TestSetupLogger:
    """Test logger configuration."""

    def test_file_and_console_handlers(self, tmp_path):
        """Test both handlers are attached and the log file is created."""
        log_file = tmp_path / "logs" / "test.log"
        logger = setup_logger("statement_categoriser.test_handlers", log_file=log_file)

        assert len(logger.handlers) == 2
        assert log_file.exists()

    def test_console_only(self):
        """Test no file handler when log_file is None."""
        logger = setup_logger("statement_categoriser.test_console", log_file=None)

        assert len(logger.handlers) == 1

    def test_handlers_not_duplicated(self, tmp_path):
        """Test repeated setup returns the configured logger."""
        name = "statement_categoriser.test_repeat"
        setup_logger(name, log_file=None)
        logger = setup_logger(name, log_file=tmp_path / "other.log")

        assert len(logger.handlers) == 1


class TestAuditLog:
    """Test audit trail entries."""

    def test_success_entry(self, caplog):
        """Test a successful run is logged as one structured line."""
        with caplog.at_level(logging.INFO, logger="statement_categoriser.audit"):
            log_categorisation_audit("statement.csv", True, transaction_count=12, skipped_rows=1, needs_homework=3)

        message = caplog.records[-1].getMessage()
        assert message.startswith("AUDIT: timestamp=")
        assert "source=statement.csv" in message
        assert "transactions=12 | skipped=1 | homework=3" in message
        assert "error=" not in message

    def test_failure_entry(self, caplog):
        """Test failures include the error."""
        with caplog.at_level(logging.INFO, logger="statement_categoriser.audit"):
            log_categorisation_audit("<text>", False, error="File appears empty or has no data rows.")

        assert "error=File appears empty or has no data rows." in caplog.records[-1].getMessage()
