"""Logging configuration for the application."""
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional

from ..config.settings import LOG_LEVEL, LOG_FILE

FILE_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(filename)s:%(lineno)d - %(message)s'
CONSOLE_FORMAT = '%(levelname)s [%(name)s]: %(message)s'


def setup_logger(
    name: str = "statement_categoriser",
    log_file: Optional[Path] = LOG_FILE,
    console_level: int = logging.WARNING
) -> logging.Logger:
    """
    Configure the package logger once.

    The console only shows warnings by default so it doesn't interleave
    with the CLI's rich output; the log file gets everything.

    Args:
        name: Logger name (child loggers inherit its handlers)
        log_file: File for DEBUG output, or None for console only
        console_level: Minimum level echoed to stderr

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)

    # Already configured
    if logger.handlers:
        return logger

    logger.setLevel(getattr(logging, LOG_LEVEL.upper(), logging.INFO))

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(console_level)
    console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    logger.addHandler(console_handler)

    if log_file is None:
        return logger

    try:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding='utf-8')
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt='%Y-%m-%d %H:%M:%S'))
        logger.addHandler(file_handler)
    except OSError as e:
        logger.warning(f"Could not set up file logging: {e}")

    return logger


def log_categorisation_audit(
    source: str,
    success: bool,
    transaction_count: int = 0,
    skipped_rows: int = 0,
    needs_homework: int = 0,
    error: Optional[str] = None
) -> None:
    """
    Log a categorisation run as a single structured audit line.

    Args:
        source: Name of the processed file (or "<text>")
        success: Whether parsing succeeded
        transaction_count: Number of transactions categorised
        skipped_rows: Number of rows the parser dropped
        needs_homework: Number of results below the confidence threshold
        error: Error message if failed
    """
    logger = logging.getLogger("statement_categoriser.audit")

    audit_data = {
        "timestamp": datetime.now().isoformat(),
        "source": source,
        "success": success,
        "transactions": transaction_count,
        "skipped": skipped_rows,
        "homework": needs_homework,
    }

    if error:
        audit_data["error"] = error

    # Format as structured log entry
    audit_message = " | ".join(f"{k}={v}" for k, v in audit_data.items())
    logger.info(f"AUDIT: {audit_message}")
