"""
Logging Configuration

Provides the simulator's logging setup:
- Structured, single-line output for parsing
- Timing of slow operations (e-mail delivery)
- Environment-based levels and file output (LOG_LEVEL, LOG_FILE)
"""

import logging
import sys
from pathlib import Path
from datetime import datetime
from typing import Optional
import os


class StructuredFormatter(logging.Formatter):
    """
    Structured log formatter.

    Format: [TIMESTAMP] [LEVEL] [MODULE:FUNCTION:LINE] MESSAGE {context}
    """

    def format(self, record: logging.LogRecord) -> str:
        if not hasattr(record, 'simulation_context'):
            record.simulation_context = ''

        timestamp = datetime.fromtimestamp(record.created).strftime('%Y-%m-%d %H:%M:%S.%f')[:-3]
        location = f"{record.module}:{record.funcName}:{record.lineno}"

        base_msg = f"[{timestamp}] [{record.levelname:8s}] [{location}] {record.getMessage()}"

        if record.exc_info:
            base_msg += f"\n{self.formatException(record.exc_info)}"

        # Context is attached via `extra={'simulation_context': ...}`
        if record.simulation_context:
            base_msg += f" {record.simulation_context}"

        return base_msg


class PerformanceLogger:
    """Context manager that logs how long an operation took."""

    def __init__(self, logger: logging.Logger, operation: str, threshold_ms: float = 1000):
        self.logger = logger
        self.operation = operation
        self.threshold_ms = threshold_ms
        self.start_time = None
        self.duration_ms = None

    def __enter__(self):
        self.start_time = datetime.now()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self.start_time:
            self.duration_ms = (datetime.now() - self.start_time).total_seconds() * 1000

            if self.duration_ms > self.threshold_ms:
                self.logger.warning(f"SLOW: {self.operation} took {self.duration_ms:.1f}ms")
            else:
                self.logger.debug(f"{self.operation} took {self.duration_ms:.1f}ms")


def setup_logger(
    name: str,
    level: Optional[str] = None,
    log_file: Optional[str] = None
) -> logging.Logger:
    """
    Set up a logger with structured formatting and optional file output.

    Args:
        name: Logger name (usually __name__)
        level: Log level (DEBUG, INFO, WARNING, ERROR). Defaults to env var or INFO
        log_file: Optional file path for logs. Defaults to the LOG_FILE env var

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)

    # Avoid duplicate handlers on Streamlit reruns
    if logger.handlers:
        return logger

    if level is None:
        level = os.getenv('LOG_LEVEL', 'INFO').upper()

    log_level = getattr(logging, level, logging.INFO)

    if log_file is None:
        log_file = os.getenv('LOG_FILE')
    logger.setLevel(log_level)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(StructuredFormatter())
    logger.addHandler(console_handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_file, encoding='utf-8')
        file_handler.setLevel(log_level)
        file_handler.setFormatter(StructuredFormatter())
        logger.addHandler(file_handler)

    logger.propagate = False

    return logger


def get_perf_logger(logger: logging.Logger, operation: str, threshold_ms: float = 1000):
    """
    Get a performance logger context manager.

    Usage:
        with get_perf_logger(logger, "send_simulation", threshold_ms=3000):
            response = session.post(url, json=payload)
    """
    return PerformanceLogger(logger, operation, threshold_ms)


def simulation_context(**fields) -> dict:
    """
    Build the `extra` mapping for a log call.

    Example:
        logger.info("Simulation computed", extra=simulation_context(category="child"))
    """
    rendered = " ".join(f"{key}={value}" for key, value in sorted(fields.items()))
    return {'simulation_context': "{" + rendered + "}" if rendered else ''}
