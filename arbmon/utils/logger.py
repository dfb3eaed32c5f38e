"""Logging configuration and utilities for the monitor runner."""

import logging
import sys
from typing import Optional


_logger: Optional[logging.Logger] = None


def setup_logger(
    name: str = "arbmon",
    level: str = "INFO",
    log_to_file: bool = False,
    log_file: str = "arbmon.log",
) -> logging.Logger:
    """Setup and configure the logger."""
    global _logger

    logger = logging.getLogger(name)
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    # Clear existing handlers
    logger.handlers.clear()

    formatter = logging.Formatter(
        fmt="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_to_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logger.propagate = False

    _logger = logger
    return logger


def get_logger() -> logging.Logger:
    """Get the configured logger instance."""
    global _logger
    if _logger is None:
        _logger = setup_logger()
    return _logger


class LogContext:
    """Context manager for logging with additional context."""

    def __init__(self, context: str, logger: Optional[logging.Logger] = None):
        self.context = context
        self.logger = logger or get_logger()

    def __enter__(self):
        self.logger.debug(f"[START] {self.context}")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type is not None:
            self.logger.error(f"[ERROR] {self.context}: {exc_val}")
        else:
            self.logger.debug(f"[END] {self.context}")
        return False
