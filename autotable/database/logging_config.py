"""
Database logging configuration.

This module sets up logging for the autotable package from the ``logging``
section of the configuration, with detailed statement tracking at DEBUG.
"""

import logging
import sys
from typing import Dict, Any, Optional, Mapping
from pathlib import Path

from ..security import SensitiveDataFilter

LOGGER_NAME = 'autotable'


class SafeFormatter(logging.Formatter):
    """Custom formatter that provides default values for missing fields."""

    def format(self, record):
        # Provide default values for missing fields
        if not hasattr(record, 'table_context'):
            record.table_context = '-'

        return super().format(record)


def setup_db_logging(main_config: Dict[str, Any]) -> logging.Logger:
    """
    Setup package logging based on configuration.

    Args:
        main_config: Configuration dictionary with an optional ``logging``
            section (``level``, ``log_dir``)

    Returns:
        Configured package logger
    """
    logging_config = main_config.get('logging', {}) or {}
    log_level = str(logging_config.get('level', 'INFO')).upper()

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(getattr(logging, log_level))

    # Remove any existing handlers to avoid duplicates
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(SafeFormatter(
        '%(asctime)s - [%(table_context)s] - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    ))
    console_handler.setLevel(getattr(logging, log_level))
    logger.addHandler(console_handler)

    log_dir = logging_config.get('log_dir')
    if log_dir:
        Path(log_dir).mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(Path(log_dir) / 'autotable.log')
        file_handler.setFormatter(SafeFormatter(
            '%(asctime)s.%(msecs)03d - %(name)s - [%(table_context)s] - '
            '%(levelname)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        ))
        file_handler.setLevel(logging.DEBUG)
        logger.addHandler(file_handler)

    # Statements are logged with their parameters at DEBUG
    sensitive_filter = SensitiveDataFilter()
    for handler in logger.handlers:
        handler.addFilter(sensitive_filter)

    # Prevent propagation to root logger to avoid duplicate messages
    logger.propagate = False

    return logger


def log_query(logger: logging.Logger, query: str, params: Optional[Mapping[str, Any]] = None,
              duration: float = None, level: str = 'DEBUG') -> None:
    """
    Log database statement with appropriate detail level.

    Args:
        logger: Logger instance
        query: SQL statement text
        params: Bound parameters
        duration: Execution time in seconds
        level: Log level ('DEBUG', 'INFO', 'WARNING', 'ERROR')
    """
    log_level = getattr(logging, level.upper())

    if logger.isEnabledFor(logging.DEBUG):
        message = f"Executed: {' '.join(query.split())}"
        if params:
            message += f" | params={dict(params)}"
        if duration is not None:
            message += f" | {duration:.3f}s"
        logger.log(log_level, message)
    elif logger.isEnabledFor(log_level) and duration is not None:
        logger.log(log_level, f"Statement executed in {duration:.3f}s")


class DatabaseLoggerAdapter(logging.LoggerAdapter):
    """
    Logger adapter that adds the table being worked on to every record.
    """

    def __init__(self, logger: logging.Logger, extra: Dict[str, Any] = None):
        super().__init__(logger, extra or {})

    def process(self, msg, kwargs):
        """Add table context to log records."""
        if 'extra' not in kwargs:
            kwargs['extra'] = {}
        kwargs['extra']['table_context'] = self.extra.get('table', '-')

        return msg, kwargs
