"""Unit tests for database logging configuration."""

import pytest
import logging

from autotable.database.logging_config import (
    DatabaseLoggerAdapter, LOGGER_NAME, log_query, setup_db_logging
)
from autotable.security import SensitiveDataFilter


class TestSetupDbLogging:
    """Test logger setup from configuration."""

    @pytest.fixture(autouse=True)
    def reset_logger(self):
        """Restore the package logger after each test."""
        yield
        logger = logging.getLogger(LOGGER_NAME)
        for handler in logger.handlers[:]:
            handler.close()
            logger.removeHandler(handler)
        logger.setLevel(logging.NOTSET)
        logger.propagate = True

    def test_level_from_config(self):
        """Test the configured level is applied."""
        logger = setup_db_logging({'logging': {'level': 'debug'}})
        assert logger.name == LOGGER_NAME
        assert logger.level == logging.DEBUG
        assert logger.propagate is False

    def test_default_level(self):
        """Test INFO is the default level."""
        logger = setup_db_logging({})
        assert logger.level == logging.INFO
        assert len(logger.handlers) == 1

    def test_file_handler(self, tmp_path):
        """Test a log directory adds a file handler."""
        logger = setup_db_logging({'logging': {'log_dir': str(tmp_path / 'logs')}})
        assert any(isinstance(h, logging.FileHandler) for h in logger.handlers)
        assert (tmp_path / 'logs').is_dir()

    def test_handlers_redact_credentials(self):
        """Test every handler carries the sensitive data filter."""
        logger = setup_db_logging({})
        for handler in logger.handlers:
            assert any(isinstance(f, SensitiveDataFilter) for f in handler.filters)


class TestLogQuery:
    """Test statement logging."""

    def test_debug_includes_statement(self, caplog):
        """Test DEBUG output includes statement text and parameters."""
        logger = logging.getLogger('test_log_query')
        with caplog.at_level(logging.DEBUG, logger='test_log_query'):
            log_query(logger, "SELECT *\n  FROM t WHERE a = :a", {'a': 1}, 0.0123)
        assert 'SELECT * FROM t WHERE a = :a' in caplog.text
        assert "{'a': 1}" in caplog.text
        assert '0.012s' in caplog.text

    def test_silent_above_debug(self, caplog):
        """Test nothing is logged at INFO for DEBUG statements."""
        logger = logging.getLogger('test_log_query_info')
        with caplog.at_level(logging.INFO, logger='test_log_query_info'):
            log_query(logger, "SELECT 1", None, 0.5)
        assert caplog.text == ''


class TestDatabaseLoggerAdapter:
    """Test table context injection."""

    def test_table_context(self):
        """Test the adapter adds the table to every record."""
        adapter = DatabaseLoggerAdapter(logging.getLogger('x'), {'table': 'users'})
        _, kwargs = adapter.process('hello', {})
        assert kwargs['extra']['table_context'] == 'users'
