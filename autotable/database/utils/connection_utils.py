"""
Connection utilities for database operations
"""

from sqlalchemy import text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from typing import Dict, Any
import logging
import time

from ...exceptions import DatabaseConnectionError

logger = logging.getLogger(__name__)


class ConnectionUtils:
    """Utilities for database connection checks"""

    VERSION_QUERIES = {
        'mysql': "SELECT version()",
        'postgresql': "SELECT version()",
        'sqlite': "SELECT sqlite_version()",
    }

    @staticmethod
    def test_connection(engine: Engine) -> Dict[str, Any]:
        """
        Test database connection and return status information

        Args:
            engine: SQLAlchemy engine to test

        Returns:
            Dictionary with connection test results
        """
        result = {
            'success': False,
            'error': None,
            'response_time_ms': None,
            'database_type': engine.dialect.name,
            'database_version': None
        }

        start_time = time.time()

        try:
            with engine.connect() as conn:
                # Basic connectivity test
                conn.execute(text("SELECT 1"))

                result['success'] = True
                result['response_time_ms'] = round((time.time() - start_time) * 1000, 2)

                version_query = ConnectionUtils.VERSION_QUERIES.get(engine.dialect.name)
                if version_query:
                    try:
                        result['database_version'] = conn.execute(text(version_query)).scalar()
                    except SQLAlchemyError as e:
                        logger.debug(f"Could not get database version: {e}")

        except SQLAlchemyError as e:
            result['error'] = str(e)
            result['response_time_ms'] = round((time.time() - start_time) * 1000, 2)

        return result

    @staticmethod
    def verify_connection(engine: Engine) -> Dict[str, Any]:
        """
        Test the connection and raise when it fails

        Raises:
            DatabaseConnectionError: If the database cannot be reached
        """
        status = ConnectionUtils.test_connection(engine)
        if not status['success']:
            logger.error(f"Database connection failed: {status['error']}")
            raise DatabaseConnectionError(f"Database connection failed: {status['error']}")

        logger.info(f"Connected to {status['database_type']} {status['database_version'] or ''}".rstrip())
        return status

    @staticmethod
    def get_connection_info(engine: Engine) -> Dict[str, Any]:
        """
        Get connection information with the password hidden

        Args:
            engine: SQLAlchemy engine

        Returns:
            Dictionary with connection details
        """
        return {
            'url': engine.url.render_as_string(hide_password=True),
            'dialect': engine.dialect.name,
            'driver': engine.dialect.driver,
        }
