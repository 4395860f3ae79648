"""
Database engine factory for creating database managers with dialect-specific queries
"""

from typing import Dict, Any, Optional
import logging

from .config import DatabaseConfig
from .base_manager import DatabaseManager
from .queries.base_queries import BaseQueries
from .queries.specific import MySQLSpecificQueries, PostgreSQLSpecificQueries, SQLiteSpecificQueries
from .utils.connection_utils import ConnectionUtils

logger = logging.getLogger(__name__)


class DatabaseFactory:
    """Factory for creating database managers with database-specific functionality"""

    QUERY_CLASSES = {
        'mysql': MySQLSpecificQueries,
        'postgresql': PostgreSQLSpecificQueries,
        'sqlite': SQLiteSpecificQueries,
    }

    @staticmethod
    def get_queries(db_type: str) -> BaseQueries:
        """
        Get dialect queries for a database type

        Args:
            db_type: Database type ('mysql', 'postgresql', 'sqlite')

        Returns:
            Dialect queries instance
        """
        query_class = DatabaseFactory.QUERY_CLASSES.get(db_type)
        if query_class is None:
            logger.warning(f"Unknown database type {db_type}, using standard SQL only")
            return BaseQueries()
        return query_class()

    @staticmethod
    def create_manager(db_type: str, connection_params: Dict[str, Any],
                       verify: bool = False) -> DatabaseManager:
        """
        Create database manager with database-specific functionality

        Args:
            db_type: Database type ('mysql', 'postgresql', 'sqlite')
            connection_params: Database connection parameters
            verify: Run a connectivity check before returning

        Returns:
            DatabaseManager instance with dialect queries attached
        """
        engine = DatabaseConfig.get_engine(db_type, connection_params)
        manager = DatabaseManager(engine, DatabaseFactory.get_queries(db_type))

        if verify:
            try:
                ConnectionUtils.verify_connection(engine)
            except Exception:
                engine.dispose()
                raise

        logger.info(f"Created {db_type} database manager for "
                    f"{ConnectionUtils.get_connection_info(engine)['url']}")
        return manager

    @staticmethod
    def create_from_config(config: Dict[str, Any], verify: bool = False) -> DatabaseManager:
        """
        Create database manager from configuration dictionary

        Args:
            config: Configuration with 'db_type' and 'connection_params' keys
            verify: Run a connectivity check before returning

        Returns:
            DatabaseManager instance
        """
        db_type = config.get('db_type')
        connection_params = config.get('connection_params', {})

        if not db_type:
            raise ValueError("Configuration must include 'db_type'")

        return DatabaseFactory.create_manager(db_type, connection_params, verify=verify)

    @staticmethod
    def setup(url: str, username: Optional[str] = None,
              password: Optional[str] = None) -> DatabaseManager:
        """
        Connect from a connection string and credentials

        The connection is verified immediately so that configuration
        problems surface here rather than on the first operation.

        Args:
            url: SQLAlchemy connection string
            username: Optional user name
            password: Optional password

        Returns:
            Verified DatabaseManager

        Raises:
            DatabaseConnectionError: If the URL is invalid or the database is unreachable
        """
        config = DatabaseConfig.from_url(url, username, password)
        return DatabaseFactory.create_from_config(config, verify=True)

    @staticmethod
    def get_supported_databases() -> list:
        """
        Get list of supported database types

        Returns:
            List of supported database type strings
        """
        return list(DatabaseFactory.QUERY_CLASSES)
