"""
autotable - a single-table data-access layer that shapes its schema to the data.

Records are plain mappings; the table and its columns are created or retyped
as records arrive, and every value is sent through bound parameters.
"""

from .database import (
    ColumnType,
    DatabaseConfig,
    DatabaseFactory,
    DatabaseManager,
    EmptyMatch,
    NullSchemaLock,
    ThreadSchemaLock,
    TypeMapper,
)
from .database.logging_config import setup_db_logging
from .exceptions import (
    AutoTableError,
    DatabaseConnectionError,
    ExecutionError,
    InvalidArgumentError,
    QueryInjectionError,
    RecordNotFoundError,
)
from .repository import RecordRepository

__version__ = '0.1.0'

__all__ = [
    'RecordRepository',
    'DatabaseFactory',
    'DatabaseConfig',
    'DatabaseManager',
    'ColumnType',
    'TypeMapper',
    'EmptyMatch',
    'NullSchemaLock',
    'ThreadSchemaLock',
    'setup_db_logging',
    'AutoTableError',
    'DatabaseConnectionError',
    'ExecutionError',
    'InvalidArgumentError',
    'QueryInjectionError',
    'RecordNotFoundError',
]
