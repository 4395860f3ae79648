"""
Database-specific queries
"""

from .mysql_queries import MySQLSpecificQueries
from .postgres_queries import PostgreSQLSpecificQueries
from .sqlite_queries import SQLiteSpecificQueries

__all__ = [
    'MySQLSpecificQueries',
    'PostgreSQLSpecificQueries',
    'SQLiteSpecificQueries'
]
