"""
Dialect-aware statement text
"""

from .base_queries import BaseQueries, ColumnInfo
from .specific import MySQLSpecificQueries, PostgreSQLSpecificQueries, SQLiteSpecificQueries

__all__ = [
    'BaseQueries',
    'ColumnInfo',
    'MySQLSpecificQueries',
    'PostgreSQLSpecificQueries',
    'SQLiteSpecificQueries'
]
