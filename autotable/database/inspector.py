"""
Live schema introspection
"""

from typing import List, Optional
import logging

from .base_manager import DatabaseManager
from .queries.base_queries import ColumnInfo

logger = logging.getLogger(__name__)


class SchemaInspector:
    """
    Read-only questions about the live schema.

    Nothing is cached: every call queries the database, so answers are never
    stale but repeated calls cost a round trip each.
    """

    def __init__(self, manager: DatabaseManager):
        self.manager = manager
        self.queries = manager.queries

    def table_exists(self, table_name: str) -> bool:
        """
        Check if table exists in database

        Args:
            table_name: Name of table to check

        Returns:
            True if table exists, False otherwise
        """
        query, params = self.queries.table_exists_query(table_name)
        row = self.manager.execute_query_one(query, params)
        return bool(row and row['n'])

    def describe(self, table_name: str) -> List[ColumnInfo]:
        """
        Get (name, declared type) for every column, in table order

        Args:
            table_name: Name of table

        Returns:
            List of column tuples, empty when the table does not exist
        """
        query, params = self.queries.columns_query(table_name)
        rows = self.manager.execute_query(query, params)
        return [(row['name'], row['type'] or '') for row in rows]

    def list_columns(self, table_name: str) -> List[str]:
        """
        Get column names of a table, in table order

        Args:
            table_name: Name of table

        Returns:
            List of column names
        """
        return [name for name, _ in self.describe(table_name)]

    def column_type(self, table_name: str, column: str) -> Optional[str]:
        """
        Get the declared type of a column

        Args:
            table_name: Name of table
            column: Name of column

        Returns:
            ColumnType when the declared type is one this package creates,
            the upper-cased declared type otherwise, None if the column is absent
        """
        for name, declared_type in self.describe(table_name):
            if name == column:
                return self.queries.normalize_declared_type(declared_type)
        return None
