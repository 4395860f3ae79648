"""
MySQL-specific queries and operations
"""

from typing import List, Dict, Any, Tuple
import re
import logging

from ..base_queries import BaseQueries, ColumnInfo
from ...utils.type_mapping import ColumnType

logger = logging.getLogger(__name__)


class MySQLSpecificQueries(BaseQueries):
    """MySQL dialect: backtick quoting, AUTO_INCREMENT and MODIFY"""

    name = 'mysql'
    quote_char = '`'
    primary_key_clause = 'id INT AUTO_INCREMENT PRIMARY KEY'

    def _normalize(self, declared_type: str) -> str:
        normalized = super()._normalize(declared_type)
        # Servers before 8.0.19 report display widths such as int(11)
        return re.sub(r'^INT\(\d+\)', 'INT', normalized)

    def table_exists_query(self, table_name: str) -> Tuple[str, Dict[str, Any]]:
        # information_schema instead of SHOW TABLES LIKE, where _ is a wildcard
        query = """
            SELECT COUNT(*) AS n FROM information_schema.tables
            WHERE table_schema = DATABASE() AND table_name = :table_name
        """
        return query, {'table_name': table_name}

    def columns_query(self, table_name: str) -> Tuple[str, Dict[str, Any]]:
        query = """
            SELECT column_name AS name, column_type AS type
            FROM information_schema.columns
            WHERE table_schema = DATABASE() AND table_name = :table_name
            ORDER BY ordinal_position
        """
        return query, {'table_name': table_name}

    def add_column_statement(self, table_name: str, column: str,
                             column_type: ColumnType) -> str:
        return (
            f"ALTER TABLE {self.quote(table_name)} "
            f"ADD {self.quote(column)} {self.column_ddl(column_type)}"
        )

    def change_column_type_statements(self, table_name: str, column: str,
                                      column_type: ColumnType,
                                      live_columns: List[ColumnInfo]) -> List[str]:
        return [
            f"ALTER TABLE {self.quote(table_name)} "
            f"MODIFY {self.quote(column)} {self.column_ddl(column_type)}"
        ]
