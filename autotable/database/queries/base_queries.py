"""
Base dialect queries shared by all supported database types
"""

from typing import List, Dict, Any, Optional, Tuple, Mapping
import re
import logging

from ..utils.type_mapping import ColumnType
from ...security import SecureQueryBuilder

logger = logging.getLogger(__name__)

# (name, declared type) pairs as reported by the engine
ColumnInfo = Tuple[str, str]


class BaseQueries:
    """Statement text that every dialect needs, with standard-SQL defaults"""

    name = 'generic'
    quote_char = '"'
    primary_key_clause = 'id INTEGER PRIMARY KEY'
    insert_suffix = ''

    # DDL spelling of each column type
    COLUMN_TYPE_DDL: Dict[ColumnType, str] = {
        column_type: column_type.value for column_type in ColumnType
    }

    # Normalized declared type reported by the engine -> column type
    REPORTED_TYPES: Dict[str, ColumnType] = {
        column_type.value: column_type for column_type in ColumnType
    }

    def quote(self, identifier: str) -> str:
        """
        Validate and quote an identifier

        Args:
            identifier: Table or column name

        Returns:
            Identifier quoted for this dialect
        """
        SecureQueryBuilder.validate_identifier(identifier)
        return SecureQueryBuilder.escape_identifier(identifier, self.quote_char)

    def column_ddl(self, column_type: ColumnType) -> str:
        return self.COLUMN_TYPE_DDL[column_type]

    def _normalize(self, declared_type: str) -> str:
        return re.sub(r'\s+', ' ', declared_type.strip()).upper()

    def normalize_declared_type(self, declared_type: Optional[str]) -> Optional[str]:
        """
        Map a declared type reported by the engine onto a column type

        Args:
            declared_type: Type text from the introspection query

        Returns:
            Matching ColumnType, the upper-cased declared type when it has
            no counterpart, or None when there is no declared type
        """
        if declared_type is None:
            return None
        normalized = self._normalize(declared_type)
        return self.REPORTED_TYPES.get(normalized, normalized)

    def table_exists_query(self, table_name: str) -> Tuple[str, Dict[str, Any]]:
        """Query returning a single row with a count column ``n``"""
        query = """
            SELECT COUNT(*) AS n FROM information_schema.tables
            WHERE table_name = :table_name
        """
        return query, {'table_name': table_name}

    def columns_query(self, table_name: str) -> Tuple[str, Dict[str, Any]]:
        """Query returning ``name`` and ``type`` for each column in table order"""
        query = """
            SELECT column_name AS name, data_type AS type
            FROM information_schema.columns
            WHERE table_name = :table_name
            ORDER BY ordinal_position
        """
        return query, {'table_name': table_name}

    def create_table_statement(self, table_name: str,
                               columns: Mapping[str, ColumnType]) -> str:
        """
        Build CREATE TABLE with the autogenerated primary key first

        Args:
            table_name: Name of table
            columns: Column name to type, in record order

        Returns:
            DDL statement
        """
        definitions = [self.primary_key_clause]
        for column, column_type in columns.items():
            definitions.append(f"{self.quote(column)} {self.column_ddl(column_type)}")
        return f"CREATE TABLE {self.quote(table_name)} ({', '.join(definitions)})"

    def add_column_statement(self, table_name: str, column: str,
                             column_type: ColumnType) -> str:
        return (
            f"ALTER TABLE {self.quote(table_name)} "
            f"ADD COLUMN {self.quote(column)} {self.column_ddl(column_type)}"
        )

    def change_column_type_statements(self, table_name: str, column: str,
                                      column_type: ColumnType,
                                      live_columns: List[ColumnInfo]) -> List[str]:
        """
        Build the statement(s) changing a column's declared type

        Args:
            table_name: Name of table
            column: Column to change
            column_type: New type
            live_columns: Current (name, declared type) pairs of the table

        Returns:
            Statements to run, in order, inside one transaction
        """
        return [
            f"ALTER TABLE {self.quote(table_name)} "
            f"ALTER COLUMN {self.quote(column)} TYPE {self.column_ddl(column_type)}"
        ]
