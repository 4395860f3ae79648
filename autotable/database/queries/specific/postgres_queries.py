"""
PostgreSQL-specific queries and operations
"""

from typing import List, Dict, Any, Tuple
import logging

from ..base_queries import BaseQueries, ColumnInfo
from ...utils.type_mapping import ColumnType

logger = logging.getLogger(__name__)


class PostgreSQLSpecificQueries(BaseQueries):
    """PostgreSQL dialect: SERIAL key, format_type introspection, USING casts"""

    name = 'postgresql'
    quote_char = '"'
    primary_key_clause = 'id SERIAL PRIMARY KEY'
    insert_suffix = ' RETURNING id'

    COLUMN_TYPE_DDL = {
        ColumnType.INT: 'INTEGER',
        ColumnType.FLOAT: 'DOUBLE PRECISION',
        ColumnType.BOOLEAN_AS_TINYINT: 'SMALLINT',
        ColumnType.VARCHAR: 'VARCHAR(255)',
        ColumnType.TEXT: 'TEXT',
        ColumnType.DATETIME: 'TIMESTAMP',
    }

    # Spellings produced by format_type(), plus the DDL spellings above
    REPORTED_TYPES = {
        'INTEGER': ColumnType.INT,
        'DOUBLE PRECISION': ColumnType.FLOAT,
        'SMALLINT': ColumnType.BOOLEAN_AS_TINYINT,
        'CHARACTER VARYING(255)': ColumnType.VARCHAR,
        'VARCHAR(255)': ColumnType.VARCHAR,
        'TEXT': ColumnType.TEXT,
        'TIMESTAMP WITHOUT TIME ZONE': ColumnType.DATETIME,
        'TIMESTAMP': ColumnType.DATETIME,
    }

    def table_exists_query(self, table_name: str) -> Tuple[str, Dict[str, Any]]:
        query = """
            SELECT COUNT(*) AS n FROM information_schema.tables
            WHERE table_schema = current_schema() AND table_name = :table_name
        """
        return query, {'table_name': table_name}

    def columns_query(self, table_name: str) -> Tuple[str, Dict[str, Any]]:
        query = """
            SELECT a.attname AS name, format_type(a.atttypid, a.atttypmod) AS type
            FROM pg_attribute a
            WHERE a.attrelid = to_regclass(quote_ident(:table_name))
              AND a.attnum > 0 AND NOT a.attisdropped
            ORDER BY a.attnum
        """
        return query, {'table_name': table_name}

    def change_column_type_statements(self, table_name: str, column: str,
                                      column_type: ColumnType,
                                      live_columns: List[ColumnInfo]) -> List[str]:
        quoted_column = self.quote(column)
        ddl_type = self.column_ddl(column_type)
        return [
            f"ALTER TABLE {self.quote(table_name)} "
            f"ALTER COLUMN {quoted_column} TYPE {ddl_type} USING {quoted_column}::{ddl_type}"
        ]
