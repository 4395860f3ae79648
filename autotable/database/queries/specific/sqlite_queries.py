"""
SQLite-specific queries and operations
"""

from typing import List, Dict, Any, Tuple
import logging

from ..base_queries import BaseQueries, ColumnInfo
from ...utils.type_mapping import ColumnType
from ....security import SecureQueryBuilder

logger = logging.getLogger(__name__)


class SQLiteSpecificQueries(BaseQueries):
    """SQLite dialect: sqlite_master lookups and table rebuilds for type changes"""

    name = 'sqlite'
    quote_char = '"'
    primary_key_clause = 'id INTEGER PRIMARY KEY AUTOINCREMENT'

    # Suffix of the scratch table used while rebuilding
    REBUILD_SUFFIX = '__autotable_rebuild'

    def table_exists_query(self, table_name: str) -> Tuple[str, Dict[str, Any]]:
        query = """
            SELECT COUNT(*) AS n FROM sqlite_master
            WHERE type = 'table' AND name = :table_name
        """
        return query, {'table_name': table_name}

    def columns_query(self, table_name: str) -> Tuple[str, Dict[str, Any]]:
        # PRAGMA table_info reports the declared type verbatim
        query = "SELECT name, type FROM pragma_table_info(:table_name) ORDER BY cid"
        return query, {'table_name': table_name}

    def change_column_type_statements(self, table_name: str, column: str,
                                      column_type: ColumnType,
                                      live_columns: List[ColumnInfo]) -> List[str]:
        """
        SQLite has no ALTER COLUMN, so copy the table into one with the new
        declaration and swap it in place
        """
        scratch = SecureQueryBuilder.escape_identifier(
            f"{table_name}{self.REBUILD_SUFFIX}", self.quote_char
        )
        definitions = [self.primary_key_clause]
        names = []
        for name, declared_type in live_columns:
            names.append(self.quote(name))
            if name == 'id':
                continue
            ddl_type = self.column_ddl(column_type) if name == column else declared_type
            definitions.append(f"{self.quote(name)} {ddl_type}".rstrip())

        column_list = ', '.join(names)
        logger.debug(f"Rebuilding {table_name} to change {column} to {column_type}")
        return [
            f"DROP TABLE IF EXISTS {scratch}",
            f"CREATE TABLE {scratch} ({', '.join(definitions)})",
            f"INSERT INTO {scratch} ({column_list}) "
            f"SELECT {column_list} FROM {self.quote(table_name)}",
            *self._carry_sequence_statements(table_name, f"{table_name}{self.REBUILD_SUFFIX}"),
            f"DROP TABLE {self.quote(table_name)}",
            f"ALTER TABLE {scratch} RENAME TO {self.quote(table_name)}",
        ]

    def _carry_sequence_statements(self, table_name: str, scratch_name: str) -> List[str]:
        """
        Copy the AUTOINCREMENT high-water mark onto the scratch table

        Copying rows only advances the sequence to the largest id still
        present, so ids of deleted rows would otherwise be handed out again.
        """
        table = self._literal(table_name)
        scratch = self._literal(scratch_name)
        return [
            f"UPDATE sqlite_sequence SET seq = ("
            f"SELECT MAX(seq) FROM sqlite_sequence WHERE name IN ({table}, {scratch})"
            f") WHERE name = {scratch}",
            f"INSERT INTO sqlite_sequence (name, seq) "
            f"SELECT {scratch}, seq FROM sqlite_sequence WHERE name = {table} "
            f"AND NOT EXISTS (SELECT 1 FROM sqlite_sequence WHERE name = {scratch})",
        ]

    @staticmethod
    def _literal(value: str) -> str:
        return "'" + value.replace("'", "''") + "'"
