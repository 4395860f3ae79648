"""
Schema reconciliation: create or alter a table so it fits an incoming record
"""

from typing import Any, Dict, List, Mapping, Optional
import logging

from ..base_manager import DatabaseManager
from ..inspector import SchemaInspector
from ..queries.base_queries import ColumnInfo
from ..utils.type_mapping import ColumnType, TypeMapper
from ...exceptions import InvalidArgumentError
from ...security import SecureQueryBuilder

logger = logging.getLogger(__name__)

PRIMARY_KEY = 'id'


class SchemaReconciler:
    """
    Makes the live table match the shape of a record.

    Columns are only ever added or retyped, never dropped or renamed. A
    column is retyped whenever the type inferred from the new value differs
    from the declared type; this is a plain inequality, so it narrows as
    readily as it widens (a TEXT column written with a short string becomes
    VARCHAR(255) again, and the engine may truncate longer values).

    DDL is not transactional with the data statement that follows, and a
    failure part way through leaves earlier changes in place.
    """

    def __init__(self, manager: DatabaseManager, inspector: Optional[SchemaInspector] = None):
        self.manager = manager
        self.queries = manager.queries
        self.inspector = inspector or SchemaInspector(manager)

    def ensure_schema(self, table_name: str, record: Mapping[str, Any]) -> List[str]:
        """
        Create the table or add/retype columns so the record fits

        Args:
            table_name: Name of table
            record: Column name to value mapping

        Returns:
            DDL statements that were executed, empty when nothing changed
        """
        SecureQueryBuilder.validate_table_name(table_name)
        SecureQueryBuilder.validate_column_names(record.keys())

        if not self.inspector.table_exists(table_name):
            return self.create_table(table_name, record)
        return self.add_missing_columns(table_name, record)

    def create_table(self, table_name: str, record: Mapping[str, Any]) -> List[str]:
        """
        Create a table with the autogenerated key plus one column per record key

        Args:
            table_name: Name of table to create
            record: Record whose keys and values define the columns

        Returns:
            Executed statements
        """
        columns = {
            column: column_type
            for column, column_type in TypeMapper.infer_types(record).items()
            if column != PRIMARY_KEY
        }
        if not columns:
            raise InvalidArgumentError(f"Cannot create table '{table_name}' without columns")

        statement = self.queries.create_table_statement(table_name, columns)
        self.manager.execute_ddl(statement)
        logger.info(f"Created table {table_name} with columns {list(columns)}")
        return [statement]

    def add_missing_columns(self, table_name: str, record: Mapping[str, Any]) -> List[str]:
        """
        Add absent columns and retype present ones where the inferred type differs

        Args:
            table_name: Name of an existing table
            record: Record being written

        Returns:
            Executed statements
        """
        live_columns = self.inspector.describe(table_name)
        executed: List[str] = []

        for column, value in record.items():
            if column == PRIMARY_KEY:
                continue

            declared = self._declared_type(live_columns, column)
            if declared is None:
                column_type = TypeMapper.infer_type(value)
                statement = self.queries.add_column_statement(table_name, column, column_type)
                self.manager.execute_ddl(statement)
                live_columns.append((column, self.queries.column_ddl(column_type)))
                executed.append(statement)
                logger.info(f"Added column {table_name}.{column} {column_type}")
            else:
                statements = self._change_type(table_name, column, value, declared, live_columns)
                executed.extend(statements)

        return executed

    def change_column_type_if_needed(self, table_name: str, column: str, value: Any) -> List[str]:
        """
        Retype a single existing column if the value's inferred type differs

        Args:
            table_name: Name of table
            column: Existing column name
            value: Value about to be written

        Returns:
            Executed statements

        Raises:
            InvalidArgumentError: If the column does not exist
        """
        live_columns = self.inspector.describe(table_name)
        declared = self._declared_type(live_columns, column)
        if declared is None:
            raise InvalidArgumentError(f"Column '{table_name}.{column}' does not exist")
        return self._change_type(table_name, column, value, declared, live_columns)

    def _declared_type(self, live_columns: List[ColumnInfo], column: str) -> Optional[str]:
        for name, declared_type in live_columns:
            if name == column:
                return self.queries.normalize_declared_type(declared_type)
        return None

    def _change_type(self, table_name: str, column: str, value: Any,
                     declared: Optional[str], live_columns: List[ColumnInfo]) -> List[str]:
        # A null carries no type information, so it never retypes a column
        if value is None:
            return []

        new_type = TypeMapper.infer_type(value)
        if declared == new_type:
            return []

        statements = self.queries.change_column_type_statements(
            table_name, column, new_type, live_columns
        )
        if len(statements) == 1:
            self.manager.execute_ddl(statements[0])
        else:
            self.manager.execute_script(statements)

        ddl_type = self.queries.column_ddl(new_type)
        live_columns[:] = [
            (name, ddl_type if name == column else declared_type)
            for name, declared_type in live_columns
        ]
        logger.info(f"Changed column {table_name}.{column} from {declared} to {new_type}")
        return statements
