"""
Record repository bound to a single table.

Callers hand over plain mappings; the repository reconciles the table's
schema to fit them and runs CRUD statements through bound parameters:

    manager = DatabaseFactory.setup('sqlite:///app.db')
    users = RecordRepository(manager, 'users')
    user_id = users.create({'name': 'Ada', 'age': 36})
    users.update(user_id, {'bio': 'x' * 300})     # widens bio to TEXT
"""

from typing import Any, Dict, Iterable, List, Mapping, Optional, Union
import logging
import time

import pandas as pd

from .database.base_manager import DatabaseManager
from .database.inspector import SchemaInspector
from .database.logging_config import DatabaseLoggerAdapter
from .database.migrations.locking import NullSchemaLock, ThreadSchemaLock
from .database.migrations.schema_reconciler import SchemaReconciler
from .database.query_builder import QueryBuilder
from .database.utils.type_mapping import TypeMapper
from .exceptions import AutoTableError, InvalidArgumentError, RecordNotFoundError
from .security import SecureQueryBuilder

Record = Dict[str, Any]


class RecordRepository:
    """
    CRUD operations against one table, with automatic schema reconciliation.

    Every operation that writes a column first makes sure the column exists
    with a type matching the value (see SchemaReconciler). The sequence
    inspect, alter, write is not atomic; pass a ThreadSchemaLock to
    serialize it per table within one process.
    """

    def __init__(self, manager: DatabaseManager, table_name: str,
                 schema_lock: Optional[Union[NullSchemaLock, ThreadSchemaLock]] = None):
        """
        Initialize repository for one table.

        Args:
            manager: Database manager executing the statements
            table_name: Table every operation targets
            schema_lock: Serialization strategy for reconcile-then-write
        """
        self._table_name = SecureQueryBuilder.validate_table_name(table_name)
        self.manager = manager
        self.inspector = SchemaInspector(manager)
        self.reconciler = SchemaReconciler(manager, self.inspector)
        self.builder = QueryBuilder(manager.queries)
        self.schema_lock = schema_lock or NullSchemaLock()
        self.logger = DatabaseLoggerAdapter(
            logging.getLogger(f'{__name__}.{table_name}'),
            {'table': table_name}
        )

        self.operation_stats = {
            'operations': 0,
            'schema_changes': 0,
            'total_time': 0.0,
        }

    @property
    def table_name(self) -> str:
        return self._table_name

    # Writes

    def create(self, record: Mapping[str, Any]) -> Any:
        """
        Insert a record, creating the table or columns it needs.

        Args:
            record: Non-empty column name to value mapping

        Returns:
            Primary key of the new row (None if the driver does not report it)

        Raises:
            InvalidArgumentError: If the record is empty
            ExecutionError: If reconciliation or the insert is rejected
        """
        self._require_payload(record, "Nothing to insert")
        start_time = time.time()

        try:
            with self.schema_lock.hold(self.table_name):
                self._reconcile(record)
                sql, params = self.builder.insert(self.table_name, TypeMapper.preprocess(record))
                record_id = self.manager.execute_insert(sql, params)
        except AutoTableError as e:
            self.logger.error(f"Failed to create record: {e}")
            raise

        self._track_operation('create', time.time() - start_time)
        self.logger.debug(f"Created record {record_id}")
        return record_id

    def update(self, record_id: Any, record: Mapping[str, Any]) -> None:
        """
        Update the given columns of one row; columns not in the record are untouched.

        Args:
            record_id: Primary key
            record: Non-empty column name to value mapping

        Raises:
            InvalidArgumentError: If the record is empty
            RecordNotFoundError: If no row has this id
            ExecutionError: If reconciliation or the update is rejected
        """
        self._require_payload(record, "No data to update")
        start_time = time.time()
        self._require_row(record_id)

        try:
            with self.schema_lock.hold(self.table_name):
                self._reconcile(record)
                sql, params = self.builder.update_by_id(
                    self.table_name, TypeMapper.preprocess(record), record_id
                )
                self.manager.execute_dml(sql, params)
        except AutoTableError as e:
            self.logger.error(f"Failed to update record {record_id}: {e}")
            raise

        self._track_operation('update', time.time() - start_time)

    def update_all(self, record: Mapping[str, Any]) -> int:
        """
        Set the given columns on every row.

        Args:
            record: Non-empty column name to value mapping

        Returns:
            Number of rows updated

        Raises:
            InvalidArgumentError: If the record is empty
        """
        self._require_payload(record, "No data to update")
        return self._run_update('update_all', record, lambda data: self.builder.update(
            self.table_name, data
        ))

    def update_where(self, record: Mapping[str, Any], conditions: Mapping[str, Any]) -> int:
        """
        Set the given columns on rows matching every equality condition.

        Args:
            record: Non-empty column name to value mapping
            conditions: Non-empty column to value mapping, combined with AND

        Returns:
            Number of rows updated

        Raises:
            InvalidArgumentError: If the record or the condition set is empty
        """
        self._require_payload(record, "No data to update")
        self._require_payload(conditions, "Condition set is empty")
        SecureQueryBuilder.validate_column_names(conditions.keys())
        bound_conditions = TypeMapper.preprocess(conditions)
        return self._run_update('update_where', record, lambda data: self.builder.update_where(
            self.table_name, data, bound_conditions
        ))

    def update_where_empty(self, record: Mapping[str, Any], conditions: Mapping[str, Any]) -> int:
        """
        Set the given columns on rows where any condition column is empty.

        A condition value of None matches ``IS NULL`` and '' matches ``= ''``;
        conditions with any other value are dropped from the WHERE clause.

        Args:
            record: Non-empty column name to value mapping
            conditions: Column to None/'' mapping, combined with OR

        Returns:
            Number of rows updated

        Raises:
            InvalidArgumentError: If the record is empty or no condition is left
        """
        self._require_payload(record, "No data to update")
        SecureQueryBuilder.validate_column_names(conditions.keys())
        # Build once up front so a malformed WHERE fails before any DDL runs
        self.builder.update_where_empty(self.table_name, TypeMapper.preprocess(record), conditions)
        return self._run_update('update_where_empty', record, lambda data: self.builder.update_where_empty(
            self.table_name, data, conditions
        ))

    def delete(self, record_id: Any) -> None:
        """
        Delete one row.

        Args:
            record_id: Primary key

        Raises:
            RecordNotFoundError: If no row has this id
        """
        start_time = time.time()
        self._require_row(record_id)

        try:
            with self.schema_lock.hold(self.table_name):
                sql, params = self.builder.delete_by_id(self.table_name, record_id)
                self.manager.execute_dml(sql, params)
        except AutoTableError as e:
            self.logger.error(f"Failed to delete record {record_id}: {e}")
            raise

        self._track_operation('delete', time.time() - start_time)
        self.logger.debug(f"Deleted record {record_id}")

    # Reads

    def find(self, record_id: Any) -> Record:
        """
        Find one row by primary key.

        Args:
            record_id: Primary key

        Returns:
            Row as a dictionary

        Raises:
            RecordNotFoundError: If no row has this id
        """
        row = self._find_row(record_id)
        if row is None:
            raise RecordNotFoundError(self.table_name, record_id)
        return row

    def find_all(self) -> List[Record]:
        """Every row of the table; empty when the table does not exist yet."""
        if not self.inspector.table_exists(self.table_name):
            return []
        sql, params = self.builder.select(self.table_name)
        return self.manager.execute_query(sql, params)

    def find_by_column(self, column: str, value: Any,
                       exclude: Iterable[str] = ()) -> List[Record]:
        """
        Find rows where a column equals a value.

        Args:
            column: Column to match on
            value: Value to match
            exclude: Columns to leave out of the returned rows

        Returns:
            Matching rows without the excluded columns

        Raises:
            InvalidArgumentError: If the column name is empty or every column is excluded
        """
        if not column:
            raise InvalidArgumentError("Column name cannot be empty")
        SecureQueryBuilder.validate_column_name(column)
        exclude = list(exclude)

        if not self.inspector.table_exists(self.table_name):
            return []

        columns = None
        if exclude:
            columns = self.builder.projection(self.inspector.list_columns(self.table_name), exclude)
            if not columns:
                raise InvalidArgumentError(f"Every column of '{self.table_name}' is excluded")

        sql, params = self.builder.select(
            self.table_name, columns, {column: TypeMapper.preprocess_value(value)}
        )
        return self.manager.execute_query(sql, params)

    def find_all_df(self) -> pd.DataFrame:
        """Every row of the table as a DataFrame."""
        if not self.inspector.table_exists(self.table_name):
            return pd.DataFrame()
        sql, params = self.builder.select(self.table_name)
        return self.manager.execute_query_df(sql, params)

    def count(self) -> int:
        """Number of rows; 0 when the table does not exist yet."""
        if not self.inspector.table_exists(self.table_name):
            return 0
        sql, params = self.builder.count(self.table_name)
        row = self.manager.execute_query_one(sql, params)
        return int(row['n']) if row else 0

    def query(self, sql: str, params: Optional[Mapping[str, Any]] = None) -> Union[List[Record], int]:
        """
        Run caller-supplied SQL with named ``:param`` placeholders.

        The statement text is used as given, so it must not be built from
        untrusted input; values belong in ``params``.

        Args:
            sql: Statement text
            params: Values for the named placeholders

        Returns:
            Rows for statements starting with SELECT, affected row count otherwise

        Raises:
            ExecutionError: If the statement fails
        """
        bound = TypeMapper.preprocess(params or {})
        if self.builder.is_select(sql):
            return self.manager.execute_query(sql, bound)
        return self.manager.execute_dml(sql, bound)

    def get_performance_stats(self) -> Dict[str, Any]:
        """Get operation statistics for this repository."""
        stats = self.operation_stats.copy()
        if stats['operations'] > 0:
            stats['avg_time'] = stats['total_time'] / stats['operations']
        else:
            stats['avg_time'] = 0.0
        return stats

    # Internals

    def _require_payload(self, payload: Mapping[str, Any], message: str) -> None:
        if not payload:
            raise InvalidArgumentError(message)

    def _find_row(self, record_id: Any) -> Optional[Record]:
        if not self.inspector.table_exists(self.table_name):
            return None
        sql, params = self.builder.select_by_id(self.table_name, record_id)
        return self.manager.execute_query_one(sql, params)

    def _require_row(self, record_id: Any) -> None:
        if self._find_row(record_id) is None:
            raise RecordNotFoundError(self.table_name, record_id)

    def _reconcile(self, record: Mapping[str, Any]) -> None:
        executed = self.reconciler.ensure_schema(self.table_name, record)
        self.operation_stats['schema_changes'] += len(executed)

    def _run_update(self, operation: str, record: Mapping[str, Any], build) -> int:
        start_time = time.time()
        try:
            with self.schema_lock.hold(self.table_name):
                self._reconcile(record)
                sql, params = build(TypeMapper.preprocess(record))
                updated = self.manager.execute_dml(sql, params)
        except AutoTableError as e:
            self.logger.error(f"Failed to {operation.replace('_', ' ')}: {e}")
            raise

        self._track_operation(operation, time.time() - start_time)
        self.logger.debug(f"{operation} updated {updated} rows")
        return updated

    def _track_operation(self, operation: str, duration: float) -> None:
        self.operation_stats['operations'] += 1
        self.operation_stats['total_time'] += duration
        self.logger.debug(f"{operation} took {duration:.3f}s")
