"""
Parameterized statement builder.

Identifiers are validated and quoted before they are spliced into statement
text; values only ever travel as named bind parameters.
"""

from enum import Enum
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple
import re
import logging

from .queries.base_queries import BaseQueries
from ..exceptions import InvalidArgumentError

logger = logging.getLogger(__name__)

Statement = Tuple[str, Dict[str, Any]]

_SELECT_PATTERN = re.compile(r'^\s*SELECT\b', re.IGNORECASE)


class EmptyMatch(Enum):
    """Explicit sentinels for empty-match conditions"""

    IS_NULL = 'is_null'
    IS_EMPTY = 'is_empty'


class QueryBuilder:
    """Builds SELECT/INSERT/UPDATE/DELETE text for one dialect"""

    SET_PREFIX = 'set_'
    CONDITION_PREFIX = 'cond_'
    KEY_PARAM = 'pk'

    def __init__(self, queries: BaseQueries):
        self.queries = queries

    @staticmethod
    def is_select(sql: str) -> bool:
        """True when the statement text begins with SELECT"""
        return bool(_SELECT_PATTERN.match(sql))

    @staticmethod
    def projection(all_columns: Iterable[str], exclude: Iterable[str]) -> List[str]:
        """
        Columns left after removing the excluded ones, in table order

        Args:
            all_columns: Live column names
            exclude: Column names to leave out

        Returns:
            Remaining column names
        """
        excluded = set(exclude)
        return [column for column in all_columns if column not in excluded]

    def _columns_clause(self, columns: Optional[Iterable[str]]) -> str:
        if not columns:
            return '*'
        return ', '.join(self.queries.quote(column) for column in columns)

    def select(self, table_name: str, columns: Optional[Iterable[str]] = None,
               where: Optional[Mapping[str, Any]] = None) -> Statement:
        """
        Build SELECT with an optional equality conjunction

        Args:
            table_name: Name of table
            columns: Projection, ``*`` when empty or None
            where: Column to value equality conditions

        Returns:
            (statement, params)
        """
        sql = f"SELECT {self._columns_clause(columns)} FROM {self.queries.quote(table_name)}"
        params: Dict[str, Any] = {}
        if where:
            where_sql, params = self.where_equals(where)
            sql += f" WHERE {where_sql}"
        return sql, params

    def select_by_id(self, table_name: str, record_id: Any) -> Statement:
        sql = f"SELECT * FROM {self.queries.quote(table_name)} WHERE id = :{self.KEY_PARAM}"
        return sql, {self.KEY_PARAM: record_id}

    def count(self, table_name: str) -> Statement:
        return f"SELECT COUNT(*) AS n FROM {self.queries.quote(table_name)}", {}

    def insert(self, table_name: str, record: Mapping[str, Any]) -> Statement:
        """
        Build INSERT for the record's columns, in record order

        Args:
            table_name: Name of table
            record: Preprocessed record

        Returns:
            (statement, params)
        """
        if not record:
            raise InvalidArgumentError("Nothing to insert")
        columns = ', '.join(self.queries.quote(column) for column in record)
        placeholders = ', '.join(f":{column}" for column in record)
        sql = (
            f"INSERT INTO {self.queries.quote(table_name)} ({columns}) "
            f"VALUES ({placeholders}){self.queries.insert_suffix}"
        )
        return sql, dict(record)

    def set_clause(self, record: Mapping[str, Any]) -> Statement:
        """Build ``col = :set_col, ...`` for an UPDATE"""
        if not record:
            raise InvalidArgumentError("No data to update")
        assignments = []
        params = {}
        for column, value in record.items():
            assignments.append(f"{self.queries.quote(column)} = :{self.SET_PREFIX}{column}")
            params[f"{self.SET_PREFIX}{column}"] = value
        return ', '.join(assignments), params

    def where_equals(self, conditions: Mapping[str, Any]) -> Statement:
        """
        Build an AND of equality predicates

        Args:
            conditions: Column to value mapping

        Returns:
            (predicate text, params)
        """
        if not conditions:
            raise InvalidArgumentError("Condition set is empty")
        predicates = []
        params = {}
        for column, value in conditions.items():
            predicates.append(f"{self.queries.quote(column)} = :{self.CONDITION_PREFIX}{column}")
            params[f"{self.CONDITION_PREFIX}{column}"] = value
        return ' AND '.join(predicates), params

    def where_empty(self, conditions: Mapping[str, Any]) -> str:
        """
        Build an OR of emptiness predicates

        A condition value of None (or EmptyMatch.IS_NULL) means ``IS NULL``,
        an empty string (or EmptyMatch.IS_EMPTY) means ``= ''``. Any other
        value produces no predicate and is dropped.

        Args:
            conditions: Column to value mapping

        Returns:
            Predicate text, empty when every condition was dropped
        """
        predicates = []
        for column, value in conditions.items():
            quoted = self.queries.quote(column)
            if value is None or value is EmptyMatch.IS_NULL:
                predicates.append(f"{quoted} IS NULL")
            elif value == '' or value is EmptyMatch.IS_EMPTY:
                predicates.append(f"{quoted} = ''")
            else:
                logger.debug(f"Dropping condition on {column}: {value!r} is neither null nor empty")
        return ' OR '.join(predicates)

    def update(self, table_name: str, record: Mapping[str, Any],
               where_sql: str = '', where_params: Optional[Mapping[str, Any]] = None) -> Statement:
        """
        Build UPDATE with an already built WHERE predicate

        Args:
            table_name: Name of table
            record: Preprocessed values to set
            where_sql: Predicate text, no WHERE clause when empty
            where_params: Parameters used by the predicate

        Returns:
            (statement, params)
        """
        set_sql, params = self.set_clause(record)
        sql = f"UPDATE {self.queries.quote(table_name)} SET {set_sql}"
        if where_sql:
            sql += f" WHERE {where_sql}"
        params.update(where_params or {})
        return sql, params

    def update_by_id(self, table_name: str, record: Mapping[str, Any], record_id: Any) -> Statement:
        return self.update(table_name, record, f"id = :{self.KEY_PARAM}", {self.KEY_PARAM: record_id})

    def update_where(self, table_name: str, record: Mapping[str, Any],
                     conditions: Mapping[str, Any]) -> Statement:
        where_sql, where_params = self.where_equals(conditions)
        return self.update(table_name, record, where_sql, where_params)

    def update_where_empty(self, table_name: str, record: Mapping[str, Any],
                           conditions: Mapping[str, Any]) -> Statement:
        where_sql = self.where_empty(conditions)
        if not where_sql:
            raise InvalidArgumentError(
                "No empty-match condition left: every value was neither None nor ''"
            )
        return self.update(table_name, record, where_sql)

    def delete_by_id(self, table_name: str, record_id: Any) -> Statement:
        sql = f"DELETE FROM {self.queries.quote(table_name)} WHERE id = :{self.KEY_PARAM}"
        return sql, {self.KEY_PARAM: record_id}
