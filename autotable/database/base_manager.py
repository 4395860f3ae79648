"""
Base database manager using SQLAlchemy Core
"""

from contextlib import contextmanager
from sqlalchemy import text
from sqlalchemy.engine import Connection, CursorResult, Engine
from sqlalchemy.exc import SQLAlchemyError
from typing import List, Dict, Any, Iterator, Optional, Sequence
import pandas as pd
import logging
import time

from .logging_config import log_query
from .queries.base_queries import BaseQueries
from ..exceptions import DatabaseConnectionError, ExecutionError

logger = logging.getLogger(__name__)


class DatabaseManager:
    """SQL execution port: runs parameterized statements against one engine"""

    def __init__(self, engine: Engine, queries: Optional[BaseQueries] = None):
        """
        Initialize database manager with SQLAlchemy engine

        Args:
            engine: SQLAlchemy Engine instance
            queries: Dialect queries matching the engine
        """
        self.engine = engine
        self.queries = queries or BaseQueries()

    @property
    def db_type(self) -> str:
        return self.queries.name

    @contextmanager
    def _connection(self, transactional: bool = False) -> Iterator[Connection]:
        """Open a connection, optionally wrapped in a transaction"""
        try:
            conn = self.engine.connect()
        except SQLAlchemyError as e:
            logger.error(f"Could not connect to {self.engine.url!r}: {e}")
            raise DatabaseConnectionError(f"Could not connect to database: {e}") from e

        with conn:
            if transactional:
                with conn.begin():
                    yield conn
            else:
                yield conn

    def _execute(self, conn: Connection, query: str,
                 params: Optional[Dict[str, Any]] = None) -> CursorResult:
        start_time = time.time()
        try:
            result = conn.execute(text(query), params or {})
        except SQLAlchemyError as e:
            logger.error(f"Statement failed: {' '.join(query.split())}: {e}")
            raise ExecutionError(f"Statement failed: {e}", statement=query) from e
        log_query(logger, query, params, time.time() - start_time)
        return result

    def execute_query(self, query: str, params: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
        """
        Execute SELECT query

        Args:
            query: SQL query string with named placeholders
            params: Optional query parameters

        Returns:
            List of result dictionaries
        """
        with self._connection() as conn:
            result = self._execute(conn, query, params)
            return [dict(row._mapping) for row in result]

    def execute_query_one(self, query: str, params: Optional[Dict[str, Any]] = None) -> Optional[Dict[str, Any]]:
        """
        Execute SELECT query and return the first row only

        Returns:
            Result dictionary or None when no row matched
        """
        with self._connection() as conn:
            row = self._execute(conn, query, params).first()
            return dict(row._mapping) if row is not None else None

    def execute_ddl(self, query: str, params: Optional[Dict[str, Any]] = None) -> None:
        """
        Execute DDL (CREATE, DROP, ALTER) statement

        Args:
            query: DDL SQL statement
            params: Optional query parameters
        """
        with self._connection(transactional=True) as conn:
            self._execute(conn, query, params)

    def execute_script(self, statements: Sequence[str]) -> None:
        """
        Execute several statements in order inside one transaction

        Args:
            statements: SQL statements without parameters
        """
        with self._connection(transactional=True) as conn:
            for statement in statements:
                self._execute(conn, statement)

    def execute_dml(self, query: str, params: Optional[Dict[str, Any]] = None) -> int:
        """
        Execute DML (INSERT, UPDATE, DELETE) statement

        Args:
            query: DML SQL statement
            params: Optional query parameters

        Returns:
            Number of affected rows
        """
        with self._connection(transactional=True) as conn:
            result = self._execute(conn, query, params)
            return result.rowcount if result.rowcount is not None and result.rowcount >= 0 else 0

    def execute_insert(self, query: str, params: Optional[Dict[str, Any]] = None) -> Any:
        """
        Execute INSERT statement and return the generated primary key

        Statements ending in ``RETURNING id`` read the key from the result,
        all others use the driver's last row id.

        Returns:
            Generated primary key, or None if the driver does not report one
        """
        with self._connection(transactional=True) as conn:
            result = self._execute(conn, query, params)
            if result.returns_rows:
                return result.scalar()
            return result.lastrowid

    def execute_query_df(self, query: str, params: Optional[Dict[str, Any]] = None) -> pd.DataFrame:
        """
        Execute SELECT query and return as DataFrame

        Args:
            query: SQL query string
            params: Optional query parameters

        Returns:
            Pandas DataFrame with results
        """
        with self._connection() as conn:
            try:
                return pd.read_sql(text(query), conn, params=params or {})
            except SQLAlchemyError as e:
                raise ExecutionError(f"Statement failed: {e}", statement=query) from e

    def close(self) -> None:
        """Close database connections"""
        if hasattr(self.engine, 'dispose'):
            self.engine.dispose()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
