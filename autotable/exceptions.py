"""Error hierarchy for the autotable data-access layer.

Every public operation raises one of these; nothing is retried internally.
"""

from typing import Any, Optional


class AutoTableError(Exception):
    """Base exception for all autotable errors."""
    pass


class DatabaseConnectionError(AutoTableError):
    """Raised when the database cannot be reached or configured."""
    pass


class RecordNotFoundError(AutoTableError, LookupError):
    """Raised when an operation targets a primary key with no matching row."""

    def __init__(self, table: str, record_id: Any):
        self.table = table
        self.record_id = record_id
        super().__init__(f"Record with id {record_id!r} not found in table '{table}'")


class InvalidArgumentError(AutoTableError, ValueError):
    """Raised for empty payloads, empty column names or malformed conditions."""
    pass


class QueryInjectionError(InvalidArgumentError):
    """Raised when an identifier fails validation before being spliced into SQL."""
    pass


class ExecutionError(AutoTableError):
    """Raised when the engine rejects a DDL or DML statement."""

    def __init__(self, message: str, statement: Optional[str] = None):
        self.statement = statement
        super().__init__(message)
