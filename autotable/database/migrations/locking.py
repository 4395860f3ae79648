"""
Serialization strategies for schema reconciliation.

Reconciliation is a sequence of round trips (inspect, alter, write) with no
atomicity across them. Two writers may both see a column as absent and both
try to add it; the second ADD then fails with an ExecutionError. The
repository takes one of these locks to decide whether that race is left open.
"""

from contextlib import contextmanager
from typing import Dict, Iterator
import threading
import logging

logger = logging.getLogger(__name__)


class NullSchemaLock:
    """No serialization: every caller reconciles and writes independently"""

    @contextmanager
    def hold(self, table_name: str) -> Iterator[None]:
        yield


class ThreadSchemaLock:
    """
    One re-entrant lock per table name, shared by every repository that
    uses the same ThreadSchemaLock instance.

    Only serializes threads of the current process; other processes
    writing to the same table are not covered.
    """

    def __init__(self):
        self._guard = threading.Lock()
        self._locks: Dict[str, threading.RLock] = {}

    def _lock_for(self, table_name: str) -> threading.RLock:
        with self._guard:
            if table_name not in self._locks:
                self._locks[table_name] = threading.RLock()
            return self._locks[table_name]

    @contextmanager
    def hold(self, table_name: str) -> Iterator[None]:
        lock = self._lock_for(table_name)
        with lock:
            logger.debug(f"Acquired schema lock for {table_name}")
            yield
