"""
Database layer: engines, dialect queries, introspection and reconciliation
"""

from .base_manager import DatabaseManager
from .config import DatabaseConfig
from .engine_factory import DatabaseFactory
from .inspector import SchemaInspector
from .query_builder import QueryBuilder, EmptyMatch
from .migrations import SchemaReconciler, NullSchemaLock, ThreadSchemaLock
from .utils import ColumnType, TypeMapper

__all__ = [
    'DatabaseManager',
    'DatabaseConfig',
    'DatabaseFactory',
    'SchemaInspector',
    'QueryBuilder',
    'EmptyMatch',
    'SchemaReconciler',
    'NullSchemaLock',
    'ThreadSchemaLock',
    'ColumnType',
    'TypeMapper'
]
