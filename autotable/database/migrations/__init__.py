"""
Schema reconciliation tools
"""

from .schema_reconciler import SchemaReconciler
from .locking import NullSchemaLock, ThreadSchemaLock

__all__ = ['SchemaReconciler', 'NullSchemaLock', 'ThreadSchemaLock']
