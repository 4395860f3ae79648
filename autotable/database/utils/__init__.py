"""
Database utilities
"""

from .type_mapping import TypeMapper, ColumnType
from .connection_utils import ConnectionUtils

__all__ = [
    'TypeMapper',
    'ColumnType',
    'ConnectionUtils'
]
