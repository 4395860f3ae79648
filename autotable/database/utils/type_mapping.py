"""
Type mapping utilities: runtime values to column types and bind values
"""

from datetime import datetime
from enum import Enum
from typing import Dict, Any, Mapping
import json
import logging

logger = logging.getLogger(__name__)

TIMESTAMP_FORMAT = '%Y-%m-%d %H:%M:%S'

# Longest string stored as VARCHAR(255); anything longer goes to TEXT
VARCHAR_MAX_LENGTH = 255


class ColumnType(str, Enum):
    """Storage column types, spelled the way MySQL reports them"""

    INT = 'INT'
    FLOAT = 'FLOAT'
    BOOLEAN_AS_TINYINT = 'TINYINT(1)'
    VARCHAR = 'VARCHAR(255)'
    TEXT = 'TEXT'
    DATETIME = 'DATETIME'

    def __str__(self) -> str:
        return self.value


class TypeMapper:
    """Utility for mapping Python values to column types and bind values"""

    @classmethod
    def infer_type(cls, value: Any) -> ColumnType:
        """
        Determine the column type for a value

        Args:
            value: Runtime value taken from a record

        Returns:
            ColumnType the value should be stored as
        """
        if isinstance(value, datetime):
            return ColumnType.DATETIME
        # bool is a subclass of int, so it must be checked first
        elif isinstance(value, bool):
            return ColumnType.BOOLEAN_AS_TINYINT
        elif isinstance(value, int):
            return ColumnType.INT
        elif isinstance(value, float):
            return ColumnType.FLOAT
        elif isinstance(value, str):
            return cls._get_string_type(value)
        else:
            # None, nested structures and anything without a scalar mapping
            return ColumnType.TEXT

    @classmethod
    def _get_string_type(cls, value: str) -> ColumnType:
        """Get string type based on length"""
        if len(value) > VARCHAR_MAX_LENGTH:
            return ColumnType.TEXT
        return ColumnType.VARCHAR

    @classmethod
    def infer_types(cls, record: Mapping[str, Any]) -> Dict[str, ColumnType]:
        """Infer a column type for every key of a record, keeping key order"""
        return {column: cls.infer_type(value) for column, value in record.items()}

    @classmethod
    def preprocess_value(cls, value: Any) -> Any:
        """
        Convert a value to the representation bound into queries

        Args:
            value: Runtime value

        Returns:
            Bind-ready value
        """
        if isinstance(value, datetime):
            return value.strftime(TIMESTAMP_FORMAT)
        elif isinstance(value, bool):
            return 1 if value else 0
        elif isinstance(value, (dict, list, tuple)):
            return json.dumps(value, default=str)
        elif value is None or isinstance(value, (int, float, str, bytes)):
            return value
        else:
            logger.debug(f"Serializing {type(value).__name__} value as text")
            return str(value)

    @classmethod
    def preprocess(cls, record: Mapping[str, Any]) -> Dict[str, Any]:
        """
        Convert every value of a record to its bind representation

        Args:
            record: Column name to value mapping

        Returns:
            New dictionary with the same keys in the same order
        """
        return {column: cls.preprocess_value(value) for column, value in record.items()}
