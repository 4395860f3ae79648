"""Security utilities for SQL identifiers.

Table and column names cannot travel through bind parameters, so they are
spliced into statement text. This module makes that safe:
- Identifier validation against an allow-listed pattern
- Dialect-aware identifier quoting
- Log sanitization for statements logged with their parameters
"""

import re
from typing import Iterable, List
import logging

from .exceptions import QueryInjectionError

logger = logging.getLogger(__name__)


class SecureQueryBuilder:
    """Validates and quotes identifiers before they reach SQL text."""

    # Alphanumeric and underscore only (dash can be an SQL operator)
    IDENTIFIER_PATTERN = re.compile(r'^[A-Za-z_][A-Za-z0-9_]*$')

    # MySQL's limit, the strictest of the supported engines
    MAX_IDENTIFIER_LENGTH = 64

    @classmethod
    def validate_identifier(cls, identifier: str, kind: str = 'identifier') -> str:
        """Validate an identifier for safety.

        Args:
            identifier: Name to validate
            kind: Human readable kind used in the error message

        Returns:
            The identifier, unchanged

        Raises:
            QueryInjectionError: If the name contains characters outside the allow-list
        """
        if not isinstance(identifier, str) or not cls.IDENTIFIER_PATTERN.match(identifier):
            logger.warning(f"Rejected {kind} name {identifier!r}")
            raise QueryInjectionError(
                f"{kind.capitalize()} name {identifier!r} contains invalid characters"
            )
        if len(identifier) > cls.MAX_IDENTIFIER_LENGTH:
            raise QueryInjectionError(
                f"{kind.capitalize()} name {identifier!r} exceeds "
                f"{cls.MAX_IDENTIFIER_LENGTH} characters"
            )
        return identifier

    @classmethod
    def validate_table_name(cls, table_name: str) -> str:
        """Validate table name against the identifier pattern."""
        return cls.validate_identifier(table_name, 'table')

    @classmethod
    def validate_column_name(cls, column_name: str) -> str:
        """Validate column name against the identifier pattern."""
        return cls.validate_identifier(column_name, 'column')

    @classmethod
    def validate_column_names(cls, column_names: Iterable[str]) -> List[str]:
        return [cls.validate_column_name(name) for name in column_names]

    @classmethod
    def escape_identifier(cls, identifier: str, quote_char: str = '"') -> str:
        """Quote an already validated identifier.

        Args:
            identifier: Identifier to escape
            quote_char: Dialect quote character (backtick for MySQL)

        Returns:
            Quoted identifier
        """
        escaped = identifier.replace(quote_char, quote_char * 2)
        return f"{quote_char}{escaped}{quote_char}"


def sanitize_log_message(message: str) -> str:
    """Remove credentials from log messages.

    Args:
        message: Log message to sanitize

    Returns:
        Sanitized message
    """
    # Bound parameters are logged as 'password': 'value'
    message = re.sub(
        r"""(['"]?(?:password|passwd|token|secret|api_key)['"]?\s*[=:]\s*)('[^']*'|"[^"]*"|[^\s,}]+)""",
        r'\1***REDACTED***',
        message,
        flags=re.IGNORECASE
    )

    # Credentials embedded in connection URLs
    message = re.sub(r'(://[^:/\s]+:)[^@\s]+@', r'\1***@', message)

    return message


class SensitiveDataFilter(logging.Filter):
    """Logging filter that removes credentials from records."""

    def filter(self, record: logging.LogRecord) -> bool:
        if record.args:
            record.msg = record.getMessage()
            record.args = None
        record.msg = sanitize_log_message(str(record.msg))
        return True
