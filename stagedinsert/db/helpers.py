from __future__ import annotations

import re
from collections.abc import Iterator, Sequence
from typing import TypeVar

from ..errors import ConfigurationError

T = TypeVar("T")

_IDENTIFIER_RE = re.compile(r"^[a-zA-Z_][a-zA-Z0-9_]*$")
_MAX_IDENTIFIER_LENGTH = 128


def validate_identifier(name: str, identifier_type: str = "identifier") -> str:
    """
    Validate that an identifier (column name) is safe for SQL interpolation.

    SQL Server, PostgreSQL and SQLite all accept a wider identifier alphabet
    when quoted, but identifiers are interpolated unquoted here, so we restrict
    to alphanumeric + underscore.

    ⚠️ SECURITY CONTRACT ⚠️
    This function validates identifier format but does NOT make untrusted
    input safe. Table and column names MUST come from the inserter definition
    (hardcoded), never from user input.

    Args:
        name: The identifier to validate
        identifier_type: Description of the identifier (for error messages)

    Returns:
        The validated identifier (unchanged if valid)

    Raises:
        ConfigurationError: If the identifier is not a string, is empty,
            contains unsafe characters or is too long

    Example:
        >>> validate_identifier("customer_id", "column")
        'customer_id'
        >>> validate_identifier("'; DROP TABLE--", "column")
        ConfigurationError: Invalid column "'; DROP TABLE--": ...
    """
    if not isinstance(name, str):
        raise ConfigurationError(
            f"{identifier_type} must be a string, got {type(name).__name__}"
        )

    if not name:
        raise ConfigurationError(f"{identifier_type} cannot be empty")

    if not _IDENTIFIER_RE.match(name):
        raise ConfigurationError(
            f"Invalid {identifier_type} {name!r}: "
            "must start with letter/underscore and contain only alphanumeric characters and underscores"
        )

    if len(name) > _MAX_IDENTIFIER_LENGTH:
        raise ConfigurationError(
            f"{identifier_type} {name!r} exceeds the {_MAX_IDENTIFIER_LENGTH}-character limit"
        )

    return name


def validate_table_name(table: str) -> str:
    """
    Validate a possibly schema-qualified table name such as ``dbo.orders``.

    Each dot-separated part must be a valid identifier.
    """
    if not isinstance(table, str) or not table:
        raise ConfigurationError("table name must be a non-empty string")
    for part in table.split("."):
        validate_identifier(part, "table name part")
    return table


def chunked(rows: Sequence[T], size: int) -> Iterator[Sequence[T]]:
    """Yield consecutive slices of ``rows`` holding at most ``size`` items."""
    for start in range(0, len(rows), size):
        yield rows[start:start + size]
