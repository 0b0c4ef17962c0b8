from .base import StatementBuilder
from .mssql import MssqlStatementBuilder
from .postgresql import PostgresStatementBuilder
from .sqlite import SqliteStatementBuilder
from ...errors import ConfigurationError

_BUILDERS: dict[str, type[StatementBuilder]] = {
    "mssql": MssqlStatementBuilder,
    "postgresql": PostgresStatementBuilder,
    "sqlite": SqliteStatementBuilder,
}


def make_statement_builder(dialect_name: str, ordinal_column: str = "_ordinal") -> StatementBuilder:
    """
    Create the statement builder for a SQLAlchemy dialect name
    (``connection.dialect.name``).
    """
    try:
        builder_cls = _BUILDERS[dialect_name]
    except KeyError:
        raise ConfigurationError(
            f"Unsupported dialect {dialect_name!r}; "
            f"supported: {', '.join(sorted(_BUILDERS))}. "
            "Pass a StatementBuilder explicitly for other databases."
        ) from None
    return builder_cls(ordinal_column)


__all__ = [
    "StatementBuilder",
    "MssqlStatementBuilder",
    "PostgresStatementBuilder",
    "SqliteStatementBuilder",
    "make_statement_builder",
]
