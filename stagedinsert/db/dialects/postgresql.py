from __future__ import annotations

from typing import Sequence

from ..models import ColumnMapping
from .base import StatementBuilder


class PostgresStatementBuilder(StatementBuilder):
    """
    PostgreSQL: TEMPORARY table fed by a data-modifying CTE.

    PostgreSQL has no OUTPUT ... INTO, so the capture insert wraps the
    INSERT ... RETURNING in a CTE whose rows are inserted into the staging
    table together with the bound ordinal.
    """

    def capture_clause(self, staging: str, auto_columns: Sequence[ColumnMapping]) -> str:
        return f"RETURNING {self.join([c.name for c in auto_columns])}"

    def capture_insert_statement(
        self,
        table: str,
        columns: Sequence[ColumnMapping],
        auto_columns: Sequence[ColumnMapping],
        staging: str,
    ) -> str:
        names = [c.name for c in auto_columns]
        return (
            f"WITH inserted AS ({self.insert_statement(table, columns)} "
            f"{self.capture_clause(staging, auto_columns)}) "
            f"INSERT INTO {self.staging_reference(staging)} "
            f"({self.join(names + [self.ordinal_column])}) "
            f"SELECT {self.join(names)}, "
            f"CAST({self.placeholder(self.ordinal_column)} AS INTEGER) FROM inserted"
        )

    def staging_ddl(
        self,
        table: str,
        staging: str,
        auto_columns: Sequence[ColumnMapping],
    ) -> tuple[str, ...]:
        ref = self.staging_reference(staging)
        return (
            f"DROP TABLE IF EXISTS {ref}",
            f"CREATE TEMPORARY TABLE {ref} ({self.ordinal_column} INTEGER NOT NULL, "
            f"{self.staging_columns(auto_columns)})",
        )
