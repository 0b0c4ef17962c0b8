from __future__ import annotations

from typing import Sequence

from ..models import ColumnMapping
from .base import StatementBuilder


class MssqlStatementBuilder(StatementBuilder):
    """
    SQL Server: ``#`` temp table plus ``OUTPUT ... INTO`` between the column
    list and VALUES.

    The ordinal is bound per parameter row and written by the OUTPUT clause
    next to the generated values.

    The staging DDL must run without bind parameters: pyodbc then executes it
    directly instead of through sp_prepexec, which keeps the ``#`` table
    visible to the rest of the session.
    """

    def staging_reference(self, staging: str) -> str:
        return f"#{staging}"

    def capture_clause(self, staging: str, auto_columns: Sequence[ColumnMapping]) -> str:
        outputs = self.join(
            [f"INSERTED.{c.name}" for c in auto_columns] + [self.placeholder(self.ordinal_column)]
        )
        targets = self.join([c.name for c in auto_columns] + [self.ordinal_column])
        return f"OUTPUT {outputs} INTO {self.staging_reference(staging)} ({targets})"

    def staging_ddl(
        self,
        table: str,
        staging: str,
        auto_columns: Sequence[ColumnMapping],
    ) -> tuple[str, ...]:
        ref = self.staging_reference(staging)
        return (
            f"IF OBJECT_ID('tempdb..{ref}') IS NOT NULL DROP TABLE {ref}",
            f"CREATE TABLE {ref} ({self.ordinal_column} INT NOT NULL, "
            f"{self.staging_columns(auto_columns)})",
        )
