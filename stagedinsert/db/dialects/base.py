from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Sequence

from ..models import ColumnMapping


class StatementBuilder(ABC):
    """
    Renders the SQL text of a batch insert and of its staging round trip.

    Every method is a pure function of its arguments (table name, column
    mappings, staging name) and of the ordinal column name given at
    construction. Dialects override the fragments whose syntax differs;
    the plain INSERT fragments below are shared.

    Placeholders use SQLAlchemy's ``:name`` bind syntax, one per column and
    named after it, so one statement can be executed with many parameter rows.
    """

    # True when the capture statement binds the row position as a parameter.
    binds_ordinal: bool = True

    def __init__(self, ordinal_column: str = "_ordinal") -> None:
        self.ordinal_column = ordinal_column

    @staticmethod
    def join(names: Sequence[str], joiner: str = ", ") -> str:
        return joiner.join(names)

    def placeholder(self, name: str) -> str:
        return f":{name}"

    def insert_clause(self, table: str, columns: Sequence[ColumnMapping]) -> str:
        return f"INSERT INTO {table} ({self.join([c.name for c in columns])})"

    def values_clause(self, columns: Sequence[ColumnMapping]) -> str:
        return f"VALUES ({self.join([self.placeholder(c.name) for c in columns])})"

    def insert_statement(self, table: str, columns: Sequence[ColumnMapping]) -> str:
        return f"{self.insert_clause(table, columns)} {self.values_clause(columns)}"

    def staging_reference(self, staging: str) -> str:
        """How statements refer to the staging table."""
        return staging

    @abstractmethod
    def capture_clause(self, staging: str, auto_columns: Sequence[ColumnMapping]) -> str:
        """Clause redirecting generated values of the inserted rows into the staging table."""
        ...

    def capture_insert_statement(
        self,
        table: str,
        columns: Sequence[ColumnMapping],
        auto_columns: Sequence[ColumnMapping],
        staging: str,
    ) -> str:
        """One statement that both inserts the rows and captures their generated values."""
        return " ".join(
            part
            for part in (
                self.insert_clause(table, columns),
                self.capture_clause(staging, auto_columns),
                self.values_clause(columns),
            )
            if part
        )

    @abstractmethod
    def staging_ddl(
        self,
        table: str,
        staging: str,
        auto_columns: Sequence[ColumnMapping],
    ) -> tuple[str, ...]:
        """Statements that drop the staging table if present and create it afresh."""
        ...

    def staging_select(self, staging: str) -> str:
        return f"SELECT * FROM {self.staging_reference(staging)} ORDER BY {self.ordinal_column}"

    def staging_drop(self, staging: str) -> tuple[str, ...]:
        return (f"DROP TABLE {self.staging_reference(staging)}",)

    def staging_columns(self, auto_columns: Sequence[ColumnMapping]) -> str:
        return self.join([f"{c.name} {c.db_type}" for c in auto_columns])
