from __future__ import annotations

from typing import Sequence

from ..models import ColumnMapping
from .base import StatementBuilder


class SqliteStatementBuilder(StatementBuilder):
    """
    SQLite: TEMP table populated by a TEMP trigger on the target table.

    SQLite cannot redirect RETURNING rows into a table, so the capture is an
    ``AFTER INSERT`` trigger copying ``NEW.<column>`` values. The trigger lives
    in the connection's temp schema and only fires for this connection.

    The ordinal is the staging table's INTEGER PRIMARY KEY, assigned in
    capture order; executemany() inserts parameter rows strictly in sequence.

    With the pysqlite driver, use SQLAlchemy's transactional-DDL recipe
    (``isolation_level = None`` on connect, explicit ``BEGIN`` on the
    ``begin`` event) so a rollback also undoes the staging DDL.
    """

    binds_ordinal = False

    def staging_reference(self, staging: str) -> str:
        return f"temp.{staging}"

    def trigger_name(self, staging: str) -> str:
        return f"{staging}_capture"

    def capture_clause(self, staging: str, auto_columns: Sequence[ColumnMapping]) -> str:
        return ""

    def staging_ddl(
        self,
        table: str,
        staging: str,
        auto_columns: Sequence[ColumnMapping],
    ) -> tuple[str, ...]:
        names = [c.name for c in auto_columns]
        # trigger bodies only accept unqualified table names
        target = table.split(".")[-1]
        return (
            f"DROP TRIGGER IF EXISTS temp.{self.trigger_name(staging)}",
            f"DROP TABLE IF EXISTS {self.staging_reference(staging)}",
            f"CREATE TEMP TABLE {staging} ({self.ordinal_column} INTEGER PRIMARY KEY, "
            f"{self.staging_columns(auto_columns)})",
            f"CREATE TEMP TRIGGER {self.trigger_name(staging)} AFTER INSERT ON {target} "
            f"BEGIN INSERT INTO {staging} ({self.join(names)}) "
            f"VALUES ({self.join([f'NEW.{n}' for n in names])}); END",
        )

    def staging_drop(self, staging: str) -> tuple[str, ...]:
        return (
            f"DROP TRIGGER temp.{self.trigger_name(staging)}",
            f"DROP TABLE {self.staging_reference(staging)}",
        )
