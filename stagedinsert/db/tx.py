from __future__ import annotations

from typing import Any, Mapping, Protocol, Sequence

from sqlalchemy.sql.elements import TextClause


class DbTx(Protocol):
    """
    Protocol for the statement-level capabilities the staging round trip needs.

    InsertSession implements it on top of a SQLAlchemy Connection; tests may
    substitute a recording fake.
    """

    def execute(
        self,
        sql: str | TextClause,
        params: Mapping[str, Any] | None = None,
    ) -> int:
        """Execute a single statement and return affected row count."""
        ...

    def execute_many(
        self,
        sql: str | TextClause,
        rows: Sequence[Mapping[str, Any]],
    ) -> int:
        """Execute one statement for many parameter rows (executemany)."""
        ...

    def fetch_all(
        self,
        sql: str | TextClause,
        params: Mapping[str, Any] | None = None,
    ) -> list[dict[str, Any]]:
        """Execute a SELECT returning multiple rows."""
        ...
