from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Callable, Mapping, Sequence, TypeVar

from ..errors import RetrievalError
from .dialects.base import StatementBuilder
from .helpers import chunked
from .metrics import observe_staging_cleanup_failure
from .models import ColumnMapping
from .tx import DbTx

logger = logging.getLogger(__name__)

T = TypeVar("T")


class StagingState(str, Enum):
    PENDING = "pending"
    CREATED = "created"
    POPULATED = "populated"
    READ = "read"
    DROPPED = "dropped"


class StagingRoundTrip:
    """
    Insert a batch and read back its database-generated values through a
    staging table.

    The steps run strictly in order, inside the caller's transaction:

        CREATED    drop-if-exists + create the staging table
        POPULATED  one insert statement, executed for all parameter rows,
                   that also captures the generated values into staging
        READ       select the captured rows ordered by the ordinal column
        DROPPED    drop the staging table (always attempted)

    Read-back is aligned with the input by the ordinal column, never by the
    order in which the server happens to return rows.

    An instance runs once.
    """

    def __init__(
        self,
        session: DbTx,
        builder: StatementBuilder,
        table: str,
        columns: Sequence[ColumnMapping],
        auto_columns: Sequence[ColumnMapping],
        staging_name: str,
        chunk_size: int = 10_000,
    ) -> None:
        self.session = session
        self.builder = builder
        self.table = table
        self.columns = list(columns)
        self.auto_columns = list(auto_columns)
        self.staging_name = staging_name
        self.chunk_size = chunk_size
        self.state = StagingState.PENDING

    def run(
        self,
        items: Sequence[T],
        rows: Sequence[Mapping[str, Any]],
        merge: Callable[[T, dict[str, Any]], T],
    ) -> list[T]:
        """
        Execute the round trip and return ``merge(items[i], values[i])`` for
        every position i.

        Raises:
            RetrievalError: If the staging read does not return exactly one
                aligned row per item
            RuntimeError: If this round trip already ran
        """
        if self.state != StagingState.PENDING:
            raise RuntimeError(f"Staging round trip already ran (state={self.state.value})")

        failed = True
        try:
            self._create()
            self._populate(rows)
            values = self._read(len(items))
            merged = [merge(item, auto_values) for item, auto_values in zip(items, values)]
            failed = False
            return merged
        finally:
            self._drop(superseded=failed)

    def _create(self) -> None:
        for stmt in self.builder.staging_ddl(self.table, self.staging_name, self.auto_columns):
            self.session.execute(stmt)
        self.state = StagingState.CREATED
        logger.debug("Created staging table %s for %s", self.staging_name, self.table)

    def _populate(self, rows: Sequence[Mapping[str, Any]]) -> None:
        sql = self.builder.capture_insert_statement(
            self.table, self.columns, self.auto_columns, self.staging_name
        )
        if self.builder.binds_ordinal:
            ordinal = self.builder.ordinal_column
            rows = [{**row, ordinal: position} for position, row in enumerate(rows)]

        for chunk in chunked(rows, self.chunk_size):
            self.session.execute_many(sql, chunk)
        self.state = StagingState.POPULATED
        logger.debug("Inserted %d rows into %s capturing into %s", len(rows), self.table, self.staging_name)

    def _read(self, expected: int) -> list[dict[str, Any]]:
        rows = self.session.fetch_all(self.builder.staging_select(self.staging_name))
        self.state = StagingState.READ

        if not rows:
            raise RetrievalError(
                f"no rows returned from staging table {self.staging_name} "
                f"after inserting {expected} rows into {self.table}"
            )
        if len(rows) != expected:
            raise RetrievalError(
                f"row count mismatch: staging table {self.staging_name} returned "
                f"{len(rows)} rows for {expected} inserted into {self.table}"
            )

        # servers may fold unquoted identifiers (PostgreSQL lowercases them)
        names = {c.name.lower(): c.name for c in self.auto_columns}
        ordinal = self.builder.ordinal_column
        names[ordinal.lower()] = ordinal

        values = []
        for position, row in enumerate(rows):
            normalized = {names.get(key.lower(), key): value for key, value in row.items()}
            seen = normalized.pop(ordinal, None)
            if self.builder.binds_ordinal and seen != position:
                raise RetrievalError(
                    f"ordinal mismatch: staging row {position} of {self.staging_name} "
                    f"carries ordinal {seen!r}"
                )
            values.append(normalized)
        return values

    def _drop(self, superseded: bool) -> None:
        try:
            for stmt in self.builder.staging_drop(self.staging_name):
                self.session.execute(stmt)
        except Exception:
            if not superseded:
                raise
            # the error already propagating takes precedence; rollback discards the table
            logger.exception(
                "Failed to drop staging table %s for %s", self.staging_name, self.table
            )
            observe_staging_cleanup_failure(self.table)
            return

        self.state = StagingState.DROPPED
        logger.debug("Dropped staging table %s", self.staging_name)
