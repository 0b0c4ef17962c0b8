from __future__ import annotations

import logging
import time
from abc import ABC, abstractmethod
from typing import Any, Callable, Generic, Optional, Sequence, TypeVar

from sqlalchemy.engine import Connection, Transaction

from ..config import InsertConfig
from ..errors import ConfigurationError
from .dialects import StatementBuilder, make_statement_builder
from .helpers import chunked, validate_table_name
from .metrics import observe_batch_insert
from .models import ColumnMapping
from .naming import StagingNameSource
from .registry import MappingRegistry
from .session import InsertSession, ensure_transaction_belongs
from .staging import StagingRoundTrip

logger = logging.getLogger(__name__)

T = TypeVar("T")


class BaseInserter(ABC, Generic[T]):
    """
    Batch INSERT of records of one type, with read-back of generated columns.

    Subclasses register their columns in ``__init__`` and implement
    ``merge()`` to fold generated values into a record:

        class PersonInserter(BaseInserter[Person]):
            def __init__(self) -> None:
                super().__init__("people")
                self.register_auto_column("id", "INT")
                self.register_plain_column("name", lambda p: p.name)

            def merge(self, original, auto_values):
                return dataclasses.replace(original, id=auto_values["id"])

        with engine.connect() as conn:
            people = PersonInserter().insert(people, conn)

    Without auto-generated columns the batch is a single executemany()
    INSERT. With them, the insert goes through a StagingRoundTrip.

    Column mappings are fixed the first time ``insert()`` runs. An inserter
    holds no per-call state and may be shared between threads, as long as
    each thread uses its own connection.
    """

    def __init__(
        self,
        table: str,
        config: Optional[InsertConfig] = None,
        builder: Optional[StatementBuilder] = None,
        name_source: Optional[Callable[[str], str]] = None,
    ) -> None:
        self.table = validate_table_name(table)
        self.config = config or InsertConfig()
        self.builder = builder
        self.name_source = name_source or StagingNameSource(self.config.staging_name_max_length)
        self.registry: MappingRegistry[T] = MappingRegistry(reserved=(self.config.ordinal_column,))

    @property
    def table_name(self) -> str:
        return self.table

    def register_plain_column(self, name: str, extractor: Callable[[T], Any]) -> ColumnMapping[T]:
        """Map a column to a value computed from the record."""
        return self.registry.add_plain(name, extractor)

    def register_auto_column(self, name: str, db_type: str) -> ColumnMapping[T]:
        """Declare a database-generated column to read back after insert."""
        return self.registry.add_auto(name, db_type)

    def project(self, record: T) -> dict[str, Any]:
        return self.registry.project(record)

    @abstractmethod
    def merge(self, original: T, auto_values: dict[str, Any]) -> T:
        """
        Return ``original`` with the generated values applied.

        Called once per record after a successful read-back; must not do I/O.
        """
        ...

    def insert(
        self,
        items: Sequence[T],
        connection: Connection,
        transaction: Optional[Transaction] = None,
    ) -> Sequence[T]:
        """
        Insert ``items`` and return them with generated values merged in.

        If ``transaction`` is given it must belong to ``connection``; the
        caller keeps ownership and must commit or roll it back. Otherwise a
        transaction is begun here and committed on success or rolled back
        on any error; on a connection that has already autobegun one, that
        is a SAVEPOINT and the outer transaction is left to the caller.

        Returns:
            ``items`` itself when there are no auto-generated columns (or no
            items), else a new list aligned with ``items``

        Raises:
            PreconditionError: If the transaction belongs to another connection
            ConfigurationError: If no plain column is registered or the
                dialect is unsupported
            RetrievalError: If generated values could not be read back
            sqlalchemy.exc.SQLAlchemyError: Any statement or transaction failure
        """
        ensure_transaction_belongs(connection, transaction)
        if not items:
            return items

        self.registry.freeze()
        columns = self.registry.plain_columns()
        auto_columns = self.registry.auto_columns()
        if not columns:
            raise ConfigurationError(
                f"Inserter for {self.table} has no plain columns; nothing to insert"
            )

        builder = self.builder or make_statement_builder(
            connection.dialect.name, self.config.ordinal_column
        )
        rows = [self.registry.project(item) for item in items]
        mode = "staged" if auto_columns else "plain"

        logger.debug(
            "Inserting %d rows into %s (%s, %d plain / %d auto columns)",
            len(rows), self.table, mode, len(columns), len(auto_columns),
        )

        start_time = time.monotonic()
        status = "success"
        try:
            with InsertSession(connection, transaction) as session:
                if auto_columns:
                    round_trip = StagingRoundTrip(
                        session,
                        builder,
                        self.table,
                        columns,
                        auto_columns,
                        self.name_source(self.table),
                        chunk_size=self.config.chunk_size,
                    )
                    result: Sequence[T] = round_trip.run(items, rows, self.merge)
                else:
                    sql = builder.insert_statement(self.table, columns)
                    for chunk in chunked(rows, self.config.chunk_size):
                        session.execute_many(sql, chunk)
                    result = items
        except Exception:
            status = "error"
            raise
        finally:
            observe_batch_insert(
                table=self.table,
                mode=mode,
                status=status,
                rows=len(rows),
                latency_s=time.monotonic() - start_time,
            )

        logger.info("Inserted %d rows into %s (%s)", len(rows), self.table, mode)
        return result
