from __future__ import annotations

import logging
from typing import Any, Mapping, Optional, Sequence

from sqlalchemy import text
from sqlalchemy.engine import Connection, Transaction
from sqlalchemy.sql import TextClause

from ..errors import PreconditionError

logger = logging.getLogger(__name__)


def ensure_transaction_belongs(
    connection: Connection,
    transaction: Optional[Transaction],
) -> None:
    """
    Raise PreconditionError if ``transaction`` was begun on another connection.

    Performs no I/O.
    """
    if transaction is not None and transaction.connection is not connection:
        raise PreconditionError(
            "transaction/connection mismatch: the transaction was started by a different connection"
        )


class InsertSession:
    """
    Transaction scope for one batch insert on a SQLAlchemy Connection.

    If a transaction is supplied it is joined and left alone: the caller owns
    it and decides whether to commit or roll back. Otherwise a new transaction
    is begun on enter and finalized on exit, committed on success and rolled
    back on any exception. If the connection has already autobegun a
    transaction, the owned scope is a SAVEPOINT inside it and the outer
    transaction stays with the caller.

    Use as:
        with InsertSession(conn) as session:
            session.execute_many("INSERT INTO t (a) VALUES (:a)", rows)
            rows = session.fetch_all("SELECT * FROM t")
    """

    def __init__(
        self,
        connection: Connection,
        transaction: Optional[Transaction] = None,
    ) -> None:
        ensure_transaction_belongs(connection, transaction)
        self.connection = connection
        self._external_tx = transaction
        self._tx: Optional[Transaction] = None
        self._owned = False

    @property
    def owns_transaction(self) -> bool:
        return self._owned

    def __enter__(self) -> "InsertSession":
        if self._tx is not None:
            raise RuntimeError("InsertSession is already active; nested sessions are not allowed")
        if self._external_tx is not None:
            self._tx = self._external_tx
            self._owned = False
        elif self.connection.in_transaction():
            # autobegun by an earlier statement; the caller still owns it
            logger.debug("Connection already in a transaction; using a SAVEPOINT")
            self._tx = self.connection.begin_nested()
            self._owned = True
        else:
            self._tx = self.connection.begin()
            self._owned = True
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        try:
            if self._owned and self._tx is not None:
                if exc_type:
                    logger.debug("Rolling back insert transaction after %s", exc_type.__name__)
                    self._tx.rollback()
                else:
                    self._tx.commit()
        finally:
            self._tx = None
            self._owned = False

        # propagate exceptions (if any)
        return False

    def _connection(self) -> Connection:
        if self._tx is None:
            raise RuntimeError("InsertSession is not active; use within a context manager")
        return self.connection

    def execute(
        self,
        sql: str | TextClause,
        params: Mapping[str, Any] | None = None,
    ) -> int:
        """
        Execute a single statement and return the affected row count.

        DDL statements usually report -1.
        """
        conn = self._connection()
        stmt = text(sql) if isinstance(sql, str) else sql
        result = conn.execute(stmt, params or {})
        try:
            return int(result.rowcount)
        finally:
            result.close()

    def execute_many(
        self,
        sql: str | TextClause,
        rows: Sequence[Mapping[str, Any]],
    ) -> int:
        """
        Execute one statement for every parameter row in a single call.

        SQLAlchemy hands the list to the driver's executemany(), so the
        statement is sent once for the whole batch.
        """
        if not rows:
            return 0
        conn = self._connection()
        stmt = text(sql) if isinstance(sql, str) else sql
        result = conn.execute(stmt, list(rows))
        try:
            return int(result.rowcount)
        finally:
            result.close()

    def fetch_all(
        self,
        sql: str | TextClause,
        params: Mapping[str, Any] | None = None,
    ) -> list[dict[str, Any]]:
        """
        Execute a SELECT expected to return multiple rows.
        """
        conn = self._connection()
        stmt = text(sql) if isinstance(sql, str) else sql
        result = conn.execute(stmt, params or {})
        try:
            return [dict(row) for row in result.mappings()]
        finally:
            result.close()
