from __future__ import annotations

import re
from collections.abc import Callable, Iterator

import pytest
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Connection, Engine


@pytest.fixture
def sqlite_url(tmp_path) -> str:
    """
    File-backed SQLite database, fresh for every test.

    A file (rather than :memory:) lets a second connection observe what the
    first one committed.
    """
    return f"sqlite:///{tmp_path / 'stagedinsert.db'}"


@pytest.fixture
def engine(sqlite_url: str) -> Iterator[Engine]:
    """
    SQLAlchemy engine with transactional DDL.

    pysqlite only begins transactions implicitly before DML, so the staging
    DDL would escape a rollback. SQLAlchemy's documented recipe takes
    transaction control away from the driver and emits BEGIN itself.
    """
    eng = create_engine(sqlite_url)

    @event.listens_for(eng, "connect")
    def _disable_driver_transactions(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(eng, "begin")
    def _emit_begin(conn):
        conn.exec_driver_sql("BEGIN")

    yield eng
    eng.dispose()


def _sanitize_table_name(name: str) -> str:
    name = re.sub(r"[^a-zA-Z0-9_]+", "_", name).strip("_").lower()
    if not name:
        name = "t"
    return name[:48]


@pytest.fixture
def table_factory(engine: Engine) -> Callable[[str, str], str]:
    """
    Factory fixture creating tables in the per-test database.

    Usage:
        table = table_factory("people", "id INTEGER PRIMARY KEY, name TEXT")
    """

    def _create(name: str, schema_sql: str) -> str:
        table = _sanitize_table_name(name)
        with engine.begin() as conn:
            conn.exec_driver_sql(f"DROP TABLE IF EXISTS {table}")
            conn.exec_driver_sql(f"CREATE TABLE {table} ({schema_sql})")
        return table

    return _create


@pytest.fixture
def people_table(table_factory: Callable[[str, str], str]) -> str:
    """
    Target table with an identity, a server-side timestamp default and two
    caller-supplied columns.
    """
    return table_factory(
        "people",
        """
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        name TEXT NOT NULL,
        email TEXT NULL,
        created_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP
        """,
    )


@pytest.fixture
def statement_log() -> Callable[[Connection], list[tuple[str, bool]]]:
    """
    Attach a cursor-level statement recorder to a connection.

    Usage:
        log = statement_log(conn)
        ...
        assert log == [("INSERT INTO ...", True)]  # (statement, executemany)
    """

    def _attach(conn: Connection) -> list[tuple[str, bool]]:
        log: list[tuple[str, bool]] = []

        @event.listens_for(conn, "before_cursor_execute")
        def _record(conn, cursor, statement, parameters, context, executemany):
            log.append((statement, executemany))

        return log

    return _attach
