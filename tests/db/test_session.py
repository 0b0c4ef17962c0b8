from __future__ import annotations

import pytest
from sqlalchemy import text

from stagedinsert import PreconditionError
from stagedinsert.db.session import InsertSession


def _count(engine, table: str) -> int:
    with engine.connect() as conn:
        return conn.execute(text(f"SELECT COUNT(*) FROM {table}")).scalar_one()


def test_owned_transaction_commits_on_success(engine, people_table: str) -> None:
    with engine.connect() as conn:
        with InsertSession(conn) as session:
            assert session.owns_transaction
            rc = session.execute_many(
                f"INSERT INTO {people_table} (name) VALUES (:name)",
                [{"name": "a"}, {"name": "b"}],
            )
            assert rc == 2
        assert not conn.in_transaction()

    assert _count(engine, people_table) == 2


def test_owned_transaction_rolls_back_on_exception(engine, people_table: str) -> None:
    with engine.connect() as conn:
        with pytest.raises(RuntimeError, match="boom"):
            with InsertSession(conn) as session:
                session.execute(f"INSERT INTO {people_table} (name) VALUES (:name)", {"name": "a"})
                raise RuntimeError("boom")

    assert _count(engine, people_table) == 0


def test_external_transaction_is_not_finalized(engine, people_table: str) -> None:
    with engine.connect() as conn:
        tx = conn.begin()
        with pytest.raises(RuntimeError):
            with InsertSession(conn, tx) as session:
                assert not session.owns_transaction
                session.execute(f"INSERT INTO {people_table} (name) VALUES ('a')")
                raise RuntimeError("boom")

        assert tx.is_active
        tx.commit()

    assert _count(engine, people_table) == 1


def test_mismatched_transaction_is_rejected(engine) -> None:
    with engine.connect() as conn, engine.connect() as other:
        tx = other.begin()
        with pytest.raises(PreconditionError):
            InsertSession(conn, tx)
        tx.rollback()


def test_nested_usage_raises_runtime_error(engine) -> None:
    with engine.connect() as conn:
        session = InsertSession(conn)
        with session:
            with pytest.raises(RuntimeError, match="nested"):
                with session:
                    pass


def test_use_outside_context_raises(engine, people_table: str) -> None:
    with engine.connect() as conn:
        with pytest.raises(RuntimeError, match="not active"):
            InsertSession(conn).fetch_all(f"SELECT * FROM {people_table}")


def test_execute_many_with_no_rows_is_a_noop(engine, people_table: str) -> None:
    with engine.connect() as conn:
        with InsertSession(conn) as session:
            assert session.execute_many(f"INSERT INTO {people_table} (name) VALUES (:name)", []) == 0


def test_fetch_all_returns_list_of_dicts(engine, people_table: str) -> None:
    with engine.connect() as conn:
        with InsertSession(conn) as session:
            session.execute_many(
                f"INSERT INTO {people_table} (name) VALUES (:name)",
                [{"name": "a"}, {"name": "b"}],
            )
            rows = session.fetch_all(f"SELECT id, name FROM {people_table} ORDER BY id")

    assert rows == [{"id": 1, "name": "a"}, {"id": 2, "name": "b"}]


def test_autobegun_connection_gets_a_savepoint(engine, people_table: str) -> None:
    with engine.connect() as conn:
        conn.execute(text(f"INSERT INTO {people_table} (name) VALUES ('outer')"))

        with pytest.raises(RuntimeError, match="boom"):
            with InsertSession(conn) as session:
                assert session.owns_transaction
                assert conn.in_nested_transaction()
                session.execute(f"INSERT INTO {people_table} (name) VALUES ('inner')")
                raise RuntimeError("boom")

        assert conn.in_transaction()
        assert not conn.in_nested_transaction()
        assert _count_on(conn, people_table) == 1
        conn.commit()

    assert _count(engine, people_table) == 1


def _count_on(conn, table: str) -> int:
    return conn.execute(text(f"SELECT COUNT(*) FROM {table}")).scalar_one()
