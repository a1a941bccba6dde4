"""Tests for database connection management and schema bootstrap."""

import sqlite3

import pytest

from custrack.core.db import SCHEMA_ORDER, apply_schemas, get_db, migrate_all


def test_get_db_sets_row_factory(tmp_path):
    with get_db(path=tmp_path / "c.db") as conn:
        row = conn.execute("SELECT 1 AS val").fetchone()
    assert row["val"] == 1


def test_get_db_enables_foreign_keys(tmp_path):
    with get_db(path=tmp_path / "c.db") as conn:
        fk = conn.execute("PRAGMA foreign_keys").fetchone()[0]
    assert fk == 1


def test_get_db_creates_parent_directory(tmp_path):
    target = tmp_path / "nested" / "dir" / "c.db"
    with get_db(path=target):
        pass
    assert target.exists()


def test_get_db_closes_connection(tmp_path):
    with get_db(path=tmp_path / "c.db") as conn:
        pass
    with pytest.raises(sqlite3.ProgrammingError):
        conn.execute("SELECT 1")


def test_readonly_connection_rejects_writes(tmp_path):
    path = tmp_path / "c.db"
    with get_db(path=path) as conn:
        apply_schemas(conn)
    with get_db(readonly=True, path=path) as conn:
        with pytest.raises(sqlite3.OperationalError):
            conn.execute(
                "INSERT INTO customers (short_name, credit_limit, outstanding_credit) "
                "VALUES ('X', 0, 0)"
            )


def test_schema_order():
    assert SCHEMA_ORDER == ["customers"]


def test_migrate_all_creates_tables_and_seeds():
    conn = sqlite3.connect(":memory:")
    conn.row_factory = sqlite3.Row
    assert migrate_all(conn, seed=True) is True
    assert conn.execute("SELECT COUNT(*) FROM customers").fetchone()[0] == 8
    conn.close()


def test_migrate_all_is_idempotent():
    conn = sqlite3.connect(":memory:")
    conn.row_factory = sqlite3.Row
    migrate_all(conn, seed=True)
    assert migrate_all(conn, seed=True) is False
    assert conn.execute("SELECT COUNT(*) FROM customers").fetchone()[0] == 8
    conn.close()


def test_migrate_all_without_seed_leaves_tables_empty():
    conn = sqlite3.connect(":memory:")
    conn.row_factory = sqlite3.Row
    assert migrate_all(conn, seed=False) is False
    assert conn.execute("SELECT COUNT(*) FROM customers").fetchone()[0] == 0
    assert conn.execute("SELECT COUNT(*) FROM customer_addresses").fetchone()[0] == 0
    conn.close()
