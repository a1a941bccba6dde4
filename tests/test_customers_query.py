"""Tests for the parameterized query executor."""

import sqlite3

import pytest

from custrack.customers.query import (
    check_column,
    check_table,
    classify_error,
    execute,
    fetch_all,
    fetch_one,
    run_trusted,
)
from custrack.customers.results import Done, Stage, StorageError

INSERT = (
    "INSERT INTO customers (short_name, first_name, credit_limit, outstanding_credit) "
    "VALUES (?, ?, ?, ?)"
)


class TestExecute:

    def test_success_returns_done_with_rowid(self, memory_db):
        result = execute(memory_db, INSERT, ("JDOE", "Jane", 1000, 0))
        assert isinstance(result, Done)
        assert result.rowcount == 1
        row = memory_db.execute(
            "SELECT short_name FROM customers WHERE customer_id = ?", (result.lastrowid,)
        ).fetchone()
        assert row["short_name"] == "JDOE"

    def test_none_binds_null(self, memory_db):
        execute(memory_db, INSERT, ("JDOE", None, 0, 0))
        row = memory_db.execute("SELECT first_name FROM customers").fetchone()
        assert row["first_name"] is None

    def test_operator_text_is_bound_not_spliced(self, memory_db):
        hostile = "x'); DROP TABLE customers; --"
        assert isinstance(execute(memory_db, INSERT, (hostile, None, 0, 0)), Done)
        row = memory_db.execute("SELECT short_name FROM customers").fetchone()
        assert row["short_name"] == hostile

    def test_prepare_failure(self, memory_db):
        result = execute(memory_db, "INSERT INTO nowhere (a) VALUES (?)", (1,))
        assert isinstance(result, StorageError)
        assert result.stage == Stage.PREPARE

    def test_syntax_error_is_prepare_failure(self, memory_db):
        result = execute(memory_db, "INSERTT INTO customers VALUES (?)", (1,))
        assert isinstance(result, StorageError)
        assert result.stage == Stage.PREPARE

    def test_wrong_placeholder_count_is_bind_failure(self, memory_db):
        result = execute(memory_db, INSERT, ("JDOE", None))
        assert isinstance(result, StorageError)
        assert result.stage == Stage.BIND

    def test_unsupported_value_is_bind_failure(self, memory_db):
        result = execute(memory_db, INSERT, ("JDOE", ["not", "bindable"], 0, 0))
        assert isinstance(result, StorageError)
        assert result.stage == Stage.BIND

    def test_constraint_violation_is_execute_failure(self, memory_db, jdoe):
        result = execute(memory_db, INSERT, ("JDOE", None, 0, 0))
        assert isinstance(result, StorageError)
        assert result.stage == Stage.EXECUTE
        assert "UNIQUE" in result.detail

    def test_failure_leaves_connection_usable(self, memory_db):
        execute(memory_db, "INSERT INTO nowhere (a) VALUES (?)", (1,))
        assert isinstance(execute(memory_db, INSERT, ("JDOE", None, 0, 0)), Done)

    def test_without_commit_can_be_rolled_back(self, memory_db):
        execute(memory_db, INSERT, ("JDOE", None, 0, 0), commit=False)
        memory_db.rollback()
        assert memory_db.execute("SELECT COUNT(*) FROM customers").fetchone()[0] == 0


class TestFetch:

    def test_fetch_all(self, memory_db, jdoe_addresses):
        ids, _ = jdoe_addresses
        rows = fetch_all(
            memory_db,
            "SELECT address_id FROM customer_addresses WHERE address_id IN (?, ?)",
            ids,
        )
        assert sorted(r["address_id"] for r in rows) == sorted(ids)

    def test_fetch_one_none_when_no_row(self, memory_db):
        assert fetch_one(memory_db, "SELECT * FROM customers WHERE short_name = ?", ("X",)) is None

    def test_fetch_errors_are_returned(self, memory_db):
        result = fetch_one(memory_db, "SELECT * FROM missing_table WHERE a = ?", (1,))
        assert isinstance(result, StorageError)
        assert result.stage == Stage.PREPARE

    def test_run_trusted(self, memory_db, jdoe):
        rows = run_trusted(memory_db, "SELECT short_name FROM customers")
        assert [r["short_name"] for r in rows] == ["JDOE"]


class TestIdentifierAllowList:

    def test_known_identifiers_pass(self):
        assert check_table("customers") == "customers"
        assert check_column("short_name") == "short_name"
        assert check_column("*", allow_star=True) == "*"

    def test_unknown_table_rejected(self):
        with pytest.raises(ValueError):
            check_table("customers; DROP TABLE customers")

    def test_unknown_column_rejected(self):
        with pytest.raises(ValueError):
            check_column("password")

    def test_star_rejected_unless_allowed(self):
        with pytest.raises(ValueError):
            check_column("*")


class TestClassifyError:

    def test_busy_is_execute(self):
        exc = sqlite3.OperationalError("database is locked")
        exc.sqlite_errorcode = 5
        assert classify_error(exc) == Stage.EXECUTE

    def test_generic_error_code_is_prepare(self):
        exc = sqlite3.OperationalError("no such table: x")
        exc.sqlite_errorcode = 1
        assert classify_error(exc) == Stage.PREPARE

    def test_interface_error_is_bind(self):
        assert classify_error(sqlite3.InterfaceError("Error binding parameter 0")) == Stage.BIND

    def test_integrity_error_is_execute(self):
        assert classify_error(sqlite3.IntegrityError("NOT NULL constraint failed")) == Stage.EXECUTE
