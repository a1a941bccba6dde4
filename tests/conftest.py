"""
Shared test fixtures for custrack.

Provides an in-memory database with all schemas, a patched get_db, a CLI
runner, stdin feeding for prompt-driven code, and seed data fixtures.
"""

import io
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from unittest.mock import patch

import pytest

import custrack
from custrack.core.db import SCHEMA_ORDER


@pytest.fixture
def memory_db():
    """Provide an in-memory SQLite database with ALL schemas applied in FK order."""
    conn = sqlite3.connect(":memory:")
    conn.execute("PRAGMA foreign_keys = ON")
    conn.row_factory = sqlite3.Row

    package_dir = Path(custrack.__file__).parent
    for module in SCHEMA_ORDER:
        schema_file = package_dir / module / "schema.sql"
        if schema_file.exists():
            conn.executescript(schema_file.read_text(encoding="utf-8"))

    yield conn
    conn.close()


@pytest.fixture
def mock_db(memory_db):
    """Patch get_db everywhere to return the in-memory database."""

    @contextmanager
    def _get_db(readonly=False, path=None):
        yield memory_db

    with patch("custrack.core.db.get_db", _get_db), \
         patch("custrack.core.get_db", _get_db):
        yield memory_db


@pytest.fixture
def cli_runner():
    """Typer CLI test runner."""
    from typer.testing import CliRunner

    return CliRunner()


@pytest.fixture
def operator_input(monkeypatch):
    """Feed lines to stdin for code that prompts. Usage: operator_input("JDOE", "y")."""

    def _feed(*lines):
        text = "".join(f"{line}\n" for line in lines)
        monkeypatch.setattr("sys.stdin", io.StringIO(text))

    return _feed


@pytest.fixture
def jdoe(memory_db):
    """Insert customer JDOE with no addresses. Returns customer_id."""
    cur = memory_db.execute(
        "INSERT INTO customers (short_name, first_name, last_name, credit_limit, "
        "outstanding_credit, created_on, updated_on) "
        "VALUES ('JDOE', 'Jane', 'Doe', 1000, 0, DATE('now'), DATE('now'))"
    )
    memory_db.commit()
    return cur.lastrowid


@pytest.fixture
def jdoe_addresses(memory_db, jdoe):
    """Two addresses for JDOE plus one for another customer.

    Returns (jdoe_address_ids, other_address_id).
    """
    ids = []
    for line in ("1 High Street", "2 Low Road"):
        cur = memory_db.execute(
            "INSERT INTO customer_addresses (customer_id, address_type, address_line_1) "
            "VALUES (?, 'HOME', ?)",
            (jdoe, line),
        )
        ids.append(cur.lastrowid)

    other = memory_db.execute(
        "INSERT INTO customers (short_name, credit_limit, outstanding_credit) "
        "VALUES ('OTHER', 0, 0)"
    ).lastrowid
    other_address = memory_db.execute(
        "INSERT INTO customer_addresses (customer_id, address_line_1) VALUES (?, '9 Far Away')",
        (other,),
    ).lastrowid
    memory_db.commit()
    return ids, other_address


@pytest.fixture
def seeded_db(memory_db):
    """In-memory database holding the sample customers and addresses."""
    from custrack.customers.seed import seed_sample_data

    seed_sample_data(memory_db)
    return memory_db
