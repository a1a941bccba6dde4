"""
Parameterized query execution.

Every statement gets its own cursor, closed on every exit path, and every
value reaches SQLite as a bound parameter (None binds NULL). Failures are
returned as ``StorageError`` tagged with the stage that failed; nothing
here raises for the caller.

Table and column names cannot be bound, so any identifier spliced into
statement text must pass ``check_table`` / ``check_column`` first.
``run_trusted`` is for literal SQL with no operator-derived fragments.
"""

import sqlite3
from contextlib import closing
from typing import Any, List, Optional, Sequence, Union

from custrack.core import get_logger
from custrack.customers.results import Done, Stage, StorageError

logger = get_logger("custrack.customers.query")

ALLOWED_TABLES = frozenset({"customers", "customer_addresses"})

ALLOWED_COLUMNS = frozenset({
    "customer_id", "short_name", "first_name", "last_name", "group_name",
    "credit_limit", "outstanding_credit", "created_on", "updated_on",
    "address_id", "address_type", "contact_name", "address_line_1",
    "address_line_2", "address_line_3", "address_line_4", "address_line_5",
})

# Primary result code for "SQL error or missing database"; raised while
# compiling a statement (syntax, unknown table/column).
_SQLITE_ERROR = 1

Params = Sequence[Any]


def check_table(name: str) -> str:
    """Return *name* if it is a known table, else raise ValueError."""
    if name not in ALLOWED_TABLES:
        raise ValueError(f"Table not allowed in SQL text: {name!r}")
    return name


def check_column(name: str, allow_star: bool = False) -> str:
    """Return *name* if it is a known column (or ``*`` when allowed)."""
    if allow_star and name == "*":
        return name
    if name not in ALLOWED_COLUMNS:
        raise ValueError(f"Column not allowed in SQL text: {name!r}")
    return name


def classify_error(exc: sqlite3.Error) -> Stage:
    """Map a driver exception to the stage it came from."""
    if isinstance(exc, sqlite3.InterfaceError):
        return Stage.BIND
    if isinstance(exc, sqlite3.ProgrammingError):
        return Stage.BIND if "binding" in str(exc).lower() else Stage.PREPARE
    if isinstance(exc, sqlite3.OperationalError):
        code = getattr(exc, "sqlite_errorcode", None)
        if code is None or code & 0xFF == _SQLITE_ERROR:
            return Stage.PREPARE
    return Stage.EXECUTE


def _failure(exc: sqlite3.Error, label: str) -> StorageError:
    stage = classify_error(exc)
    logger.error("Error at %s stage of %s: %s", stage.value, label, exc)
    return StorageError(stage, str(exc))


def execute(
    conn: sqlite3.Connection,
    sql: str,
    params: Params = (),
    *,
    label: str = "statement",
    commit: bool = True,
) -> Union[Done, StorageError]:
    """
    Run one parameterized write statement to completion.

    Args:
        conn: Open connection (never closed here)
        sql: Statement text with ``?`` placeholders
        params: One value per placeholder; None binds NULL
        label: Short description used in log messages
        commit: Commit on success. Pass False to group statements
            into a caller-managed transaction.

    Returns:
        Done(rowcount, lastrowid) or StorageError
    """
    with closing(conn.cursor()) as cur:
        try:
            cur.execute(sql, tuple(params))
            if commit:
                conn.commit()
        except sqlite3.Error as exc:
            return _failure(exc, label)
        return Done(rowcount=cur.rowcount, lastrowid=cur.lastrowid)


def fetch_all(
    conn: sqlite3.Connection,
    sql: str,
    params: Params = (),
    *,
    label: str = "SELECT",
) -> Union[List[sqlite3.Row], StorageError]:
    """Run a parameterized SELECT and return every row."""
    with closing(conn.cursor()) as cur:
        try:
            cur.execute(sql, tuple(params))
            return cur.fetchall()
        except sqlite3.Error as exc:
            return _failure(exc, label)


def fetch_one(
    conn: sqlite3.Connection,
    sql: str,
    params: Params = (),
    *,
    label: str = "SELECT",
) -> Union[sqlite3.Row, None, StorageError]:
    """Run a parameterized SELECT and return the first row (or None)."""
    with closing(conn.cursor()) as cur:
        try:
            cur.execute(sql, tuple(params))
            return cur.fetchone()
        except sqlite3.Error as exc:
            return _failure(exc, label)


def run_trusted(
    conn: sqlite3.Connection,
    sql: str,
    *,
    label: Optional[str] = None,
) -> Union[List[sqlite3.Row], StorageError]:
    """
    Run literal SQL that takes no parameters.

    Only for fixed statement text written in this package. Never pass
    anything an operator typed; see ``customers.raw_sql`` for that.
    """
    return fetch_all(conn, sql, (), label=label or "trusted statement")
