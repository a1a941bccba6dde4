"""
UNSAFE: operator-typed SQL.

Runs text exactly as entered, with no parameter binding and none of the
checks the rest of the customers module applies (short name uniqueness,
addresses before customer on delete, blank -> NULL). Does not share any
code with ``customers.query``. Errors propagate to the caller.
"""

import sqlite3
from typing import List, Tuple

import typer

from custrack.core import get_logger
from custrack.core.output import format_rows
from custrack.core.text import trim_whitespace

logger = get_logger("custrack.customers.raw_sql")

EXIT_COMMAND = "EXIT"


def split_statements(text: str) -> List[str]:
    """
    Break operator text into complete statements.

    ``;`` inside string literals, comments and trigger bodies does not
    split. A trailing fragment with no ``;`` is kept as the last statement.
    """
    statements: List[str] = []
    buffer = ""
    *pieces, last = text.split(";")
    for piece in pieces:
        buffer += piece + ";"
        if sqlite3.complete_statement(buffer):
            if buffer.strip(" \t\r\n;"):
                statements.append(buffer.strip())
            buffer = ""
    tail = (buffer + last).strip()
    if tail:
        statements.append(tail)
    return statements


def run_operator_sql(conn: sqlite3.Connection, text: str) -> Tuple[List[str], List[sqlite3.Row]]:
    """
    Execute operator-supplied text, one statement at a time, committing each.

    Execution stops at the first failing statement; the ones before it
    stay committed.

    Returns:
        (column names, rows) of the last statement; both empty when it
        returns nothing

    Raises:
        sqlite3.Error: whatever the driver raises for the text
    """
    columns: List[str] = []
    rows: List[sqlite3.Row] = []
    for statement in split_statements(text):
        logger.warning("Executing operator SQL: %s", statement)
        cur = conn.execute(statement)
        try:
            rows = cur.fetchall()
            columns = [d[0] for d in cur.description or ()]
        finally:
            cur.close()
        conn.commit()
    return columns, rows


def sql_session(conn: sqlite3.Connection) -> int:
    """
    Read and run statements until the operator types EXIT.

    Returns:
        Number of statements that executed successfully
    """
    typer.echo(
        "Enter SQL statements. They run exactly as typed and can destroy data.\n"
        f"Type {EXIT_COMMAND} to leave."
    )
    executed = 0
    while True:
        text = trim_whitespace(typer.prompt("sql"))
        if text.upper() == EXIT_COMMAND:
            return executed
        try:
            _, rows = run_operator_sql(conn, text)
        except sqlite3.Error as exc:
            typer.echo(f"Error executing statement: {exc}", err=True)
            continue
        executed += 1
        if rows:
            typer.echo(format_rows(rows))
        typer.echo("Statement executed.")
