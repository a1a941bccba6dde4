"""
Short name -> customer_id resolution.

``prompt_short_name`` only returns a name that existed when it was
checked; ``get_customer_id`` is a separate lookup and can still come back
NotFound, so callers check both.
"""

import sqlite3
from typing import Tuple, Union

import typer

from custrack.core import get_logger
from custrack.core import prompts
from custrack.core.text import trim_whitespace
from custrack.customers.counter import select_count
from custrack.customers.query import fetch_one
from custrack.customers.results import Count, Found, NotFound, StorageError

logger = get_logger("custrack.customers.resolver")

Resolved = Union[Found, NotFound, StorageError]


def count_short_name(conn: sqlite3.Connection, short_name: str) -> Union[Count, StorageError]:
    """Number of customers using *short_name* (0 or 1)."""
    return select_count(conn, "*", "customers", "short_name", trim_whitespace(short_name))


def get_customer_id(conn: sqlite3.Connection, short_name: str) -> Resolved:
    """Look up the customer_id for a short name."""
    short_name = trim_whitespace(short_name)
    row = fetch_one(
        conn,
        "SELECT customer_id FROM customers WHERE short_name = ?",
        (short_name,),
        label="SELECT customer_id",
    )
    if isinstance(row, StorageError):
        return row
    if row is None:
        return NotFound(short_name)
    return Found(row["customer_id"])


def prompt_short_name(conn: sqlite3.Connection, text: str = "Customer short name") -> str:
    """Prompt until the operator enters a short name that exists."""
    while True:
        short_name = prompts.read_required(text)
        counted = count_short_name(conn, short_name)
        if isinstance(counted, StorageError):
            typer.echo("An error occurred searching for that name. Please try again.")
        elif counted.value == 0:
            typer.echo(f"Customer short name '{short_name}' not found. Please try again.")
        else:
            typer.echo("Customer identified.")
            return short_name


def prompt_customer(
    conn: sqlite3.Connection,
    text: str = "Customer short name",
) -> Tuple[str, Resolved]:
    """Prompt for an existing short name and resolve its customer_id."""
    short_name = prompt_short_name(conn, text)
    return short_name, get_customer_id(conn, short_name)
