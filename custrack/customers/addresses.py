"""
Address disambiguation.

Lists every address a customer owns, then accepts only an address_id
from that exact list. An id that exists in the table but belongs to
someone else is rejected like any other wrong answer.
"""

import sqlite3
from typing import List, Set, Union

import typer

from custrack.core import get_logger
from custrack.core import prompts
from custrack.core.output import format_record
from custrack.customers.counter import select_count
from custrack.customers.query import fetch_all
from custrack.customers.resolver import get_customer_id
from custrack.customers.results import (
    Found,
    NoRelationship,
    NotFound,
    StorageError,
)

logger = get_logger("custrack.customers.addresses")

Selection = Union[Found, NotFound, NoRelationship, StorageError]


def list_customer_addresses(
    conn: sqlite3.Connection,
    customer_id: int,
) -> Union[List[sqlite3.Row], StorageError]:
    """All address rows owned by *customer_id*, oldest first."""
    return fetch_all(
        conn,
        "SELECT * FROM customer_addresses WHERE customer_id = ? ORDER BY address_id",
        (customer_id,),
        label="SELECT customer addresses",
    )


def choose_address(short_name: str, valid_ids: Set[int], text: str) -> int:
    """Prompt until the entered id is one of *valid_ids*."""
    while True:
        address_id = prompts.get_int(text)
        if address_id in valid_ids:
            typer.echo("Address identified.")
            return address_id
        typer.echo(f"Please enter an address ID belonging to customer {short_name}.")


def list_and_select(
    conn: sqlite3.Connection,
    short_name: str,
    text: str = "Address ID to process",
) -> Selection:
    """
    Show a customer's addresses and have the operator pick one.

    Returns:
        Found(address_id), NotFound if the customer vanished,
        NoRelationship if it owns no addresses, or StorageError.
    """
    resolved = get_customer_id(conn, short_name)
    if not isinstance(resolved, Found):
        return resolved
    customer_id = resolved.value

    counted = select_count(conn, "*", "customer_addresses", "customer_id", customer_id)
    if isinstance(counted, StorageError):
        return counted
    if counted.value == 0:
        return NoRelationship(customer_id)

    rows = list_customer_addresses(conn, customer_id)
    if isinstance(rows, StorageError):
        return rows

    typer.echo(f"Customer {short_name} is associated with {len(rows)} address(es):")
    valid_ids: Set[int] = set()
    for row in rows:
        typer.echo(format_record(row))
        typer.echo("")
        valid_ids.add(row["address_id"])

    # Rows deleted between the count and the SELECT
    if not valid_ids:
        return NoRelationship(customer_id)

    return Found(choose_address(short_name, valid_ids, text))
