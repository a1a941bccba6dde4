"""
Interactive operator workflows.

Each function prompts for what it needs, calls into ``customers.db``,
reports the outcome on the console and returns the result variant so
callers (menu, CLI) can decide on exit codes.
"""

import sqlite3
from typing import Any, Optional

import typer

from custrack.core import get_config_value, get_logger
from custrack.core import prompts
from custrack.core.output import format_record
from custrack.customers import db
from custrack.customers.addresses import list_and_select
from custrack.customers.resolver import count_short_name, prompt_customer, prompt_short_name
from custrack.customers.results import (
    CascadeResult,
    Declined,
    Done,
    Duplicate,
    Found,
    NoRelationship,
    NotFound,
    StorageError,
)

logger = get_logger("custrack.customers.workflows")


def report(result: Any, success: str) -> None:
    """Echo a one-line outcome for *result*."""
    if isinstance(result, (Done, Found)):
        typer.echo(success)
    elif isinstance(result, Duplicate):
        typer.echo(f"Short name {result.key} is already in use.")
    elif isinstance(result, NotFound):
        typer.echo(f"No record found for {result.key}.")
    elif isinstance(result, NoRelationship):
        typer.echo("That customer is not associated with any addresses.")
    elif isinstance(result, Declined):
        typer.echo("Cancelled. Nothing was changed.")
    elif isinstance(result, StorageError):
        typer.echo(f"Error: {result}", err=True)
    elif isinstance(result, CascadeResult):
        if result.ok:
            typer.echo(success)
        else:
            for part, outcome in (("addresses", result.addresses), ("customer", result.customer)):
                if isinstance(outcome, StorageError):
                    typer.echo(f"Error deleting {part}: {outcome}", err=True)
            if result.rolled_back:
                typer.echo("No rows were deleted.", err=True)


def prompt_unique_short_name(conn: sqlite3.Connection) -> str:
    """Prompt until the operator enters a short name nobody uses yet."""
    while True:
        short_name = prompts.read_required(
            "Unique customer short name (e.g. John Smith -> JSMITH)"
        )
        counted = count_short_name(conn, short_name)
        if isinstance(counted, StorageError):
            typer.echo("An error occurred checking that name. Please try again.")
        elif counted.value:
            typer.echo(
                "Short name already in use. Choose another or amend the existing record."
            )
        else:
            return short_name


def _prompt_address_fields() -> dict:
    return {
        "address_type": prompts.read_optional("Address type"),
        "contact_name": prompts.read_optional("Contact name"),
        "address_line_1": prompts.read_required("Address line 1"),
        "address_line_2": prompts.read_optional("Address line 2"),
        "address_line_3": prompts.read_optional("Address line 3"),
        "address_line_4": prompts.read_optional("Address line 4"),
        "address_line_5": prompts.read_optional("Address line 5"),
    }


# =============================================================================
# Add
# =============================================================================

def add_customer(conn: sqlite3.Connection):
    """Collect a new customer's details and insert it."""
    short_name = prompt_unique_short_name(conn)
    first_name = prompts.read_optional("First name")
    last_name = prompts.read_optional("Surname")
    group_name = prompts.read_optional("Group name")
    credit_limit = prompts.get_int("Credit limit")
    outstanding_credit = prompts.get_int("Outstanding credit")

    result = db.insert_customer(
        conn, short_name, first_name, last_name, group_name,
        credit_limit, outstanding_credit,
    )
    report(result, "Record added.")
    return result


def add_address(conn: sqlite3.Connection):
    """Pick an existing customer and add an address for it."""
    typer.echo("A new address needs an existing customer.")
    short_name = prompt_short_name(conn)
    result = db.insert_address(conn, short_name, **_prompt_address_fields())
    report(result, "Record added.")
    return result


# =============================================================================
# Update
# =============================================================================

def update_customer(conn: sqlite3.Connection):
    """Update either the names or the credit figures of a customer."""
    short_name, resolved = prompt_customer(conn)
    if not isinstance(resolved, Found):
        report(resolved, "")
        return resolved
    customer_id = resolved.value

    current = db.get_customer(conn, customer_id)
    if not isinstance(current, Found):
        report(current, "")
        return current
    typer.echo(f"Showing data for customer {short_name}:")
    typer.echo(format_record(current.value))

    choice = prompts.get_int_between(
        "Update 1) names and group name  2) credit limit and outstanding credit", 1, 2
    )
    if choice == 1:
        result = db.update_customer_names(
            conn,
            customer_id,
            prompts.read_optional("First name"),
            prompts.read_optional("Surname"),
            prompts.read_optional("Group name"),
        )
    else:
        result = db.update_customer_credit(
            conn,
            customer_id,
            prompts.get_int("Credit limit"),
            prompts.get_int("Outstanding credit"),
        )
    report(result, "Record updated.")
    return result


def update_address(conn: sqlite3.Connection):
    """Pick one of a customer's addresses and replace its fields."""
    short_name = prompt_short_name(conn)
    selected = list_and_select(conn, short_name, "Address ID to update")
    if not isinstance(selected, Found):
        report(selected, "")
        return selected

    result = db.update_address(conn, selected.value, **_prompt_address_fields())
    report(result, "Address updated.")
    return result


# =============================================================================
# Delete
# =============================================================================

def delete_customer(conn: sqlite3.Connection, atomic: Optional[bool] = None):
    """Delete a customer and every address it owns, after confirmation."""
    short_name, resolved = prompt_customer(conn)
    if not isinstance(resolved, Found):
        report(resolved, "")
        return resolved

    if not prompts.get_yes_no(
        f"This deletes all customer and address data for {short_name}. Proceed?"
    ):
        result = Declined()
        report(result, "")
        return result

    if atomic is None:
        atomic = bool(get_config_value("customers", "atomic_cascade_delete", default=True))
    result = db.delete_customer_cascade(conn, resolved.value, atomic=atomic)
    report(result, f"Customer {short_name} and its addresses deleted.")
    return result


def delete_address(conn: sqlite3.Connection):
    """Delete one of a customer's addresses, after confirmation."""
    short_name = prompt_short_name(conn)
    selected = list_and_select(conn, short_name, "Address ID to delete")
    if not isinstance(selected, Found):
        report(selected, "")
        return selected

    if not prompts.get_yes_no(f"This deletes address {selected.value}. Proceed?"):
        result = Declined()
        report(result, "")
        return result

    result = db.delete_address(conn, selected.value)
    report(result, f"Address {selected.value} deleted.")
    return result


# =============================================================================
# Search
# =============================================================================

def search_customer(conn: sqlite3.Connection):
    """Show one customer followed by all of its addresses."""
    short_name = prompt_short_name(conn)
    result = db.get_customer_summary(conn, short_name)
    if not isinstance(result, Found):
        report(result, "")
        return result

    summary = result.value
    typer.echo("Customer data:")
    typer.echo(format_record(summary["customer"]))
    typer.echo(
        f"\nCustomer {short_name} is associated with "
        f"{len(summary['addresses'])} address(es):"
    )
    for row in summary["addresses"]:
        typer.echo(format_record(row))
        typer.echo("")
    return result
