"""
Numbered console menu.

The long-running operator shell: view, add, update and remove records,
or drop into the raw SQL session. Runs until the operator picks 0.
"""

import sqlite3
from typing import Callable, Dict, Optional

import typer

from custrack.core import prompts
from custrack.core.output import format_rows
from custrack.customers import db, workflows
from custrack.customers.raw_sql import sql_session
from custrack.customers.results import StorageError

MAIN_MENU = """Please select an option:
1. View data in the database.
2. Add new data to the database.
3. Update existing data in the database.
4. Remove customer(s) from the database.
5. Run custom SQL on the database.
0. Exit"""

VIEW_MENU = """Please select an action:
1. View all customer data.
2. View all address data.
3. View all customer and address joint data.
4. Search for data on a specific customer.
0. Back"""

ADD_MENU = """Add a new customer or a new address?
1. Customer
2. Address
0. Back"""

UPDATE_MENU = """Which type of data would you like to update?
1. Customer
2. Address
0. Back"""

REMOVE_MENU = """Please select an action:
1. Delete customer and all associated addresses.
2. Delete a single address associated with a particular customer.
0. Back"""


def _show(rows) -> None:
    if isinstance(rows, StorageError):
        typer.echo(f"Error: {rows}", err=True)
    else:
        typer.echo(format_rows(rows))


def _submenu(text: str, actions: Dict[int, Callable[[], object]]) -> None:
    while True:
        typer.echo(text)
        choice = prompts.get_int_between("Option", 0, len(actions))
        if choice == 0:
            return
        actions[choice]()
        typer.echo("")


def view_data(conn: sqlite3.Connection) -> None:
    customers, addresses = db.table_counts(conn)
    if isinstance(customers, StorageError) or isinstance(addresses, StorageError):
        typer.echo("Error: could not count customers and addresses.", err=True)
    else:
        typer.echo(
            f"Currently storing {customers.value} customers and {addresses.value} addresses."
        )
    _submenu(VIEW_MENU, {
        1: lambda: _show(db.list_customers(conn)),
        2: lambda: _show(db.list_addresses(conn)),
        3: lambda: _show(db.list_customers_with_addresses(conn)),
        4: lambda: workflows.search_customer(conn),
    })


def add_data(conn: sqlite3.Connection) -> None:
    _submenu(ADD_MENU, {
        1: lambda: workflows.add_customer(conn),
        2: lambda: workflows.add_address(conn),
    })


def update_data(conn: sqlite3.Connection) -> None:
    _submenu(UPDATE_MENU, {
        1: lambda: workflows.update_customer(conn),
        2: lambda: workflows.update_address(conn),
    })


def remove_data(conn: sqlite3.Connection, atomic: Optional[bool] = None) -> None:
    _submenu(REMOVE_MENU, {
        1: lambda: workflows.delete_customer(conn, atomic=atomic),
        2: lambda: workflows.delete_address(conn),
    })


def run_menu(conn: sqlite3.Connection, atomic: Optional[bool] = None) -> None:
    """Main loop. Returns when the operator chooses 0."""
    handlers: Dict[int, Callable[[], object]] = {
        1: lambda: view_data(conn),
        2: lambda: add_data(conn),
        3: lambda: update_data(conn),
        4: lambda: remove_data(conn, atomic=atomic),
        5: lambda: sql_session(conn),
    }
    typer.echo("Welcome to the customer manager.")
    while True:
        typer.echo(MAIN_MENU)
        choice = prompts.get_int_between("Option", 0, 5)
        if choice == 0:
            return
        handlers[choice]()
        typer.echo("")
