"""
Customer CLI commands.

Usage:
    custrack customers list [--format json]
    custrack customers addresses
    custrack customers joined
    custrack customers counts
    custrack customers show <short_name>
    custrack customers add-customer [--short-name JDOE --credit-limit 1000 ...]
    custrack customers add-address [--short-name JDOE --line-1 "1 High St" ...]
    custrack customers update-customer
    custrack customers update-address
    custrack customers delete-customer [--best-effort]
    custrack customers delete-address
    custrack customers sql [--execute "SELECT ..."]
"""

from contextlib import contextmanager
from typing import Optional

import typer

from custrack.core.output import OutputFormat, format_record, format_rows

app = typer.Typer(no_args_is_help=True)


@contextmanager
def _open(readonly: bool = False):
    """Open the configured database, creating any missing tables first."""
    from custrack.core import get_db, migrate_all

    if readonly:
        with get_db() as conn:
            migrate_all(conn, seed=False)
        with get_db(readonly=True) as conn:
            yield conn
    else:
        with get_db() as conn:
            migrate_all(conn, seed=False)
            yield conn


def _finish(result) -> None:
    """Exit non-zero unless *result* is a success or an operator cancel."""
    from custrack.customers.results import Declined, succeeded

    if not succeeded(result) and not isinstance(result, Declined):
        raise typer.Exit(1)


def _print_rows(rows, fmt: OutputFormat, title: str) -> None:
    from custrack.customers.results import StorageError

    if isinstance(rows, StorageError):
        typer.echo(f"Error: {rows}", err=True)
        raise typer.Exit(1)
    if not rows and fmt == OutputFormat.HUMAN:
        typer.echo(f"No {title.lower()} found.")
        raise typer.Exit()
    typer.echo(format_rows(rows, fmt, title if fmt != OutputFormat.JSON else None))


@app.command("list")
def list_customers(
    fmt: OutputFormat = typer.Option(OutputFormat.HUMAN, "--format", "-f", help="Output format"),
):
    """List all customers."""
    from custrack.customers.db import list_customers as _list

    with _open(readonly=True) as conn:
        rows = _list(conn)
    _print_rows(rows, fmt, "Customers")


@app.command("addresses")
def list_addresses(
    fmt: OutputFormat = typer.Option(OutputFormat.HUMAN, "--format", "-f", help="Output format"),
):
    """List all addresses."""
    from custrack.customers.db import list_addresses as _list

    with _open(readonly=True) as conn:
        rows = _list(conn)
    _print_rows(rows, fmt, "Addresses")


@app.command("joined")
def joined(
    fmt: OutputFormat = typer.Option(OutputFormat.HUMAN, "--format", "-f", help="Output format"),
):
    """List customers joined with their addresses."""
    from custrack.customers.db import list_customers_with_addresses

    with _open(readonly=True) as conn:
        rows = list_customers_with_addresses(conn)
    _print_rows(rows, fmt, "Customer Addresses")


@app.command("counts")
def counts():
    """Show how many customers and addresses are stored."""
    from custrack.customers.db import table_counts
    from custrack.customers.results import StorageError

    with _open(readonly=True) as conn:
        customers, addresses = table_counts(conn)

    if isinstance(customers, StorageError) or isinstance(addresses, StorageError):
        typer.echo("Error: could not count customers and addresses.", err=True)
        raise typer.Exit(1)
    typer.echo(f"Customers: {customers.value}  |  Addresses: {addresses.value}")


@app.command("show")
def show(
    short_name: str = typer.Argument(..., help="Customer short name"),
    fmt: OutputFormat = typer.Option(OutputFormat.HUMAN, "--format", "-f", help="Output format"),
):
    """Show one customer and its addresses."""
    from custrack.customers.db import get_customer_summary
    from custrack.customers.results import Found, NotFound

    with _open(readonly=True) as conn:
        result = get_customer_summary(conn, short_name)

    if isinstance(result, NotFound):
        typer.echo(f"Customer {short_name} not found.")
        raise typer.Exit(1)
    if not isinstance(result, Found):
        typer.echo(f"Error: {result}", err=True)
        raise typer.Exit(1)

    summary = result.value
    if fmt == OutputFormat.HUMAN:
        typer.echo(format_record(summary["customer"]))
        typer.echo(f"\nAddresses: {len(summary['addresses'])}")
        if summary["addresses"]:
            typer.echo(format_rows(summary["addresses"]))
    else:
        typer.echo(format_rows([summary["customer"]], fmt))
        typer.echo(format_rows(summary["addresses"], fmt))


@app.command("add-customer")
def add_customer(
    short_name: Optional[str] = typer.Option(None, help="Unique short name (omit for interactive entry)"),
    first_name: Optional[str] = typer.Option(None, help="First name"),
    last_name: Optional[str] = typer.Option(None, help="Surname"),
    group_name: Optional[str] = typer.Option(None, help="Group name"),
    credit_limit: int = typer.Option(0, help="Credit limit"),
    outstanding_credit: int = typer.Option(0, help="Outstanding credit"),
):
    """Add a customer. Prompts for every field unless --short-name is given."""
    from custrack.customers import workflows
    from custrack.customers.db import insert_customer

    with _open() as conn:
        if short_name is None:
            result = workflows.add_customer(conn)
        else:
            result = insert_customer(
                conn, short_name, first_name, last_name, group_name,
                credit_limit, outstanding_credit,
            )
            workflows.report(result, "Record added.")
    _finish(result)


@app.command("add-address")
def add_address(
    short_name: Optional[str] = typer.Option(None, help="Owning customer's short name"),
    line_1: Optional[str] = typer.Option(None, "--line-1", help="Address line 1"),
    address_type: Optional[str] = typer.Option(None, help="Address type (HOME, WORK, ...)"),
    contact_name: Optional[str] = typer.Option(None, help="Contact name"),
    line_2: Optional[str] = typer.Option(None, "--line-2"),
    line_3: Optional[str] = typer.Option(None, "--line-3"),
    line_4: Optional[str] = typer.Option(None, "--line-4"),
    line_5: Optional[str] = typer.Option(None, "--line-5"),
):
    """Add an address. Prompts unless both --short-name and --line-1 are given."""
    from custrack.customers import workflows
    from custrack.customers.db import insert_address

    with _open() as conn:
        if short_name is None or line_1 is None:
            result = workflows.add_address(conn)
        else:
            result = insert_address(
                conn, short_name, line_1,
                address_type=address_type,
                contact_name=contact_name,
                address_line_2=line_2,
                address_line_3=line_3,
                address_line_4=line_4,
                address_line_5=line_5,
            )
            workflows.report(result, "Record added.")
    _finish(result)


@app.command("update-customer")
def update_customer():
    """Interactively update a customer's names or credit figures."""
    from custrack.customers import workflows

    with _open() as conn:
        result = workflows.update_customer(conn)
    _finish(result)


@app.command("update-address")
def update_address():
    """Interactively pick and update one of a customer's addresses."""
    from custrack.customers import workflows

    with _open() as conn:
        result = workflows.update_address(conn)
    _finish(result)


@app.command("delete-customer")
def delete_customer(
    atomic: Optional[bool] = typer.Option(
        None,
        "--atomic/--best-effort",
        help="Single transaction, or two independent deletes (default from config)",
    ),
):
    """Delete a customer and all of its addresses."""
    from custrack.customers import workflows

    with _open() as conn:
        result = workflows.delete_customer(conn, atomic=atomic)
    _finish(result)


@app.command("delete-address")
def delete_address():
    """Delete a single address belonging to a customer."""
    from custrack.customers import workflows

    with _open() as conn:
        result = workflows.delete_address(conn)
    _finish(result)


@app.command("sql")
def sql(
    execute: Optional[str] = typer.Option(None, "--execute", "-e", help="Run one statement and exit"),
):
    """UNSAFE: run SQL exactly as typed. No checks, no parameter binding."""
    import sqlite3

    from custrack.customers.raw_sql import run_operator_sql, sql_session

    with _open() as conn:
        if execute is None:
            sql_session(conn)
            return
        try:
            _, rows = run_operator_sql(conn, execute)
        except sqlite3.Error as exc:
            typer.echo(f"Error executing statement: {exc}", err=True)
            raise typer.Exit(1)
    if rows:
        typer.echo(format_rows(rows))
    typer.echo("Statement executed.")
