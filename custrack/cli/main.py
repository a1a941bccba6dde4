"""
custrack CLI - Main Entry Point

Unified Typer CLI that assembles all module sub-commands.

Usage:
    custrack version
    custrack migrate [--no-seed]
    custrack menu
    custrack customers [command]
"""

import importlib
from pathlib import Path
from typing import Optional

import typer

import custrack

app = typer.Typer(
    name="custrack",
    help="Customer and address record manager.",
    no_args_is_help=True,
)


@app.command()
def version():
    """Show custrack version."""
    typer.echo(f"custrack {custrack.__version__}")


@app.command()
def migrate(
    seed: Optional[bool] = typer.Option(
        None, "--seed/--no-seed", help="Insert sample data into an empty database (default from config)"
    ),
    database: Optional[Path] = typer.Option(None, "--database", "-d", help="Database file (default from config)"),
):
    """Create missing tables and optionally seed sample data."""
    from custrack.core import get_db, migrate_all

    with get_db(path=database) as conn:
        seeded = migrate_all(conn, seed=seed)
    if seeded:
        typer.echo("Customer table was empty. Sample data added.")
    typer.echo("Database migration complete.")


@app.command()
def menu(
    database: Optional[Path] = typer.Option(None, "--database", "-d", help="Database file (default from config)"),
    atomic: Optional[bool] = typer.Option(
        None,
        "--atomic-delete/--best-effort-delete",
        help="How customer deletes run (default from config)",
    ),
):
    """Open the interactive customer manager."""
    from custrack.core import get_db, migrate_all
    from custrack.customers.menu import run_menu

    with get_db(path=database) as conn:
        typer.echo("Database opened successfully.")
        if migrate_all(conn):
            typer.echo("Customer table was empty. Sample data added.")
        run_menu(conn, atomic=atomic)
    typer.echo("Database closed.")


MODULE_REGISTRY = [
    ("custrack.customers.cli", "customers", "Customer and address records"),
]


def _register_modules():
    """Register module CLI sub-apps."""
    for module_path, name, help_text in MODULE_REGISTRY:
        mod = importlib.import_module(module_path)
        app.add_typer(mod.app, name=name, help=help_text)


_register_modules()


def main():
    """Entry point for the custrack CLI."""
    app()


if __name__ == "__main__":
    main()
