"""
custrack - Customer & address record manager

Console tool over a two-table SQLite schema: customers and the
addresses they own (one customer, many addresses).

Modules:
    core        - Shared services (db, config, logging, prompts, text)
    customers   - Relational access layer, operator workflows, menu
    cli         - Typer entry point
"""

__version__ = "0.1.0"
