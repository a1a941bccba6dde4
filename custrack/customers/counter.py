"""
COUNT queries used for existence and relationship checks.

Table and column names are checked against the allow-list in
``customers.query``; the condition value is always bound.
"""

import sqlite3
from typing import Any, Optional, Union

from custrack.core import get_logger
from custrack.customers.query import check_column, check_table, fetch_one
from custrack.customers.results import Count, Stage, StorageError

logger = get_logger("custrack.customers.counter")


def select_count(
    conn: sqlite3.Connection,
    column: str,
    table: str,
    where_column: Optional[str] = None,
    value: Any = None,
) -> Union[Count, StorageError]:
    """
    ``SELECT COUNT(column) FROM table [WHERE where_column = ?]``.

    Args:
        conn: Open connection
        column: Counted column, or ``*``
        table: Table name
        where_column: Optional condition column
        value: Bound condition value (ignored without where_column)

    Returns:
        Count(n), or StorageError if the query fails or yields no row
    """
    sql = f"SELECT COUNT({check_column(column, allow_star=True)}) FROM {check_table(table)}"
    params: tuple = ()
    if where_column is not None:
        sql += f" WHERE {check_column(where_column)} = ?"
        params = (value,)

    row = fetch_one(conn, sql, params, label=f"SELECT COUNT on {table}")
    if isinstance(row, StorageError):
        return row
    if row is None:
        logger.error("SELECT COUNT on %s returned no row", table)
        return StorageError(Stage.EXECUTE, f"SELECT COUNT on {table} returned no row")
    return Count(row[0])
