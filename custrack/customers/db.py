"""
Customer and address records. Pure Python, no CLI imports.

Reads plus the insert/update/delete routines for both tables. Mutators
take values that have already been collected (see ``workflows`` for the
prompting side), normalise every string (trimmed, blank -> NULL) and
return a result variant from ``customers.results``.
"""

import sqlite3
from typing import Any, Dict, List, Optional, Tuple, Union

from custrack.core import get_logger
from custrack.core.text import blank_to_none
from custrack.customers.addresses import list_customer_addresses
from custrack.customers.counter import select_count
from custrack.customers.query import execute, fetch_one, run_trusted
from custrack.customers.resolver import count_short_name, get_customer_id
from custrack.customers.results import (
    CascadeResult,
    Count,
    Done,
    Duplicate,
    Found,
    NotFound,
    Stage,
    StorageError,
)

logger = get_logger("custrack.customers.db")

Mutation = Union[Done, NotFound, StorageError]


# =============================================================================
# Statements
# =============================================================================

INSERT_CUSTOMER_SQL = """
    INSERT INTO customers
        (short_name, first_name, last_name, group_name,
         credit_limit, outstanding_credit, created_on, updated_on)
    VALUES (?, ?, ?, ?, ?, ?, DATE('now'), DATE('now'))
"""

# customer_id comes from a bound sub-SELECT on short_name
INSERT_ADDRESS_SQL = """
    INSERT INTO customer_addresses
        (customer_id, address_type, contact_name, address_line_1,
         address_line_2, address_line_3, address_line_4, address_line_5,
         created_on, updated_on)
    VALUES ((SELECT customer_id FROM customers WHERE short_name = ?),
            ?, ?, ?, ?, ?, ?, ?, DATE('now'), DATE('now'))
"""

UPDATE_CUSTOMER_NAMES_SQL = """
    UPDATE customers
    SET first_name = ?, last_name = ?, group_name = ?, updated_on = DATE('now')
    WHERE customer_id = ?
"""

UPDATE_CUSTOMER_CREDIT_SQL = """
    UPDATE customers
    SET credit_limit = ?, outstanding_credit = ?, updated_on = DATE('now')
    WHERE customer_id = ?
"""

UPDATE_ADDRESS_SQL = """
    UPDATE customer_addresses
    SET address_type = ?, contact_name = ?, address_line_1 = ?,
        address_line_2 = ?, address_line_3 = ?, address_line_4 = ?,
        address_line_5 = ?, updated_on = DATE('now')
    WHERE address_id = ?
"""

DELETE_CUSTOMER_ADDRESSES_SQL = "DELETE FROM customer_addresses WHERE customer_id = ?"
DELETE_CUSTOMER_SQL = "DELETE FROM customers WHERE customer_id = ?"
DELETE_ADDRESS_SQL = "DELETE FROM customer_addresses WHERE address_id = ?"


def _missing(field: str) -> StorageError:
    logger.error("Refusing to bind blank value for required field %s", field)
    return StorageError(Stage.BIND, f"{field} is required")


def _not_an_amount(field: str, value: Any) -> StorageError:
    logger.error("Refusing to bind non-integer %s: %r", field, value)
    return StorageError(Stage.BIND, f"{field} must be a whole number")


def _amounts(**amounts: Any) -> Optional[StorageError]:
    for field, value in amounts.items():
        if isinstance(value, bool) or not isinstance(value, int):
            return _not_an_amount(field, value)
    return None


def _address_values(
    address_type: Optional[str],
    contact_name: Optional[str],
    address_line_1: str,
    extra_lines: Tuple[Optional[str], ...],
) -> tuple:
    return (
        blank_to_none(address_type),
        blank_to_none(contact_name),
        address_line_1,
        *(blank_to_none(line) for line in extra_lines),
    )


# =============================================================================
# Reads
# =============================================================================

def table_counts(
    conn: sqlite3.Connection,
) -> Tuple[Union[Count, StorageError], Union[Count, StorageError]]:
    """Row counts for (customers, customer_addresses)."""
    return (
        select_count(conn, "*", "customers"),
        select_count(conn, "*", "customer_addresses"),
    )


def list_customers(conn: sqlite3.Connection) -> Union[List[sqlite3.Row], StorageError]:
    """Every customer, in id order."""
    return run_trusted(conn, "SELECT * FROM customers ORDER BY customer_id", label="list customers")


def list_addresses(conn: sqlite3.Connection) -> Union[List[sqlite3.Row], StorageError]:
    """Every address, in id order."""
    return run_trusted(
        conn,
        "SELECT * FROM customer_addresses ORDER BY address_id",
        label="list addresses",
    )


def list_customers_with_addresses(
    conn: sqlite3.Connection,
) -> Union[List[sqlite3.Row], StorageError]:
    """Customer/address pairs (customers without addresses are omitted)."""
    return run_trusted(
        conn,
        """SELECT c.customer_id, c.short_name, c.first_name, c.last_name,
                  c.group_name, c.credit_limit, c.outstanding_credit,
                  a.address_id, a.address_type, a.contact_name,
                  a.address_line_1, a.address_line_2, a.address_line_3,
                  a.address_line_4, a.address_line_5
           FROM customers c
           INNER JOIN customer_addresses a ON a.customer_id = c.customer_id
           ORDER BY c.customer_id, a.address_id""",
        label="list customers with addresses",
    )


def get_customer(
    conn: sqlite3.Connection,
    customer_id: int,
) -> Union[Found, NotFound, StorageError]:
    """Single customer row by id."""
    row = fetch_one(
        conn,
        "SELECT * FROM customers WHERE customer_id = ?",
        (customer_id,),
        label="SELECT customer",
    )
    if isinstance(row, StorageError):
        return row
    if row is None:
        return NotFound(customer_id)
    return Found(row)


def get_customer_summary(
    conn: sqlite3.Connection,
    short_name: str,
) -> Union[Found, NotFound, StorageError]:
    """
    Customer row plus its addresses.

    Returns:
        Found({"customer": Row, "addresses": [Row, ...]}), NotFound or StorageError
    """
    resolved = get_customer_id(conn, short_name)
    if not isinstance(resolved, Found):
        return resolved

    customer = get_customer(conn, resolved.value)
    if not isinstance(customer, Found):
        return customer

    addresses = list_customer_addresses(conn, resolved.value)
    if isinstance(addresses, StorageError):
        return addresses

    summary: Dict[str, Any] = {"customer": customer.value, "addresses": addresses}
    return Found(summary)


# =============================================================================
# Customers
# =============================================================================

def insert_customer(
    conn: sqlite3.Connection,
    short_name: str,
    first_name: Optional[str] = None,
    last_name: Optional[str] = None,
    group_name: Optional[str] = None,
    credit_limit: int = 0,
    outstanding_credit: int = 0,
) -> Union[Done, Duplicate, StorageError]:
    """
    Add a customer.

    The short name is checked for uniqueness before anything is written;
    a taken name returns Duplicate and leaves the table untouched.
    """
    short_name = blank_to_none(short_name)
    if short_name is None:
        return _missing("short_name")
    bad = _amounts(credit_limit=credit_limit, outstanding_credit=outstanding_credit)
    if bad:
        return bad

    existing = count_short_name(conn, short_name)
    if isinstance(existing, StorageError):
        return existing
    if existing.value:
        logger.info("Rejected duplicate short name %s", short_name)
        return Duplicate(short_name)

    result = execute(
        conn,
        INSERT_CUSTOMER_SQL,
        (
            short_name,
            blank_to_none(first_name),
            blank_to_none(last_name),
            blank_to_none(group_name),
            credit_limit,
            outstanding_credit,
        ),
        label="INSERT customer",
    )
    if isinstance(result, Done):
        logger.info("Added customer %s (id %s)", short_name, result.lastrowid)
    return result


def update_customer_names(
    conn: sqlite3.Connection,
    customer_id: int,
    first_name: Optional[str],
    last_name: Optional[str],
    group_name: Optional[str],
) -> Mutation:
    """Replace first/last/group name; blanks become NULL."""
    result = execute(
        conn,
        UPDATE_CUSTOMER_NAMES_SQL,
        (
            blank_to_none(first_name),
            blank_to_none(last_name),
            blank_to_none(group_name),
            customer_id,
        ),
        label="UPDATE customer names",
    )
    return _updated(result, "customer", customer_id)


def update_customer_credit(
    conn: sqlite3.Connection,
    customer_id: int,
    credit_limit: int,
    outstanding_credit: int,
) -> Mutation:
    """Replace credit limit and outstanding credit."""
    bad = _amounts(credit_limit=credit_limit, outstanding_credit=outstanding_credit)
    if bad:
        return bad
    result = execute(
        conn,
        UPDATE_CUSTOMER_CREDIT_SQL,
        (credit_limit, outstanding_credit, customer_id),
        label="UPDATE customer credit",
    )
    return _updated(result, "customer", customer_id)


def delete_customer_cascade(
    conn: sqlite3.Connection,
    customer_id: int,
    atomic: bool = True,
) -> Union[CascadeResult, NotFound]:
    """
    Delete a customer's addresses, then the customer.

    Args:
        conn: Open connection
        customer_id: Customer to remove
        atomic: Run both deletes in one transaction and roll back if
            either fails. With False each delete commits on its own and
            the customer delete is attempted even if the address delete
            failed (a remaining address then blocks it via the foreign key).

    Returns:
        CascadeResult, or NotFound if no customer row was deleted
    """
    if not atomic:
        addresses = execute(
            conn, DELETE_CUSTOMER_ADDRESSES_SQL, (customer_id,),
            label="DELETE customer addresses",
        )
        customer = execute(
            conn, DELETE_CUSTOMER_SQL, (customer_id,), label="DELETE customer",
        )
        if isinstance(customer, Done) and customer.rowcount == 0:
            logger.info("No customer %s to delete", customer_id)
            return NotFound(customer_id)
        outcome = CascadeResult(addresses, customer)
        if outcome.ok:
            logger.info("Deleted customer %s and %s address(es)", customer_id, addresses.rowcount)
        return outcome

    addresses = execute(
        conn, DELETE_CUSTOMER_ADDRESSES_SQL, (customer_id,),
        label="DELETE customer addresses", commit=False,
    )
    customer: Union[Done, StorageError, None] = None
    if isinstance(addresses, Done):
        customer = execute(
            conn, DELETE_CUSTOMER_SQL, (customer_id,),
            label="DELETE customer", commit=False,
        )

    if isinstance(customer, Done) and customer.rowcount == 0:
        conn.rollback()
        logger.info("No customer %s to delete", customer_id)
        return NotFound(customer_id)

    if isinstance(customer, Done):
        try:
            conn.commit()
        except sqlite3.Error as exc:
            conn.rollback()
            logger.error("Commit of customer %s delete failed: %s", customer_id, exc)
            return CascadeResult(addresses, StorageError(Stage.EXECUTE, str(exc)), rolled_back=True)
        logger.info("Deleted customer %s and %s address(es)", customer_id, addresses.rowcount)
        return CascadeResult(addresses, customer)

    conn.rollback()
    logger.error("Rolled back delete of customer %s", customer_id)
    return CascadeResult(addresses, customer, rolled_back=True)


# =============================================================================
# Addresses
# =============================================================================

def insert_address(
    conn: sqlite3.Connection,
    short_name: str,
    address_line_1: str,
    address_type: Optional[str] = None,
    contact_name: Optional[str] = None,
    address_line_2: Optional[str] = None,
    address_line_3: Optional[str] = None,
    address_line_4: Optional[str] = None,
    address_line_5: Optional[str] = None,
) -> Mutation:
    """Add an address owned by the customer with *short_name*."""
    short_name = blank_to_none(short_name)
    if short_name is None:
        return _missing("short_name")
    line_1 = blank_to_none(address_line_1)
    if line_1 is None:
        return _missing("address_line_1")

    owner = count_short_name(conn, short_name)
    if isinstance(owner, StorageError):
        return owner
    if owner.value == 0:
        return NotFound(short_name)

    values = _address_values(
        address_type, contact_name, line_1,
        (address_line_2, address_line_3, address_line_4, address_line_5),
    )
    result = execute(conn, INSERT_ADDRESS_SQL, (short_name, *values), label="INSERT address")
    if isinstance(result, Done):
        logger.info("Added address %s for customer %s", result.lastrowid, short_name)
    return result


def update_address(
    conn: sqlite3.Connection,
    address_id: int,
    address_line_1: str,
    address_type: Optional[str] = None,
    contact_name: Optional[str] = None,
    address_line_2: Optional[str] = None,
    address_line_3: Optional[str] = None,
    address_line_4: Optional[str] = None,
    address_line_5: Optional[str] = None,
) -> Mutation:
    """Replace every editable field of an address."""
    line_1 = blank_to_none(address_line_1)
    if line_1 is None:
        return _missing("address_line_1")

    values = _address_values(
        address_type, contact_name, line_1,
        (address_line_2, address_line_3, address_line_4, address_line_5),
    )
    result = execute(conn, UPDATE_ADDRESS_SQL, (*values, address_id), label="UPDATE address")
    return _updated(result, "address", address_id)


def delete_address(conn: sqlite3.Connection, address_id: int) -> Mutation:
    """Delete a single address."""
    result = execute(conn, DELETE_ADDRESS_SQL, (address_id,), label="DELETE address")
    if isinstance(result, Done) and result.rowcount == 0:
        return NotFound(address_id)
    if isinstance(result, Done):
        logger.info("Deleted address %s", address_id)
    return result


def _updated(result: Union[Done, StorageError], kind: str, row_id: int) -> Mutation:
    if isinstance(result, StorageError):
        return result
    if result.rowcount == 0:
        return NotFound(row_id)
    logger.info("Updated %s %s", kind, row_id)
    return result
