"""
Demonstration data for an empty database.

Eight customers and eight addresses, inserted only when the customers
table has no rows. Blank sample fields are stored as NULL.
"""

import sqlite3
from typing import List, Optional, Tuple

from custrack.core import get_logger

logger = get_logger("custrack.customers.seed")


SAMPLE_CUSTOMERS: List[Tuple[int, str, str, str, str, int, int]] = [
    # (customer_id, short_name, first_name, last_name, group_name, credit_limit, outstanding_credit)
    (1, "JSMITH", "John", "Smith", "SMITH FAMILY", 10000, 0),
    (2, "MSMITH", "Mary", "Smith", "SMITH FAMILY", 10000, 0),
    (3, "BSMITH", "Bob", "Smith", "SMITH FAMILY", 5000, 0),
    (4, "BJONES", "Brian", "Jones", "JONES FAMILY", 5000, 0),
    (5, "DTRACEY", "Donald", "Tracey", "TRACEY FAMILY", 3000, 0),
    (6, "ABAKER", "Anthony", "Baker", "BAKER FAMILY", 5000, 0),
    (7, "AMCKECHNIE", "Alastair", "McKechnie", "MCKECHNIE FAMILY", 7000, 0),
    (8, "RGOULDING", "Robert", "Goulding", "GOULDING", 5000, 0),
]

SAMPLE_ADDRESSES: List[Tuple[int, str, str, str, str, Optional[str]]] = [
    # (address_id, owner short_name, address_type, line_1, line_2, line_3)
    (1, "JSMITH", "HOME", "1 Regent Road", "London", "W12 5GG"),
    (2, "MSMITH", "HOME", "1 Regent Road", "London", "W12 5GG"),
    (3, "BSMITH", "HOME", "1 Regent Road", "London", "W12 5GG"),
    (4, "JSMITH", "WORK", "26 Lombard Street", "London", "EC4"),
    (5, "DTRACEY", "HOME", "5 Bright Street", "Dorking", "Surrey"),
    (6, "ABAKER", "HOME", "21 Hope Street", "Barnet", "Middlesex"),
    (7, "ABAKER", "WORK", "1 Canada Square", "Canary Wharf", "London"),
    (8, "ABAKER", "UNKNOWN", "17 Broad Street", "London", "EC3"),
]


def customers_empty(conn: sqlite3.Connection) -> bool:
    row = conn.execute("SELECT EXISTS (SELECT 1 FROM customers)").fetchone()
    return not row[0]


def seed_sample_data(conn: sqlite3.Connection) -> bool:
    """
    Insert the sample rows if the customers table is empty.

    Returns:
        True if rows were inserted
    """
    if not customers_empty(conn):
        return False

    conn.executemany(
        """INSERT OR IGNORE INTO customers
           (customer_id, short_name, first_name, last_name, group_name,
            credit_limit, outstanding_credit, created_on, updated_on)
           VALUES (?, ?, ?, ?, ?, ?, ?, DATE('now'), DATE('now'))""",
        SAMPLE_CUSTOMERS,
    )
    conn.executemany(
        """INSERT OR IGNORE INTO customer_addresses
           (address_id, customer_id, address_type, address_line_1,
            address_line_2, address_line_3, created_on, updated_on)
           VALUES (?, (SELECT customer_id FROM customers WHERE short_name = ?),
                   ?, ?, ?, ?, DATE('now'), DATE('now'))""",
        SAMPLE_ADDRESSES,
    )
    conn.commit()
    logger.info(
        "Seeded %d sample customers and %d addresses",
        len(SAMPLE_CUSTOMERS), len(SAMPLE_ADDRESSES),
    )
    return True
