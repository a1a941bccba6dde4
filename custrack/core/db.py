"""
Database access for custrack.

Provides connection management and schema bootstrap. The connection
handle is opened once by the caller (CLI shell) and passed by reference
into every customers operation; those operations never open or close it.
"""

import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Generator, Optional, Union

from custrack.core.config import CT_PATHS


def get_db_path() -> Path:
    """Get database path from config."""
    return CT_PATHS.database


@contextmanager
def get_db(
    readonly: bool = False,
    path: Optional[Union[str, Path]] = None,
) -> Generator[sqlite3.Connection, None, None]:
    """
    Context manager for database connections.

    Enables foreign keys and Row factory automatically.

    Args:
        readonly: Open in read-only mode (useful for queries)
        path: Override the configured database file

    Yields:
        sqlite3.Connection with Row factory enabled
    """
    db_path = Path(path) if path is not None else get_db_path()

    if readonly:
        uri = f"file:{db_path}?mode=ro"
        conn = sqlite3.connect(uri, uri=True)
    else:
        db_path.parent.mkdir(parents=True, exist_ok=True)
        conn = sqlite3.connect(str(db_path))

    try:
        conn.execute("PRAGMA foreign_keys = ON")
        if not readonly:
            conn.execute("PRAGMA journal_mode = WAL")
        conn.row_factory = sqlite3.Row
        yield conn
    finally:
        conn.close()


# Schema dependency order. Foreign keys flow downhill through this list.
SCHEMA_ORDER = [
    "customers",
]


def apply_schemas(conn: sqlite3.Connection) -> None:
    """Run every module's schema.sql in SCHEMA_ORDER (idempotent)."""
    from custrack.core.logging import get_logger

    logger = get_logger("custrack.migrate")
    package_dir = Path(__file__).parent.parent

    for module_name in SCHEMA_ORDER:
        schema_file = package_dir / module_name / "schema.sql"
        if schema_file.exists():
            logger.info("Applying schema: %s/schema.sql", module_name)
            conn.executescript(schema_file.read_text(encoding="utf-8"))
        else:
            logger.debug("No schema for module: %s", module_name)
    conn.commit()


def migrate_all(
    conn: Optional[sqlite3.Connection] = None,
    seed: Optional[bool] = None,
) -> bool:
    """
    Create any missing tables and seed demonstration data.

    Each schema.sql uses CREATE TABLE IF NOT EXISTS, making this safe
    to run repeatedly. Seeding only happens when the customers table is
    empty; ``seed=None`` defers to ``bootstrap.seed_sample_data``.

    Returns:
        True if sample rows were inserted
    """
    from custrack.core.config import get_config_value
    from custrack.customers.seed import seed_sample_data

    if seed is None:
        seed = bool(get_config_value("bootstrap", "seed_sample_data", default=True))

    if conn is None:
        with get_db() as own_conn:
            apply_schemas(own_conn)
            return seed_sample_data(own_conn) if seed else False

    apply_schemas(conn)
    return seed_sample_data(conn) if seed else False
