"""
Database migrations for the voice sync ledger.

Uses SQLite ALTER TABLE ADD COLUMN for incremental schema evolution.
create_all() builds every table with all current columns, so a fresh
database needs nothing here. When a column is added to a model after a
release, append it to COLUMN_MIGRATIONS so databases created by the
older release gain it on the next start.

Called automatically from get_engine() after create_all().
"""
import logging
from typing import List, Tuple

from sqlalchemy import text

logger = logging.getLogger(__name__)

# (table, column, SQLite type). Empty: the schema has not changed since release.
COLUMN_MIGRATIONS: List[Tuple[str, str, str]] = []


def run_migrations(engine) -> None:
    """Apply all pending schema migrations.

    Safe to call multiple times. Only SQLite is migrated here (uses
    PRAGMA table_info); other backends are expected to be managed by
    their own tooling and are left untouched.

    Args:
        engine: SQLAlchemy engine (SQLModel create_engine result).
    """
    if not COLUMN_MIGRATIONS:
        return
    if engine.dialect.name != "sqlite":
        logger.info("Skipping migrations for dialect %s", engine.dialect.name)
        return

    with engine.connect() as conn:
        for table, column, col_type in COLUMN_MIGRATIONS:
            _add_column_if_missing(conn, table, column, col_type)
        conn.commit()


def _add_column_if_missing(conn, table: str, column: str, col_type: str) -> None:
    """Add a column to a table if it doesn't already exist.

    Args:
        conn: SQLAlchemy connection.
        table: Table name (lowercase, as SQLite stores it).
        column: Column name to add.
        col_type: SQLite type string, e.g. "INTEGER", "TEXT", "DATETIME".
    """
    result = conn.execute(text(f"PRAGMA table_info({table})"))
    existing_columns = {row[1] for row in result}
    if column not in existing_columns:
        logger.info("Adding column %s.%s", table, column)
        conn.execute(text(f"ALTER TABLE {table} ADD COLUMN {column} {col_type}"))
