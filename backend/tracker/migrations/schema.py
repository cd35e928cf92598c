"""
Schema migrations for the clicks database.

Tables are created from the models; databases created by older deployments
are brought up to date with additive, numbered steps. The applied version is
stored in the schema_version table so each step runs at most once, and every
step also checks the live schema before altering it.

Usage:
    cd backend
    python -m tracker.migrations.schema
"""

import logging
from typing import Callable, List, Tuple

from sqlalchemy import inspect, text
from sqlalchemy.engine import Connection, Engine

from ..database import Base
from .. import models  # noqa: F401  (registers tables on Base.metadata)

logger = logging.getLogger(__name__)


def _column_names(conn: Connection, table: str) -> List[str]:
    return [col["name"] for col in inspect(conn).get_columns(table)]


def _add_column(table: str, name: str, ddl: str) -> Callable[[Connection], None]:
    def step(conn: Connection) -> None:
        if name in _column_names(conn, table):
            logger.info("Column %s already exists in %s table", name, table)
            return
        conn.execute(text(f"ALTER TABLE {table} ADD COLUMN {name} {ddl}"))
        logger.info("Added column %s to %s table", name, table)
    return step


def _create_index(name: str, table: str, columns: str) -> Callable[[Connection], None]:
    def step(conn: Connection) -> None:
        conn.execute(text(f"CREATE INDEX IF NOT EXISTS {name} ON {table}({columns})"))
        logger.info("Created index %s", name)
    return step


MIGRATIONS: List[Tuple[int, str, Callable[[Connection], None]]] = [
    (1, "add country column", _add_column("clicks", "country", "VARCHAR(100) DEFAULT 'unknown'")),
    (2, "add click_count column", _add_column("clicks", "click_count", "INTEGER NOT NULL DEFAULT 1")),
    (3, "index clicks by ip and time", _create_index("idx_clicks_ip_time", "clicks", "ip_address, timestamp")),
]

LATEST_VERSION = MIGRATIONS[-1][0]


def get_schema_version(conn: Connection) -> int:
    row = conn.execute(text("SELECT version FROM schema_version WHERE id = 1")).first()
    return row[0] if row else 0


def _set_schema_version(conn: Connection, version: int) -> None:
    updated = conn.execute(
        text("UPDATE schema_version SET version = :version, updated_at = CURRENT_TIMESTAMP WHERE id = 1"),
        {"version": version}
    )
    if updated.rowcount == 0:
        conn.execute(
            text("INSERT INTO schema_version (id, version) VALUES (1, :version)"),
            {"version": version}
        )


def migrate(engine: Engine) -> int:
    """Create missing tables and apply pending migrations. Returns the schema version."""
    Base.metadata.create_all(bind=engine)

    with engine.begin() as conn:
        current = get_schema_version(conn)
        for version, description, step in MIGRATIONS:
            if version <= current:
                continue
            logger.info("Applying migration %d: %s", version, description)
            step(conn)
            current = version
        _set_schema_version(conn, current)

    logger.info("Database schema at version %d", current)
    return current


if __name__ == "__main__":
    from ..config import get_settings
    from ..core.logging_config import setup_logging
    from ..database import Database

    settings = get_settings()
    setup_logging(settings.LOG_LEVEL)
    database = Database(settings.DATABASE_URL)
    try:
        migrate(database.engine)
    finally:
        database.close()
