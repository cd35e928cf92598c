import logging

from fastapi import Request
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker

logger = logging.getLogger(__name__)

# Base class for models
Base = declarative_base()


def _set_sqlite_pragma(dbapi_conn, connection_record):
    # WAL lets the backup copy run alongside request writes
    cursor = dbapi_conn.cursor()
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.close()


def create_db_engine(database_url: str) -> Engine:
    """Create engine with SQLite optimizations"""
    if database_url.startswith("sqlite"):
        engine = create_engine(
            database_url,
            connect_args={
                "check_same_thread": False,
                "timeout": 30
            },
            pool_pre_ping=True
        )
        event.listen(engine, "connect", _set_sqlite_pragma)
        return engine

    return create_engine(database_url, pool_pre_ping=True)


class Database:
    """Owns the engine and session factory for the lifetime of the app"""

    def __init__(self, database_url: str):
        self.url = database_url
        self.engine = create_db_engine(database_url)
        self.session_factory = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)

    @property
    def is_sqlite(self) -> bool:
        return self.engine.dialect.name == "sqlite"

    def close(self) -> None:
        self.engine.dispose()
        logger.info("Database connections closed")


# Dependency to get database session
def get_db(request: Request):
    db = request.app.state.database.session_factory()
    try:
        yield db
    finally:
        db.close()
