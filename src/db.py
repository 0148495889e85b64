"""Database engine and schema init for the Gantt backend.

Uses SQLAlchemy and SQLModel; the URL comes from DATABASE_URL, or is built
from POSTGRES_* env vars (psycopg2 driver) when DATABASE_URL is unset.
"""

import logging
import os

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlmodel import SQLModel

from models import GanttTask  # noqa: F401  ensure table registered

logger = logging.getLogger(__name__)


def _connection_params():
    return {
        "host": os.environ.get("POSTGRES_HOST", "localhost"),
        "port": int(os.environ.get("POSTGRES_PORT", "5432")),
        "user": os.environ.get("POSTGRES_USER", "postgres"),
        "password": os.environ.get("POSTGRES_PASSWORD", ""),
        "dbname": os.environ.get("POSTGRES_DB", "postgres"),
    }


def _database_url() -> str:
    url = (os.environ.get("DATABASE_URL") or "").strip()
    if url:
        return url
    p = _connection_params()
    return (
        f"postgresql+psycopg2://{p['user']}:{p['password']}"
        f"@{p['host']}:{p['port']}/{p['dbname']}"
    )


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    # SQLite ignores FOREIGN KEY ... ON DELETE CASCADE unless switched on per connection
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_db_engine(url: str, **kwargs) -> Engine:
    """Create an engine for url; SQLite engines get foreign key enforcement turned on."""
    engine = create_engine(url, **kwargs)
    if engine.dialect.name == "sqlite":
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
    return engine


_engine = None


def get_engine():
    """Return the shared SQLAlchemy engine for SQLModel sessions."""
    global _engine
    if _engine is None:
        echo = os.environ.get("SQL_ECHO", "false").strip().lower() in ("true", "1", "yes")
        _engine = create_db_engine(_database_url(), echo=echo)
        logger.info("Database engine created (%s)", _engine.dialect.name)
    return _engine


def init_db() -> None:
    """Create the tasks table from SQLModel metadata if it does not exist."""
    engine = get_engine()
    SQLModel.metadata.create_all(engine)
