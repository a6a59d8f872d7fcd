from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path

from sqlalchemy import Engine, create_engine, event
from sqlalchemy.orm import Session, sessionmaker

from physiosim.config import get_settings

logger = logging.getLogger(__name__)

# "PSYS"
_SQLITE_APPLICATION_ID = 0x50535953


def _configure_sqlite(engine: Engine, *, busy_timeout_ms: int) -> None:
    @event.listens_for(engine, "connect")
    def _set_sqlite_pragmas(dbapi_connection, connection_record) -> None:  # noqa: ARG001
        cursor = dbapi_connection.cursor()
        try:
            cursor.execute("PRAGMA foreign_keys = ON")
            cursor.execute(f"PRAGMA busy_timeout = {int(busy_timeout_ms)}")
            cursor.execute("PRAGMA journal_mode = WAL")
            cursor.execute("PRAGMA synchronous = NORMAL")
            cursor.execute("PRAGMA temp_store = MEMORY")
            cursor.execute("PRAGMA cache_size = -8192")
            cursor.execute(f"PRAGMA application_id = {_SQLITE_APPLICATION_ID}")
        finally:
            cursor.close()


def create_db_engine(database_url: str, **kwargs) -> Engine:
    """
    Build an Engine for `database_url`.

    SQLite connections get foreign keys, WAL journaling and a busy timeout on
    every new DBAPI connection. Extra keyword arguments go to `create_engine`.
    """
    settings = get_settings()
    kwargs.setdefault("echo", settings.sql_echo)
    engine = create_engine(database_url, future=True, **kwargs)
    if engine.dialect.name == "sqlite":
        db_path = engine.url.database
        if db_path and db_path != ":memory:" and not db_path.startswith("file:"):
            Path(db_path).parent.mkdir(parents=True, exist_ok=True)
        _configure_sqlite(engine, busy_timeout_ms=settings.sqlite_busy_timeout_ms)
    logger.debug("Created engine for %s", engine.url.render_as_string(hide_password=True))
    return engine


@lru_cache(maxsize=1)
def get_engine() -> Engine:
    """Return the Engine (connection pool) for the configured `database_url`."""
    return create_db_engine(get_settings().database_url)


def get_session(engine: Engine | None = None) -> Session:
    """Create a new Session. Callers are responsible for closing it."""
    SessionLocal = sessionmaker(bind=engine or get_engine(), expire_on_commit=False, future=True)
    return SessionLocal()
