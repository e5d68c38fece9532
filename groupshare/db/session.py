"""Database session management."""
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, Session
from contextlib import contextmanager
from typing import Generator

from groupshare.core.config import settings

DATABASE_URL = settings.get_database_url()


def _engine_options(url: str) -> dict:
    """Pool and connection options for the configured backend."""
    if url.startswith("sqlite"):
        return {"connect_args": {"check_same_thread": False}}

    return {
        "pool_size": settings.DB_POOL_SIZE,
        "max_overflow": settings.DB_MAX_OVERFLOW,
        # Every statement inherits the server-side timeout; the core never retries
        "connect_args": {"options": f"-c statement_timeout={settings.DB_STATEMENT_TIMEOUT_MS}"},
    }


def enable_sqlite_write_lock(engine: Engine) -> None:
    """
    Make every SQLite transaction take the database write lock at BEGIN.

    SQLite ignores ``FOR UPDATE``. ``BEGIN IMMEDIATE`` serializes writers the
    way the group row lock does on PostgreSQL.
    """
    @event.listens_for(engine, "connect")
    def _disable_driver_begin(dbapi_connection, connection_record):
        # pysqlite would otherwise emit its own deferred BEGIN
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _begin_immediate(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")


engine = create_engine(
    DATABASE_URL,
    pool_pre_ping=True,
    echo=False,
    **_engine_options(DATABASE_URL),
)
if DATABASE_URL.startswith("sqlite"):
    enable_sqlite_write_lock(engine)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Generator[Session, None, None]:
    """Dependency for FastAPI to get database session."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def get_db_context():
    """Context manager for getting database session outside of FastAPI."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
