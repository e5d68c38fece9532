"""Database package."""
from groupshare.db.session import engine, SessionLocal, get_db, get_db_context
from groupshare.db.base import Base

__all__ = ["engine", "SessionLocal", "get_db", "get_db_context", "Base"]
