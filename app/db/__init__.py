"""
Database configuration, models and read-only repositories.
"""

from app.db.database import engine, SessionLocal, get_db, init_db
from app.db.models import Base
from app.db.repositories import CategoryDirectory, LedgerStore, PropertyRegistry

__all__ = [
    "engine",
    "SessionLocal",
    "get_db",
    "init_db",
    "Base",
    "CategoryDirectory",
    "LedgerStore",
    "PropertyRegistry",
]
