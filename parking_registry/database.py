# parking_registry/database.py
"""
Database connection, session management, and table creation.
Uses SQLAlchemy (PostgreSQL in production, SQLite for tests). All models are
auto-imported in create_tables() so one call creates every table.
"""

from fastapi import Request
from sqlalchemy import create_engine, event
from sqlalchemy.ext.declarative import declarative_base
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

Base = declarative_base()


def _unicode_lower(dbapi_connection, connection_record):
    dbapi_connection.create_function("lower", 1, lambda v: v.lower() if isinstance(v, str) else v,
                                     deterministic=True)


class Database:
    """Owns the engine and session factory for one configured DATABASE_URL."""

    def __init__(self, url: str):
        if url.startswith("sqlite"):
            # One shared connection so in-memory databases survive across sessions
            self.engine = create_engine(
                url,
                connect_args={"check_same_thread": False},
                poolclass=StaticPool,
            )
            # SQLite's built-in lower() only folds ASCII; name search needs "NGUYỄN" == "nguyễn"
            event.listen(self.engine, "connect", _unicode_lower)
        else:
            self.engine = create_engine(
                url,
                pool_pre_ping=True,      # Auto-reconnect if DB connection drops
                pool_size=10,
                max_overflow=20,
                echo=False,
            )
        self.SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)

    def session(self):
        return self.SessionLocal()

    def create_tables(self):
        """
        Creates all DB tables. Safe to call multiple times.
        Import all models here so SQLAlchemy knows about them.
        """
        from parking_registry.models.person import Person                 # noqa
        from parking_registry.models.vehicle import Vehicle               # noqa
        from parking_registry.models.transaction import Transaction       # noqa
        from parking_registry.models.inventory import InventorySession, InventoryRecord  # noqa
        from parking_registry.models.admin import Admin                   # noqa

        Base.metadata.create_all(bind=self.engine)


def get_db(request: Request):
    """FastAPI dependency: yields a DB session and closes it after request."""
    db = request.app.state.db.session()
    try:
        yield db
    finally:
        db.close()
