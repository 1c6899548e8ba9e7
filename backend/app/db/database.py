"""
Database connection and session management.
Engine with connection pooling, health-checked connections and
automatic recycling. Supports PostgreSQL and SQLite backends.
"""

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import QueuePool, StaticPool
from typing import Generator, Optional
import logging
import os
import time

from app.core.config import settings
from app.db.models import Base

logger = logging.getLogger(__name__)

# Remember an outage so every request doesn't pay for a slow connect attempt
_db_available = True
_db_last_check = 0.0
_DB_RETRY_INTERVAL = 30  # seconds

_BACKEND_DIR = os.path.dirname(os.path.dirname(os.path.dirname(__file__)))


def _resolve_sqlite_url(url: str) -> str:
    """Relative SQLite paths are resolved against the backend directory."""
    path = url.replace("sqlite:///", "", 1)
    if path.startswith("./"):
        return f"sqlite:///{os.path.join(_BACKEND_DIR, path[2:])}"
    return url


def build_engine(database_url: str) -> Engine:
    """Create an engine tuned for the backend in the URL."""
    if database_url.startswith("sqlite"):
        sqlite_engine = create_engine(
            _resolve_sqlite_url(database_url),
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
            echo=False,
        )

        @event.listens_for(sqlite_engine, "connect")
        def set_sqlite_pragma(dbapi_conn, connection_record):
            cursor = dbapi_conn.cursor()
            cursor.execute("PRAGMA journal_mode=WAL")
            cursor.execute("PRAGMA synchronous=NORMAL")
            cursor.close()

        return sqlite_engine

    pg_engine = create_engine(
        database_url,
        poolclass=QueuePool,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
        pool_recycle=settings.database_pool_recycle,
        pool_pre_ping=settings.database_pool_pre_ping,
        pool_timeout=30,
        echo=False,
        connect_args={"connect_timeout": 10},
    )

    @event.listens_for(pg_engine, "connect")
    def set_application_name(dbapi_conn, connection_record):
        cursor = dbapi_conn.cursor()
        cursor.execute("SET application_name = 'flights-packages-search'")
        cursor.close()

    return pg_engine


engine = build_engine(settings.database_url)

SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
)


def get_db() -> Generator[Optional[Session], None, None]:
    """
    Dependency injection for database session.
    Yields None while the database is known to be down (graceful degradation).
    """
    global _db_available, _db_last_check

    if not _db_available:
        now = time.time()
        if now - _db_last_check < _DB_RETRY_INTERVAL:
            yield None
            return
        _db_last_check = now

    db = None
    try:
        db = SessionLocal()
        db.execute(text("SELECT 1"))
        _db_available = True
    except Exception as e:
        logger.warning(f"Database unavailable: {e}")
        _db_available = False
        _db_last_check = time.time()
        if db is not None:
            db.close()
        db = None

    try:
        yield db
    finally:
        if db is not None:
            db.close()


def mark_unavailable() -> None:
    """Flag the database as down (used when startup init fails)."""
    global _db_available, _db_last_check
    _db_available = False
    _db_last_check = time.time()


def init_db() -> None:
    """Create catalog tables if missing (development / SQLite)."""
    logger.info("Initializing database schema...")
    Base.metadata.create_all(bind=engine)
    logger.info("Database schema initialized")
