"""
Database connection and session management module.

Uses SQLAlchemy for ORM operations. Supports PostgreSQL (production)
and SQLite (local development and tests).

Nothing here is module-global: the application factory builds one engine
and one session factory and keeps them on ``app.state``. Routes obtain a
session (and from it a store) per request through ``get_session``.
"""

import os
from fastapi import Request
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, DeclarativeBase
from sqlalchemy.pool import StaticPool

# Read database URL from environment
# Fallback to SQLite for local development when PostgreSQL is not available
DATABASE_URL = os.getenv(
    "DATABASE_URL",
    "sqlite:///./students.db"
)


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy ORM models."""
    pass


def _is_memory_sqlite(url: str) -> bool:
    return url in ("sqlite://", "sqlite:///:memory:") or url.startswith("sqlite:///:memory:?")


def build_engine(url: str = None) -> Engine:
    """
    Create a SQLAlchemy engine configured for the database type.

    SQLite does not support pool_size, max_overflow, or pool_pre_ping.
    An in-memory SQLite database lives inside a single connection, so it
    is pinned with a StaticPool to survive across sessions.
    """
    url = url or DATABASE_URL
    engine_kwargs = {"echo": False}

    if url.startswith("postgresql"):
        engine_kwargs.update({
            "pool_size": 10,
            "max_overflow": 20,
            "pool_pre_ping": True,
        })
    elif url.startswith("sqlite"):
        # SQLite needs check_same_thread=False for FastAPI (multi-threaded)
        engine_kwargs["connect_args"] = {"check_same_thread": False}
        if _is_memory_sqlite(url):
            engine_kwargs["poolclass"] = StaticPool

    engine = create_engine(url, **engine_kwargs)

    if url.startswith("sqlite") and not _is_memory_sqlite(url):
        @event.listens_for(engine, "connect")
        def set_sqlite_pragma(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA journal_mode=WAL")
            cursor.close()

    return engine


def make_session_factory(engine: Engine) -> sessionmaker:
    """Session factory bound to ``engine``."""
    return sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)


def create_tables(engine: Engine):
    """
    Create all database tables directly (used for SQLite).
    For PostgreSQL, use Alembic migrations instead.
    """
    # Import models so they are registered with Base.metadata
    from student_records.models import Student  # noqa: F401

    Base.metadata.create_all(bind=engine)


def get_session(request: Request):
    """
    FastAPI dependency that provides a database session.

    Yields a session from the application's session factory and ensures it
    is closed after the request, even if an exception occurs.
    """
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()
