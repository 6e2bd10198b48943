"""Database configuration with lazy engine initialization.

The engine is only created when first needed, not at module import time, so
tests and migrations can point the application at another database before any
connection is opened.
"""

from contextlib import contextmanager
from functools import lru_cache
from typing import Generator

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import NullPool

from symposium.common.config import get_settings

# Base class for all ORM models - this is safe to initialize at import time
Base = declarative_base()


@lru_cache(maxsize=1)
def get_sync_engine():
    """
    Lazily create the engine on first database access.

    SQLite needs ``check_same_thread`` disabled because FastAPI runs sync
    endpoints in a threadpool.
    """
    settings = get_settings()
    connect_args = {}
    if settings.database_url.startswith("sqlite"):
        connect_args["check_same_thread"] = False
    return create_engine(
        settings.database_url,
        echo=settings.debug,
        future=True,
        poolclass=NullPool,
        connect_args=connect_args,
    )


def get_session_factory(engine=None) -> sessionmaker:
    return sessionmaker(
        bind=engine or get_sync_engine(),
        autoflush=False,
        autocommit=False,
        expire_on_commit=False,
    )


@contextmanager
def session_scope() -> Generator[Session, None, None]:
    """Context manager for database sessions."""
    SessionLocal = get_session_factory()
    session: Session = SessionLocal()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def get_db() -> Generator[Session, None, None]:
    """FastAPI dependency that provides a database session."""
    with session_scope() as session:
        yield session
