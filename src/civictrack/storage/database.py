"""Database engine and session handling"""

from sqlalchemy import create_engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker, Session
from contextlib import contextmanager
from typing import Generator

from ..errors import StoreError
from .migrations import initialize_database_async, get_database_url

# Global database engine and session factory
engine = None
SessionLocal = None


def get_engine():
    """Get database engine"""
    global engine
    if engine is None:
        engine = create_engine(
            get_database_url(),
            # SQLite specific: sessions are used from worker threads, and
            # writers wait on the database lock instead of failing at once
            connect_args={"check_same_thread": False, "timeout": 30},
        )
    return engine


def get_session_factory():
    """Get session factory"""
    global SessionLocal
    if SessionLocal is None:
        SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=get_engine())
    return SessionLocal


@contextmanager
def get_db_session() -> Generator[Session, None, None]:
    """Get database session with automatic cleanup.

    Commits on success and rolls back on any error. Driver errors are
    re-raised as StoreError so callers see one persistence failure type.
    """
    SessionFactory = get_session_factory()
    session = SessionFactory()
    try:
        yield session
        session.commit()
    except SQLAlchemyError as e:
        session.rollback()
        raise StoreError(f"Database operation failed: {e}") from e
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def reset_database_globals():
    """Reset global database engine and session factory for testing"""
    global engine, SessionLocal
    if engine:
        engine.dispose()
    engine = None
    SessionLocal = None


async def initialize_database():
    """Initialize database on startup with automatic migrations"""
    await initialize_database_async()
