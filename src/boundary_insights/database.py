"""Database connection and session management."""

from contextlib import contextmanager
from typing import Generator

from sqlalchemy import create_engine, Engine
from sqlalchemy.orm import sessionmaker, Session

from .config import settings


# Global engine instance
_engine: Engine | None = None
_SessionLocal: sessionmaker | None = None


def get_database_engine() -> Engine:
    """Get or create the database engine."""
    global _engine
    if _engine is None:
        _engine = create_engine(
            settings.database.url,
            pool_pre_ping=True,
            pool_recycle=3600,
            echo=settings.database.echo,
        )
    return _engine


def get_session_local() -> sessionmaker:
    """Get or create the session factory."""
    global _SessionLocal
    if _SessionLocal is None:
        _SessionLocal = sessionmaker(
            autocommit=False,
            autoflush=False,
            bind=get_database_engine()
        )
    return _SessionLocal


@contextmanager
def session_scope(factory: sessionmaker) -> Generator[Session, None, None]:
    """Open a session from ``factory`` that commits on success and rolls back on error."""
    session = factory()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


@contextmanager
def get_session() -> Generator[Session, None, None]:
    """Get a database session with automatic cleanup."""
    with session_scope(get_session_local()) as session:
        yield session


def create_tables(engine: Engine | None = None) -> None:
    """Create all database tables."""
    from .models import Base
    Base.metadata.create_all(bind=engine or get_database_engine())


def drop_tables(engine: Engine | None = None) -> None:
    """Drop all database tables."""
    from .models import Base
    Base.metadata.drop_all(bind=engine or get_database_engine())


def dispose_engine() -> None:
    """Close pooled connections and forget the global engine."""
    global _engine, _SessionLocal
    if _engine is not None:
        _engine.dispose()
    _engine = None
    _SessionLocal = None
