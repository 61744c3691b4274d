"""
Database session management.

Provides the SQLModel engine, the per-request session dependency and the
``atomic`` unit-of-work helper every service operation runs inside.
"""

from contextlib import contextmanager
from typing import Generator, Iterator

from sqlmodel import Session, create_engine

from app.core.config import settings

DATABASE_URL: str = settings.DATABASE_URL


def build_engine(url: str):
    if url.startswith("sqlite"):
        return create_engine(url, echo=settings.DEBUG, connect_args={"check_same_thread": False})
    return create_engine(
        url,
        echo=settings.DEBUG,  # Log SQL queries in debug mode
        pool_pre_ping=True,   # Verify connections before using
        pool_size=5,          # Connection pool size
        max_overflow=10       # Max connections beyond pool_size
    )


engine = build_engine(DATABASE_URL)


def get_db() -> Generator[Session, None, None]:
    """
    Dependency for FastAPI endpoints to get database session.

    Yields:
        SQLModel Session instance
    """
    with Session(engine) as session:
        yield session


@contextmanager
def atomic(session: Session) -> Iterator[Session]:
    """Commit on success, roll back on any exception.

    Repositories only flush; the state change and its audit entry become
    visible together when this block exits cleanly.
    """
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
