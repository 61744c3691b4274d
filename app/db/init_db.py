"""
Database initialization.

Creates all tables from the SQLModel metadata.  Production databases are
managed with alembic; this is for local development and throwaway setups.
"""

from loguru import logger
from sqlmodel import SQLModel

import app.db.base  # noqa: F401
from app.db.session import engine


def init_db(bind=None) -> None:
    """Create every table that does not exist yet."""
    bind = bind if bind is not None else engine
    logger.info("Creating database tables on {}", bind.url.render_as_string(hide_password=True))
    SQLModel.metadata.create_all(bind)
    logger.info("Tables created: {}", ", ".join(sorted(SQLModel.metadata.tables)))


if __name__ == "__main__":
    init_db()
