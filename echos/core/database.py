"""
Engine and sessions for the user directory store.

Every request gets its own Session through get_db; UserDirectory wraps it.
"""

import logging
from collections.abc import Generator

from sqlalchemy import create_engine, inspect, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from echos.core.config import settings

logger = logging.getLogger(__name__)

USERS_TABLE = "users"

# SQLite connections are shared with FastAPI's threadpool workers.
_connect_args = (
    {"check_same_thread": False} if settings.DATABASE_URL.startswith("sqlite") else {}
)

engine = create_engine(
    settings.DATABASE_URL,
    pool_pre_ping=True,
    echo=settings.DEBUG,
    connect_args=_connect_args,
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Generator[Session, None, None]:
    """Dependency that yields a directory session and closes it when the request ends."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def check_db_connected(db: Session) -> bool:
    try:
        db.execute(text("SELECT 1"))
        return True
    except SQLAlchemyError as e:
        logger.warning("User directory database unreachable: %s", e.__class__.__name__)
        return False


def users_table_present(db: Session) -> bool:
    """True once the users migration has been applied to the bound database."""
    return inspect(db.get_bind()).has_table(USERS_TABLE)
