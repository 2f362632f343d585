"""
Database engine, session management, and base model.

This module is the foundation for all database operations.
Every model inherits from Base. Every request gets a session
from get_db().
"""

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, DeclarativeBase

from shop_wallet.config import get_settings

settings = get_settings()


def _connect_args(url: str) -> dict:
    # SQLite connections are shared across FastAPI worker threads
    if url.startswith("sqlite"):
        return {"check_same_thread": False}
    return {}


# --- Engine ---
# pool_pre_ping=True tests connections before using them, which
# handles cases where the database restarted or a connection
# went stale.
engine = create_engine(
    settings.DATABASE_URL,
    pool_pre_ping=True,
    connect_args=_connect_args(settings.DATABASE_URL),
)

# --- Session Factory ---
# autocommit=False: the API layer decides when a settlement is
# committed, so balance, ledger and order writes land together.
# autoflush=False: SQL is only sent on an explicit flush.
SessionLocal = sessionmaker(
    bind=engine,
    autocommit=False,
    autoflush=False,
)


class Base(DeclarativeBase):
    pass


# --- Dependency for FastAPI ---
def get_db():
    """
    Provide a database session for a single request.

    The try/finally pattern ensures the session is always
    closed, even if the endpoint raised.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
