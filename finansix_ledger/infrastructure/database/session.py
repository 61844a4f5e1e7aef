"""Database engine and session factory construction"""

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from finansix_ledger.config import settings


def build_engine(database_url: str | None = None) -> Engine:
    """Create an engine with connection pooling (SQLite URLs get thread-safe defaults)"""
    url = database_url or settings.database_url

    if url.startswith("sqlite"):
        # Store calls run in worker threads
        return create_engine(url, connect_args={"check_same_thread": False})

    # Connection pool: max 20 connections, recycle after 1 hour to avoid stale connections
    return create_engine(
        url,
        pool_pre_ping=True,  # Verify connections before using
        pool_size=10,
        max_overflow=10,
        pool_recycle=3600,
    )


def build_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine, expire_on_commit=False)
