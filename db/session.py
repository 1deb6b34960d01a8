"""
db/session.py

Engine and session factory for the mirror database, built on first use.
"""

from __future__ import annotations

from collections.abc import Generator
from functools import lru_cache

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from app.config import DatabaseSettings, get_database_settings


def create_db_engine(settings: DatabaseSettings) -> Engine:
    """
    Build a pooled psycopg engine from ``settings``; nothing connects yet.
    """

    return create_engine(
        settings.url,
        echo=settings.echo,
        pool_pre_ping=True,
        pool_size=settings.pool_size,
        max_overflow=settings.max_overflow,
        pool_recycle=settings.pool_recycle_seconds,
        connect_args={
            "connect_timeout": settings.connect_timeout_seconds,
            "application_name": settings.application_name,
        },
    )


@lru_cache(maxsize=1)
def get_engine() -> Engine:
    return create_db_engine(get_database_settings())


@lru_cache(maxsize=1)
def get_session_factory() -> sessionmaker[Session]:
    # objects stay readable after the per-record commits of an ingestion pass
    return sessionmaker(bind=get_engine(), autoflush=False, expire_on_commit=False)


def SessionLocal() -> Session:
    return get_session_factory()()


def get_db() -> Generator[Session, None, None]:
    """FastAPI dependency: one session per request, always closed."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def dispose_engine() -> None:
    """
    Close pooled connections and forget the engine; the next use rebuilds it.
    """

    if get_engine.cache_info().currsize:
        get_engine().dispose()
    get_session_factory.cache_clear()
    get_engine.cache_clear()
