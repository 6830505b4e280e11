"""Database configuration and base setup for the Artwork Indexer."""

from typing import Dict, Optional

from sqlalchemy import Engine, create_engine
from sqlalchemy.engine.url import URL, make_url
from sqlalchemy.orm import DeclarativeBase, sessionmaker
from sqlalchemy.pool import StaticPool

from ..config import get_settings


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""

    pass


def _ensure_sync_driver(url: URL) -> URL:
    """Force a synchronous driver for the ORM engine."""

    if url.drivername.startswith("postgresql+"):
        # Normalize any async driver variants to psycopg (sync)
        if any(token in url.drivername for token in ("async", "aiopg")):
            url = url.set(drivername="postgresql+psycopg")
    elif url.drivername.startswith("sqlite+"):
        if "aiosqlite" in url.drivername:
            url = url.set(drivername="sqlite")

    return url


def get_database_url(raw_url: Optional[str] = None) -> str:
    """Return a database URL with a guaranteed synchronous driver."""

    url = make_url(raw_url or get_settings().database_url)
    # render_as_string keeps the password; str(url) would mask it as ***
    return _ensure_sync_driver(url).render_as_string(hide_password=False)


_engines: Dict[str, Engine] = {}


def get_engine(raw_url: Optional[str] = None) -> Engine:
    """
    Create and cache the database engine for a URL.

    Engines are created lazily so the URL is read at runtime, not at
    import time.
    """
    database_url = get_database_url(raw_url)
    engine = _engines.get(database_url)
    if engine is not None:
        return engine

    if database_url.startswith("sqlite"):
        # SQLite configuration for development/testing
        engine = create_engine(
            database_url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    else:
        # PostgreSQL configuration for production
        engine = create_engine(
            database_url,
            pool_size=5,
            max_overflow=10,
            pool_pre_ping=True,
            pool_recycle=3600,
        )

    _engines[database_url] = engine
    return engine


def get_session_local(raw_url: Optional[str] = None) -> sessionmaker:
    """Get a sessionmaker bound to the engine for ``raw_url``."""
    return sessionmaker(autocommit=False, autoflush=False, bind=get_engine(raw_url))


def init_database(raw_url: Optional[str] = None) -> None:
    """Create all tables."""
    # Import all models to ensure they're registered with Base
    from . import models  # noqa: F401

    Base.metadata.create_all(bind=get_engine(raw_url))


def drop_database(raw_url: Optional[str] = None) -> None:
    """Drop all database tables. Use with caution!"""
    from . import models  # noqa: F401

    Base.metadata.drop_all(bind=get_engine(raw_url))
