"""
SQLAlchemy engine setup and session helpers.

The billing service is synchronous, so a single synchronous engine backs
every repository.  In-memory SQLite uses a ``StaticPool`` so that all
sessions share the one connection holding the database.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import create_engine as sa_create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import QueuePool, StaticPool

from .config import DatabaseSettings, get_default_settings
from .models import Base

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine


# ---------------------------------------------------------------------------
# Engine factories
# ---------------------------------------------------------------------------


def build_engine(settings: DatabaseSettings | None = None) -> Engine:
    """Create a synchronous :class:`Engine` suited to the configured URL."""
    s = settings or get_default_settings()
    if s.is_in_memory:
        return sa_create_engine(
            s.DATABASE_URL,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
            echo=s.ECHO,
        )
    if s.is_sqlite:
        return sa_create_engine(
            s.DATABASE_URL,
            connect_args={"check_same_thread": False},
            echo=s.ECHO,
        )
    return sa_create_engine(
        s.DATABASE_URL,
        poolclass=QueuePool,
        pool_size=s.POOL_SIZE,
        max_overflow=s.MAX_OVERFLOW,
        pool_timeout=s.POOL_TIMEOUT,
        pool_pre_ping=True,
        echo=s.ECHO,
    )


def build_session_factory(engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(bind=engine, expire_on_commit=False)


def create_tables(engine: Engine) -> None:
    """Create all tables directly; production schemas go through Alembic."""
    Base.metadata.create_all(engine)
