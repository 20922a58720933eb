"""
Database configuration for the billing service.

Connection settings are derived from :class:`AppSettings`.  SQLite is the
default for local use; any SQLAlchemy URL (PostgreSQL via psycopg2 in
production) is accepted.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from infrastructure.settings import AppSettings


@dataclass(frozen=True)
class DatabaseSettings:
    """Immutable database connection and pool configuration."""

    DATABASE_URL: str = "sqlite:///./ebilling.db"

    # Connection-pool tuning (ignored for SQLite)
    POOL_SIZE: int = 5
    MAX_OVERFLOW: int = 10
    POOL_TIMEOUT: int = 30

    ECHO: bool = False

    @classmethod
    def from_app_settings(cls, settings: AppSettings) -> DatabaseSettings:
        return cls(
            DATABASE_URL=settings.database_url,
            POOL_SIZE=settings.db_pool_size,
            ECHO=settings.db_echo,
        )

    @property
    def is_sqlite(self) -> bool:
        return self.DATABASE_URL.startswith("sqlite")

    @property
    def is_in_memory(self) -> bool:
        return self.is_sqlite and (
            self.DATABASE_URL in ("sqlite://", "sqlite:///:memory:")
        )


@lru_cache(maxsize=1)
def get_default_settings() -> DatabaseSettings:
    """Return database settings built from the application settings."""
    from infrastructure.settings import get_settings

    return DatabaseSettings.from_app_settings(get_settings())
