"""Application settings loaded from environment variables via Pydantic."""

from __future__ import annotations

from decimal import Decimal
from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings


class AppSettings(BaseSettings):
    """Central configuration for the electricity billing service."""

    model_config = {"env_prefix": "EBILL_", "case_sensitive": False}

    # Storage
    storage_backend: Literal["memory", "sql"] = "memory"
    database_url: str = "sqlite:///./ebilling.db"
    db_pool_size: int = 5
    db_echo: bool = False

    # Tariff applied when a bill is issued without one
    default_rate_per_unit: Decimal = Decimal("8.5")
    default_fixed_charge: Decimal = Decimal("0")
    default_tax_percent: Decimal = Decimal("0")
    payment_terms_days: int = 20

    # Celery
    celery_broker_url: str = "redis://localhost:6379/0"
    celery_result_backend: str = "redis://localhost:6379/1"

    # Logging
    log_level: str = "INFO"
    log_format: Literal["json", "console"] = "json"

    # CORS
    cors_origins: str = "*"


@lru_cache(maxsize=1)
def get_settings() -> AppSettings:
    """Return the application settings singleton."""
    return AppSettings()
