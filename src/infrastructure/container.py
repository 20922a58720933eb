"""Dependency injection container for the billing service.

Wires storage adapters, domain services and application services together
according to :class:`AppSettings`, and exposes factory functions suitable
for FastAPI's ``Depends()`` system.
"""

from __future__ import annotations

import logging

from application.services.billing_service import BillingService
from application.services.customer_service import CustomerService
from domain.models.tariff import Tariff
from domain.services.bill_lifecycle import BillLifecycleService
from infrastructure.adapters import (
    InMemoryBillRepository,
    InMemoryCustomerRepository,
    MetricsEventPublisher,
)
from infrastructure.settings import AppSettings, get_settings

logger = logging.getLogger(__name__)


class ServiceContainer:
    """Central DI container that owns all service instances."""

    def __init__(self, settings: AppSettings | None = None) -> None:
        self._settings = settings or get_settings()

        # Storage adapters
        if self._settings.storage_backend == "sql":
            from infrastructure.database.config import DatabaseSettings
            from infrastructure.database.engine import (
                build_engine,
                build_session_factory,
                create_tables,
            )
            from infrastructure.database.repository import (
                SqlAlchemyBillRepository,
                SqlAlchemyCustomerRepository,
            )

            self.engine = build_engine(DatabaseSettings.from_app_settings(self._settings))
            if self.engine.dialect.name == "sqlite":
                create_tables(self.engine)
            session_factory = build_session_factory(self.engine)
            self.customer_repo = SqlAlchemyCustomerRepository(session_factory)
            self.bill_repo = SqlAlchemyBillRepository(session_factory)
        else:
            self.engine = None
            self.customer_repo = InMemoryCustomerRepository()
            self.bill_repo = InMemoryBillRepository()

        self.event_publisher = MetricsEventPublisher()

        # Domain services
        self.lifecycle_service = BillLifecycleService()
        self.default_tariff = Tariff(
            rate_per_unit=self._settings.default_rate_per_unit,
            fixed_charge=self._settings.default_fixed_charge,
            tax_percent=self._settings.default_tax_percent,
        )

        # Application services
        self.customer_service = CustomerService(
            customer_repo=self.customer_repo,
            bill_repo=self.bill_repo,
        )

        self.billing_service = BillingService(
            bill_repo=self.bill_repo,
            customer_repo=self.customer_repo,
            lifecycle_service=self.lifecycle_service,
            event_publisher=self.event_publisher,
            default_tariff=self.default_tariff,
            payment_terms_days=self._settings.payment_terms_days,
        )

        logger.info("ServiceContainer initialized (storage=%s)", self._settings.storage_backend)

    @property
    def settings(self) -> AppSettings:
        return self._settings


# Module-level singleton
_container: ServiceContainer | None = None


def get_container() -> ServiceContainer:
    """Return the global container singleton."""
    global _container
    if _container is None:
        _container = ServiceContainer()
    return _container


def reset_container() -> None:
    """Reset the global container (for testing)."""
    global _container
    if _container is not None and _container.engine is not None:
        _container.engine.dispose()
    _container = None


# ---------------------------------------------------------------------------
# FastAPI dependency factories
# ---------------------------------------------------------------------------


def get_customer_service() -> CustomerService:
    return get_container().customer_service


def get_billing_service() -> BillingService:
    return get_container().billing_service
