"""Shared fixtures for unit tests."""

from __future__ import annotations

import sys
from datetime import date, datetime, timezone
from decimal import Decimal
from pathlib import Path
from uuid import UUID

import pytest

# Ensure src is importable
sys.path.insert(0, str(Path(__file__).resolve().parents[2] / "src"))

from application.services.billing_service import BillingService
from application.services.customer_service import CustomerService
from domain.models.bill import Bill
from domain.models.customer import Customer
from domain.models.period import BillingPeriod
from domain.models.tariff import Tariff
from domain.services.bill_lifecycle import BillLifecycleService
from infrastructure.adapters import (
    InMemoryBillRepository,
    InMemoryCustomerRepository,
    LoggingEventPublisher,
)

CUSTOMER_ID = UUID("00000000-0000-0000-0000-000000000001")
NOW = datetime(2024, 1, 31, 12, 0, 0, tzinfo=timezone.utc)
ISSUE_DATE = date(2024, 1, 31)


class RecordingEventPublisher(LoggingEventPublisher):
    """Keeps every published event for assertions."""

    def __init__(self) -> None:
        self.events: list = []

    def publish(self, event) -> None:
        super().publish(event)
        self.events.append(event)

    def of_type(self, event_type: str) -> list:
        return [e for e in self.events if e.event_type == event_type]


@pytest.fixture
def customer_id() -> UUID:
    return CUSTOMER_ID


@pytest.fixture
def sample_customer() -> Customer:
    return Customer(
        id=CUSTOMER_ID,
        name="Asha Verma",
        meter_number="MTR-100234",
        address="12 Station Road, Pune",
        last_reading=1000,
        created_at=NOW,
        updated_at=NOW,
    )


@pytest.fixture
def sample_bill() -> Bill:
    """The worked example: 150 units at 8.5 plus 50 fixed, 10% tax."""
    return Bill.issue(
        customer_id=CUSTOMER_ID,
        customer_snapshot="Asha Verma, 12 Station Road, Pune",
        meter_snapshot="Meter MTR-100234",
        period=BillingPeriod(2024, 1),
        units=150,
        rate_per_unit=Decimal("8.5"),
        fixed_charge=Decimal("50"),
        tax_percent=Decimal("10"),
        issue_date=ISSUE_DATE,
        due_date=date(2024, 2, 20),
    )


@pytest.fixture
def sample_tariff() -> Tariff:
    return Tariff(
        rate_per_unit=Decimal("8.5"),
        fixed_charge=Decimal("50"),
        tax_percent=Decimal("10"),
    )


@pytest.fixture
def customer_repo() -> InMemoryCustomerRepository:
    return InMemoryCustomerRepository()


@pytest.fixture
def bill_repo() -> InMemoryBillRepository:
    return InMemoryBillRepository()


@pytest.fixture
def event_publisher() -> RecordingEventPublisher:
    return RecordingEventPublisher()


@pytest.fixture
def lifecycle_service() -> BillLifecycleService:
    return BillLifecycleService()


@pytest.fixture
def customer_service(customer_repo, bill_repo) -> CustomerService:
    return CustomerService(customer_repo=customer_repo, bill_repo=bill_repo)


@pytest.fixture
def billing_service(
    bill_repo, customer_repo, lifecycle_service, event_publisher, sample_tariff
) -> BillingService:
    return BillingService(
        bill_repo=bill_repo,
        customer_repo=customer_repo,
        lifecycle_service=lifecycle_service,
        event_publisher=event_publisher,
        default_tariff=sample_tariff,
        payment_terms_days=20,
    )
