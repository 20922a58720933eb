"""Adapter implementations bridging infrastructure to application-layer ports.

Provides in-memory customer and bill stores (the default storage backend
and the one the unit tests run against) and the event publishers.  The
SQLAlchemy-backed stores live in :mod:`infrastructure.database.repository`.
"""

from __future__ import annotations

import logging
from typing import Any, Optional
from uuid import UUID

from domain.events.bill_events import BillIssued, BillPaid
from domain.models.bill import Bill, BillStatus
from domain.models.customer import Customer
from domain.models.period import BillingPeriod

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# In-memory repository adapters
# ---------------------------------------------------------------------------

class InMemoryCustomerRepository:
    """Synchronous in-memory customer store."""

    def __init__(self) -> None:
        self._store: dict[UUID, Customer] = {}

    def get_by_id(self, customer_id: UUID) -> Optional[Customer]:
        return self._store.get(customer_id)

    def get_by_meter_number(self, meter_number: str) -> Optional[Customer]:
        for customer in self._store.values():
            if customer.meter_number == meter_number:
                return customer
        return None

    def list_customers(self, offset: int = 0, limit: int = 20) -> tuple[list[Customer], int]:
        items = sorted(self._store.values(), key=lambda c: (c.name.lower(), c.created_at))
        return items[offset : offset + limit], len(items)

    def save(self, customer: Customer) -> Customer:
        self._store[customer.id] = customer
        return customer

    def update(self, customer: Customer) -> Customer:
        self._store[customer.id] = customer
        return customer

    def delete(self, customer_id: UUID) -> bool:
        return self._store.pop(customer_id, None) is not None


class InMemoryBillRepository:
    """In-memory bill store keyed by bill id.

    Bills are held by reference, so a status change made on a fetched bill
    is visible before ``update`` is called; ``update`` exists to honour the
    port contract shared with the SQL store.
    """

    def __init__(self) -> None:
        self._bills: dict[UUID, Bill] = {}

    def save(self, bill: Bill) -> Bill:
        self._bills[bill.id] = bill
        return bill

    def get_by_id(self, bill_id: UUID) -> Optional[Bill]:
        return self._bills.get(bill_id)

    def get_by_customer_and_period(
        self, customer_id: UUID, period: BillingPeriod
    ) -> Optional[Bill]:
        for bill in self._bills.values():
            if bill.customer_id == customer_id and bill.period == period:
                return bill
        return None

    def list_by_customer(self, customer_id: UUID) -> list[Bill]:
        return [b for b in self._bills.values() if b.customer_id == customer_id]

    def list_by_status(self, status: BillStatus) -> list[Bill]:
        return [b for b in self._bills.values() if b.status == status]

    def list_bills(
        self,
        offset: int = 0,
        limit: int = 20,
        status_filter: Optional[BillStatus] = None,
    ) -> tuple[list[Bill], int]:
        items = list(self._bills.values())
        if status_filter:
            items = [b for b in items if b.status == status_filter]
        items.sort(key=lambda b: (b.issue_date, b.period), reverse=True)
        return items[offset : offset + limit], len(items)

    def update(self, bill: Bill) -> Bill:
        self._bills[bill.id] = bill
        return bill

    def delete(self, bill_id: UUID) -> bool:
        return self._bills.pop(bill_id, None) is not None

    def delete_by_customer(self, customer_id: UUID) -> int:
        doomed = [bid for bid, b in self._bills.items() if b.customer_id == customer_id]
        for bid in doomed:
            del self._bills[bid]
        return len(doomed)


# ---------------------------------------------------------------------------
# Event publishers
# ---------------------------------------------------------------------------

class LoggingEventPublisher:
    """Event publisher that logs events."""

    def publish(self, event: Any) -> None:
        logger.info("Domain event: %s", event)


class MetricsEventPublisher(LoggingEventPublisher):
    """Logs each event and feeds the Prometheus billing counters."""

    def publish(self, event: Any) -> None:
        from infrastructure.observability.metrics import (
            bill_events_total,
            billed_amount_total,
            collected_amount_total,
        )

        super().publish(event)
        bill_events_total.labels(event_type=getattr(event, "event_type", "unknown")).inc()
        if isinstance(event, BillIssued):
            billed_amount_total.inc(float(event.total))
        elif isinstance(event, BillPaid):
            collected_amount_total.inc(float(event.amount))
