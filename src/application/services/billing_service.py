"""Billing application service.

Turns meter readings into issued bills and drives each bill through its
lifecycle (payment, cancellation, the overdue sweep).  The :class:`Bill`
entity itself accepts any status change; this service is where the
transition table from :class:`BillLifecycleService` is enforced.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, timedelta
from decimal import Decimal
from typing import Any, Optional, Protocol
from uuid import UUID

from domain.events.bill_events import BillCancelled, BillIssued, BillOverdue, BillPaid
from domain.exceptions import (
    BillNotFoundError,
    CustomerNotFoundError,
    DuplicateBillError,
    InvalidInputError,
    InvalidStateTransitionError,
)
from domain.models.bill import Bill, BillCharge, BillStatus
from domain.models.customer import Customer
from domain.models.money import MAX_READING
from domain.models.period import BillingPeriod
from domain.models.tariff import Tariff
from domain.services.bill_lifecycle import BillLifecycleService

from application.schemas.pagination import PaginatedResponse, PaginationParams
from application.services.customer_service import CustomerRepository

logger = logging.getLogger(__name__)

DEFAULT_PAYMENT_TERMS_DAYS = 20
MAX_PAYMENT_TERMS_DAYS = 3650

_OUTSTANDING = (BillStatus.ISSUED, BillStatus.OVERDUE)


# ---------------------------------------------------------------------------
# Value objects returned by service methods
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class CustomerStatement:
    """Money position of one customer across all of their bills."""

    customer_id: UUID
    bill_count: int = 0
    total_billed: Decimal = Decimal("0")
    total_paid: Decimal = Decimal("0")
    outstanding: Decimal = Decimal("0")
    overdue_count: int = 0


# ---------------------------------------------------------------------------
# Repository / infrastructure port interfaces
# ---------------------------------------------------------------------------


class BillRepository(Protocol):
    """Port: the bill store, keyed by bill id."""

    def save(self, bill: Bill) -> Bill: ...

    def get_by_id(self, bill_id: UUID) -> Optional[Bill]: ...

    def get_by_customer_and_period(
        self,
        customer_id: UUID,
        period: BillingPeriod,
    ) -> Optional[Bill]: ...

    def list_by_customer(self, customer_id: UUID) -> list[Bill]: ...

    def list_by_status(self, status: BillStatus) -> list[Bill]: ...

    def list_bills(
        self,
        offset: int,
        limit: int,
        status_filter: Optional[BillStatus] = None,
    ) -> tuple[list[Bill], int]: ...

    def update(self, bill: Bill) -> Bill: ...

    def delete(self, bill_id: UUID) -> bool: ...

    def delete_by_customer(self, customer_id: UUID) -> int: ...


class EventPublisher(Protocol):
    """Port: domain-event publishing."""

    def publish(self, event: Any) -> None: ...


# ---------------------------------------------------------------------------
# Service
# ---------------------------------------------------------------------------


class BillingService:
    """Issues bills and applies lifecycle transitions to them."""

    def __init__(
        self,
        bill_repo: BillRepository,
        customer_repo: CustomerRepository,
        lifecycle_service: BillLifecycleService,
        event_publisher: EventPublisher,
        default_tariff: Optional[Tariff] = None,
        payment_terms_days: int = DEFAULT_PAYMENT_TERMS_DAYS,
    ) -> None:
        self._bill_repo = bill_repo
        self._customer_repo = customer_repo
        self._lifecycle = lifecycle_service
        self._event_publisher = event_publisher
        self._default_tariff = default_tariff or Tariff(rate_per_unit=Decimal("8.5"))
        self._payment_terms_days = payment_terms_days

    @property
    def default_tariff(self) -> Tariff:
        return self._default_tariff

    # -- helpers ----------------------------------------------------------

    def _get_customer(self, customer_id: UUID) -> Customer:
        customer = self._customer_repo.get_by_id(customer_id)
        if customer is None:
            raise CustomerNotFoundError(customer_id=str(customer_id))
        return customer

    def _transition(self, bill: Bill, new_status: BillStatus) -> None:
        if not self._lifecycle.validate_transition(bill.status, new_status):
            raise InvalidStateTransitionError(
                current_state=bill.status.value,
                new_state=new_status.value,
            )

    # -- public API -------------------------------------------------------

    def issue_bill(
        self,
        customer_id: UUID,
        period: BillingPeriod,
        current_reading: int,
        *,
        tariff: Optional[Tariff] = None,
        issue_date: Optional[date] = None,
        due_in_days: Optional[int] = None,
    ) -> Bill:
        """Bill a customer for *period* from their latest meter reading.

        Units are the difference between *current_reading* and the reading
        stored on the customer, which then advances to *current_reading*.
        """
        customer = self._get_customer(customer_id)

        if isinstance(current_reading, bool) or not isinstance(current_reading, int):
            raise InvalidInputError("current_reading", f"expected an integer, got {current_reading!r}")
        if current_reading > MAX_READING:
            raise InvalidInputError(
                "current_reading", f"must be <= {MAX_READING}, got {current_reading}"
            )
        units = current_reading - customer.last_reading
        if units < 0:
            raise InvalidInputError(
                "current_reading",
                f"{current_reading} is below the previous reading {customer.last_reading}",
            )

        if self._bill_repo.get_by_customer_and_period(customer.id, period) is not None:
            raise DuplicateBillError(customer_id=str(customer.id), period=str(period))

        terms = self._payment_terms_days if due_in_days is None else due_in_days
        if not 0 <= terms <= MAX_PAYMENT_TERMS_DAYS:
            raise InvalidInputError(
                "due_in_days", f"must be between 0 and {MAX_PAYMENT_TERMS_DAYS}, got {terms}"
            )
        issued_on = issue_date or date.today()

        bill = Bill(
            customer_id=customer.id,
            customer_snapshot=customer.snapshot(),
            meter_snapshot=customer.meter_snapshot(),
            period=period,
            charge=BillCharge.for_usage(units, tariff or self._default_tariff),
            issue_date=issued_on,
            due_date=issued_on + timedelta(days=terms),
        )
        bill = self._bill_repo.save(bill)

        previous_reading = customer.last_reading
        customer.last_reading = current_reading
        try:
            self._customer_repo.update(customer)
        except Exception:
            # the reading did not advance, so the bill must not exist either
            logger.exception(
                "Reading update failed for customer %s; withdrawing bill %s",
                customer.id,
                bill.id,
            )
            customer.last_reading = previous_reading
            self._bill_repo.delete(bill.id)
            raise

        self._event_publisher.publish(
            BillIssued(
                bill_id=bill.id,
                customer_id=customer.id,
                period=str(period),
                total=bill.total,
            )
        )
        logger.info(
            "Bill %s issued to customer %s for %s: %d units, total %s",
            bill.id,
            customer.id,
            period,
            units,
            bill.total,
        )
        return bill

    def get_bill(self, bill_id: UUID) -> Bill:
        bill = self._bill_repo.get_by_id(bill_id)
        if bill is None:
            raise BillNotFoundError(bill_id=str(bill_id))
        return bill

    def list_bills_for_customer(self, customer_id: UUID) -> list[Bill]:
        """Return a customer's bills, most recent period first."""
        self._get_customer(customer_id)
        bills = self._bill_repo.list_by_customer(customer_id)
        return sorted(bills, key=lambda b: (b.period, b.issue_date), reverse=True)

    def list_bills(
        self,
        page: int = 1,
        size: int = 20,
        status_filter: Optional[BillStatus] = None,
    ) -> PaginatedResponse[Bill]:
        params = PaginationParams(page=page, size=size)
        items, total = self._bill_repo.list_bills(
            offset=params.offset,
            limit=params.size,
            status_filter=status_filter,
        )
        return PaginatedResponse[Bill](
            items=items,
            total=total,
            page=params.page,
            size=params.size,
        )

    def pay_bill(self, bill_id: UUID, paid_on: Optional[date] = None) -> Bill:
        """Record payment of an ISSUED or OVERDUE bill."""
        bill = self.get_bill(bill_id)
        self._transition(bill, BillStatus.PAID)
        bill.mark_paid(paid_on or date.today())
        bill = self._bill_repo.update(bill)

        self._event_publisher.publish(
            BillPaid(bill_id=bill.id, customer_id=bill.customer_id, amount=bill.total)
        )
        logger.info("Bill %s paid on %s", bill.id, bill.paid_date)
        return bill

    def cancel_bill(self, bill_id: UUID) -> Bill:
        bill = self.get_bill(bill_id)
        self._transition(bill, BillStatus.CANCELLED)
        bill.set_status(BillStatus.CANCELLED)
        bill = self._bill_repo.update(bill)

        self._event_publisher.publish(BillCancelled(bill_id=bill.id, customer_id=bill.customer_id))
        logger.info("Bill %s cancelled", bill.id)
        return bill

    def mark_overdue_bills(self, today: Optional[date] = None) -> list[Bill]:
        """Move every issued bill past its due date to OVERDUE."""
        today = today or date.today()
        overdue: list[Bill] = []
        for bill in self._bill_repo.list_by_status(BillStatus.ISSUED):
            if not self._lifecycle.is_overdue(bill, today):
                continue
            bill.set_status(BillStatus.OVERDUE)
            overdue.append(self._bill_repo.update(bill))
            self._event_publisher.publish(BillOverdue(bill_id=bill.id, customer_id=bill.customer_id))

        logger.info("Overdue sweep for %s: %d bills marked", today.isoformat(), len(overdue))
        return overdue

    def delete_bill(self, bill_id: UUID) -> bool:
        self.get_bill(bill_id)
        deleted = self._bill_repo.delete(bill_id)
        logger.info("Bill %s deleted", bill_id)
        return deleted

    def customer_statement(self, customer_id: UUID) -> CustomerStatement:
        """Summarise what a customer has been billed, paid and still owes.

        Cancelled bills count towards neither the billed nor the owed total.
        """
        bills = self.list_bills_for_customer(customer_id)

        billed = Decimal("0")
        paid = Decimal("0")
        outstanding = Decimal("0")
        overdue_count = 0
        for bill in bills:
            if bill.status == BillStatus.CANCELLED:
                continue
            billed += bill.total
            if bill.status == BillStatus.PAID:
                paid += bill.total
            elif bill.status in _OUTSTANDING:
                outstanding += bill.total
            if bill.status == BillStatus.OVERDUE:
                overdue_count += 1

        return CustomerStatement(
            customer_id=customer_id,
            bill_count=len(bills),
            total_billed=billed,
            total_paid=paid,
            outstanding=outstanding,
            overdue_count=overdue_count,
        )
