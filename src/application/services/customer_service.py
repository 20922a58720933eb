"""Application service for customer and meter registration.

Mirrors the customer maintenance screen of the billing desk: add, edit,
list and remove customers, optionally removing their bills as well.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Optional, Protocol
from uuid import UUID

from domain.exceptions import CustomerNotFoundError, MeterAlreadyAssignedError
from domain.models.customer import Customer

from application.schemas.pagination import PaginatedResponse, PaginationParams

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Repository port interfaces
# ---------------------------------------------------------------------------

class CustomerRepository(Protocol):
    """Port: persistence for :class:`Customer` records."""

    def get_by_id(self, customer_id: UUID) -> Optional[Customer]: ...

    def get_by_meter_number(self, meter_number: str) -> Optional[Customer]: ...

    def list_customers(self, offset: int, limit: int) -> tuple[list[Customer], int]: ...

    def save(self, customer: Customer) -> Customer: ...

    def update(self, customer: Customer) -> Customer: ...

    def delete(self, customer_id: UUID) -> bool: ...


class BillCleanupRepository(Protocol):
    """Port: the part of the bill store needed when a customer is removed."""

    def delete_by_customer(self, customer_id: UUID) -> int: ...


# ---------------------------------------------------------------------------
# Service
# ---------------------------------------------------------------------------

class CustomerService:
    """Customer CRUD with meter-number uniqueness."""

    def __init__(
        self,
        customer_repo: CustomerRepository,
        bill_repo: BillCleanupRepository,
    ) -> None:
        self._customer_repo = customer_repo
        self._bill_repo = bill_repo

    def _ensure_meter_free(self, meter_number: str, owner_id: Optional[UUID] = None) -> None:
        existing = self._customer_repo.get_by_meter_number(meter_number.strip())
        if existing is not None and existing.id != owner_id:
            raise MeterAlreadyAssignedError(meter_number=meter_number.strip())

    def add_customer(
        self,
        name: str,
        meter_number: str,
        address: str = "",
        initial_reading: int = 0,
    ) -> Customer:
        """Register a customer and the meter they are billed on."""
        customer = Customer(
            name=name,
            meter_number=meter_number,
            address=address,
            last_reading=initial_reading,
        )
        self._ensure_meter_free(customer.meter_number)
        customer = self._customer_repo.save(customer)
        logger.info("Customer %s added on meter %s", customer.id, customer.meter_number)
        return customer

    def get_customer(self, customer_id: UUID) -> Customer:
        customer = self._customer_repo.get_by_id(customer_id)
        if customer is None:
            raise CustomerNotFoundError(customer_id=str(customer_id))
        return customer

    def list_customers(self, page: int = 1, size: int = 20) -> PaginatedResponse[Customer]:
        params = PaginationParams(page=page, size=size)
        items, total = self._customer_repo.list_customers(offset=params.offset, limit=params.size)
        return PaginatedResponse[Customer](
            items=items,
            total=total,
            page=params.page,
            size=params.size,
        )

    def update_customer(
        self,
        customer_id: UUID,
        name: str,
        meter_number: str,
        address: str = "",
    ) -> Customer:
        """Replace a customer's details.

        Bills already issued keep the snapshot they were issued with.
        """
        customer = self.get_customer(customer_id)
        updated = Customer(
            id=customer.id,
            name=name,
            meter_number=meter_number,
            address=address,
            last_reading=customer.last_reading,
            created_at=customer.created_at,
            updated_at=datetime.now(timezone.utc),
        )
        self._ensure_meter_free(updated.meter_number, owner_id=customer.id)
        updated = self._customer_repo.update(updated)
        logger.info("Customer %s updated", customer_id)
        return updated

    def delete_customer(self, customer_id: UUID, remove_bills: bool = False) -> bool:
        """Delete a customer; with *remove_bills* their bills go too.

        Bills that are kept still reference the customer id and carry their
        own snapshot, so they remain readable.
        """
        self.get_customer(customer_id)
        removed_bills = 0
        if remove_bills:
            removed_bills = self._bill_repo.delete_by_customer(customer_id)
        deleted = self._customer_repo.delete(customer_id)
        logger.info(
            "Customer %s deleted (bills removed: %d)",
            customer_id,
            removed_bills,
        )
        return deleted
