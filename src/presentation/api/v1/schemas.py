"""
Pydantic v2 request/response schemas for the billing API.

Money fields are ``Decimal`` and serialise as strings, so amounts survive
the round trip through JSON without binary rounding.  Error bodies follow
RFC 9457 Problem Details.
"""

from __future__ import annotations

import uuid
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from application.services.billing_service import MAX_PAYMENT_TERMS_DAYS
from domain.models.bill import Bill
from domain.models.customer import Customer
from domain.models.money import CHARGE_PRECISION, MAX_READING, PERCENT_PRECISION, RATE_PRECISION

# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------


class BillStatus(str, Enum):
    DRAFT = "DRAFT"
    ISSUED = "ISSUED"
    PAID = "PAID"
    OVERDUE = "OVERDUE"
    CANCELLED = "CANCELLED"


# ---------------------------------------------------------------------------
# Base / shared
# ---------------------------------------------------------------------------


class _SnakeModel(BaseModel):
    """Base model; field names stay snake_case on the wire."""

    model_config = ConfigDict(
        populate_by_name=True,
        from_attributes=True,
        json_schema_extra={"$schema": "https://json-schema.org/draft/2020-12/schema"},
    )


class PaginationMeta(BaseModel):
    """Pagination metadata included in every list response."""

    page: int = Field(..., description="Current page number.")
    page_size: int = Field(..., description="Requested page size.")
    total_items: int = Field(..., description="Total number of items.")
    total_pages: int = Field(..., description="Total number of pages.")


class ErrorResponse(_SnakeModel):
    """Error response following RFC 9457 Problem Details for HTTP APIs."""

    type: str = Field(
        default="about:blank",
        description="A URI reference that identifies the problem type.",
        examples=["https://api.ebilling.example/problems/bill-not-found"],
    )
    title: str = Field(..., examples=["Bill Not Found"])
    status: int = Field(..., examples=[404])
    detail: str = Field(..., examples=["Bill not found: 550e8400-e29b-41d4-a716-446655440000"])
    instance: str | None = Field(default=None, examples=["/api/v1/bills/550e8400-e29b-41d4-a716-446655440000"])
    errors: list[dict[str, Any]] | None = Field(
        default=None,
        description="Validation error details (when status is 422).",
    )


# ---------------------------------------------------------------------------
# Customer schemas
# ---------------------------------------------------------------------------


class CustomerCreate(_SnakeModel):
    """Request body for registering a customer."""

    name: str = Field(..., min_length=1, max_length=255, examples=["Asha Verma"])
    meter_number: str = Field(..., min_length=1, max_length=64, examples=["MTR-100234"])
    address: str = Field(default="", max_length=1024, examples=["12 Station Road, Pune"])
    initial_reading: int = Field(
        default=0,
        ge=0,
        le=MAX_READING,
        description="Meter reading at the time the customer is connected.",
    )

    @field_validator("name", "meter_number")
    @classmethod
    def _not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("must not be blank")
        return v.strip()


class CustomerUpdate(_SnakeModel):
    """Request body replacing a customer's details."""

    name: str = Field(..., min_length=1, max_length=255)
    meter_number: str = Field(..., min_length=1, max_length=64)
    address: str = Field(default="", max_length=1024)


class CustomerResponse(_SnakeModel):
    id: uuid.UUID
    name: str
    meter_number: str
    address: str
    last_reading: int
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_domain(cls, customer: Customer) -> CustomerResponse:
        return cls.model_validate(customer)


class CustomerListResponse(_SnakeModel):
    items: list[CustomerResponse]
    pagination: PaginationMeta


# ---------------------------------------------------------------------------
# Bill schemas
# ---------------------------------------------------------------------------


class BillCreate(_SnakeModel):
    """Request body for issuing a bill from a meter reading.

    Tariff fields left out fall back to the configured default tariff.
    """

    period: str = Field(..., pattern=r"^\d{4}-\d{2}$", examples=["2024-01"])
    current_reading: int = Field(..., ge=0, le=MAX_READING, examples=[1150])
    rate_per_unit: Decimal | None = Field(
        default=None,
        ge=0,
        max_digits=RATE_PRECISION[0],
        decimal_places=RATE_PRECISION[1],
        examples=["8.5"],
    )
    fixed_charge: Decimal | None = Field(
        default=None,
        ge=0,
        max_digits=CHARGE_PRECISION[0],
        decimal_places=CHARGE_PRECISION[1],
        examples=["50"],
    )
    tax_percent: Decimal | None = Field(
        default=None,
        ge=0,
        max_digits=PERCENT_PRECISION[0],
        decimal_places=PERCENT_PRECISION[1],
        examples=["10"],
    )
    issue_date: date | None = Field(default=None, description="Defaults to today.")
    due_in_days: int | None = Field(
        default=None,
        ge=0,
        le=MAX_PAYMENT_TERMS_DAYS,
        description="Payment terms; defaults to the configured number of days.",
    )


class BillPayment(_SnakeModel):
    paid_on: date | None = Field(default=None, description="Defaults to today.")


class BillResponse(_SnakeModel):
    """Issued bill with its frozen figures."""

    id: uuid.UUID
    customer_id: uuid.UUID
    customer_snapshot: str
    meter_snapshot: str
    period: str = Field(..., examples=["2024-01"])
    units: int = Field(..., ge=0)
    rate_per_unit: Decimal
    fixed_charge: Decimal
    tax_percent: Decimal
    subtotal: Decimal
    tax: Decimal
    total: Decimal
    status: BillStatus
    issue_date: date
    due_date: date
    paid_date: date | None = None

    @classmethod
    def from_domain(cls, bill: Bill) -> BillResponse:
        return cls(
            id=bill.id,
            customer_id=bill.customer_id,
            customer_snapshot=bill.customer_snapshot,
            meter_snapshot=bill.meter_snapshot,
            period=str(bill.period),
            units=bill.units,
            rate_per_unit=bill.rate_per_unit,
            fixed_charge=bill.fixed_charge,
            tax_percent=bill.tax_percent,
            subtotal=bill.subtotal,
            tax=bill.tax,
            total=bill.total,
            status=BillStatus(bill.status.value),
            issue_date=bill.issue_date,
            due_date=bill.due_date,
            paid_date=bill.paid_date,
        )


class BillListResponse(_SnakeModel):
    items: list[BillResponse]
    pagination: PaginationMeta


class CustomerStatementResponse(_SnakeModel):
    customer_id: uuid.UUID
    bill_count: int
    total_billed: Decimal
    total_paid: Decimal
    outstanding: Decimal
    overdue_count: int


class OverdueSweepResponse(_SnakeModel):
    as_of: date
    bills_marked: int
    bill_ids: list[uuid.UUID]
