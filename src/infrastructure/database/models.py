"""
SQLAlchemy 2.0+ ORM models for the billing service.

Tables
------
* ``customers`` -- one row per registered customer and meter
* ``bills``     -- one row per issued bill, with its frozen figures

``bills.customer_id`` carries no foreign key: a bill outlives
the customer record it was issued to and keeps its own snapshot.
"""

from __future__ import annotations

import uuid
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy import (
    CheckConstraint,
    Date,
    DateTime,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
    Uuid,
    func,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from domain.models.money import (
    AMOUNT_PRECISION,
    CHARGE_PRECISION,
    PERCENT_PRECISION,
    RATE_PRECISION,
)


class Base(DeclarativeBase):
    """Shared declarative base for every ORM model."""
    pass


class CustomerModel(Base):
    __tablename__ = "customers"
    __table_args__ = (
        UniqueConstraint("meter_number", name="uq_customers_meter_number"),
        CheckConstraint("last_reading >= 0", name="ck_customers_last_reading"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    meter_number: Mapped[str] = mapped_column(String(64), nullable=False)
    address: Mapped[str] = mapped_column(Text, nullable=False, default="")
    last_reading: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )

    def __repr__(self) -> str:
        return f"<Customer {self.meter_number!r} ({self.id})>"


class BillModel(Base):
    """Persisted bill.

    The money columns are written once, on insert; updates only ever touch
    ``status`` and ``paid_date``.
    """

    __tablename__ = "bills"
    __table_args__ = (
        UniqueConstraint(
            "customer_id", "period_year", "period_month", name="uq_bills_customer_period"
        ),
        CheckConstraint("units >= 0", name="ck_bills_units"),
        CheckConstraint("due_date >= issue_date", name="ck_bills_due_after_issue"),
        CheckConstraint("period_month BETWEEN 1 AND 12", name="ck_bills_period_month"),
        Index("ix_bills_customer_id", "customer_id"),
        Index("ix_bills_status", "status"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True)
    customer_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)
    customer_snapshot: Mapped[str] = mapped_column(Text, nullable=False, default="")
    meter_snapshot: Mapped[str] = mapped_column(Text, nullable=False, default="")
    period_year: Mapped[int] = mapped_column(Integer, nullable=False)
    period_month: Mapped[int] = mapped_column(Integer, nullable=False)

    units: Mapped[int] = mapped_column(Integer, nullable=False)
    rate_per_unit: Mapped[Decimal] = mapped_column(Numeric(*RATE_PRECISION), nullable=False)
    fixed_charge: Mapped[Decimal] = mapped_column(Numeric(*CHARGE_PRECISION), nullable=False)
    tax_percent: Mapped[Decimal] = mapped_column(Numeric(*PERCENT_PRECISION), nullable=False)
    subtotal: Mapped[Decimal] = mapped_column(Numeric(*AMOUNT_PRECISION), nullable=False)
    tax: Mapped[Decimal] = mapped_column(Numeric(*AMOUNT_PRECISION), nullable=False)
    total: Mapped[Decimal] = mapped_column(Numeric(*AMOUNT_PRECISION), nullable=False)

    status: Mapped[str] = mapped_column(String(20), nullable=False)
    issue_date: Mapped[date] = mapped_column(Date, nullable=False)
    due_date: Mapped[date] = mapped_column(Date, nullable=False)
    paid_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)

    def __repr__(self) -> str:
        return f"<Bill {self.id} {self.period_year:04d}-{self.period_month:02d} {self.status}>"
