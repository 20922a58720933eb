"""Bill entity: a frozen charge computation plus a mutable status cell.

A :class:`Bill` is created once, at issuance, with every financial figure
computed immediately and permanently.  Afterwards only ``status`` and
``paid_date`` may change.  The entity does not enforce which status
transitions are legal; that is the job of
:class:`domain.services.bill_lifecycle.BillLifecycleService`.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Any
from uuid import UUID, uuid4

from domain.exceptions import InvalidInputError
from domain.models.money import (
    CHARGE_PRECISION,
    MAX_READING,
    PERCENT_PRECISION,
    RATE_PRECISION,
    Numeric,
    charge_figures,
    check_precision,
    to_decimal,
)
from domain.models.period import BillingPeriod
from domain.models.tariff import Tariff


class BillStatus(enum.Enum):
    DRAFT = "DRAFT"
    ISSUED = "ISSUED"
    PAID = "PAID"
    OVERDUE = "OVERDUE"
    CANCELLED = "CANCELLED"


@dataclass(frozen=True)
class BillCharge:
    """Usage and tariff inputs with the figures derived from them.

    ``subtotal``, ``tax`` and ``total`` are not constructor arguments; they
    are computed once in ``__post_init__``.  ``subtotal`` and ``tax`` are
    rounded to cents and ``total`` is their exact sum.
    """

    units: int
    rate_per_unit: Decimal
    fixed_charge: Decimal
    tax_percent: Decimal
    subtotal: Decimal = field(init=False)
    tax: Decimal = field(init=False)
    total: Decimal = field(init=False)

    def __post_init__(self) -> None:
        if isinstance(self.units, bool) or not isinstance(self.units, int):
            raise InvalidInputError("units", f"expected an integer, got {self.units!r}")
        if self.units < 0:
            raise InvalidInputError("units", f"must be >= 0, got {self.units}")
        if self.units > MAX_READING:
            raise InvalidInputError("units", f"must be <= {MAX_READING}, got {self.units}")

        rate = check_precision(
            to_decimal(self.rate_per_unit, "rate_per_unit"), "rate_per_unit", RATE_PRECISION
        )
        fixed = check_precision(
            to_decimal(self.fixed_charge, "fixed_charge"), "fixed_charge", CHARGE_PRECISION
        )
        tax_percent = check_precision(
            to_decimal(self.tax_percent, "tax_percent"), "tax_percent", PERCENT_PRECISION
        )
        subtotal, tax, total = charge_figures(self.units, rate, fixed, tax_percent)

        object.__setattr__(self, "rate_per_unit", rate)
        object.__setattr__(self, "fixed_charge", fixed)
        object.__setattr__(self, "tax_percent", tax_percent)
        object.__setattr__(self, "subtotal", subtotal)
        object.__setattr__(self, "tax", tax)
        object.__setattr__(self, "total", total)

    @classmethod
    def for_usage(cls, units: int, tariff: Tariff) -> BillCharge:
        return cls(
            units=units,
            rate_per_unit=tariff.rate_per_unit,
            fixed_charge=tariff.fixed_charge,
            tax_percent=tariff.tax_percent,
        )

    @classmethod
    def restore(
        cls,
        *,
        units: int,
        rate_per_unit: Decimal,
        fixed_charge: Decimal,
        tax_percent: Decimal,
        subtotal: Decimal,
        tax: Decimal,
        total: Decimal,
    ) -> BillCharge:
        """Rebuild a charge from stored figures without recomputing them.

        Used by storage adapters so a bill read back from the database keeps
        the amounts it was issued with, whatever the current rounding rules.
        """
        charge = cls.__new__(cls)
        for name, value in (
            ("units", units),
            ("rate_per_unit", rate_per_unit),
            ("fixed_charge", fixed_charge),
            ("tax_percent", tax_percent),
            ("subtotal", subtotal),
            ("tax", tax),
            ("total", total),
        ):
            object.__setattr__(charge, name, value)
        return charge


_MUTABLE_FIELDS = frozenset({"status", "paid_date"})


@dataclass(eq=False)
class Bill:
    """One customer's charge for one billing period."""

    customer_id: UUID
    customer_snapshot: str
    meter_snapshot: str
    period: BillingPeriod
    charge: BillCharge
    issue_date: date
    due_date: date
    id: UUID = field(init=False, default_factory=uuid4)
    status: BillStatus = field(init=False, default=BillStatus.ISSUED)
    paid_date: date | None = field(init=False, default=None)

    def __post_init__(self) -> None:
        if self.customer_id is None:
            raise InvalidInputError("customer_id", "is required")
        if not isinstance(self.customer_snapshot, str):
            raise InvalidInputError("customer_snapshot", "must be a string")
        if not isinstance(self.meter_snapshot, str):
            raise InvalidInputError("meter_snapshot", "must be a string")
        if not isinstance(self.period, BillingPeriod):
            raise InvalidInputError("period", f"expected BillingPeriod, got {self.period!r}")
        if self.due_date < self.issue_date:
            raise InvalidInputError(
                "due_date",
                f"{self.due_date.isoformat()} is before issue date {self.issue_date.isoformat()}",
            )
        object.__setattr__(self, "_sealed", True)

    def __setattr__(self, name: str, value: Any) -> None:
        if getattr(self, "_sealed", False) and name not in _MUTABLE_FIELDS:
            raise AttributeError(f"Bill.{name} cannot change after issuance")
        object.__setattr__(self, name, value)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Bill):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    @classmethod
    def issue(
        cls,
        *,
        customer_id: UUID,
        customer_snapshot: str,
        meter_snapshot: str,
        period: BillingPeriod,
        units: int,
        rate_per_unit: Numeric,
        fixed_charge: Numeric,
        tax_percent: Numeric,
        issue_date: date,
        due_date: date,
    ) -> Bill:
        """Create an ISSUED bill from raw usage and tariff inputs."""
        charge = BillCharge(
            units=units,
            rate_per_unit=to_decimal(rate_per_unit, "rate_per_unit"),
            fixed_charge=to_decimal(fixed_charge, "fixed_charge"),
            tax_percent=to_decimal(tax_percent, "tax_percent"),
        )
        return cls(
            customer_id=customer_id,
            customer_snapshot=customer_snapshot,
            meter_snapshot=meter_snapshot,
            period=period,
            charge=charge,
            issue_date=issue_date,
            due_date=due_date,
        )

    @classmethod
    def restore(
        cls,
        *,
        id: UUID,
        status: BillStatus,
        paid_date: date | None,
        **fields: Any,
    ) -> Bill:
        """Rebuild a stored bill, keeping its id and recorded status."""
        bill = cls(**fields)
        object.__setattr__(bill, "id", id)
        object.__setattr__(bill, "status", status)
        object.__setattr__(bill, "paid_date", paid_date)
        return bill

    # -- read-only views over the charge ---------------------------------

    @property
    def units(self) -> int:
        return self.charge.units

    @property
    def rate_per_unit(self) -> Decimal:
        return self.charge.rate_per_unit

    @property
    def fixed_charge(self) -> Decimal:
        return self.charge.fixed_charge

    @property
    def tax_percent(self) -> Decimal:
        return self.charge.tax_percent

    @property
    def subtotal(self) -> Decimal:
        return self.charge.subtotal

    @property
    def tax(self) -> Decimal:
        return self.charge.tax

    @property
    def total(self) -> Decimal:
        return self.charge.total

    # -- status mutators (unvalidated) -------------------------------------

    def mark_paid(self, paid_on: date) -> None:
        self.status = BillStatus.PAID
        self.paid_date = paid_on

    def set_status(self, new_status: BillStatus) -> None:
        self.status = new_status
