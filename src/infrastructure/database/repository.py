"""
SQLAlchemy implementations of the customer and bill store ports.

Each repository owns a session factory and runs every operation in its
own short transaction, mapping ORM rows to and from domain objects so the
application layer never sees SQLAlchemy types.
"""

from __future__ import annotations

import uuid
from typing import Optional

from sqlalchemy import delete, func, select, update
from sqlalchemy.orm import Session, sessionmaker

from domain.models.bill import Bill, BillCharge, BillStatus
from domain.models.customer import Customer
from domain.models.period import BillingPeriod

from .models import BillModel, CustomerModel


# =========================================================================
# Row <-> domain mapping
# =========================================================================

def _customer_to_domain(row: CustomerModel) -> Customer:
    return Customer(
        id=row.id,
        name=row.name,
        meter_number=row.meter_number,
        address=row.address,
        last_reading=row.last_reading,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def _bill_to_domain(row: BillModel) -> Bill:
    # stored figures are restored as-is, never recomputed
    charge = BillCharge.restore(
        units=row.units,
        rate_per_unit=row.rate_per_unit,
        fixed_charge=row.fixed_charge,
        tax_percent=row.tax_percent,
        subtotal=row.subtotal,
        tax=row.tax,
        total=row.total,
    )
    return Bill.restore(
        id=row.id,
        customer_id=row.customer_id,
        customer_snapshot=row.customer_snapshot,
        meter_snapshot=row.meter_snapshot,
        period=BillingPeriod(row.period_year, row.period_month),
        charge=charge,
        issue_date=row.issue_date,
        due_date=row.due_date,
        status=BillStatus(row.status),
        paid_date=row.paid_date,
    )


def _bill_to_row(bill: Bill) -> BillModel:
    return BillModel(
        id=bill.id,
        customer_id=bill.customer_id,
        customer_snapshot=bill.customer_snapshot,
        meter_snapshot=bill.meter_snapshot,
        period_year=bill.period.year,
        period_month=bill.period.month,
        units=bill.units,
        rate_per_unit=bill.rate_per_unit,
        fixed_charge=bill.fixed_charge,
        tax_percent=bill.tax_percent,
        subtotal=bill.subtotal,
        tax=bill.tax,
        total=bill.total,
        status=bill.status.value,
        issue_date=bill.issue_date,
        due_date=bill.due_date,
        paid_date=bill.paid_date,
    )


# =========================================================================
# SqlAlchemyCustomerRepository
# =========================================================================

class SqlAlchemyCustomerRepository:
    """Customer store backed by the ``customers`` table."""

    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self._session_factory = session_factory

    def get_by_id(self, customer_id: uuid.UUID) -> Optional[Customer]:
        with self._session_factory() as session:
            row = session.get(CustomerModel, customer_id)
            return _customer_to_domain(row) if row else None

    def get_by_meter_number(self, meter_number: str) -> Optional[Customer]:
        stmt = select(CustomerModel).where(CustomerModel.meter_number == meter_number)
        with self._session_factory() as session:
            row = session.execute(stmt).scalar_one_or_none()
            return _customer_to_domain(row) if row else None

    def list_customers(self, offset: int = 0, limit: int = 20) -> tuple[list[Customer], int]:
        stmt = (
            select(CustomerModel)
            .order_by(func.lower(CustomerModel.name), CustomerModel.created_at)
            .offset(offset)
            .limit(limit)
        )
        with self._session_factory() as session:
            total = session.execute(select(func.count()).select_from(CustomerModel)).scalar_one()
            rows = session.execute(stmt).scalars().all()
            return [_customer_to_domain(r) for r in rows], total

    def save(self, customer: Customer) -> Customer:
        row = CustomerModel(
            id=customer.id,
            name=customer.name,
            meter_number=customer.meter_number,
            address=customer.address,
            last_reading=customer.last_reading,
            created_at=customer.created_at,
            updated_at=customer.updated_at,
        )
        with self._session_factory.begin() as session:
            session.add(row)
        return customer

    def update(self, customer: Customer) -> Customer:
        stmt = (
            update(CustomerModel)
            .where(CustomerModel.id == customer.id)
            .values(
                name=customer.name,
                meter_number=customer.meter_number,
                address=customer.address,
                last_reading=customer.last_reading,
                updated_at=customer.updated_at,
            )
        )
        with self._session_factory.begin() as session:
            session.execute(stmt)
        return customer

    def delete(self, customer_id: uuid.UUID) -> bool:
        stmt = delete(CustomerModel).where(CustomerModel.id == customer_id)
        with self._session_factory.begin() as session:
            result = session.execute(stmt)
        return result.rowcount > 0


# =========================================================================
# SqlAlchemyBillRepository
# =========================================================================

class SqlAlchemyBillRepository:
    """Bill store backed by the ``bills`` table."""

    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self._session_factory = session_factory

    def save(self, bill: Bill) -> Bill:
        with self._session_factory.begin() as session:
            session.add(_bill_to_row(bill))
        return bill

    def get_by_id(self, bill_id: uuid.UUID) -> Optional[Bill]:
        with self._session_factory() as session:
            row = session.get(BillModel, bill_id)
            return _bill_to_domain(row) if row else None

    def get_by_customer_and_period(
        self, customer_id: uuid.UUID, period: BillingPeriod
    ) -> Optional[Bill]:
        stmt = select(BillModel).where(
            BillModel.customer_id == customer_id,
            BillModel.period_year == period.year,
            BillModel.period_month == period.month,
        )
        with self._session_factory() as session:
            row = session.execute(stmt).scalar_one_or_none()
            return _bill_to_domain(row) if row else None

    def list_by_customer(self, customer_id: uuid.UUID) -> list[Bill]:
        stmt = select(BillModel).where(BillModel.customer_id == customer_id)
        with self._session_factory() as session:
            return [_bill_to_domain(r) for r in session.execute(stmt).scalars()]

    def list_by_status(self, status: BillStatus) -> list[Bill]:
        stmt = select(BillModel).where(BillModel.status == status.value)
        with self._session_factory() as session:
            return [_bill_to_domain(r) for r in session.execute(stmt).scalars()]

    def list_bills(
        self,
        offset: int = 0,
        limit: int = 20,
        status_filter: Optional[BillStatus] = None,
    ) -> tuple[list[Bill], int]:
        stmt = select(BillModel)
        count_stmt = select(func.count()).select_from(BillModel)
        if status_filter is not None:
            stmt = stmt.where(BillModel.status == status_filter.value)
            count_stmt = count_stmt.where(BillModel.status == status_filter.value)
        stmt = stmt.order_by(
            BillModel.issue_date.desc(),
            BillModel.period_year.desc(),
            BillModel.period_month.desc(),
        ).offset(offset).limit(limit)

        with self._session_factory() as session:
            total = session.execute(count_stmt).scalar_one()
            rows = session.execute(stmt).scalars().all()
            return [_bill_to_domain(r) for r in rows], total

    def update(self, bill: Bill) -> Bill:
        """Persist the mutable part of a bill: status and paid date."""
        stmt = (
            update(BillModel)
            .where(BillModel.id == bill.id)
            .values(status=bill.status.value, paid_date=bill.paid_date)
        )
        with self._session_factory.begin() as session:
            session.execute(stmt)
        return bill

    def delete(self, bill_id: uuid.UUID) -> bool:
        stmt = delete(BillModel).where(BillModel.id == bill_id)
        with self._session_factory.begin() as session:
            result = session.execute(stmt)
        return result.rowcount > 0

    def delete_by_customer(self, customer_id: uuid.UUID) -> int:
        stmt = delete(BillModel).where(BillModel.customer_id == customer_id)
        with self._session_factory.begin() as session:
            result = session.execute(stmt)
        return result.rowcount
