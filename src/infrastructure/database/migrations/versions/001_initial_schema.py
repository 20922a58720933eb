"""Initial schema: customers and bills.

Revision ID: 001
Revises: None
Create Date: 2026-10-19
"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

revision: str = "001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "customers",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("meter_number", sa.String(64), nullable=False),
        sa.Column("address", sa.Text(), nullable=False, server_default=""),
        sa.Column("last_reading", sa.Integer(), nullable=False, server_default="0"),
        sa.Column(
            "created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False
        ),
        sa.Column(
            "updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False
        ),
        sa.UniqueConstraint("meter_number", name="uq_customers_meter_number"),
        sa.CheckConstraint("last_reading >= 0", name="ck_customers_last_reading"),
    )

    # No FK to customers: bills are kept when their customer is removed
    op.create_table(
        "bills",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("customer_id", sa.Uuid(), nullable=False),
        sa.Column("customer_snapshot", sa.Text(), nullable=False, server_default=""),
        sa.Column("meter_snapshot", sa.Text(), nullable=False, server_default=""),
        sa.Column("period_year", sa.Integer(), nullable=False),
        sa.Column("period_month", sa.Integer(), nullable=False),
        sa.Column("units", sa.Integer(), nullable=False),
        sa.Column("rate_per_unit", sa.Numeric(12, 4), nullable=False),
        sa.Column("fixed_charge", sa.Numeric(12, 2), nullable=False),
        sa.Column("tax_percent", sa.Numeric(6, 3), nullable=False),
        sa.Column("subtotal", sa.Numeric(14, 2), nullable=False),
        sa.Column("tax", sa.Numeric(14, 2), nullable=False),
        sa.Column("total", sa.Numeric(14, 2), nullable=False),
        sa.Column("status", sa.String(20), nullable=False),
        sa.Column("issue_date", sa.Date(), nullable=False),
        sa.Column("due_date", sa.Date(), nullable=False),
        sa.Column("paid_date", sa.Date(), nullable=True),
        sa.UniqueConstraint(
            "customer_id", "period_year", "period_month", name="uq_bills_customer_period"
        ),
        sa.CheckConstraint("units >= 0", name="ck_bills_units"),
        sa.CheckConstraint("due_date >= issue_date", name="ck_bills_due_after_issue"),
        sa.CheckConstraint("period_month BETWEEN 1 AND 12", name="ck_bills_period_month"),
    )
    op.create_index("ix_bills_customer_id", "bills", ["customer_id"])
    op.create_index("ix_bills_status", "bills", ["status"])


def downgrade() -> None:
    op.drop_index("ix_bills_status", table_name="bills")
    op.drop_index("ix_bills_customer_id", table_name="bills")
    op.drop_table("bills")
    op.drop_table("customers")
