"""Tests for src/application/tasks/billing_tasks.py"""

from datetime import date

import pytest

from domain.models.bill import BillStatus
from domain.models.period import BillingPeriod
from infrastructure.container import get_container, reset_container


@pytest.fixture
def container():
    reset_container()
    yield get_container()
    reset_container()


class TestMarkOverdueBillsTask:

    def test_marks_past_due_bills(self, container):
        from application.tasks.billing_tasks import mark_overdue_bills

        customer = container.customer_service.add_customer("Asha", "MTR-1")
        bill = container.billing_service.issue_bill(
            customer.id, BillingPeriod(2024, 1), 100, issue_date=date(2024, 1, 31)
        )

        result = mark_overdue_bills.apply(kwargs={"as_of": "2024-03-01"}).get()

        assert result == {
            "as_of": "2024-03-01",
            "bills_marked": 1,
            "bill_ids": [str(bill.id)],
        }
        assert container.billing_service.get_bill(bill.id).status == BillStatus.OVERDUE

    def test_nothing_due(self, container):
        from application.tasks.billing_tasks import mark_overdue_bills

        result = mark_overdue_bills.apply(kwargs={"as_of": "2024-03-01"}).get()
        assert result["bills_marked"] == 0
