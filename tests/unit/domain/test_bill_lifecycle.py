"""Tests for src/domain/services/bill_lifecycle.py"""

from datetime import date

import pytest

from domain.models.bill import BillStatus
from domain.services.bill_lifecycle import VALID_TRANSITIONS, BillLifecycleService


@pytest.fixture
def service():
    return BillLifecycleService()


class TestValidateTransition:
    @pytest.mark.parametrize(
        "current, new",
        [
            (BillStatus.DRAFT, BillStatus.ISSUED),
            (BillStatus.DRAFT, BillStatus.CANCELLED),
            (BillStatus.ISSUED, BillStatus.PAID),
            (BillStatus.ISSUED, BillStatus.OVERDUE),
            (BillStatus.ISSUED, BillStatus.CANCELLED),
            (BillStatus.OVERDUE, BillStatus.PAID),
            (BillStatus.OVERDUE, BillStatus.CANCELLED),
        ],
    )
    def test_valid_transitions(self, service, current, new):
        assert service.validate_transition(current, new) is True

    @pytest.mark.parametrize(
        "current, new",
        [
            (BillStatus.PAID, BillStatus.DRAFT),
            (BillStatus.PAID, BillStatus.CANCELLED),
            (BillStatus.CANCELLED, BillStatus.ISSUED),
            (BillStatus.OVERDUE, BillStatus.ISSUED),
            (BillStatus.DRAFT, BillStatus.PAID),
            (BillStatus.ISSUED, BillStatus.ISSUED),
        ],
    )
    def test_invalid_transitions(self, service, current, new):
        assert service.validate_transition(current, new) is False

    def test_every_status_has_an_entry(self):
        assert set(VALID_TRANSITIONS) == set(BillStatus)


class TestAllowedTransitions:
    def test_terminal_states(self, service):
        assert service.allowed_transitions(BillStatus.PAID) == []
        assert service.allowed_transitions(BillStatus.CANCELLED) == []

    def test_returns_copy(self, service):
        allowed = service.allowed_transitions(BillStatus.ISSUED)
        allowed.clear()
        assert service.allowed_transitions(BillStatus.ISSUED)


class TestIsOverdue:
    def test_not_overdue_on_due_date(self, service, sample_bill):
        assert service.is_overdue(sample_bill, sample_bill.due_date) is False

    def test_overdue_day_after_due_date(self, service, sample_bill):
        assert service.is_overdue(sample_bill, date(2024, 2, 21)) is True

    def test_paid_bill_never_overdue(self, service, sample_bill):
        sample_bill.mark_paid(date(2024, 2, 1))
        assert service.is_overdue(sample_bill, date(2025, 1, 1)) is False

    def test_already_overdue_bill_not_flagged_again(self, service, sample_bill):
        sample_bill.set_status(BillStatus.OVERDUE)
        assert service.is_overdue(sample_bill, date(2025, 1, 1)) is False
