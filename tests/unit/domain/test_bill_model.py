"""Tests for src/domain/models/bill.py"""

from __future__ import annotations

from dataclasses import FrozenInstanceError
from datetime import date
from decimal import Decimal
from uuid import uuid4

import pytest

from domain.exceptions import InvalidInputError
from domain.models.bill import Bill, BillCharge, BillStatus
from domain.models.money import MAX_READING
from domain.models.period import BillingPeriod


def _issue(**overrides) -> Bill:
    kwargs = dict(
        customer_id=uuid4(),
        customer_snapshot="Asha Verma, 12 Station Road",
        meter_snapshot="Meter MTR-1",
        period=BillingPeriod(2024, 1),
        units=150,
        rate_per_unit=Decimal("8.5"),
        fixed_charge=Decimal("50"),
        tax_percent=Decimal("10"),
        issue_date=date(2024, 1, 1),
        due_date=date(2024, 1, 20),
    )
    kwargs.update(overrides)
    return Bill.issue(**kwargs)


class TestBillComputation:

    def test_worked_example(self):
        bill = _issue()
        assert bill.subtotal == Decimal("1325.00")
        assert bill.tax == Decimal("132.50")
        assert bill.total == Decimal("1457.50")
        assert bill.status == BillStatus.ISSUED

    def test_total_is_subtotal_plus_tax(self):
        bill = _issue(units=37, rate_per_unit="3.33", fixed_charge="12.5", tax_percent="17.5")
        assert bill.total == bill.subtotal + bill.tax

    def test_subtotal_and_tax_are_rounded_to_cents(self):
        # 7 * 1.005 = 7.035 -> 7.04; 7.04 * 12.5% = 0.88
        bill = _issue(units=7, rate_per_unit="1.005", fixed_charge=0, tax_percent="12.5")
        assert bill.subtotal == Decimal("7.04")
        assert bill.tax == Decimal("0.88")
        assert bill.total == Decimal("7.92")

    def test_all_zero_inputs(self):
        bill = _issue(units=0, rate_per_unit=0, fixed_charge=0, tax_percent=0)
        assert bill.subtotal == Decimal("0")
        assert bill.tax == Decimal("0")
        assert bill.total == Decimal("0")

    def test_float_inputs_do_not_drift(self):
        bill = _issue(units=3, rate_per_unit=0.1, fixed_charge=0.2, tax_percent=0)
        assert bill.subtotal == Decimal("0.50")

    def test_tariff_inputs_are_copied_onto_bill(self):
        bill = _issue()
        assert bill.units == 150
        assert bill.rate_per_unit == Decimal("8.5")
        assert bill.fixed_charge == Decimal("50")
        assert bill.tax_percent == Decimal("10")


class TestBillDefaults:

    def test_fresh_bill_is_issued_and_unpaid(self):
        bill = _issue()
        assert bill.status == BillStatus.ISSUED
        assert bill.paid_date is None

    def test_ids_are_unique(self):
        ids = {_issue().id for _ in range(50)}
        assert len(ids) == 50

    def test_empty_snapshots_are_accepted(self):
        bill = _issue(customer_snapshot="", meter_snapshot="")
        assert bill.customer_snapshot == ""

    def test_due_date_equal_to_issue_date(self):
        bill = _issue(issue_date=date(2024, 1, 1), due_date=date(2024, 1, 1))
        assert bill.due_date == bill.issue_date


class TestBillValidation:

    @pytest.mark.parametrize(
        "overrides",
        [
            {"units": -1},
            {"rate_per_unit": -1},
            {"fixed_charge": Decimal("-0.01")},
            {"tax_percent": -5},
            {"rate_per_unit": "abc"},
            {"rate_per_unit": float("nan")},
            {"units": 1.5},
            {"units": True},
        ],
    )
    def test_invalid_numeric_inputs(self, overrides):
        with pytest.raises(InvalidInputError):
            _issue(**overrides)

    def test_due_before_issue(self):
        with pytest.raises(InvalidInputError) as exc_info:
            _issue(issue_date=date(2024, 1, 20), due_date=date(2024, 1, 19))
        assert exc_info.value.field == "due_date"

    def test_missing_customer_id(self):
        with pytest.raises(InvalidInputError):
            _issue(customer_id=None)

    def test_snapshot_must_be_provided(self):
        with pytest.raises(InvalidInputError):
            _issue(meter_snapshot=None)

    def test_period_must_be_billing_period(self):
        with pytest.raises(InvalidInputError):
            _issue(period="2024-01")


class TestBillTransitions:

    def test_mark_paid(self):
        bill = _issue()
        bill.mark_paid(date(2024, 3, 15))
        assert bill.status == BillStatus.PAID
        assert bill.paid_date == date(2024, 3, 15)
        assert bill.total == Decimal("1457.50")

    def test_set_status_does_not_touch_paid_date(self):
        bill = _issue()
        bill.set_status(BillStatus.CANCELLED)
        assert bill.status == BillStatus.CANCELLED
        assert bill.paid_date is None

    def test_entity_does_not_enforce_transitions(self):
        bill = _issue()
        bill.mark_paid(date(2024, 1, 5))
        bill.set_status(BillStatus.DRAFT)
        assert bill.status == BillStatus.DRAFT
        assert bill.paid_date == date(2024, 1, 5)

    def test_financials_survive_any_status_sequence(self):
        bill = _issue()
        before = (bill.subtotal, bill.tax, bill.total)
        for status in BillStatus:
            bill.set_status(status)
        bill.mark_paid(date(2024, 2, 1))
        bill.set_status(BillStatus.OVERDUE)
        assert (bill.subtotal, bill.tax, bill.total) == before


class TestBillFreezing:

    @pytest.mark.parametrize(
        "field_name, value",
        [
            ("charge", None),
            ("customer_id", uuid4()),
            ("customer_snapshot", "someone else"),
            ("period", BillingPeriod(2025, 1)),
            ("issue_date", date(2030, 1, 1)),
            ("id", uuid4()),
        ],
    )
    def test_frozen_fields_reject_assignment(self, field_name, value):
        bill = _issue()
        with pytest.raises(AttributeError):
            setattr(bill, field_name, value)

    def test_derived_figures_have_no_setter(self):
        bill = _issue()
        with pytest.raises(AttributeError):
            bill.total = Decimal("1")

    def test_charge_is_immutable(self):
        bill = _issue()
        with pytest.raises(FrozenInstanceError):
            bill.charge.rate_per_unit = Decimal("100")

    def test_equality_by_id(self):
        bill = _issue()
        other = _issue()
        assert bill == bill
        assert bill != other
        assert len({bill, other, bill}) == 2


class TestBillCharge:

    def test_for_usage_uses_tariff(self, sample_tariff):
        charge = BillCharge.for_usage(150, sample_tariff)
        assert charge.total == Decimal("1457.50")

    def test_restore_keeps_stored_figures(self):
        charge = BillCharge.restore(
            units=10,
            rate_per_unit=Decimal("1"),
            fixed_charge=Decimal("0"),
            tax_percent=Decimal("0"),
            subtotal=Decimal("10.00"),
            tax=Decimal("0.00"),
            total=Decimal("9.99"),
        )
        assert charge.total == Decimal("9.99")

    def test_subtotal_is_not_a_constructor_argument(self):
        with pytest.raises(TypeError):
            BillCharge(
                units=1,
                rate_per_unit=Decimal("1"),
                fixed_charge=Decimal("0"),
                tax_percent=Decimal("0"),
                subtotal=Decimal("5"),
            )


class TestBillPrecision:

    @pytest.mark.parametrize(
        "overrides, field",
        [
            ({"rate_per_unit": Decimal("0.00001")}, "rate_per_unit"),
            ({"fixed_charge": Decimal("0.001")}, "fixed_charge"),
            ({"tax_percent": Decimal("0.0001")}, "tax_percent"),
            ({"tax_percent": Decimal("1000")}, "tax_percent"),
            ({"rate_per_unit": Decimal("100000000")}, "rate_per_unit"),
        ],
    )
    def test_inputs_beyond_stored_precision_rejected(self, overrides, field):
        with pytest.raises(InvalidInputError) as exc_info:
            _issue(**overrides)
        assert exc_info.value.field == field

    def test_trailing_zeros_do_not_count(self):
        bill = _issue(rate_per_unit=Decimal("0.12340000"), tax_percent=Decimal("999.999"))
        assert bill.rate_per_unit == Decimal("0.1234")

    def test_sub_cent_rate_at_the_limit(self):
        bill = _issue(units=3, rate_per_unit=Decimal("0.0001"), fixed_charge=0, tax_percent=0)
        assert bill.rate_per_unit == Decimal("0.0001")
        assert bill.subtotal == Decimal("0.00")

    def test_huge_units_raise_invalid_input(self):
        with pytest.raises(InvalidInputError) as exc_info:
            _issue(units=10**27)
        assert exc_info.value.field == "units"

    def test_max_units_accepted(self):
        bill = _issue(units=MAX_READING, rate_per_unit=1, fixed_charge=0, tax_percent=0)
        assert bill.total == Decimal(MAX_READING)

    def test_total_too_large_to_store(self):
        with pytest.raises(InvalidInputError) as exc_info:
            _issue(units=MAX_READING, rate_per_unit=Decimal("99999999.9999"))
        assert exc_info.value.field == "total"


class TestBillConstruction:

    @pytest.mark.parametrize(
        "extra",
        [{"id": uuid4()}, {"status": BillStatus.PAID}, {"paid_date": date(2024, 1, 2)}],
    )
    def test_generated_fields_are_not_constructor_arguments(self, extra):
        charge = BillCharge(
            units=1, rate_per_unit=Decimal("1"), fixed_charge=Decimal("0"), tax_percent=Decimal("0")
        )
        with pytest.raises(TypeError):
            Bill(
                customer_id=uuid4(),
                customer_snapshot="",
                meter_snapshot="",
                period=BillingPeriod(2024, 1),
                charge=charge,
                issue_date=date(2024, 1, 1),
                due_date=date(2024, 1, 20),
                **extra,
            )

    def test_restore_keeps_identity_and_status(self):
        issued = _issue()
        bill_id = uuid4()
        restored = Bill.restore(
            id=bill_id,
            status=BillStatus.PAID,
            paid_date=date(2024, 1, 10),
            customer_id=issued.customer_id,
            customer_snapshot=issued.customer_snapshot,
            meter_snapshot=issued.meter_snapshot,
            period=issued.period,
            charge=issued.charge,
            issue_date=issued.issue_date,
            due_date=issued.due_date,
        )
        assert restored.id == bill_id
        assert restored.status == BillStatus.PAID
        assert restored.paid_date == date(2024, 1, 10)
        with pytest.raises(AttributeError):
            restored.id = uuid4()

    def test_restore_still_validates(self):
        issued = _issue()
        with pytest.raises(InvalidInputError):
            Bill.restore(
                id=uuid4(),
                status=BillStatus.ISSUED,
                paid_date=None,
                customer_id=issued.customer_id,
                customer_snapshot=issued.customer_snapshot,
                meter_snapshot=issued.meter_snapshot,
                period=issued.period,
                charge=issued.charge,
                issue_date=date(2024, 2, 1),
                due_date=date(2024, 1, 1),
            )
