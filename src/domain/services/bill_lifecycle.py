from __future__ import annotations

from datetime import date

from domain.models.bill import Bill, BillStatus


VALID_TRANSITIONS: dict[BillStatus, list[BillStatus]] = {
    BillStatus.DRAFT: [BillStatus.ISSUED, BillStatus.CANCELLED],
    BillStatus.ISSUED: [BillStatus.PAID, BillStatus.OVERDUE, BillStatus.CANCELLED],
    BillStatus.OVERDUE: [BillStatus.PAID, BillStatus.CANCELLED],
    BillStatus.PAID: [],
    BillStatus.CANCELLED: [],
}


class BillLifecycleService:

    def validate_transition(
        self,
        current_state: BillStatus,
        new_state: BillStatus,
    ) -> bool:
        allowed = VALID_TRANSITIONS.get(current_state, [])
        return new_state in allowed

    def allowed_transitions(self, current_state: BillStatus) -> list[BillStatus]:
        return list(VALID_TRANSITIONS.get(current_state, []))

    def is_overdue(self, bill: Bill, today: date) -> bool:
        """An issued bill becomes overdue the day after its due date."""
        return bill.status == BillStatus.ISSUED and today > bill.due_date
