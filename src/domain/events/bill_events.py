from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from uuid import UUID, uuid4


@dataclass
class BillEvent:
    bill_id: UUID = field(default_factory=uuid4)
    customer_id: UUID = field(default_factory=uuid4)
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    event_type: str = ""


@dataclass
class BillIssued(BillEvent):
    event_type: str = "BillIssued"
    period: str = ""
    total: Decimal = Decimal("0")


@dataclass
class BillPaid(BillEvent):
    event_type: str = "BillPaid"
    amount: Decimal = Decimal("0")


@dataclass
class BillOverdue(BillEvent):
    event_type: str = "BillOverdue"


@dataclass
class BillCancelled(BillEvent):
    event_type: str = "BillCancelled"
