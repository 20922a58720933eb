from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from uuid import UUID, uuid4

from domain.exceptions import InvalidInputError
from domain.models.money import MAX_READING


@dataclass
class Customer:
    id: UUID = field(default_factory=uuid4)
    name: str = ""
    meter_number: str = ""
    address: str = ""
    last_reading: int = 0
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    def __post_init__(self) -> None:
        self.name = (self.name or "").strip()
        self.meter_number = (self.meter_number or "").strip()
        self.address = (self.address or "").strip()
        if not self.name:
            raise InvalidInputError("name", "is required")
        if not self.meter_number:
            raise InvalidInputError("meter_number", "is required")
        if isinstance(self.last_reading, bool) or not isinstance(self.last_reading, int):
            raise InvalidInputError("last_reading", f"expected an integer, got {self.last_reading!r}")
        if not 0 <= self.last_reading <= MAX_READING:
            raise InvalidInputError(
                "last_reading", f"must be between 0 and {MAX_READING}, got {self.last_reading}"
            )

    def snapshot(self) -> str:
        """Customer details as frozen into a bill at issuance."""
        if self.address:
            return f"{self.name}, {self.address}"
        return self.name

    def meter_snapshot(self) -> str:
        return f"Meter {self.meter_number}"
