from __future__ import annotations

import calendar
import re
from dataclasses import dataclass
from datetime import date

from domain.exceptions import InvalidInputError

_PERIOD_RE = re.compile(r"^(\d{4})-(\d{2})$")


@dataclass(frozen=True, order=True)
class BillingPeriod:
    """A billing cycle identified by year and month (no day component)."""

    year: int
    month: int

    def __post_init__(self) -> None:
        if isinstance(self.year, bool) or not isinstance(self.year, int) or not 1 <= self.year <= 9999:
            raise InvalidInputError("period.year", f"must be an integer in 1..9999, got {self.year!r}")
        if isinstance(self.month, bool) or not isinstance(self.month, int) or not 1 <= self.month <= 12:
            raise InvalidInputError("period.month", f"must be an integer in 1..12, got {self.month!r}")

    @classmethod
    def parse(cls, value: str) -> BillingPeriod:
        """Parse a ``YYYY-MM`` string."""
        match = _PERIOD_RE.match(value.strip()) if isinstance(value, str) else None
        if match is None:
            raise InvalidInputError("period", f"expected YYYY-MM, got {value!r}")
        return cls(year=int(match.group(1)), month=int(match.group(2)))

    @classmethod
    def from_date(cls, value: date) -> BillingPeriod:
        return cls(year=value.year, month=value.month)

    @property
    def first_day(self) -> date:
        return date(self.year, self.month, 1)

    @property
    def last_day(self) -> date:
        return date(self.year, self.month, calendar.monthrange(self.year, self.month)[1])

    def previous(self) -> BillingPeriod:
        if self.month == 1:
            return BillingPeriod(self.year - 1, 12)
        return BillingPeriod(self.year, self.month - 1)

    def next(self) -> BillingPeriod:
        if self.month == 12:
            return BillingPeriod(self.year + 1, 1)
        return BillingPeriod(self.year, self.month + 1)

    def __str__(self) -> str:
        return f"{self.year:04d}-{self.month:02d}"
