from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from domain.models.money import (
    CHARGE_PRECISION,
    PERCENT_PRECISION,
    RATE_PRECISION,
    check_precision,
    to_decimal,
)


@dataclass(frozen=True)
class Tariff:
    """Rate inputs for a bill, supplied by the caller and copied into it.

    Each field must fit the precision it is stored with: four decimal places
    for the rate, cents for the fixed charge, three places for the tax
    percentage.
    """

    rate_per_unit: Decimal = Decimal("0")
    fixed_charge: Decimal = Decimal("0")
    tax_percent: Decimal = Decimal("0")

    def __post_init__(self) -> None:
        for name, precision in (
            ("rate_per_unit", RATE_PRECISION),
            ("fixed_charge", CHARGE_PRECISION),
            ("tax_percent", PERCENT_PRECISION),
        ):
            amount = check_precision(to_decimal(getattr(self, name), name), name, precision)
            # frozen=True requires object.__setattr__ for normalisation
            object.__setattr__(self, name, amount)
