from __future__ import annotations

from decimal import ROUND_HALF_UP, Context, Decimal, InvalidOperation, localcontext
from typing import Union

from domain.exceptions import InvalidInputError

CENT = Decimal("0.01")

Numeric = Union[int, float, str, Decimal]

# (max_digits, decimal_places) of every stored amount; the SQL columns use the same pairs
RATE_PRECISION = (12, 4)
CHARGE_PRECISION = (12, 2)
PERCENT_PRECISION = (6, 3)
AMOUNT_PRECISION = (14, 2)

# meter readings and units live in 32-bit integer columns
MAX_READING = 2**31 - 1

_WORKING = Context(prec=60, rounding=ROUND_HALF_UP)


def to_decimal(value: Numeric, field: str) -> Decimal:
    """Coerce *value* to a finite, non-negative :class:`Decimal`.

    Floats go through ``str`` first so ``8.5`` becomes ``Decimal("8.5")``
    rather than its binary expansion.
    """
    if isinstance(value, bool) or value is None:
        raise InvalidInputError(field, f"expected a number, got {value!r}")
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, ValueError) as exc:
        raise InvalidInputError(field, f"expected a number, got {value!r}") from exc
    if not amount.is_finite():
        raise InvalidInputError(field, "must be finite")
    if amount < 0:
        raise InvalidInputError(field, f"must be >= 0, got {amount}")
    return amount


def check_precision(amount: Decimal, field: str, precision: tuple[int, int]) -> Decimal:
    """Reject *amount* unless it fits ``(max_digits, decimal_places)`` exactly.

    Trailing zeros do not count towards the decimal places, so ``0.1000``
    fits four places.
    """
    max_digits, places = precision
    exponent = amount.normalize(_WORKING).as_tuple().exponent
    if isinstance(exponent, int) and -exponent > places:
        raise InvalidInputError(field, f"at most {places} decimal places allowed, got {amount}")
    limit = Decimal(10) ** (max_digits - places)
    if amount >= limit:
        raise InvalidInputError(field, f"must be below {limit}, got {amount}")
    return amount


def round_money(amount: Decimal) -> Decimal:
    with localcontext(_WORKING):
        return amount.quantize(CENT)


def charge_figures(
    units: int,
    rate_per_unit: Decimal,
    fixed_charge: Decimal,
    tax_percent: Decimal,
) -> tuple[Decimal, Decimal, Decimal]:
    """Return ``(subtotal, tax, total)`` computed exactly, then rounded to cents.

    Raises :class:`InvalidInputError` when the total would not fit a stored
    amount.
    """
    with localcontext(_WORKING):
        subtotal = round_money(units * rate_per_unit + fixed_charge)
        tax = round_money(subtotal * tax_percent / Decimal("100"))
        total = subtotal + tax
    check_precision(total, "total", AMOUNT_PRECISION)
    return subtotal, tax, total
