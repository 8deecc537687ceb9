"""Exact money amounts.

Prices travel as strings in command payloads and are held as
``decimal.Decimal`` with two places everywhere else.
"""

from decimal import Decimal, InvalidOperation

from protean.exceptions import ValidationError

CENTS = Decimal("0.01")
ZERO = Decimal("0.00")


def to_money(value, field="price") -> Decimal:
    """Parse ``value`` into a two-place Decimal, rejecting anything lossy."""
    try:
        amount = Decimal(str(value).strip())
    except (InvalidOperation, TypeError, ValueError):
        raise ValidationError({field: [f"Invalid amount: {value!r}"]}) from None

    if not amount.is_finite():
        raise ValidationError({field: [f"Invalid amount: {value!r}"]})
    if amount.as_tuple().exponent < -2:
        raise ValidationError({field: ["Amount cannot have more than 2 decimal places"]})
    return amount.quantize(CENTS)


def line_total(unit_price, quantity) -> Decimal:
    return (Decimal(unit_price) * quantity).quantize(CENTS)
