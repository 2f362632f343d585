"""Money helpers. All amounts are Decimal with two fraction digits."""

from decimal import Decimal, ROUND_HALF_UP

CENT = Decimal("0.01")
ZERO = Decimal("0.00")


def to_money(value) -> Decimal:
    """Convert to Decimal and round to cents (half up)."""
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def has_cents_precision(value: Decimal) -> bool:
    """True if the value carries no more than two fraction digits."""
    return value == value.quantize(CENT)


def format_money(value: Decimal, currency: str) -> str:
    """100 -> '100.00 PLN'"""
    return f"{to_money(value):.2f} {currency}"
