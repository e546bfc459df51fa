"""Currency helpers - all money is Decimal, never float"""

from decimal import Decimal

CENT = Decimal("0.01")


def to_money(value: Decimal | int | str) -> Decimal:
    """Coerce a registry or request value to a two-place Decimal.

    Floats are converted through ``str`` so the printed value is kept rather
    than its binary approximation. Values with fractions of a cent are refused
    instead of rounded.

    Raises:
        ValueError: Value carries more than two decimal places
    """
    if isinstance(value, float):
        value = str(value)
    amount = Decimal(value)
    money = amount.quantize(CENT)
    if money != amount:
        raise ValueError(f"{value} has fractions of a cent")
    return money


def format_currency(amount: Decimal) -> str:
    """Render an amount as "$1,234.50" (negative as "-$1,234.50")"""
    sign = "-" if amount < 0 else ""
    return f"{sign}${abs(amount):,.2f}"
