"""Balance projection - hypothetical balance after a draft is applied"""

from decimal import Decimal
from wallet_gateway.domain.models import MovementKind


def project_balance(balance: Decimal, amount: Decimal, kind: MovementKind) -> Decimal:
    """
    Return the balance the account would hold after the movement.

    Expense subtracts, income adds. The result is not clamped: a negative
    projection is representable and is what the insufficient-funds rule guards
    against for expenses.
    """
    if kind == MovementKind.EXPENSE:
        return balance - amount
    return balance + amount
