"""Unit tests for balance projection"""

from decimal import Decimal
from wallet_gateway.domain.models import MovementKind
from wallet_gateway.domain.projection import project_balance


def test_expense_subtracts():
    assert project_balance(Decimal("200000"), Decimal("30000"), MovementKind.EXPENSE) == Decimal("170000")


def test_income_adds():
    assert project_balance(Decimal("0"), Decimal("25000"), MovementKind.INCOME) == Decimal("25000")


def test_negative_projection_is_not_clamped():
    assert project_balance(Decimal("40000"), Decimal("50000"), MovementKind.EXPENSE) == Decimal("-10000")


def test_repeated_small_movements_do_not_drift():
    """Ten 0.10 expenses from 1.00 land exactly on zero"""
    balance = Decimal("1.00")
    for _ in range(10):
        balance = project_balance(balance, Decimal("0.10"), MovementKind.EXPENSE)
    assert balance == Decimal("0")
