"""Unit tests for outcome and account display text"""

import pytest
from decimal import Decimal
from wallet_gateway.domain.eligibility import AccountEligibilityFilter
from wallet_gateway.domain.models import AccountState, MovementKind
from wallet_gateway.domain.rendering import health_label, render_details
from wallet_gateway.domain.validation import ValidationEngine
from wallet_gateway.utils.money import format_currency, to_money
from helpers import make_account, make_draft


def test_denied_details_show_shortfall():
    outcome = ValidationEngine().evaluate(make_draft("50000"), make_account("40000"))

    assert outcome.headline == "Insufficient funds in Main savings"
    assert render_details(outcome) == [
        "Attempted amount: $50,000.00",
        "Current balance: $40,000.00",
        "Shortfall: $10,000.00",
    ]


def test_warning_details_ask_to_continue():
    outcome = ValidationEngine().evaluate(make_draft("10000"), make_account("40000"))

    details = render_details(outcome)
    assert details[0] == "Current balance: $40,000.00"
    assert details[1] == "Balance after this transaction: $30,000.00"
    assert details[-1] == "Do you want to continue anyway?"


def test_income_headline_is_positive():
    outcome = ValidationEngine().evaluate(make_draft("25000", MovementKind.INCOME), make_account("0"))

    assert outcome.headline == "Confirm income to Main savings"
    assert len(render_details(outcome)) == 2


def test_blocked_details():
    outcome = ValidationEngine().evaluate(make_draft("1"), make_account("10", AccountState.INACTIVE))
    assert render_details(outcome) == ["Activate the account or choose another one."]


def test_health_labels():
    eligibility = AccountEligibilityFilter()

    assert health_label(eligibility.classify(make_account("0"))) == "No funds available"
    assert health_label(eligibility.classify(make_account("49999"))) == "Low balance - top up soon"
    assert health_label(eligibility.classify(make_account("75000"))) == "Moderate balance"
    assert health_label(eligibility.classify(make_account("150000"))) == "Healthy balance"


def test_money_helpers():
    assert to_money("1234.5") == Decimal("1234.50")
    assert to_money(0.1) == Decimal("0.10")
    assert to_money(7) == Decimal("7.00")
    assert format_currency(Decimal("-1234.5")) == "-$1,234.50"


def test_to_money_refuses_fractions_of_a_cent():
    with pytest.raises(ValueError):
        to_money("0.005")
    assert to_money("0.010") == Decimal("0.01")
