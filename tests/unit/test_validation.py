"""Unit tests for the draft validation engine"""

import pytest
from decimal import Decimal
from wallet_gateway.domain.models import AccountState, MovementKind, OutcomeKind
from wallet_gateway.domain.validation import ValidationEngine
from helpers import make_account, make_draft


@pytest.fixture
def engine() -> ValidationEngine:
    return ValidationEngine()


def test_scenario_a_normal_expense(engine: ValidationEngine):
    """Large balance, moderate expense: plain confirmation"""
    outcome = engine.evaluate(make_draft("30000"), make_account("200000"))

    assert outcome.kind == OutcomeKind.CONFIRM_EXPENSE
    assert outcome.projected_balance == Decimal("170000")
    assert outcome.current_balance == Decimal("200000")
    assert outcome.requires_acknowledgment is True
    assert outcome.is_safety_stop is False


def test_scenario_b_low_remaining_balance(engine: ValidationEngine):
    """Expense leaving less than the threshold: warning confirmation"""
    outcome = engine.evaluate(make_draft("10000"), make_account("40000"))

    assert outcome.kind == OutcomeKind.WARN_CONFIRM
    assert outcome.projected_balance == Decimal("30000")
    assert outcome.current_balance == Decimal("40000")
    assert outcome.is_safety_stop is True


def test_scenario_c_insufficient_funds(engine: ValidationEngine):
    """Expense above balance is denied with the shortfall"""
    outcome = engine.evaluate(make_draft("50000"), make_account("40000"))

    assert outcome.kind == OutcomeKind.DENIED
    assert outcome.shortfall == Decimal("10000")
    assert outcome.amount == Decimal("50000")
    assert outcome.current_balance == Decimal("40000")
    assert outcome.projected_balance is None  # No projection for impossible spends
    assert outcome.requires_acknowledgment is False


def test_scenario_d_inactive_account(engine: ValidationEngine):
    """Inactive account blocks even an affordable expense"""
    outcome = engine.evaluate(make_draft("1000"), make_account("40000", AccountState.INACTIVE))

    assert outcome.kind == OutcomeKind.BLOCKED
    assert outcome.account_name == "Main savings"
    assert "inactive" in outcome.headline


def test_scenario_e_income_on_empty_account(engine: ValidationEngine):
    """Income always needs a positive confirmation"""
    outcome = engine.evaluate(make_draft("25000", MovementKind.INCOME), make_account("0"))

    assert outcome.kind == OutcomeKind.CONFIRM_INCOME
    assert outcome.current_balance == Decimal("0")
    assert outcome.projected_balance == Decimal("25000")


@pytest.mark.parametrize(
    "amount,kind",
    [
        ("1", MovementKind.EXPENSE),
        ("999999", MovementKind.EXPENSE),
        ("1", MovementKind.INCOME),
        ("500000", MovementKind.INCOME),
    ],
)
def test_inactive_blocks_regardless_of_amount_and_kind(engine: ValidationEngine, amount: str, kind: MovementKind):
    outcome = engine.evaluate(make_draft(amount, kind), make_account("40000", AccountState.INACTIVE))
    assert outcome.kind == OutcomeKind.BLOCKED
    assert outcome.is_rejection is True


@pytest.mark.parametrize(
    "balance,amount",
    [("0", "0.01"), ("40000", "40000.01"), ("100", "250"), ("200000", "1000000")],
)
def test_denied_shortfall_is_positive_difference(engine: ValidationEngine, balance: str, amount: str):
    outcome = engine.evaluate(make_draft(amount), make_account(balance))

    assert outcome.kind == OutcomeKind.DENIED
    assert outcome.shortfall == Decimal(amount) - Decimal(balance)
    assert outcome.shortfall > 0


def test_warn_threshold_boundaries(engine: ValidationEngine):
    """Projected 49,999.99 warns, projected exactly 50,000 is a plain confirm"""
    just_below = engine.evaluate(make_draft("50000.01"), make_account("100000"))
    at_threshold = engine.evaluate(make_draft("50000"), make_account("100000"))

    assert just_below.kind == OutcomeKind.WARN_CONFIRM
    assert just_below.projected_balance == Decimal("49999.99")
    assert at_threshold.kind == OutcomeKind.CONFIRM_EXPENSE
    assert at_threshold.projected_balance == Decimal("50000")


def test_spending_whole_balance_warns(engine: ValidationEngine):
    """Projection of exactly zero is treated as the lowest low balance"""
    outcome = engine.evaluate(make_draft("40000"), make_account("40000"))

    assert outcome.kind == OutcomeKind.WARN_CONFIRM
    assert outcome.projected_balance == Decimal("0")
    assert "empty" in outcome.headline


def test_inactive_check_precedes_funds_check(engine: ValidationEngine):
    """An inactive account with too little money is blocked, not denied"""
    outcome = engine.evaluate(make_draft("90000"), make_account("40000", AccountState.INACTIVE))
    assert outcome.kind == OutcomeKind.BLOCKED


def test_custom_threshold():
    """Threshold is fixed at construction"""
    engine = ValidationEngine(low_balance_threshold=Decimal("1000"))

    assert engine.evaluate(make_draft("39500"), make_account("40000")).kind == OutcomeKind.WARN_CONFIRM
    assert engine.evaluate(make_draft("39000"), make_account("40000")).kind == OutcomeKind.CONFIRM_EXPENSE


def test_income_has_no_upper_constraint(engine: ValidationEngine):
    outcome = engine.evaluate(make_draft("10000000", MovementKind.INCOME), make_account("200000"))
    assert outcome.kind == OutcomeKind.CONFIRM_INCOME
    assert outcome.projected_balance == Decimal("10200000")


def test_evaluation_is_idempotent(engine: ValidationEngine):
    """Same draft and snapshot always give an equal outcome"""
    draft = make_draft("10000")
    account = make_account("40000")

    assert engine.evaluate(draft, account) == engine.evaluate(draft, account)


def test_evaluation_does_not_touch_account(engine: ValidationEngine):
    account = make_account("40000")
    engine.evaluate(make_draft("10000"), account)
    assert account.balance == Decimal("40000")


def test_cent_precision_has_no_drift(engine: ValidationEngine):
    """0.10 + 0.20 style amounts stay exact"""
    outcome = engine.evaluate(make_draft("0.30", MovementKind.INCOME), make_account("0.10"))
    assert outcome.projected_balance == Decimal("0.40")
