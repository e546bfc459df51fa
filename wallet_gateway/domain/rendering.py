"""Stateless mapping from outcomes and tiers to display text"""

from decimal import Decimal
from typing import List, Optional
from wallet_gateway.domain.models import DecisionOutcome, EligibleAccount, OutcomeKind, SeverityTier
from wallet_gateway.utils.money import format_currency

HEALTH_LABELS = {
    SeverityTier.HEALTHY: "Healthy balance",
    SeverityTier.MODERATE: "Moderate balance",
    SeverityTier.LOW: "Low balance - top up soon",
}


def headline_for(kind: OutcomeKind, account_name: str, projected_balance: Optional[Decimal] = None) -> str:
    if kind == OutcomeKind.BLOCKED:
        return f"Account {account_name} is inactive and cannot receive transactions"
    elif kind == OutcomeKind.DENIED:
        return f"Insufficient funds in {account_name}"
    elif kind == OutcomeKind.WARN_CONFIRM:
        if projected_balance is not None and projected_balance == 0:
            return f"This expense will empty {account_name}"
        return f"This expense will leave {account_name} with a low balance"
    elif kind == OutcomeKind.CONFIRM_EXPENSE:
        return f"Confirm expense from {account_name}"
    return f"Confirm income to {account_name}"


def render_details(outcome: DecisionOutcome) -> List[str]:
    """Detail lines shown under the headline"""
    if outcome.kind == OutcomeKind.BLOCKED:
        return ["Activate the account or choose another one."]

    if outcome.kind == OutcomeKind.DENIED:
        return [
            f"Attempted amount: {format_currency(outcome.amount)}",
            f"Current balance: {format_currency(outcome.current_balance)}",
            f"Shortfall: {format_currency(outcome.shortfall)}",
        ]

    lines = [
        f"Current balance: {format_currency(outcome.current_balance)}",
        f"Balance after this transaction: {format_currency(outcome.projected_balance)}",
    ]
    if outcome.kind == OutcomeKind.WARN_CONFIRM:
        lines.append("Do you want to continue anyway?")
    return lines


def health_label(eligible: EligibleAccount) -> str:
    if eligible.account.balance == 0:
        return "No funds available"
    return HEALTH_LABELS[eligible.tier]
