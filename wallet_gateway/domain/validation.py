"""Validation engine - core business logic for transaction drafts"""

from decimal import Decimal
from wallet_gateway.domain.models import (
    Account,
    DecisionOutcome,
    MovementKind,
    OutcomeKind,
    TransactionDraft,
)
from wallet_gateway.domain.projection import project_balance
from wallet_gateway.domain.rendering import headline_for


class ValidationEngine:
    """Decide whether a draft may proceed and what confirmation it needs"""

    def __init__(self, low_balance_threshold: Decimal = Decimal("50000")):
        self.low_balance_threshold = low_balance_threshold

    def evaluate(self, draft: TransactionDraft, account: Account) -> DecisionOutcome:
        """
        Evaluate a draft against an account snapshot.

        Rules, first match wins:
        1. blocked:         account inactive (any movement kind)
        2. denied:          expense amount > balance, carries shortfall
        3. warn_confirm:    expense leaving 0 <= projected < low_balance_threshold
        4. confirm_expense: expense leaving projected >= low_balance_threshold
        5. confirm_income:  any income

        A projection of exactly 0 falls under rule 3: spending the whole
        balance is the lowest possible remaining balance, so it gets the
        strongest confirmation.

        Pure: no I/O, never mutates the account.
        """
        if not account.is_active:
            return self._outcome(OutcomeKind.BLOCKED, draft, account)

        if draft.kind == MovementKind.INCOME:
            projected = project_balance(account.balance, draft.amount, draft.kind)
            return self._outcome(
                OutcomeKind.CONFIRM_INCOME,
                draft,
                account,
                current_balance=account.balance,
                projected_balance=projected,
            )

        if draft.amount > account.balance:
            return self._outcome(
                OutcomeKind.DENIED,
                draft,
                account,
                current_balance=account.balance,
                shortfall=draft.amount - account.balance,
            )

        projected = project_balance(account.balance, draft.amount, draft.kind)
        if projected < self.low_balance_threshold:
            kind = OutcomeKind.WARN_CONFIRM
        else:
            kind = OutcomeKind.CONFIRM_EXPENSE

        return self._outcome(
            kind,
            draft,
            account,
            current_balance=account.balance,
            projected_balance=projected,
        )

    @staticmethod
    def _outcome(
        kind: OutcomeKind,
        draft: TransactionDraft,
        account: Account,
        current_balance: Decimal | None = None,
        projected_balance: Decimal | None = None,
        shortfall: Decimal | None = None,
    ) -> DecisionOutcome:
        return DecisionOutcome(
            kind=kind,
            headline=headline_for(kind, account.name, projected_balance),
            account_id=account.account_id,
            account_name=account.name,
            amount=draft.amount,
            current_balance=current_balance,
            projected_balance=projected_balance,
            shortfall=shortfall,
        )
