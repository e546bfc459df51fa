"""Builders and fakes shared by the test suites"""

from datetime import date, datetime, timezone
from decimal import Decimal
from typing import List
from wallet_gateway.domain.confirmation import TransactionSink
from wallet_gateway.domain.exceptions import PersistenceError
from wallet_gateway.domain.models import (
    Account,
    AccountState,
    MovementKind,
    PersistenceReceipt,
    TransactionDraft,
    TransactionSubmission,
)


def make_account(
    balance: str,
    state: AccountState = AccountState.ACTIVE,
    account_id: str = "acc_1",
    name: str = "Main savings",
) -> Account:
    return Account(
        account_id=account_id,
        name=name,
        kind="Savings account",
        balance=Decimal(balance),
        state=state,
    )


def make_draft(
    amount: str,
    kind: MovementKind = MovementKind.EXPENSE,
    account_id: str = "acc_1",
) -> TransactionDraft:
    return TransactionDraft(
        amount=Decimal(amount),
        kind=kind,
        account_id=account_id,
        category_id="cat_groceries",
        description="Weekly shopping",
        date=date(2024, 3, 15),
    )


class RecordingSink(TransactionSink):
    """In-memory persistence collaborator that remembers every call"""

    def __init__(self, fail_with: str | None = None):
        self.calls: List[TransactionSubmission] = []
        self.fail_with = fail_with

    async def persist_transaction(self, submission: TransactionSubmission) -> PersistenceReceipt:
        self.calls.append(submission)
        if self.fail_with:
            raise PersistenceError(self.fail_with)
        return PersistenceReceipt(
            transaction_id=f"txn_{len(self.calls)}",
            submission_id=submission.submission_id,
            persisted_at=datetime(2024, 3, 15, tzinfo=timezone.utc),
        )
