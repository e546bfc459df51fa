"""Data access layer for transaction reviews"""

import uuid
from typing import List, Optional
from sqlalchemy.orm import Session
from wallet_gateway.infrastructure.database.models import TransactionReview
from wallet_gateway.domain.confirmation import ConfirmationController, ControllerState
from wallet_gateway.domain.models import DecisionOutcome, MovementKind, OutcomeKind, TransactionDraft


def draft_from_record(record: TransactionReview) -> TransactionDraft:
    return TransactionDraft(
        amount=record.amount,
        kind=MovementKind(record.kind),
        account_id=record.account_id,
        category_id=record.category_id,
        description=record.description,
        date=record.movement_date,
    )


def outcome_from_record(record: TransactionReview) -> Optional[DecisionOutcome]:
    if record.outcome_kind is None:
        return None
    return DecisionOutcome(
        kind=OutcomeKind(record.outcome_kind),
        headline=record.headline,
        account_id=record.account_id,
        account_name=record.account_name,
        amount=record.amount,
        current_balance=record.current_balance,
        projected_balance=record.projected_balance,
        shortfall=record.shortfall,
    )


class ReviewRepository:
    """Repository for transaction reviews"""

    def __init__(self, db: Session):
        self.db = db

    def create_review(self, controller: ConfirmationController) -> TransactionReview:
        """Persist a freshly reviewed draft"""
        record = TransactionReview(user_id=controller.user_id)
        self.apply_controller(record, controller)
        self.db.add(record)
        self.db.flush()  # Get ID without committing
        return record

    def apply_controller(self, record: TransactionReview, controller: ConfirmationController) -> None:
        """Copy controller state, draft and outcome onto the stored row"""
        record.state = controller.state.value
        record.failure_reason = controller.failure_reason

        draft = controller.draft
        if draft is not None:
            record.account_id = draft.account_id
            record.category_id = draft.category_id
            record.kind = draft.kind.value
            record.amount = draft.amount
            record.description = draft.description
            record.movement_date = draft.date

        outcome = controller.outcome
        record.outcome_kind = outcome.kind.value if outcome else None
        record.headline = outcome.headline if outcome else None
        record.account_name = outcome.account_name if outcome else None
        record.current_balance = outcome.current_balance if outcome else None
        record.projected_balance = outcome.projected_balance if outcome else None
        record.shortfall = outcome.shortfall if outcome else None

        if controller.receipt is not None:
            record.ledger_transaction_id = controller.receipt.transaction_id

    def get_review_by_id(self, review_id: uuid.UUID) -> Optional[TransactionReview]:
        return (
            self.db.query(TransactionReview)
            .filter(TransactionReview.id == review_id)
            .first()
        )

    def get_reviews_by_user(self, user_id: str, limit: int = 20) -> List[TransactionReview]:
        """Fetch recent reviews for a user"""
        return (
            self.db.query(TransactionReview)
            .filter(TransactionReview.user_id == user_id)
            .order_by(TransactionReview.created_at.desc())
            .limit(limit)
            .all()
        )

    def compare_and_set_state(
        self,
        review_id: uuid.UUID,
        expected: ControllerState,
        target: ControllerState,
        version: int,
    ) -> bool:
        """
        Move a review to ``target`` only if it is still in ``expected`` at ``version``.

        Every successful move bumps the version, so a caller holding a row read
        before another request changed it loses the update even when the state
        has come back to ``expected``.
        """
        updated = (
            self.db.query(TransactionReview)
            .filter(
                TransactionReview.id == review_id,
                TransactionReview.state == expected.value,
                TransactionReview.version == version,
            )
            .update(
                {TransactionReview.state: target.value, TransactionReview.version: version + 1},
                synchronize_session="evaluate",
            )
        )
        return updated == 1

    def claim_for_submission(self, review_id: uuid.UUID, version: int) -> bool:
        """
        Atomically move a review from awaiting_confirmation to submitted.

        Only one caller can win this update, and only for the draft it loaded.
        An edit in between changes the version and makes the claim fail.
        """
        return self.compare_and_set_state(
            review_id,
            ControllerState.AWAITING_CONFIRMATION,
            ControllerState.SUBMITTED,
            version,
        )
