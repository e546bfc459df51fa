"""Confirmation state machine between the validation engine and persistence"""

import dataclasses
import logging
from abc import ABC, abstractmethod
from enum import Enum
from typing import List, Optional, Tuple
from wallet_gateway.domain.exceptions import InvalidTransitionError, PersistenceError
from wallet_gateway.domain.models import (
    Account,
    DecisionOutcome,
    PersistenceReceipt,
    TransactionDraft,
    TransactionSubmission,
)
from wallet_gateway.domain.validation import ValidationEngine

logger = logging.getLogger(__name__)


class ControllerState(str, Enum):
    IDLE = "idle"
    EVALUATED = "evaluated"
    AWAITING_CONFIRMATION = "awaiting_confirmation"
    REJECTED = "rejected"
    SUBMITTED = "submitted"
    CANCELLED = "cancelled"


class Cancellation(str, Enum):
    """How a cancelled confirmation should be read by the caller"""

    SAFETY_STOP = "safety_stop"  # low-balance warning declined, submission aborted
    DEFERRED = "deferred"  # plain confirmation declined, "not yet"


class TransactionSink(ABC):
    """Persistence collaborator invoked after an affirmative confirmation"""

    @abstractmethod
    async def persist_transaction(self, submission: TransactionSubmission) -> PersistenceReceipt:
        """
        Persist a confirmed transaction.

        Raises:
            PersistenceError: With the collaborator's reason when it fails
        """
        pass


# States from which a fresh draft may be reviewed
_REVIEWABLE = (ControllerState.IDLE, ControllerState.SUBMITTED, ControllerState.CANCELLED)


class ConfirmationController:
    """
    Mediates between a draft's outcome and the persistence call.

    Idle -> Evaluated -> (AwaitingConfirmation | Rejected) -> (Submitted | Cancelled)

    The persistence sink is called at most once per accepted draft, always with
    the exact draft the outcome was computed for. Editing the draft drops the
    outcome and returns to Idle.
    """

    def __init__(self, engine: ValidationEngine, sink: TransactionSink, user_id: str):
        self.engine = engine
        self.sink = sink
        self.user_id = user_id
        self.state = ControllerState.IDLE
        self.draft: Optional[TransactionDraft] = None
        self.outcome: Optional[DecisionOutcome] = None
        self.failure_reason: Optional[str] = None
        self.receipt: Optional[PersistenceReceipt] = None
        self.transitions: List[Tuple[ControllerState, ControllerState]] = []

    @classmethod
    def resume(
        cls,
        engine: ValidationEngine,
        sink: TransactionSink,
        user_id: str,
        state: ControllerState,
        draft: Optional[TransactionDraft],
        outcome: Optional[DecisionOutcome] = None,
        failure_reason: Optional[str] = None,
    ) -> "ConfirmationController":
        """Rebuild a controller from stored review state"""
        if state in (ControllerState.AWAITING_CONFIRMATION, ControllerState.EVALUATED) and outcome is None:
            raise ValueError(f"State {state.value} needs an outcome")
        controller = cls(engine, sink, user_id)
        controller.state = state
        controller.draft = draft
        controller.outcome = outcome
        controller.failure_reason = failure_reason
        return controller

    def _move(self, target: ControllerState) -> None:
        source = self.state
        self.state = target
        self.transitions.append((source, target))
        logger.info(
            "Confirmation state changed",
            extra={
                "user_id": self.user_id,
                "from_state": source.value,
                "to_state": target.value,
                "outcome_kind": self.outcome.kind.value if self.outcome else None,
            },
        )

    def _require(self, action: str, *allowed: ControllerState) -> None:
        if self.state not in allowed:
            raise InvalidTransitionError(action, self.state.value)

    def review(self, draft: TransactionDraft, account: Account) -> DecisionOutcome:
        """Evaluate a draft and park it awaiting confirmation or rejected"""
        self._require("review", *_REVIEWABLE)
        if self.state != ControllerState.IDLE:
            self._move(ControllerState.IDLE)

        self.draft = draft
        self.outcome = None
        self.failure_reason = None
        self.receipt = None

        outcome = self.engine.evaluate(draft, account)
        self.outcome = outcome
        self._move(ControllerState.EVALUATED)

        if outcome.is_rejection:
            self._move(ControllerState.REJECTED)
        else:
            self._move(ControllerState.AWAITING_CONFIRMATION)
        return outcome

    def acknowledge(self) -> None:
        """Dismiss a rejection; the draft stays available for editing"""
        self._require("acknowledge", ControllerState.REJECTED)
        self.outcome = None
        self.failure_reason = None
        self._move(ControllerState.IDLE)

    def edit(self, **changes) -> TransactionDraft:
        """
        Change draft fields, invalidating any outcome.

        The controller always lands in Idle; the edited draft must be reviewed
        again before it can be confirmed.
        """
        self._require(
            "edit",
            ControllerState.IDLE,
            ControllerState.AWAITING_CONFIRMATION,
            ControllerState.REJECTED,
        )
        if self.draft is None:
            raise InvalidTransitionError("edit", "no draft is pending")

        self.draft = dataclasses.replace(self.draft, **changes)
        self.outcome = None
        self.failure_reason = None
        if self.state != ControllerState.IDLE:
            self._move(ControllerState.IDLE)
        return self.draft

    def cancel(self) -> Cancellation:
        """Decline the pending confirmation, discard the draft and return to Idle"""
        self._require("cancel", ControllerState.AWAITING_CONFIRMATION)
        cancellation = Cancellation.SAFETY_STOP if self.outcome.is_safety_stop else Cancellation.DEFERRED
        self.draft = None
        self._move(ControllerState.CANCELLED)
        self.outcome = None
        self._move(ControllerState.IDLE)
        return cancellation

    async def confirm(self) -> PersistenceReceipt:
        """
        Accept the pending outcome and persist the reviewed draft.

        The state moves to Submitted before the sink is awaited so that a second
        confirm for the same draft fails instead of persisting twice.

        Raises:
            InvalidTransitionError: Nothing is awaiting confirmation
            PersistenceError: Sink failed; the controller is left Rejected
        """
        self._require("confirm", ControllerState.AWAITING_CONFIRMATION)
        submission = TransactionSubmission(draft=self.draft, user_id=self.user_id)
        self._move(ControllerState.SUBMITTED)

        try:
            receipt = await self.sink.persist_transaction(submission)
        except PersistenceError as e:
            self.failure_reason = e.reason
            self._move(ControllerState.REJECTED)
            raise

        self.receipt = receipt
        self.draft = None
        return receipt
