"""/v1/reviews - evaluate drafts and drive their confirmation"""

import time
import uuid
import logging
from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from wallet_gateway.api.v1.schemas import (
    CancelResponse,
    OutcomeSchema,
    ReviewEdit,
    ReviewRequest,
    ReviewResponse,
)
from wallet_gateway.api.dependencies import (
    get_ledger_client,
    get_registry_client,
    get_request_id,
    get_validation_engine,
)
from wallet_gateway.infrastructure.database.session import get_db
from wallet_gateway.infrastructure.database.models import TransactionReview
from wallet_gateway.infrastructure.database.repositories import (
    ReviewRepository,
    draft_from_record,
    outcome_from_record,
)
from wallet_gateway.infrastructure.clients.registry import RegistryClient
from wallet_gateway.infrastructure.clients.ledger import LedgerClient
from wallet_gateway.domain.confirmation import ConfirmationController, ControllerState
from wallet_gateway.domain.exceptions import (
    AccountNotFoundError,
    CategoryNotFoundError,
    InvalidTransitionError,
    PersistenceError,
    RegistryAPIError,
)
from wallet_gateway.domain.models import Account, TransactionDraft
from wallet_gateway.domain.rendering import render_details
from wallet_gateway.domain.validation import ValidationEngine
from wallet_gateway.infrastructure.observability.metrics import (
    record_outcome,
    record_resolution,
    registry_fetch_failures_counter,
)
from wallet_gateway.infrastructure.observability.logging import log_outcome

router = APIRouter()


async def resolve_target(
    registry_client: RegistryClient,
    user_id: str,
    draft: TransactionDraft,
) -> Account:
    """
    Look up the draft's account in a fresh registry snapshot.

    Raises:
        AccountNotFoundError: Account id is not in the user's snapshot
        CategoryNotFoundError: Category id is not in the category registry
    """
    accounts = await registry_client.get_accounts(user_id)
    categories = await registry_client.get_categories()

    if draft.category_id not in {c.entry_id for c in categories}:
        raise CategoryNotFoundError(f"Unknown category {draft.category_id}")

    for account in accounts:
        if account.account_id == draft.account_id:
            return account
    raise AccountNotFoundError(f"Unknown account {draft.account_id}")


def build_response(record: TransactionReview) -> ReviewResponse:
    outcome = outcome_from_record(record)
    outcome_schema = None
    if outcome is not None:
        outcome_schema = OutcomeSchema(
            kind=outcome.kind,
            headline=outcome.headline,
            details=render_details(outcome),
            requires_acknowledgment=outcome.requires_acknowledgment,
            attempted_amount=outcome.amount,
            current_balance=outcome.current_balance,
            projected_balance=outcome.projected_balance,
            shortfall=outcome.shortfall,
        )
    return ReviewResponse(
        review_id=str(record.id),
        state=record.state,
        outcome=outcome_schema,
        failure_reason=record.failure_reason,
        ledger_transaction_id=record.ledger_transaction_id,
    )


def load_review(repo: ReviewRepository, review_id: str) -> TransactionReview:
    try:
        review_uuid = uuid.UUID(review_id)
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid review ID format")

    record = repo.get_review_by_id(review_uuid)
    if not record:
        raise HTTPException(status_code=404, detail="Review not found")
    return record


def resume_controller(
    record: TransactionReview,
    engine: ValidationEngine,
    ledger_client: LedgerClient,
) -> ConfirmationController:
    return ConfirmationController.resume(
        engine,
        ledger_client,
        user_id=record.user_id,
        state=ControllerState(record.state),
        draft=draft_from_record(record),
        outcome=outcome_from_record(record),
        failure_reason=record.failure_reason,
    )


def map_lookup_error(e: Exception, request_id: str) -> HTTPException:
    """Translate registry and lookup failures into HTTP errors"""
    if isinstance(e, RegistryAPIError):
        registry_fetch_failures_counter.inc()
        logging.error(f"Registry API error: {e}", extra={"request_id": request_id})
        return HTTPException(status_code=503, detail="Account registry unavailable")
    logging.warning(f"Draft rejected before evaluation: {e}", extra={"request_id": request_id})
    return HTTPException(status_code=422, detail=str(e))


def save_controller(
    db: Session,
    repo: ReviewRepository,
    record: TransactionReview,
    controller: ConfirmationController,
    request_id: str,
) -> None:
    """Write controller state onto the row and commit, rolling back on failure"""
    try:
        repo.apply_controller(record, controller)
        db.commit()
    except Exception as e:
        db.rollback()
        logging.error(f"Failed to save review: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")


@router.post("/reviews", response_model=ReviewResponse)
async def create_review(
    request_body: ReviewRequest,
    request: Request,
    db: Session = Depends(get_db),
    registry_client: RegistryClient = Depends(get_registry_client),
    ledger_client: LedgerClient = Depends(get_ledger_client),
    engine: ValidationEngine = Depends(get_validation_engine),
):
    """
    Evaluate a transaction draft.

    Flow:
    1. Fetch the account snapshot and category registry
    2. Evaluate the draft against its target account
    3. Persist the review as awaiting_confirmation or rejected
    4. Return the outcome with rendered display text
    """
    start_time = time.time()
    request_id = get_request_id(request)

    draft = TransactionDraft(
        amount=request_body.amount,
        kind=request_body.kind,
        account_id=request_body.account_id,
        category_id=request_body.category_id,
        description=request_body.description,
        date=request_body.date,
    )

    try:
        account = await resolve_target(registry_client, request_body.user_id, draft)
    except (RegistryAPIError, AccountNotFoundError, CategoryNotFoundError) as e:
        raise map_lookup_error(e, request_id)

    try:
        controller = ConfirmationController(engine, ledger_client, request_body.user_id)
        outcome = controller.review(draft, account)

        repo = ReviewRepository(db)
        record = repo.create_review(controller)
        db.commit()
    except Exception as e:
        db.rollback()
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    duration_ms = (time.time() - start_time) * 1000
    record_outcome(outcome.kind)
    log_outcome(request_id, request_body.user_id, str(record.id), outcome.kind.value, duration_ms)

    return build_response(record)


@router.get("/reviews/{review_id}", response_model=ReviewResponse)
def get_review(review_id: str, db: Session = Depends(get_db)):
    """Current state and outcome of a review"""
    return build_response(load_review(ReviewRepository(db), review_id))


@router.patch("/reviews/{review_id}", response_model=ReviewResponse)
async def edit_review(
    review_id: str,
    request_body: ReviewEdit,
    request: Request,
    db: Session = Depends(get_db),
    registry_client: RegistryClient = Depends(get_registry_client),
    ledger_client: LedgerClient = Depends(get_ledger_client),
    engine: ValidationEngine = Depends(get_validation_engine),
):
    """
    Edit a draft and evaluate it again.

    The previous outcome is discarded before the new snapshot is fetched, so a
    confirm racing with this edit can never act on the edited draft.
    Both writes are version checked; a confirm that loaded the review before
    the edit loses its claim.
    """
    start_time = time.time()
    request_id = get_request_id(request)
    repo = ReviewRepository(db)
    record = load_review(repo, review_id)
    controller = resume_controller(record, engine, ledger_client)
    loaded_state = controller.state
    loaded_version = record.version

    try:
        draft = controller.edit(**request_body.model_dump(exclude_unset=True, exclude_none=True))
    except InvalidTransitionError as e:
        raise HTTPException(status_code=409, detail=str(e))

    if not repo.compare_and_set_state(record.id, loaded_state, ControllerState.IDLE, loaded_version):
        db.rollback()
        raise HTTPException(status_code=409, detail="Review changed concurrently")
    save_controller(db, repo, record, controller, request_id)

    try:
        account = await resolve_target(registry_client, record.user_id, draft)
    except (RegistryAPIError, AccountNotFoundError, CategoryNotFoundError) as e:
        raise map_lookup_error(e, request_id)

    outcome = controller.review(draft, account)
    if not repo.compare_and_set_state(record.id, ControllerState.IDLE, controller.state, loaded_version + 1):
        db.rollback()
        raise HTTPException(status_code=409, detail="Review changed concurrently")
    save_controller(db, repo, record, controller, request_id)

    duration_ms = (time.time() - start_time) * 1000
    record_outcome(outcome.kind)
    log_outcome(request_id, record.user_id, str(record.id), outcome.kind.value, duration_ms)

    return build_response(record)


@router.post("/reviews/{review_id}/confirm", response_model=ReviewResponse)
async def confirm_review(
    review_id: str,
    request: Request,
    db: Session = Depends(get_db),
    ledger_client: LedgerClient = Depends(get_ledger_client),
    engine: ValidationEngine = Depends(get_validation_engine),
):
    """
    Confirm a pending outcome and persist the transaction in the ledger.

    The review is claimed with a conditional update before the ledger is
    called; a second confirm for the same review gets 409.
    """
    request_id = get_request_id(request)
    repo = ReviewRepository(db)
    record = load_review(repo, review_id)
    # The draft sent to the ledger is the one stored at this version
    loaded_version = record.version
    controller = resume_controller(record, engine, ledger_client)

    if controller.state != ControllerState.AWAITING_CONFIRMATION:
        raise HTTPException(status_code=409, detail=f"Cannot confirm while {controller.state.value}")
    if not repo.claim_for_submission(record.id, loaded_version):
        db.rollback()
        raise HTTPException(status_code=409, detail="Review already confirmed or changed")
    db.commit()

    try:
        await controller.confirm()
    except PersistenceError as e:
        repo.apply_controller(record, controller)
        db.commit()
        record_resolution("persistence_failed")
        logging.error(f"Ledger persistence failed: {e.reason}", extra={"request_id": request_id})
        raise HTTPException(status_code=502, detail=e.reason)

    repo.apply_controller(record, controller)
    db.commit()
    record_resolution("submitted")
    logging.info(
        "Transaction submitted",
        extra={
            "request_id": request_id,
            "review_id": str(record.id),
            "ledger_transaction_id": record.ledger_transaction_id,
        },
    )
    return build_response(record)


@router.post("/reviews/{review_id}/cancel", response_model=CancelResponse)
def cancel_review(
    review_id: str,
    db: Session = Depends(get_db),
    ledger_client: LedgerClient = Depends(get_ledger_client),
    engine: ValidationEngine = Depends(get_validation_engine),
):
    """Decline the pending confirmation; the draft is discarded"""
    repo = ReviewRepository(db)
    record = load_review(repo, review_id)
    controller = resume_controller(record, engine, ledger_client)

    try:
        cancellation = controller.cancel()
    except InvalidTransitionError as e:
        raise HTTPException(status_code=409, detail=str(e))

    # The row keeps the cancelled resolution; the controller itself is back in idle
    if not repo.compare_and_set_state(
        record.id, ControllerState.AWAITING_CONFIRMATION, ControllerState.CANCELLED, record.version
    ):
        db.rollback()
        raise HTTPException(status_code=409, detail="Review changed concurrently")
    db.commit()
    record_resolution(f"cancelled_{cancellation.value}")

    return CancelResponse(**build_response(record).model_dump(), cancellation=cancellation.value)


@router.post("/reviews/{review_id}/acknowledge", response_model=ReviewResponse)
def acknowledge_review(
    review_id: str,
    db: Session = Depends(get_db),
    ledger_client: LedgerClient = Depends(get_ledger_client),
    engine: ValidationEngine = Depends(get_validation_engine),
):
    """Dismiss a blocked, denied or failed review so the draft can be edited"""
    repo = ReviewRepository(db)
    record = load_review(repo, review_id)
    controller = resume_controller(record, engine, ledger_client)

    try:
        controller.acknowledge()
    except InvalidTransitionError as e:
        raise HTTPException(status_code=409, detail=str(e))

    if not repo.compare_and_set_state(record.id, ControllerState.REJECTED, ControllerState.IDLE, record.version):
        db.rollback()
        raise HTTPException(status_code=409, detail="Review changed concurrently")
    repo.apply_controller(record, controller)
    db.commit()

    return build_response(record)
