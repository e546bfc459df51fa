"""GET /v1/reviews/history - Fetch user's review history"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from wallet_gateway.api.v1.schemas import HistoryResponse, HistoryItem
from wallet_gateway.infrastructure.database.session import get_db
from wallet_gateway.infrastructure.database.repositories import ReviewRepository

router = APIRouter()


@router.get("/reviews/history", response_model=HistoryResponse)
def get_review_history(
    user_id: str = Query(..., description="User identifier"),
    limit: int = Query(20, ge=1, le=100),
    db: Session = Depends(get_db),
):
    """
    Retrieve recent transaction reviews for a user.

    Returns:
        Reviews newest first, whatever state they ended in
    """
    review_repo = ReviewRepository(db)
    reviews = review_repo.get_reviews_by_user(user_id, limit=limit)

    history_items = [
        HistoryItem(
            review_id=str(r.id),
            state=r.state,
            kind=r.kind,
            amount=r.amount,
            account_id=r.account_id,
            outcome_kind=r.outcome_kind,
            created_at=r.created_at.isoformat(),
        )
        for r in reviews
    ]

    return HistoryResponse(user_id=user_id, reviews=history_items)
