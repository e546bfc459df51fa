"""Pydantic schemas for API request/response validation"""

from pydantic import BaseModel, Field
import datetime
from decimal import Decimal
from typing import List, Optional
from wallet_gateway.domain.models import MovementKind, OutcomeKind, SeverityTier

# Largest amount the review table stores (NUMERIC(14, 2))
MAX_AMOUNT = Decimal("999999999999.99")


class ReviewRequest(BaseModel):
    """Request body for POST /v1/reviews"""

    user_id: str = Field(..., min_length=1, description="Authenticated user identifier")
    account_id: str = Field(..., min_length=1, description="Target account")
    category_id: str = Field(..., min_length=1, description="Category of the movement")
    kind: MovementKind
    amount: Decimal = Field(..., gt=0, le=MAX_AMOUNT, max_digits=14, decimal_places=2, description="Amount in currency units")
    description: str = Field(..., min_length=1, max_length=255)
    date: datetime.date


class ReviewEdit(BaseModel):
    """Request body for PATCH /v1/reviews/{review_id}; omitted fields are kept"""

    account_id: Optional[str] = Field(None, min_length=1)
    category_id: Optional[str] = Field(None, min_length=1)
    kind: Optional[MovementKind] = None
    amount: Optional[Decimal] = Field(None, gt=0, le=MAX_AMOUNT, max_digits=14, decimal_places=2)
    description: Optional[str] = Field(None, min_length=1, max_length=255)
    date: Optional[datetime.date] = None


class OutcomeSchema(BaseModel):
    """Evaluated outcome with rendered display text"""

    kind: OutcomeKind
    headline: str
    details: List[str]
    requires_acknowledgment: bool
    attempted_amount: Decimal
    current_balance: Optional[Decimal] = None
    projected_balance: Optional[Decimal] = None
    shortfall: Optional[Decimal] = None


class ReviewResponse(BaseModel):
    """Response for the review endpoints"""

    review_id: str
    state: str
    outcome: Optional[OutcomeSchema] = None
    failure_reason: Optional[str] = None
    ledger_transaction_id: Optional[str] = None


class CancelResponse(ReviewResponse):
    """Response for POST /v1/reviews/{review_id}/cancel"""

    cancellation: str


class AccountSchema(BaseModel):
    """Account with its display tier"""

    account_id: str
    name: str
    kind: str
    balance: Decimal
    state: str
    tier: SeverityTier
    health_label: str


class RegistryEntrySchema(BaseModel):
    id: str
    label: str


class FormOptionsResponse(BaseModel):
    """Response for GET /v1/form-options"""

    accounts: List[AccountSchema]
    categories: List[RegistryEntrySchema]
    movement_types: List[RegistryEntrySchema]


class AccountSummaryResponse(BaseModel):
    """Response for GET /v1/accounts/summary"""

    user_id: str
    total_balance: Decimal
    active_count: int
    low_balance_count: int
    accounts: List[AccountSchema]


class HistoryItem(BaseModel):
    """Single review in history"""

    review_id: str
    state: str
    kind: MovementKind
    amount: Decimal
    account_id: str
    outcome_kind: Optional[OutcomeKind] = None
    created_at: str


class HistoryResponse(BaseModel):
    """Response for GET /v1/reviews/history"""

    user_id: str
    reviews: List[HistoryItem]
