"""Domain models - pure Python dataclasses representing business entities"""

import uuid
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Optional


class AccountState(str, Enum):
    """Lifecycle state of an account"""

    ACTIVE = "active"
    INACTIVE = "inactive"


class MovementKind(str, Enum):
    """Direction of a money movement"""

    INCOME = "income"
    EXPENSE = "expense"


class SeverityTier(str, Enum):
    """Display-only health band of an account balance"""

    HEALTHY = "healthy"
    MODERATE = "moderate"
    LOW = "low"


class OutcomeKind(str, Enum):
    """Variants a draft evaluation can produce"""

    BLOCKED = "blocked"
    DENIED = "denied"
    WARN_CONFIRM = "warn_confirm"
    CONFIRM_EXPENSE = "confirm_expense"
    CONFIRM_INCOME = "confirm_income"


@dataclass(frozen=True)
class Account:
    """Read-only snapshot of an account from the registry"""

    account_id: str
    name: str
    kind: str  # e.g. "Savings account"
    balance: Decimal
    state: AccountState

    @property
    def is_active(self) -> bool:
        return self.state == AccountState.ACTIVE


@dataclass(frozen=True)
class RegistryEntry:
    """Opaque {id, label} pair from the category or movement-type registry"""

    entry_id: str
    label: str


@dataclass(frozen=True)
class TransactionDraft:
    """Unpersisted, user-proposed transaction"""

    amount: Decimal
    kind: MovementKind
    account_id: str
    category_id: str
    description: str
    date: date


@dataclass(frozen=True)
class EligibleAccount:
    """Account that may be targeted by a transaction, with its display tier"""

    account: Account
    tier: SeverityTier


@dataclass(frozen=True)
class AccountSummary:
    """Aggregate figures shown above the account list"""

    total_balance: Decimal
    active_count: int
    low_balance_count: int
    accounts: list[EligibleAccount]


@dataclass(frozen=True)
class DecisionOutcome:
    """Tagged result of validating a draft against an account snapshot"""

    kind: OutcomeKind
    headline: str
    account_id: str
    account_name: str
    amount: Decimal
    current_balance: Optional[Decimal] = None
    projected_balance: Optional[Decimal] = None
    shortfall: Optional[Decimal] = None

    @property
    def is_rejection(self) -> bool:
        """Blocked and denied outcomes never reach persistence"""
        return self.kind in (OutcomeKind.BLOCKED, OutcomeKind.DENIED)

    @property
    def requires_acknowledgment(self) -> bool:
        return not self.is_rejection

    @property
    def is_safety_stop(self) -> bool:
        """Cancelling this outcome aborts the submission rather than deferring it"""
        return self.kind == OutcomeKind.WARN_CONFIRM


@dataclass(frozen=True)
class TransactionSubmission:
    """Full draft plus identity, as sent to the persistence collaborator"""

    draft: TransactionDraft
    user_id: str
    submission_id: str = field(default_factory=lambda: str(uuid.uuid4()))

    def to_payload(self) -> dict:
        return {
            "submission_id": self.submission_id,
            "user_id": self.user_id,
            "account_id": self.draft.account_id,
            "category_id": self.draft.category_id,
            "kind": self.draft.kind.value,
            "amount": str(self.draft.amount),
            "description": self.draft.description,
            "date": self.draft.date.isoformat(),
        }


@dataclass(frozen=True)
class PersistenceReceipt:
    """Acknowledgment returned by the persistence collaborator"""

    transaction_id: str
    submission_id: str
    persisted_at: datetime
