"""SQLAlchemy ORM models for transaction reviews"""

import uuid
from sqlalchemy import Column, Date, DateTime, Integer, Numeric, Text, Uuid
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import func

Base = declarative_base()

MONEY = Numeric(14, 2, asdecimal=True)
# Registry balances and projections are not bounded by the request schema
BALANCE = Numeric(asdecimal=True, decimal_return_scale=2)


class TransactionReview(Base):
    """A draft under review and the confirmation state it has reached"""

    __tablename__ = "transaction_review"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Text, nullable=False, index=True)

    # Draft
    account_id = Column(Text, nullable=False)
    category_id = Column(Text, nullable=False)
    kind = Column(Text, nullable=False)
    amount = Column(MONEY, nullable=False)
    description = Column(Text, nullable=False)
    movement_date = Column(Date, nullable=False)

    # Controller state and latest outcome
    state = Column(Text, nullable=False, default="idle")
    version = Column(Integer, nullable=False, default=1)
    outcome_kind = Column(Text, nullable=True)
    headline = Column(Text, nullable=True)
    account_name = Column(Text, nullable=True)
    current_balance = Column(BALANCE, nullable=True)
    projected_balance = Column(BALANCE, nullable=True)
    shortfall = Column(BALANCE, nullable=True)

    # Resolution
    failure_reason = Column(Text, nullable=True)
    ledger_transaction_id = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())
