"""GET /v1/form-options and /v1/accounts/summary - account listings for the transaction form"""

import logging
from fastapi import APIRouter, Depends, HTTPException, Query

from wallet_gateway.api.v1.schemas import (
    AccountSchema,
    AccountSummaryResponse,
    FormOptionsResponse,
    RegistryEntrySchema,
)
from wallet_gateway.api.dependencies import get_eligibility_filter, get_registry_client
from wallet_gateway.domain.eligibility import AccountEligibilityFilter
from wallet_gateway.domain.exceptions import RegistryAPIError
from wallet_gateway.domain.models import EligibleAccount
from wallet_gateway.domain.rendering import health_label
from wallet_gateway.infrastructure.clients.registry import RegistryClient
from wallet_gateway.infrastructure.observability.metrics import registry_fetch_failures_counter

router = APIRouter()


def to_account_schema(eligible: EligibleAccount) -> AccountSchema:
    account = eligible.account
    return AccountSchema(
        account_id=account.account_id,
        name=account.name,
        kind=account.kind,
        balance=account.balance,
        state=account.state.value,
        tier=eligible.tier,
        health_label=health_label(eligible),
    )


@router.get("/form-options", response_model=FormOptionsResponse)
async def get_form_options(
    user_id: str = Query(..., min_length=1, description="User identifier"),
    registry_client: RegistryClient = Depends(get_registry_client),
    eligibility: AccountEligibilityFilter = Depends(get_eligibility_filter),
):
    """
    Everything the transaction form needs to build a draft.

    Only active accounts are offered as targets.
    """
    try:
        accounts = await registry_client.get_accounts(user_id)
        categories = await registry_client.get_categories()
        movement_types = await registry_client.get_movement_types()
    except RegistryAPIError as e:
        registry_fetch_failures_counter.inc()
        logging.error(f"Registry API error: {e}")
        raise HTTPException(status_code=503, detail="Account registry unavailable")

    return FormOptionsResponse(
        accounts=[to_account_schema(a) for a in eligibility.filter(accounts)],
        categories=[RegistryEntrySchema(id=c.entry_id, label=c.label) for c in categories],
        movement_types=[RegistryEntrySchema(id=t.entry_id, label=t.label) for t in movement_types],
    )


@router.get("/accounts/summary", response_model=AccountSummaryResponse)
async def get_account_summary(
    user_id: str = Query(..., min_length=1, description="User identifier"),
    registry_client: RegistryClient = Depends(get_registry_client),
    eligibility: AccountEligibilityFilter = Depends(get_eligibility_filter),
):
    """Balance overview across all of the user's accounts, inactive included"""
    try:
        accounts = await registry_client.get_accounts(user_id)
    except RegistryAPIError as e:
        registry_fetch_failures_counter.inc()
        logging.error(f"Registry API error: {e}")
        raise HTTPException(status_code=503, detail="Account registry unavailable")

    summary = eligibility.summarize(accounts)
    return AccountSummaryResponse(
        user_id=user_id,
        total_balance=summary.total_balance,
        active_count=summary.active_count,
        low_balance_count=summary.low_balance_count,
        accounts=[to_account_schema(a) for a in summary.accounts],
    )
