"""
E2E tests for the review flow against the mock ledger server.

These tests require the mock ledger server to be running on port 8001:
    uvicorn mock.ledger_server.main:app --port 8001

Accounts in the user_demo snapshot:
- acc_savings: healthy balance, expenses confirm plainly
- acc_checking: low balance, expenses warn or are denied
- acc_old: inactive, every draft is blocked
- acc_empty: zero balance, income only
"""

import pytest
from fastapi.testclient import TestClient


def draft_body(**overrides) -> dict:
    body = {
        "user_id": "user_demo",
        "account_id": "acc_savings",
        "category_id": "cat_groceries",
        "kind": "expense",
        "amount": "100.00",
        "description": "Corner shop",
        "date": "2024-03-15",
    }
    body.update(overrides)
    return body


@pytest.mark.integration
def test_form_options_from_registry(client: TestClient):
    response = client.get("/v1/form-options?user_id=user_demo")

    assert response.status_code == 200
    data = response.json()
    ids = [a["account_id"] for a in data["accounts"]]
    assert "acc_old" not in ids
    assert "acc_savings" in ids
    assert "cat_groceries" in [c["id"] for c in data["categories"]]


@pytest.mark.integration
def test_expense_is_persisted_in_ledger(client: TestClient):
    """
    acc_savings: small expense
    Expected: confirm_expense, then a ledger transaction id on confirm
    """
    review = client.post("/v1/reviews", json=draft_body()).json()
    assert review["outcome"]["kind"] == "confirm_expense"

    response = client.post(f"/v1/reviews/{review['review_id']}/confirm")

    assert response.status_code == 200
    data = response.json()
    assert data["state"] == "submitted"
    assert data["ledger_transaction_id"].startswith("txn_")


@pytest.mark.integration
def test_inactive_account_is_blocked(client: TestClient):
    review = client.post("/v1/reviews", json=draft_body(account_id="acc_old")).json()

    assert review["state"] == "rejected"
    assert review["outcome"]["kind"] == "blocked"


@pytest.mark.integration
def test_overdraw_is_denied(client: TestClient):
    review = client.post("/v1/reviews", json=draft_body(account_id="acc_checking", amount="999999.00")).json()

    assert review["state"] == "rejected"
    assert review["outcome"]["kind"] == "denied"


@pytest.mark.integration
def test_income_to_empty_wallet(client: TestClient):
    review = client.post(
        "/v1/reviews",
        json=draft_body(account_id="acc_empty", kind="income", category_id="cat_salary", amount="25000.00"),
    ).json()
    assert review["outcome"]["kind"] == "confirm_income"

    response = client.post(f"/v1/reviews/{review['review_id']}/confirm")
    assert response.status_code == 200
    assert response.json()["state"] == "submitted"
