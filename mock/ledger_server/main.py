from decimal import Decimal
from fastapi import FastAPI, Header, HTTPException
from fastapi.responses import JSONResponse
from pathlib import Path
from pydantic import BaseModel
import json
import os
import uuid

app = FastAPI(title="Mock Ledger Server", version="1.0.0")
# Support both local development and Docker
DATA_DIR = Path("/ledger_stub") if os.path.exists("/ledger_stub") else Path(__file__).resolve().parents[1] / "ledger_stub"

# user_id -> account rows, loaded lazily and mutated by posted transactions
ACCOUNTS: dict[str, list[dict]] = {}
# Idempotency-Key -> stored response
PERSISTED: dict[str, dict] = {}


class TransactionIn(BaseModel):
    submission_id: str
    user_id: str
    account_id: str
    category_id: str
    kind: str
    amount: Decimal
    description: str
    date: str


def _accounts(user_id: str) -> list[dict]:
    if user_id not in ACCOUNTS:
        file = DATA_DIR / f"accounts_{user_id}.json"
        if not file.exists():
            raise HTTPException(status_code=404, detail="user not found")
        ACCOUNTS[user_id] = json.loads(file.read_text())
    return ACCOUNTS[user_id]


@app.get("/health")
def health(): return {"status": "ok"}


@app.get("/accounts")
def get_accounts(user_id: str):
    return JSONResponse(content=_accounts(user_id))


@app.get("/categories")
def get_categories():
    return JSONResponse(content=json.loads((DATA_DIR / "categories.json").read_text()))


@app.get("/movement-types")
def get_movement_types():
    return JSONResponse(content=json.loads((DATA_DIR / "movement_types.json").read_text()))


@app.post("/transactions")
def post_transaction(txn: TransactionIn, idempotency_key: str | None = Header(None)):
    key = idempotency_key or txn.submission_id
    if key in PERSISTED:
        return PERSISTED[key]

    account = next((a for a in _accounts(txn.user_id) if a["id"] == txn.account_id), None)
    if account is None:
        raise HTTPException(status_code=404, detail="account not found")
    if account["state"] != "active":
        raise HTTPException(status_code=409, detail="account is inactive")

    balance = Decimal(account["balance"])
    balance = balance + txn.amount if txn.kind == "income" else balance - txn.amount
    if balance < 0:
        raise HTTPException(status_code=409, detail="insufficient funds")
    account["balance"] = str(balance)

    PERSISTED[key] = {"transaction_id": f"txn_{uuid.uuid4().hex[:12]}", "balance": str(balance)}
    return PERSISTED[key]
