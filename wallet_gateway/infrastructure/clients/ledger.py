"""Ledger persistence client with exponential backoff retry logic"""

import httpx
import asyncio
import logging
from datetime import datetime, timezone
from wallet_gateway.config import settings
from wallet_gateway.domain.confirmation import TransactionSink
from wallet_gateway.domain.exceptions import PersistenceError
from wallet_gateway.domain.models import PersistenceReceipt, TransactionSubmission
from wallet_gateway.infrastructure.observability.metrics import (
    persistence_latency_histogram,
    persistence_failure_counter,
)


def _reason(response: httpx.Response) -> str:
    """Prefer the backend's own detail message over the bare status code"""
    try:
        detail = response.json().get("detail")
    except (ValueError, AttributeError):
        detail = None
    return str(detail) if detail else f"Ledger returned HTTP {response.status_code}"


class LedgerClient(TransactionSink):
    """Client that persists confirmed transactions in the ledger service"""

    def __init__(
        self,
        base_url: str | None = None,
        max_retries: int | None = None,
        backoff_base: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url or settings.ledger_api_base
        self.max_retries = max_retries or settings.persistence_max_retries
        self.backoff_base = settings.persistence_backoff_base if backoff_base is None else backoff_base
        self.timeout = settings.http_timeout_seconds
        self.transport = transport

    async def persist_transaction(self, submission: TransactionSubmission) -> PersistenceReceipt:
        """
        Persist a confirmed transaction with retry logic.

        Retry strategy:
        - Exponential backoff: base, 2*base, 4*base, ... (base * 2^(attempt-1))
        - Retries on 5xx errors and network failures only
        - 4xx responses fail at once, the ledger has rejected the transaction
        - Idempotency-Key header makes a retried delivery safe to repeat

        Raises:
            PersistenceError: With the ledger's reason after the final failure
        """
        attempt = 0
        headers = {"Idempotency-Key": submission.submission_id}
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            while True:
                try:
                    with persistence_latency_histogram.time():
                        response = await client.post(
                            f"{self.base_url}/transactions",
                            json=submission.to_payload(),
                            headers=headers,
                        )
                    response.raise_for_status()
                    data = response.json()
                    return PersistenceReceipt(
                        transaction_id=str(data.get("transaction_id", submission.submission_id)),
                        submission_id=submission.submission_id,
                        persisted_at=datetime.now(timezone.utc),
                    )

                except httpx.HTTPStatusError as e:
                    attempt += 1
                    persistence_failure_counter.inc()
                    reason = _reason(e.response)
                    if e.response.status_code < 500 or attempt >= self.max_retries:
                        raise PersistenceError(reason) from e

                except httpx.RequestError as e:
                    attempt += 1
                    persistence_failure_counter.inc()
                    if attempt >= self.max_retries:
                        raise PersistenceError(f"Ledger unreachable: {e}") from e

                except (ValueError, AttributeError) as e:
                    persistence_failure_counter.inc()
                    raise PersistenceError(f"Invalid response from ledger: {e}") from e

                backoff = self.backoff_base * (2 ** (attempt - 1))
                logging.warning(
                    "Ledger persistence failed, retrying",
                    extra={
                        "submission_id": submission.submission_id,
                        "attempt": attempt,
                        "backoff_seconds": backoff,
                    },
                )
                await asyncio.sleep(backoff)
