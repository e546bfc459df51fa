"""Registry API HTTP client for accounts, categories and movement types"""

import httpx
from decimal import InvalidOperation
from typing import Any, List
from wallet_gateway.domain.models import Account, AccountState, RegistryEntry
from wallet_gateway.domain.exceptions import RegistryAPIError
from wallet_gateway.config import settings
from wallet_gateway.utils.money import to_money


def _unwrap(data: Any) -> List[dict]:
    """Accept a bare list or a {"success": ..., "data": [...]} envelope"""
    if isinstance(data, dict):
        if data.get("success") is False:
            raise RegistryAPIError(f"Registry reported failure: {data.get('message', 'unknown error')}")
        return data.get("data", [])
    return data


class RegistryClient:
    """Client for the external account and catalogue registry"""

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url or settings.registry_api_base
        self.timeout = timeout or settings.http_timeout_seconds
        self.transport = transport

    async def _get(self, path: str, params: dict | None = None) -> List[dict]:
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            try:
                response = await client.get(f"{self.base_url}{path}", params=params)
                response.raise_for_status()
                return _unwrap(response.json())
            except httpx.TimeoutException as e:
                raise RegistryAPIError(f"Registry API timeout after {self.timeout}s") from e
            except httpx.HTTPStatusError as e:
                raise RegistryAPIError(f"Registry API error: {e.response.status_code}") from e
            except httpx.RequestError as e:
                raise RegistryAPIError(f"Registry API unreachable: {e}") from e
            except ValueError as e:
                raise RegistryAPIError(f"Invalid JSON from registry: {e}") from e

    async def get_accounts(self, user_id: str) -> List[Account]:
        """
        Fetch the user's account snapshot, in registry order.

        Raises:
            RegistryAPIError: On timeout, HTTP errors, or invalid response
        """
        rows = await self._get("/accounts", params={"user_id": user_id})
        try:
            return [
                Account(
                    account_id=str(row["id"]),
                    name=row["name"],
                    kind=row["kind"],
                    balance=to_money(row["balance"]),
                    state=AccountState(row["state"]),
                )
                for row in rows
            ]
        except (KeyError, ValueError, TypeError, InvalidOperation) as e:
            raise RegistryAPIError(f"Invalid account data from registry: {e}") from e

    async def get_categories(self) -> List[RegistryEntry]:
        return self._entries(await self._get("/categories"), "category")

    async def get_movement_types(self) -> List[RegistryEntry]:
        return self._entries(await self._get("/movement-types"), "movement type")

    @staticmethod
    def _entries(rows: List[dict], what: str) -> List[RegistryEntry]:
        try:
            return [RegistryEntry(entry_id=str(row["id"]), label=row["label"]) for row in rows]
        except (KeyError, TypeError) as e:
            raise RegistryAPIError(f"Invalid {what} data from registry: {e}") from e
