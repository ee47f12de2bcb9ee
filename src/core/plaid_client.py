"""Plaid API client wrapper.

Async HTTP client for Plaid's transactions endpoint
(https://plaid.com/docs/api/products/transactions/). Handles credentials,
environment hosts, pagination and error mapping. The per-user access
token is passed to every call; the client holds no session state.
"""

import logging
from datetime import date
from typing import Any, Optional

import httpx

from src.models.schemas import PlaidEnvironment, RawTransaction

logger = logging.getLogger("finance_mcp")

PLAID_HOSTS = {
    PlaidEnvironment.SANDBOX: "https://sandbox.plaid.com",
    PlaidEnvironment.DEVELOPMENT: "https://development.plaid.com",
    PlaidEnvironment.PRODUCTION: "https://production.plaid.com",
}
DEFAULT_TIMEOUT = 30.0
PAGE_SIZE = 500  # Plaid's maximum for /transactions/get


class PlaidError(Exception):
    """Base exception for Plaid API errors."""

    def __init__(self, status_code: int, error_type: str, error_code: str, error_message: str):
        self.status_code = status_code
        self.error_type = error_type
        self.error_code = error_code
        self.error_message = error_message
        super().__init__(f"Plaid API Error [{status_code}] {error_code}: {error_message}")


class PlaidClient:
    """Async client for the Plaid API."""

    def __init__(
        self,
        client_id: str,
        secret: str,
        environment: PlaidEnvironment | str = PlaidEnvironment.SANDBOX,
    ):
        self.client_id = client_id
        self.secret = secret
        self.environment = PlaidEnvironment(environment)
        self._client: Optional[httpx.AsyncClient] = None

    @property
    def base_url(self) -> str:
        return PLAID_HOSTS[self.environment]

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                headers={"Content-Type": "application/json"},
                timeout=DEFAULT_TIMEOUT,
            )
        return self._client

    async def close(self):
        """Close the HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()

    async def _post(self, path: str, payload: dict[str, Any]) -> dict[str, Any]:
        """Make an authenticated POST request to the Plaid API."""
        body = {"client_id": self.client_id, "secret": self.secret, **payload}
        try:
            response = await self.client.post(path, json=body)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            error = e.response.json() if e.response.content else {}
            raise PlaidError(
                status_code=e.response.status_code,
                error_type=error.get("error_type", "API_ERROR"),
                error_code=error.get("error_code", str(e.response.status_code)),
                error_message=error.get("error_message", str(e)),
            ) from e
        except httpx.TimeoutException as e:
            raise PlaidError(
                status_code=408,
                error_type="API_ERROR",
                error_code="TIMEOUT",
                error_message="Request to Plaid timed out. Please try again.",
            ) from e

        return response.json()

    # --- Transactions ---

    async def get_transactions(
        self,
        access_token: str,
        start_date: date,
        end_date: date,
        account_ids: Optional[list[str]] = None,
    ) -> list[RawTransaction]:
        """Get all transactions in an inclusive date window, following pagination."""
        transactions: list[RawTransaction] = []
        offset = 0

        while True:
            options: dict[str, Any] = {
                "count": PAGE_SIZE,
                "offset": offset,
                "include_personal_finance_category": True,
            }
            if account_ids:
                options["account_ids"] = account_ids

            data = await self._post("/transactions/get", {
                "access_token": access_token,
                "start_date": start_date.isoformat(),
                "end_date": end_date.isoformat(),
                "options": options,
            })

            page = data.get("transactions") or []
            transactions.extend(RawTransaction.model_validate(t) for t in page if isinstance(t, dict))
            offset += len(page)

            total = data.get("total_transactions", offset)
            logger.debug("Fetched %d/%d Plaid transactions", offset, total)
            if not page or offset >= total:
                break

        return transactions
