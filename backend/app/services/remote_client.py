"""Client for the hosted table store (PostgREST / Supabase REST API)."""

import logging
from typing import Any

import httpx

from app.config import get_settings
from app.services.store import PersistenceFailure

logger = logging.getLogger(__name__)
settings = get_settings()


class RemoteStoreError(PersistenceFailure):
    """A remote read or write failed."""

    pass


class RemoteTableClient:
    """
    Row-level access to the board tables of a PostgREST service.

    Supports select-all with ordering, insert, update by id and delete by id.
    Requests are made once: there is no retry, callers decide what a failure
    means.
    """

    def __init__(
        self,
        base_url: str | None = settings.remote_url,
        api_key: str | None = settings.remote_api_key,
        timeout: float = settings.remote_timeout_seconds,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        if not base_url:
            raise ValueError("Remote table store URL not configured")

        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.timeout = timeout
        self._transport = transport

        # Build headers
        self.headers: dict[str, str] = {
            "Accept": "application/json",
            "Content-Type": "application/json",
            "Prefer": "return=minimal",
        }
        if api_key:
            self.headers["apikey"] = api_key
            self.headers["Authorization"] = f"Bearer {api_key}"

    def _table_url(self, table: str) -> str:
        return f"{self.base_url}/rest/v1/{table}"

    async def _request(
        self,
        method: str,
        table: str,
        params: dict[str, str] | None = None,
        json: Any = None,
    ) -> Any:
        """Make one HTTP request and decode the JSON body, if any."""
        url = self._table_url(table)
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.request(
                    method, url, headers=self.headers, params=params, json=json
                )
                response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise RemoteStoreError(
                f"{method} {table} failed with HTTP {e.response.status_code}: {e.response.text}"
            ) from e
        except httpx.RequestError as e:
            raise RemoteStoreError(f"{method} {table} failed: {e!r}") from e

        if not response.content:
            return None
        return response.json()

    async def select_all(self, table: str, order: str = "id.asc") -> list[dict[str, Any]]:
        """
        Fetch every row of a table.

        Args:
            table: Table name
            order: PostgREST order clause, e.g. ``id.desc`` or ``created_at.desc``

        Returns:
            List of row dicts
        """
        rows = await self._request("GET", table, params={"select": "*", "order": order})
        if not isinstance(rows, list):
            raise RemoteStoreError(f"GET {table} returned {type(rows).__name__}, expected a list")
        logger.debug(f"Fetched {len(rows)} rows from {table}")
        return rows

    async def insert(self, table: str, row: dict[str, Any]) -> None:
        await self._request("POST", table, json=[row])

    async def update(self, table: str, row_id: str, fields: dict[str, Any]) -> None:
        await self._request("PATCH", table, params={"id": f"eq.{row_id}"}, json=fields)

    async def delete(self, table: str, row_id: str) -> None:
        await self._request("DELETE", table, params={"id": f"eq.{row_id}"})
