"""REST client for the hosted relational store.

The store exposes each collection at ``{base_url}/rest/v1/{table}`` and
speaks the PostgREST query dialect: filters travel as query parameters
(``email=eq.a@b.c``, ``prop_id=in.(P1,P2)``), ordering as
``order=column.desc`` and row limits as ``limit=n``.

Classes:
    RestStoreClient: httpx-based implementation of StoreClient
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from panels.contracts.protocols import Filters, Row, StoreError

logger = logging.getLogger(__name__)


def _format_value(value: Any) -> str:
    if value is True:
        return "true"
    if value is False:
        return "false"
    return str(value)


def _quote_list_item(value: Any) -> str:
    text = _format_value(value)
    if any(ch in text for ch in ',()" '):
        escaped = text.replace("\\", "\\\\").replace('"', '\\"')
        return f'"{escaped}"'
    return text


def build_filter_params(filters: Filters | None) -> list[tuple[str, str]]:
    """Translate a filter mapping into PostgREST query parameters.

    Examples:
        >>> build_filter_params({"email": "a@b.c", "is_active": True})
        [('email', 'eq.a@b.c'), ('is_active', 'eq.true')]
        >>> build_filter_params({"prop_id": ["P1", "P2"]})
        [('prop_id', 'in.(P1,P2)')]
        >>> build_filter_params({"ug_id": None})
        [('ug_id', 'is.null')]
    """
    params: list[tuple[str, str]] = []
    for column, value in (filters or {}).items():
        if value is None:
            params.append((column, "is.null"))
        elif isinstance(value, (list, tuple, set, frozenset)):
            items = ",".join(_quote_list_item(v) for v in value)
            params.append((column, f"in.({items})"))
        else:
            params.append((column, f"eq.{_format_value(value)}"))
    return params


class RestStoreClient:
    """Store client talking to the hosted REST API with httpx.

    Every request carries the ``apikey`` header and a bearer token built
    from the same key. Mutations ask for ``return=representation`` so the
    stored rows (with generated ids) come back in the response.

    Attributes:
        base_url: Project URL of the hosted store, without ``/rest/v1``.
        timeout: Request timeout in seconds.

    Example:
        >>> store = RestStoreClient("https://example.supabase.co", "anon-key")
        >>> rows = await store.select("property", {"is_active": True}, order_by="region")
    """

    def __init__(self, base_url: str, api_key: str, timeout: float = 10.0) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._api_key = api_key

    def _url(self, table: str) -> str:
        return f"{self.base_url}/rest/v1/{table}"

    def _headers(self, prefer: str | None = None) -> dict[str, str]:
        headers = {
            "apikey": self._api_key,
            "Authorization": f"Bearer {self._api_key}",
            "Content-Type": "application/json",
            "Accept": "application/json",
        }
        if prefer:
            headers["Prefer"] = prefer
        return headers

    async def _request(
        self,
        method: str,
        table: str,
        *,
        params: list[tuple[str, str]] | None = None,
        json: Any = None,
        prefer: str | None = None,
    ) -> list[Row]:
        url = self._url(table)
        logger.debug(f"{method} {url} params={params}")
        try:
            async with httpx.AsyncClient() as client:
                response = await client.request(
                    method,
                    url,
                    params=params,
                    json=json,
                    headers=self._headers(prefer),
                    timeout=self.timeout,
                )
        except httpx.TimeoutException as e:
            logger.warning(f"Timeout talking to store ({table}): {e}")
            raise StoreError(f"Request to {table} timed out", table=table) from e
        except httpx.RequestError as e:
            logger.warning(f"Could not reach store ({table}): {e}")
            raise StoreError(f"Could not reach the data store: {e}", table=table) from e

        if response.is_error:
            raise self._error_from_response(response, table)

        if not response.content:
            return []
        try:
            data = response.json()
        except ValueError as e:
            logger.warning(f"Store sent a non-JSON body for {table}: {e}")
            raise StoreError(
                "Store returned a malformed response",
                table=table,
                status_code=response.status_code,
            ) from e
        if isinstance(data, dict):
            return [data]
        if not isinstance(data, list):
            raise StoreError(
                "Store returned a malformed response",
                table=table,
                status_code=response.status_code,
            )
        return data


    @staticmethod
    def _error_from_response(response: httpx.Response, table: str) -> StoreError:
        message = f"Store returned HTTP {response.status_code}"
        code: str | None = None
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict):
            message = str(body.get("message") or body.get("error") or message)
            code = body.get("code")
        logger.warning(f"Store error on {table}: {response.status_code} {message}")
        return StoreError(
            message, table=table, status_code=response.status_code, code=code
        )

    async def select(
        self,
        table: str,
        filters: Filters | None = None,
        *,
        columns: str = "*",
        order_by: str | None = None,
        ascending: bool = True,
        limit: int | None = None,
    ) -> list[Row]:
        params = [("select", columns), *build_filter_params(filters)]
        if order_by:
            params.append(("order", f"{order_by}.{'asc' if ascending else 'desc'}"))
        if limit is not None:
            params.append(("limit", str(limit)))
        return await self._request("GET", table, params=params)

    async def insert(self, table: str, rows: list[Row]) -> list[Row]:
        return await self._request(
            "POST", table, json=rows, prefer="return=representation"
        )

    async def upsert(self, table: str, rows: list[Row], on_conflict: str) -> list[Row]:
        return await self._request(
            "POST",
            table,
            params=[("on_conflict", on_conflict)],
            json=rows,
            prefer="resolution=merge-duplicates,return=representation",
        )

    async def update(self, table: str, values: Row, filters: Filters) -> list[Row]:
        if not filters:
            raise StoreError(f"Refusing to update every row of {table}", table=table)
        return await self._request(
            "PATCH",
            table,
            params=build_filter_params(filters),
            json=values,
            prefer="return=representation",
        )

    async def delete(self, table: str, filters: Filters) -> list[Row]:
        if not filters:
            raise StoreError(f"Refusing to delete every row of {table}", table=table)
        return await self._request(
            "DELETE",
            table,
            params=build_filter_params(filters),
            prefer="return=representation",
        )
