"""PostgREST (Supabase REST) client for the remote tables."""

import logging
from typing import Any, Dict, List, Optional, Sequence, Tuple

import httpx

from frontdesk.core.exceptions import RemoteDataError
from frontdesk.services.remote.base import Filter, OrderBy, RemoteDataService, Row

logger = logging.getLogger(__name__)

REST_PATH = "/rest/v1"


def _literal(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    text = str(value)
    if any(ch in text for ch in ',()".'):
        escaped = text.replace("\\", "\\\\").replace('"', '\\"')
        return f'"{escaped}"'
    return text


def encode_filters(filters: Optional[Sequence[Filter]]) -> List[Tuple[str, str]]:
    """Translate filters into PostgREST query parameters."""
    params: List[Tuple[str, str]] = []
    for flt in filters or ():
        if flt.op == "eq":
            value = flt.value
            if isinstance(value, bool):
                value = "true" if value else "false"
            params.append((flt.column, f"eq.{value}"))
        elif flt.op == "in":
            joined = ",".join(_literal(v) for v in flt.value)
            params.append((flt.column, f"in.({joined})"))
        elif flt.op == "or_eq":
            joined = ",".join(f"{flt.column}.eq.{_literal(v)}" for v in flt.value)
            params.append(("or", f"({joined})"))
        else:
            raise ValueError(f"Unsupported filter op: {flt.op}")
    return params


def encode_order(order: Optional[OrderBy]) -> Optional[str]:
    if not order:
        return None
    return ",".join(f"{column}.{'asc' if ascending else 'desc'}" for column, ascending in order)


class PostgrestDataService(RemoteDataService):
    """Remote data service speaking the PostgREST protocol over httpx."""

    def __init__(
        self,
        base_url: str,
        api_key: str,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self._api_key = api_key
        self._timeout = timeout
        self._transport = transport

    def _headers(self, prefer: Optional[str] = None) -> Dict[str, str]:
        headers = {
            "apikey": self._api_key,
            "Authorization": f"Bearer {self._api_key}",
            "Content-Type": "application/json",
        }
        if prefer:
            headers["Prefer"] = prefer
        return headers

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=f"{self.base_url}{REST_PATH}",
            timeout=self._timeout,
            transport=self._transport,
        )

    async def _request(
        self,
        method: str,
        table: str,
        operation: str,
        params: Optional[List[Tuple[str, str]]] = None,
        json: Any = None,
        prefer: Optional[str] = None,
    ) -> List[Row]:
        try:
            async with self._client() as client:
                resp = await client.request(
                    method,
                    f"/{table}",
                    params=params,
                    json=json,
                    headers=self._headers(prefer),
                )
        except httpx.HTTPError as e:
            logger.warning(f"Remote {operation} on {table} failed: {e!r}")
            raise RemoteDataError(table, operation, str(e) or e.__class__.__name__) from e

        if resp.status_code >= 400:
            try:
                body = resp.json()
                detail = body.get("message") if isinstance(body, dict) else None
                detail = detail or str(body)
            except ValueError:
                detail = resp.text
            logger.warning(f"Remote {operation} on {table} rejected ({resp.status_code}): {detail}")
            raise RemoteDataError(table, operation, detail, status_code=resp.status_code)

        if not resp.content:
            return []
        try:
            data = resp.json()
        except ValueError as e:
            raise RemoteDataError(table, operation, "malformed response body") from e
        if isinstance(data, dict):
            return [data]
        return data

    async def insert(self, table: str, rows: List[Row]) -> List[Row]:
        return await self._request(
            "POST", table, "insert", json=rows, prefer="return=representation"
        )

    async def update(self, table: str, values: Row, filters: Sequence[Filter]) -> List[Row]:
        if not filters:
            raise ValueError("Refusing to update without filters")
        return await self._request(
            "PATCH",
            table,
            "update",
            params=encode_filters(filters),
            json=values,
            prefer="return=representation",
        )

    async def upsert(self, table: str, rows: List[Row], on_conflict: str = "id") -> List[Row]:
        return await self._request(
            "POST",
            table,
            "upsert",
            params=[("on_conflict", on_conflict)],
            json=rows,
            prefer="resolution=merge-duplicates,return=representation",
        )

    async def select(
        self,
        table: str,
        filters: Optional[Sequence[Filter]] = None,
        order: Optional[OrderBy] = None,
        limit: Optional[int] = None,
    ) -> List[Row]:
        params = [("select", "*")] + encode_filters(filters)
        order_param = encode_order(order)
        if order_param:
            params.append(("order", order_param))
        if limit is not None:
            params.append(("limit", str(limit)))
        return await self._request("GET", table, "select", params=params)

    async def delete(self, table: str, filters: Sequence[Filter]) -> None:
        if not filters:
            raise ValueError("Refusing to delete without filters")
        await self._request("DELETE", table, "delete", params=encode_filters(filters))

    async def ping(self) -> bool:
        try:
            async with self._client() as client:
                resp = await client.get("/", headers=self._headers())
            return resp.status_code < 500
        except httpx.HTTPError:
            return False
