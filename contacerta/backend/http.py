"""
HTTP Backend Client
===================

Backend implementation talking to the HTTP surface (``contacerta.api``)
with httpx.

- Bearer token taken from the current identity on every request
- Error bodies ``{code, message, details, hint}`` become ``BackendError``
- Transport failures and timeouts become ``NETWORK_ERROR``
- An empty success body is None; a body that is not JSON becomes
  ``INVALID_RESPONSE``
- No automatic retry: callers surface the error and offer one
"""

from typing import Any, Dict, List, Optional
from uuid import UUID

import httpx

from contacerta.backend.base import Backend, IdentityProvider, NULL_FILTER, Query, Row
from contacerta.core.config import get_settings
from contacerta.core.exceptions import BackendError, INSUFFICIENT_PRIVILEGE, INVALID_RESPONSE, NETWORK_ERROR
from contacerta.core.logging import get_logger

logger = get_logger(__name__)


def encode_filters(filters: Dict[str, Any]) -> Dict[str, str]:
    return {
        f"f.{key}": NULL_FILTER if value is None else str(value)
        for key, value in filters.items()
    }


class HttpBackend(Backend):
    """
    Backend over HTTP.

    Usage:
        backend = HttpBackend(lambda: session_store.identity)
        rows = await backend.select(Query("suppliers", organization_id=org_id))
        await backend.aclose()
    """

    def __init__(
        self,
        identity_provider: IdentityProvider,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        settings = get_settings()
        self._identity_provider = identity_provider
        self._client = httpx.AsyncClient(
            base_url=base_url or settings.backend_url,
            timeout=timeout if timeout is not None else settings.backend_timeout_seconds,
            transport=transport,
        )

    def _headers(self) -> Dict[str, str]:
        identity = self._identity_provider()
        if identity is None or not identity.access_token:
            raise BackendError(INSUFFICIENT_PRIVILEGE, "permission denied: not authenticated")
        return {"Authorization": f"Bearer {identity.access_token}"}

    async def _request(
        self,
        method: str,
        url: str,
        params: Optional[Dict[str, Any]] = None,
        json: Any = None,
    ) -> Any:
        headers = self._headers()
        try:
            response = await self._client.request(
                method,
                url,
                params=params,
                json=json,
                headers=headers,
            )
        except httpx.TransportError as e:
            logger.warning("backend_transport_error", method=method, url=url, error=str(e))
            raise BackendError(NETWORK_ERROR, str(e) or e.__class__.__name__)

        if response.is_error:
            raise self._error_from_response(response)
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            logger.warning(
                "backend_invalid_response",
                method=method,
                url=url,
                status_code=response.status_code,
            )
            raise BackendError(INVALID_RESPONSE, f"response is not JSON: {e}") from e

    @staticmethod
    def _error_from_response(response: httpx.Response) -> BackendError:
        try:
            body = response.json()
        except ValueError:
            body = None

        if isinstance(body, dict) and body.get("code"):
            return BackendError(
                code=str(body["code"]),
                message=body.get("message") or "",
                details=body.get("details"),
                hint=body.get("hint"),
            )
        return BackendError(f"HTTP{response.status_code}", response.text)

    # ==========================
    # Backend Interface
    # ==========================

    async def list_memberships(self) -> List[Row]:
        return await self._request("GET", "/memberships")

    async def select(self, query: Query) -> List[Row]:
        params: Dict[str, Any] = encode_filters(query.filters)
        if query.organization_id is not None:
            params["organization_id"] = str(query.organization_id)
        if query.search and query.search_columns:
            params["q"] = query.search
            params["search_columns"] = ",".join(query.search_columns)
        if query.order_by:
            params["order"] = query.order_by
            params["desc"] = "true" if query.descending else "false"
        if query.limit is not None:
            params["limit"] = query.limit
        return await self._request("GET", f"/rest/{query.table}", params=params)

    async def get(
        self,
        table: str,
        record_id: UUID,
        organization_id: Optional[UUID] = None,
    ) -> Optional[Row]:
        params = {"organization_id": str(organization_id)} if organization_id else None
        return await self._request("GET", f"/rest/{table}/{record_id}", params=params)

    async def insert(self, table: str, values: Row) -> Row:
        return await self._request("POST", f"/rest/{table}", json=values)

    async def insert_many(self, table: str, rows: List[Row]) -> List[Row]:
        if not rows:
            return []
        return await self._request("POST", f"/rest/{table}", json=rows)

    async def update(
        self,
        table: str,
        record_id: UUID,
        organization_id: UUID,
        values: Row,
    ) -> Row:
        return await self._request(
            "PATCH",
            f"/rest/{table}/{record_id}",
            params={"organization_id": str(organization_id)},
            json=values,
        )

    async def delete(self, table: str, organization_id: UUID, filters: Row) -> int:
        params = encode_filters(filters)
        params["organization_id"] = str(organization_id)
        body = await self._request("DELETE", f"/rest/{table}", params=params)
        return int(body.get("deleted", 0)) if body else 0

    async def rpc(self, name: str, params: Row) -> Any:
        return await self._request("POST", f"/rpc/{name}", json=params)

    async def aclose(self) -> None:
        await self._client.aclose()
