"""
REST Routes Module
==================

Table endpoints of the reference backend.

Filters use the ``f.<column>=<value>`` query parameter form; the value
``is.null`` matches NULL. Rows of organizations the caller holds no
membership in are simply not returned.

Endpoints:
- GET    /rest/{table}         - Scoped select
- GET    /rest/{table}/{id}    - Single visible row or null
- POST   /rest/{table}         - Insert one row (object) or many (array)
- PATCH  /rest/{table}/{id}    - Update a visible row
- DELETE /rest/{table}         - Delete visible rows matching filters
"""

from typing import Any, Dict, List, Optional, Union
from uuid import UUID

from fastapi import APIRouter, Body, Depends, Request, status
from fastapi import Query as QueryParam

from contacerta.api.dependencies import get_backend
from contacerta.backend.base import Backend, NULL_FILTER, Query
from contacerta.core.logging import get_logger

# Initialize logger
logger = get_logger(__name__)

router = APIRouter(prefix="/rest", tags=["REST"])

FILTER_PREFIX = "f."


def parse_filters(request: Request) -> Dict[str, Any]:
    """Collect ``f.<column>`` query parameters into equality filters."""
    return {
        key[len(FILTER_PREFIX):]: None if value == NULL_FILTER else value
        for key, value in request.query_params.items()
        if key.startswith(FILTER_PREFIX)
    }


@router.get(
    "/{table}",
    summary="Select Rows",
    description="Rows of a table scoped to an organization, with optional search, order and limit.",
)
async def select_rows(
    table: str,
    request: Request,
    organization_id: Optional[UUID] = None,
    q: Optional[str] = None,
    search_columns: Optional[str] = None,
    order: Optional[str] = None,
    desc: bool = False,
    limit: Optional[int] = QueryParam(default=None, ge=1, le=1000),
    backend: Backend = Depends(get_backend),
) -> List[Dict[str, Any]]:
    columns = tuple(column for column in (search_columns or "").split(",") if column)
    query = Query(
        table=table,
        organization_id=organization_id,
        filters=parse_filters(request),
        search=q,
        search_columns=columns,
        order_by=order,
        descending=desc,
        limit=limit,
    )
    return await backend.select(query)


@router.get("/{table}/{record_id}", summary="Get Row")
async def get_row(
    table: str,
    record_id: str,
    organization_id: Optional[UUID] = None,
    backend: Backend = Depends(get_backend),
) -> Optional[Dict[str, Any]]:
    return await backend.get(table, record_id, organization_id)


@router.post("/{table}", status_code=status.HTTP_201_CREATED, summary="Insert Rows")
async def insert_rows(
    table: str,
    payload: Union[List[Dict[str, Any]], Dict[str, Any]] = Body(...),
    backend: Backend = Depends(get_backend),
) -> Union[List[Dict[str, Any]], Dict[str, Any]]:
    if isinstance(payload, list):
        return await backend.insert_many(table, payload)
    return await backend.insert(table, payload)


@router.patch("/{table}/{record_id}", summary="Update Row")
async def update_row(
    table: str,
    record_id: str,
    organization_id: UUID,
    payload: Dict[str, Any] = Body(...),
    backend: Backend = Depends(get_backend),
) -> Dict[str, Any]:
    return await backend.update(table, record_id, organization_id, payload)


@router.delete("/{table}", summary="Delete Rows")
async def delete_rows(
    table: str,
    request: Request,
    organization_id: UUID,
    backend: Backend = Depends(get_backend),
) -> Dict[str, int]:
    deleted = await backend.delete(table, organization_id, parse_filters(request))
    logger.info("rows_deleted", table=table, organization_id=str(organization_id), count=deleted)
    return {"deleted": deleted}
