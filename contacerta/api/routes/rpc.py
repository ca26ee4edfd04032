"""
RPC and Membership Routes Module
================================

Endpoints:
- GET  /memberships  - Caller's memberships joined to organization names
- POST /rpc/{name}   - create_org_and_join, accept_invite, create_invite
"""

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Body, Depends

from contacerta.api.dependencies import get_backend
from contacerta.backend.base import Backend

router = APIRouter(tags=["Directory"])


@router.get(
    "/memberships",
    summary="List Memberships",
    description="Organizations the caller belongs to, with the caller's role, ordered by name.",
)
async def list_memberships(backend: Backend = Depends(get_backend)) -> List[Dict[str, Any]]:
    return await backend.list_memberships()


@router.post("/rpc/{name}", summary="Call Procedure")
async def call_rpc(
    name: str,
    params: Optional[Dict[str, Any]] = Body(default=None),
    backend: Backend = Depends(get_backend),
) -> Any:
    return await backend.rpc(name, params or {})
