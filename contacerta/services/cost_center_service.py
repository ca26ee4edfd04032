"""
Cost Center Service Module
==========================

Cost centers are budget buckets of three kinds:
- MINISTRY: bound to exactly one ministry and named after it
- EVENT / GROUP: free-text name, no ministry

The binding rules are checked before the backend is called so that the
user gets a specific message; the database CHECK and UNIQUE constraints
remain the last line and their codes are translated the same way.
"""

from typing import List, Optional, Tuple
from uuid import UUID

from contacerta.core.enums import CostCenterKind
from contacerta.core.error_messages import MINISTRY_REQUIRED_MESSAGE, NAME_REQUIRED_MESSAGE
from contacerta.core.exceptions import BackendError
from contacerta.core.logging import get_logger
from contacerta.core.result import ServiceResult
from contacerta.schemas.cost_center import CostCenterCreate, CostCenterRecord, CostCenterUpdate
from contacerta.services.base import TableService, VALIDATION_FAILED, to_wire

# Initialize logger
logger = get_logger(__name__)

MINISTRY_NOT_FOUND_MESSAGE = "Ministério não encontrado nesta organização."


class CostCenterService(TableService[CostCenterRecord]):
    table = "cost_centers"
    record_type = CostCenterRecord
    search_columns = ("name", "description")

    async def list(
        self,
        organization_id: UUID,
        search: str = "",
        kind: Optional[CostCenterKind] = None,
        limit: Optional[int] = None,
    ) -> ServiceResult[List[CostCenterRecord]]:
        filters = {"kind": kind.value} if kind else None
        return await super().list(organization_id, search, filters=filters, limit=limit)

    # --------------------------
    # Binding Rules
    # --------------------------

    async def _resolve_binding(
        self,
        organization_id: UUID,
        kind: CostCenterKind,
        name: Optional[str],
        ministry_id: Optional[UUID],
    ) -> Tuple[Optional[dict], Optional[ServiceResult]]:
        """
        Resolve the ``name`` and ``ministry_id`` columns for a kind.

        Returns:
            ``(columns, None)`` when valid, ``(None, failure)`` otherwise
        """
        if kind == CostCenterKind.MINISTRY:
            if ministry_id is None:
                return None, ServiceResult.failure(MINISTRY_REQUIRED_MESSAGE, VALIDATION_FAILED)
            try:
                ministry = await self.backend.get("ministries", ministry_id, organization_id)
            except BackendError as e:
                return None, self._failure(e, "resolve_ministry")
            if ministry is None:
                return None, ServiceResult.failure(MINISTRY_NOT_FOUND_MESSAGE, VALIDATION_FAILED)
            return {"name": ministry["name"], "ministry_id": str(ministry_id)}, None

        name = (name or "").strip()
        if not name:
            return None, ServiceResult.failure(NAME_REQUIRED_MESSAGE, VALIDATION_FAILED)
        return {"name": name, "ministry_id": None}, None

    # --------------------------
    # Operations
    # --------------------------

    async def create(self, data: CostCenterCreate) -> ServiceResult[CostCenterRecord]:
        """
        Create a cost center.

        Args:
            data: Kind, name or ministry, status and description

        Returns:
            ServiceResult with the stored cost center, or a failure with
            "select a ministry" / "name is required" wording
        """
        columns, failure = await self._resolve_binding(
            data.organization_id, data.kind, data.name, data.ministry_id
        )
        if failure is not None:
            return failure

        values = to_wire(data)
        values.update(columns)
        return await self._insert(values)

    async def update(
        self,
        organization_id: UUID,
        record_id: UUID,
        data: CostCenterUpdate,
    ) -> ServiceResult[CostCenterRecord]:
        """Update a cost center, re-resolving the binding against the stored row."""
        current = await self.get(organization_id, record_id)
        if not current.ok:
            return current
        if current.data is None:
            return ServiceResult.failure("Centro de custo não encontrado.", VALIDATION_FAILED)

        values = to_wire(data, exclude_unset=True)
        binding_fields = {"kind", "name", "ministry_id"}
        if binding_fields & values.keys():
            kind = data.kind if "kind" in values else current.data.kind
            name = data.name if "name" in values else current.data.name
            ministry_id = data.ministry_id if "ministry_id" in values else current.data.ministry_id
            if kind != CostCenterKind.MINISTRY:
                ministry_id = None
            columns, failure = await self._resolve_binding(organization_id, kind, name, ministry_id)
            if failure is not None:
                return failure
            values.update(columns)
            values["kind"] = kind.value

        return await self._update(organization_id, record_id, values)
