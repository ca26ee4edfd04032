"""
Asset Service Module
====================
"""

from typing import List, Optional
from uuid import UUID

from contacerta.core.enums import AssetStatus
from contacerta.core.result import ServiceResult
from contacerta.schemas.asset import AssetCreate, AssetRecord, AssetUpdate
from contacerta.services.base import TableService, to_wire
from contacerta.services.category_service import CATEGORY_NOT_FOUND_MESSAGE
from contacerta.services.supplier_service import SUPPLIER_NOT_FOUND_MESSAGE


class AssetService(TableService[AssetRecord]):
    """Physical assets, newest first."""

    table = "assets"
    record_type = AssetRecord
    search_columns = ("name", "description", "code")
    order_by = "created_at"
    descending = True
    default_limit = 100

    async def list(
        self,
        organization_id: UUID,
        search: str = "",
        status: Optional[AssetStatus] = None,
        category_id: Optional[UUID] = None,
        supplier_id: Optional[UUID] = None,
        limit: Optional[int] = None,
    ) -> ServiceResult[List[AssetRecord]]:
        filters = {}
        if status is not None:
            filters["status"] = status.value
        if category_id is not None:
            filters["category_id"] = str(category_id)
        if supplier_id is not None:
            filters["supplier_id"] = str(supplier_id)
        return await super().list(organization_id, search, filters=filters, limit=limit)

    async def _check_links(
        self,
        organization_id: UUID,
        category_id: Optional[UUID],
        supplier_id: Optional[UUID],
    ) -> Optional[ServiceResult]:
        return await self._check_references(organization_id, [
            ("categories", category_id, CATEGORY_NOT_FOUND_MESSAGE),
            ("suppliers", supplier_id, SUPPLIER_NOT_FOUND_MESSAGE),
        ])

    async def create(self, data: AssetCreate) -> ServiceResult[AssetRecord]:
        failure = await self._check_links(data.organization_id, data.category_id, data.supplier_id)
        if failure is not None:
            return failure
        return await self._insert(to_wire(data))

    async def update(
        self,
        organization_id: UUID,
        record_id: UUID,
        data: AssetUpdate,
    ) -> ServiceResult[AssetRecord]:
        failure = await self._check_links(organization_id, data.category_id, data.supplier_id)
        if failure is not None:
            return failure
        return await self._update(organization_id, record_id, to_wire(data, exclude_unset=True))
