"""
Ministry Service Module
=======================
"""

from typing import List, Optional
from uuid import UUID

from contacerta.core.result import ServiceResult
from contacerta.schemas.ministry import MinistryRecord
from contacerta.services.base import TableService


class MinistryService(TableService[MinistryRecord]):
    table = "ministries"
    record_type = MinistryRecord
    search_columns = ("name", "description")

    async def list(
        self,
        organization_id: UUID,
        search: str = "",
        active: Optional[bool] = None,
        limit: Optional[int] = None,
    ) -> ServiceResult[List[MinistryRecord]]:
        filters = {"active": active} if active is not None else None
        return await super().list(organization_id, search, filters=filters, limit=limit)

    async def list_active(self, organization_id: UUID) -> ServiceResult[List[MinistryRecord]]:
        """Active ministries, as offered when binding a cost center or a member."""
        return await self.list(organization_id, active=True)
