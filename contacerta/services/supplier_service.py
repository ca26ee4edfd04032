"""
Supplier Service Module
=======================
"""

from typing import List, Optional
from uuid import UUID

from contacerta.core.enums import RecordStatus
from contacerta.core.result import ServiceResult
from contacerta.schemas.supplier import SupplierRecord
from contacerta.services.base import TableService

SUPPLIER_NOT_FOUND_MESSAGE = "Fornecedor não encontrado nesta organização."


class SupplierService(TableService[SupplierRecord]):
    table = "suppliers"
    record_type = SupplierRecord
    search_columns = ("name", "tax_id", "email")
    default_limit = 20

    async def list(
        self,
        organization_id: UUID,
        search: str = "",
        only_active: bool = True,
        limit: Optional[int] = None,
    ) -> ServiceResult[List[SupplierRecord]]:
        """
        List suppliers of an organization.

        Args:
            organization_id: Active organization
            search: Matched against name, tax id and email
            only_active: Hide inactive suppliers
            limit: Maximum number of rows (20 by default)
        """
        filters = {"status": RecordStatus.ACTIVE.value} if only_active else None
        return await super().list(organization_id, search, filters=filters, limit=limit)
