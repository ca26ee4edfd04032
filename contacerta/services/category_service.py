"""
Category Service Module
=======================

Finance categories classify documents as income or expense. Creating a
category is idempotent: an existing category with the same name and
kind is returned instead of failing on the unique constraint.
"""

from typing import List, Optional
from uuid import UUID

from contacerta.backend.base import Query
from contacerta.core.enums import CategoryScope, DocumentType, FinanceKind
from contacerta.core.error_messages import NAME_REQUIRED_MESSAGE
from contacerta.core.exceptions import BackendError, UNIQUE_VIOLATION
from contacerta.core.logging import get_logger
from contacerta.core.result import ServiceResult
from contacerta.schemas.category import CategoryRecord
from contacerta.services.base import TableService, VALIDATION_FAILED

# Initialize logger
logger = get_logger(__name__)

CATEGORY_NOT_FOUND_MESSAGE = "Categoria não encontrada nesta organização."


def finance_kind_for(document_type: DocumentType) -> FinanceKind:
    """Payables are expenses, receivables are income."""
    if document_type == DocumentType.PAYABLE:
        return FinanceKind.EXPENSE
    return FinanceKind.INCOME


class CategoryService(TableService[CategoryRecord]):
    table = "categories"
    record_type = CategoryRecord
    search_columns = ("name",)

    finance_kind_for = staticmethod(finance_kind_for)

    async def list_finance_categories(
        self,
        organization_id: UUID,
        finance_kind: Optional[FinanceKind] = None,
        search: str = "",
        limit: Optional[int] = None,
    ) -> ServiceResult[List[CategoryRecord]]:
        """
        List finance categories.

        Args:
            organization_id: Active organization
            finance_kind: INCOME or EXPENSE; both when omitted
            search: Matched against the name
            limit: Maximum number of rows
        """
        filters = {"scope": CategoryScope.FINANCE.value}
        if finance_kind is not None:
            filters["finance_kind"] = finance_kind.value
        return await super().list(organization_id, search, filters=filters, limit=limit)

    async def _find(
        self,
        organization_id: UUID,
        finance_kind: FinanceKind,
        name: str,
    ) -> Optional[CategoryRecord]:
        rows = await self.backend.select(Query(
            table=self.table,
            organization_id=organization_id,
            filters={
                "scope": CategoryScope.FINANCE.value,
                "finance_kind": finance_kind.value,
                "name": name,
            },
            limit=1,
        ))
        return self.record_type.model_validate(rows[0]) if rows else None

    async def create_finance_category(
        self,
        organization_id: UUID,
        finance_kind: FinanceKind,
        name: str,
    ) -> ServiceResult[CategoryRecord]:
        """
        Return the finance category with this name, creating it if needed.

        A concurrent creation surfaces as a unique violation; the row is
        then read back instead of reporting an error.
        """
        name = (name or "").strip()
        if not name:
            return ServiceResult.failure(NAME_REQUIRED_MESSAGE, VALIDATION_FAILED)

        try:
            existing = await self._find(organization_id, finance_kind, name)
            if existing is not None:
                return ServiceResult.success(existing)

            try:
                row = await self.backend.insert(self.table, {
                    "organization_id": str(organization_id),
                    "name": name,
                    "scope": CategoryScope.FINANCE.value,
                    "finance_kind": finance_kind.value,
                })
            except BackendError as e:
                if e.code != UNIQUE_VIOLATION:
                    raise
                logger.info("category_create_conflict", name=name, finance_kind=finance_kind.value)
                existing = await self._find(organization_id, finance_kind, name)
                if existing is None:
                    raise
                return ServiceResult.success(existing)
        except BackendError as e:
            return self._failure(e, "create_finance_category")

        logger.info("category_created", category_id=row.get("id"), finance_kind=finance_kind.value)
        return ServiceResult.success(self.record_type.model_validate(row))
