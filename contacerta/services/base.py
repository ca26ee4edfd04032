"""
Table Service Base Module
=========================

Shared CRUD plumbing for the per-entity services.

Every operation returns a ``ServiceResult``. ``BackendError`` is caught
at the operation boundary and translated into a user-facing message;
any other exception propagates.
"""

from typing import Any, Dict, Generic, List, Optional, Sequence, Tuple, Type, TypeVar
from uuid import UUID

from pydantic import BaseModel

from contacerta.backend.base import Backend, Query, Row
from contacerta.core.error_messages import translate_backend_error
from contacerta.core.exceptions import BackendError
from contacerta.core.logging import get_logger
from contacerta.core.result import ServiceResult

# Initialize logger
logger = get_logger(__name__)

R = TypeVar("R", bound=BaseModel)

# Failure code for checks done before reaching the backend
VALIDATION_FAILED = "VALIDATION"


def to_wire(model: BaseModel, exclude_unset: bool = False) -> Row:
    """Dump a request schema to JSON-compatible wire values."""
    return model.model_dump(mode="json", exclude_unset=exclude_unset)


class TableService(Generic[R]):
    """
    CRUD over one tenant-scoped table.

    Subclasses set ``table``, ``record_type`` and the default list
    ordering, and add their own validation on top.
    """

    table: str = ""
    record_type: Type[R]
    search_columns: Sequence[str] = ()
    order_by: Optional[str] = "name"
    descending: bool = False
    default_limit: Optional[int] = None

    def __init__(self, backend: Backend):
        self.backend = backend

    # --------------------------
    # Helpers
    # --------------------------

    def _records(self, rows: List[Row]) -> List[R]:
        return [self.record_type.model_validate(row) for row in rows]

    def _failure(self, error: BackendError, operation: str) -> ServiceResult:
        logger.warning(
            "service_operation_failed",
            table=self.table,
            operation=operation,
            code=error.code,
            error=error.message,
        )
        return ServiceResult.failure(translate_backend_error(error, self.table), error.code)

    async def _resolve_reference(
        self,
        table: str,
        record_id: UUID,
        organization_id: UUID,
        not_found_message: str,
    ) -> Tuple[Optional[Row], Optional[ServiceResult]]:
        """
        Fetch a referenced row of the same organization.

        Returns:
            (row, None) when found, otherwise (None, failure). A row of
            another organization counts as not found.
        """
        try:
            row = await self.backend.get(table, record_id, organization_id)
        except BackendError as e:
            return None, self._failure(e, f"resolve_{table}")
        if row is None:
            logger.warning(
                "reference_not_found",
                table=self.table,
                referenced_table=table,
                record_id=str(record_id),
            )
            return None, ServiceResult.failure(not_found_message, VALIDATION_FAILED)
        return row, None

    async def _check_references(
        self,
        organization_id: UUID,
        references: Sequence[Tuple[str, Optional[UUID], str]],
    ) -> Optional[ServiceResult]:
        """First failure among (table, record_id, message) references; None ids are skipped."""
        for table, record_id, message in references:
            if record_id is None:
                continue
            _, failure = await self._resolve_reference(table, record_id, organization_id, message)
            if failure is not None:
                return failure
        return None

    # --------------------------
    # Operations
    # --------------------------

    async def list(
        self,
        organization_id: UUID,
        search: str = "",
        filters: Optional[Dict[str, Any]] = None,
        limit: Optional[int] = None,
    ) -> ServiceResult[List[R]]:
        """
        List records of an organization.

        Args:
            organization_id: Active organization
            search: Case-insensitive text matched against search_columns
            filters: Column equality filters
            limit: Maximum number of rows, defaults to default_limit
        """
        query = Query(
            table=self.table,
            organization_id=organization_id,
            filters=dict(filters or {}),
            search=search.strip() or None,
            search_columns=tuple(self.search_columns),
            order_by=self.order_by,
            descending=self.descending,
            limit=limit if limit is not None else self.default_limit,
        )
        try:
            rows = await self.backend.select(query)
        except BackendError as e:
            return self._failure(e, "list")
        return ServiceResult.success(self._records(rows))

    async def get(self, organization_id: UUID, record_id: UUID) -> ServiceResult[Optional[R]]:
        """Fetch one record; absent or invisible records yield ``data=None``."""
        try:
            row = await self.backend.get(self.table, record_id, organization_id)
        except BackendError as e:
            return self._failure(e, "get")
        return ServiceResult.success(self.record_type.model_validate(row) if row else None)

    async def _insert(self, values: Row) -> ServiceResult[R]:
        try:
            row = await self.backend.insert(self.table, values)
        except BackendError as e:
            return self._failure(e, "create")
        logger.info("record_created", table=self.table, record_id=row.get("id"))
        return ServiceResult.success(self.record_type.model_validate(row))

    async def _update(self, organization_id: UUID, record_id: UUID, values: Row) -> ServiceResult[R]:
        try:
            row = await self.backend.update(self.table, record_id, organization_id, values)
        except BackendError as e:
            return self._failure(e, "update")
        logger.info("record_updated", table=self.table, record_id=str(record_id))
        return ServiceResult.success(self.record_type.model_validate(row))

    async def create(self, data: BaseModel) -> ServiceResult[R]:
        return await self._insert(to_wire(data))

    async def update(self, organization_id: UUID, record_id: UUID, data: BaseModel) -> ServiceResult[R]:
        return await self._update(organization_id, record_id, to_wire(data, exclude_unset=True))

    async def delete(self, organization_id: UUID, record_id: UUID) -> ServiceResult[None]:
        """Delete a record. Deleting an invisible or missing record is a no-op."""
        try:
            await self.backend.delete(self.table, organization_id, {"id": str(record_id)})
        except BackendError as e:
            return self._failure(e, "delete")
        logger.info("record_deleted", table=self.table, record_id=str(record_id))
        return ServiceResult.success(None)
