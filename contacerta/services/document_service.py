"""
Document Service Module
=======================

Payable and receivable documents.

Business Rules:
- A payable may reference a supplier, never a member
- A receivable may reference a member, never a supplier
- The category's finance kind must match the document type
  (payable → EXPENSE, receivable → INCOME)
- Cost center, supplier, member and category must belong to the
  document's organization when they are set
- The cost center reference is not enforced by a foreign key: deleting a
  cost center keeps its documents
"""

from typing import List, Optional, Union
from uuid import UUID

from contacerta.core.enums import DocumentStatus, DocumentType
from contacerta.core.logging import get_logger
from contacerta.core.result import ServiceResult
from contacerta.schemas.document import (
    DocumentCreate,
    DocumentRecord,
    DocumentUpdate,
    MemberParty,
    NoParty,
    SupplierParty,
    party_allowed,
    party_columns,
)
from contacerta.services.base import TableService, VALIDATION_FAILED, to_wire
from contacerta.services.category_service import CATEGORY_NOT_FOUND_MESSAGE, finance_kind_for
from contacerta.services.member_service import MEMBER_NOT_FOUND_MESSAGE
from contacerta.services.supplier_service import SUPPLIER_NOT_FOUND_MESSAGE

# Initialize logger
logger = get_logger(__name__)

PARTY_MISMATCH_MESSAGE = (
    "Documentos a pagar aceitam apenas fornecedor e documentos a receber apenas membro."
)
CATEGORY_MISMATCH_MESSAGE = "A categoria selecionada não corresponde ao tipo do documento."
COST_CENTER_NOT_FOUND_MESSAGE = "Centro de custo não encontrado nesta organização."
DOCUMENT_NOT_FOUND_MESSAGE = "Documento não encontrado."

Party = Union[SupplierParty, MemberParty, NoParty]


class DocumentService(TableService[DocumentRecord]):
    table = "documents"
    record_type = DocumentRecord
    search_columns = ("description",)
    order_by = "due_date"

    async def list(
        self,
        organization_id: UUID,
        search: str = "",
        document_type: Optional[DocumentType] = None,
        status: Optional[DocumentStatus] = None,
        limit: Optional[int] = None,
    ) -> ServiceResult[List[DocumentRecord]]:
        filters = {}
        if document_type is not None:
            filters["type"] = document_type.value
        if status is not None:
            filters["status"] = status.value
        return await super().list(organization_id, search, filters=filters, limit=limit)

    # --------------------------
    # Validation
    # --------------------------

    async def _check(
        self,
        organization_id: UUID,
        document_type: DocumentType,
        party: Party,
        category_id: Optional[UUID],
    ) -> Optional[ServiceResult]:
        """Return a failure when the party or category does not fit the type or organization."""
        if not party_allowed(document_type, party):
            return ServiceResult.failure(PARTY_MISMATCH_MESSAGE, VALIDATION_FAILED)

        failure = await self._check_references(organization_id, [
            ("suppliers", getattr(party, "supplier_id", None), SUPPLIER_NOT_FOUND_MESSAGE),
            ("members", getattr(party, "member_id", None), MEMBER_NOT_FOUND_MESSAGE),
        ])
        if failure is not None or category_id is None:
            return failure

        category, failure = await self._resolve_reference(
            "categories", category_id, organization_id, CATEGORY_NOT_FOUND_MESSAGE
        )
        if failure is not None:
            return failure
        if category.get("finance_kind") != finance_kind_for(document_type).value:
            return ServiceResult.failure(CATEGORY_MISMATCH_MESSAGE, VALIDATION_FAILED)
        return None

    async def _check_cost_center(self, organization_id: UUID, cost_center_id: UUID) -> Optional[ServiceResult]:
        return await self._check_references(
            organization_id, [("cost_centers", cost_center_id, COST_CENTER_NOT_FOUND_MESSAGE)]
        )

    # --------------------------
    # Operations
    # --------------------------

    async def create(self, data: DocumentCreate) -> ServiceResult[DocumentRecord]:
        failure = await self._check_cost_center(data.organization_id, data.cost_center_id)
        if failure is None:
            failure = await self._check(data.organization_id, data.type, data.party, data.category_id)
        if failure is not None:
            return failure

        values = to_wire(data)
        values.pop("party")
        values.update(party_columns(data.party))
        return await self._insert(values)

    async def update(
        self,
        organization_id: UUID,
        record_id: UUID,
        data: DocumentUpdate,
    ) -> ServiceResult[DocumentRecord]:
        """
        Update a document.

        Changing the type without a new party keeps the stored party only
        if it still applies; otherwise it is cleared.
        """
        values = to_wire(data, exclude_unset=True)
        values.pop("party", None)

        if data.cost_center_id is not None:
            failure = await self._check_cost_center(organization_id, data.cost_center_id)
            if failure is not None:
                return failure

        if {"type", "party", "category_id"} & data.model_fields_set:
            current = await self.get(organization_id, record_id)
            if not current.ok:
                return current
            if current.data is None:
                return ServiceResult.failure(DOCUMENT_NOT_FOUND_MESSAGE, VALIDATION_FAILED)

            document_type = data.type or current.data.type
            if data.party is not None:
                party = data.party
            else:
                party = current.data.party
                if not party_allowed(document_type, party):
                    party = NoParty()
            category_id = (
                data.category_id if "category_id" in data.model_fields_set else current.data.category_id
            )
            if "category_id" not in data.model_fields_set and document_type != current.data.type:
                category_id = None
                values["category_id"] = None

            failure = await self._check(organization_id, document_type, party, category_id)
            if failure is not None:
                return failure
            values.update(party_columns(party))

        return await self._update(organization_id, record_id, values)
