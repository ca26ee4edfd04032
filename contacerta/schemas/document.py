"""
Document Schemas Module
=======================

Pydantic models for payable and receivable documents.

The counterparty of a document is a tagged variant::

    DocumentParty = SupplierParty | MemberParty | NoParty

so a document can never reference a supplier and a member at once. On the
wire the party is still two nullable columns (``supplier_id`` and
``member_id``); ``party_from_ids`` and ``party_columns`` convert between
the two shapes.
"""

from datetime import date
from typing import Annotated, Literal, Optional, Union
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, model_validator

from contacerta.core.enums import DocumentStatus, DocumentType
from contacerta.schemas.common import TenantRecord


# ==========================
# Party Variant
# ==========================

class SupplierParty(BaseModel):
    kind: Literal["supplier"] = "supplier"
    supplier_id: UUID

    model_config = ConfigDict(frozen=True)


class MemberParty(BaseModel):
    kind: Literal["member"] = "member"
    member_id: UUID

    model_config = ConfigDict(frozen=True)


class NoParty(BaseModel):
    kind: Literal["none"] = "none"

    model_config = ConfigDict(frozen=True)


DocumentParty = Annotated[
    Union[SupplierParty, MemberParty, NoParty],
    Field(discriminator="kind"),
]


def party_from_ids(
    document_type: DocumentType,
    supplier_id: Optional[UUID],
    member_id: Optional[UUID],
) -> Union[SupplierParty, MemberParty, NoParty]:
    """
    Normalize a pair of party columns for a document type.

    Payables never carry a member and receivables never carry a supplier;
    the reference that does not apply is dropped.

    Args:
        document_type: PAYABLE or RECEIVABLE
        supplier_id: Supplier reference, if any
        member_id: Member reference, if any

    Returns:
        The party that applies to the document type
    """
    if document_type == DocumentType.PAYABLE:
        return SupplierParty(supplier_id=supplier_id) if supplier_id else NoParty()
    return MemberParty(member_id=member_id) if member_id else NoParty()


def party_columns(party: Union[SupplierParty, MemberParty, NoParty]) -> dict:
    """Wire columns for a party."""
    return {
        "supplier_id": str(party.supplier_id) if isinstance(party, SupplierParty) else None,
        "member_id": str(party.member_id) if isinstance(party, MemberParty) else None,
    }


def party_allowed(
    document_type: DocumentType,
    party: Union[SupplierParty, MemberParty, NoParty],
) -> bool:
    """Check that a party may appear on a document of the given type."""
    if isinstance(party, SupplierParty):
        return document_type == DocumentType.PAYABLE
    if isinstance(party, MemberParty):
        return document_type == DocumentType.RECEIVABLE
    return True


# ==========================
# Request Schemas
# ==========================

class DocumentCreate(BaseModel):
    organization_id: UUID
    type: DocumentType
    description: str = Field(..., min_length=1, max_length=500)
    amount_cents: int = Field(..., ge=0, description="Amount in cents")
    issue_date: date
    due_date: date
    payment_date: Optional[date] = None
    status: DocumentStatus = DocumentStatus.OPEN
    cost_center_id: UUID
    category_id: Optional[UUID] = None
    party: DocumentParty = Field(default_factory=NoParty)


class DocumentUpdate(BaseModel):
    type: Optional[DocumentType] = None
    description: Optional[str] = Field(default=None, min_length=1, max_length=500)
    amount_cents: Optional[int] = Field(default=None, ge=0)
    issue_date: Optional[date] = None
    due_date: Optional[date] = None
    payment_date: Optional[date] = None
    status: Optional[DocumentStatus] = None
    cost_center_id: Optional[UUID] = None
    category_id: Optional[UUID] = None
    party: Optional[DocumentParty] = None


# ==========================
# Record Schema
# ==========================

class DocumentRecord(TenantRecord):
    """Document as stored by the backend."""

    type: DocumentType
    description: str
    amount_cents: int
    issue_date: date
    due_date: date
    payment_date: Optional[date] = None
    status: DocumentStatus = DocumentStatus.OPEN
    cost_center_id: UUID
    category_id: Optional[UUID] = None
    supplier_id: Optional[UUID] = None
    member_id: Optional[UUID] = None

    @model_validator(mode="after")
    def normalize_party(self) -> "DocumentRecord":
        # Rows written before the party constraint existed may carry both
        if self.type == DocumentType.PAYABLE:
            self.member_id = None
        else:
            self.supplier_id = None
        return self

    @property
    def party(self) -> Union[SupplierParty, MemberParty, NoParty]:
        return party_from_ids(self.type, self.supplier_id, self.member_id)
