"""
Document Model
==============

Financial obligation owed by (PAYABLE) or to (RECEIVABLE) the organization.

Constraints:
- PAYABLE documents never reference a member   (ck_document_party)
- RECEIVABLE documents never reference a supplier
- cost_center_id has no foreign key: deleting a cost center leaves its
  documents in place with a dangling reference
"""

import uuid
from datetime import date
from typing import Optional

from sqlalchemy import CheckConstraint, Date, ForeignKey, Integer, String
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from contacerta.core.enums import DocumentStatus, DocumentType
from contacerta.db.base import Base
from contacerta.models.mixins import (
    IdMixin,
    TenantMixin,
    TimestampMixin,
    SerializableMixin,
    enum_column,
)


class Document(IdMixin, TenantMixin, TimestampMixin, SerializableMixin, Base):
    """
    Payable or receivable document.

    Attributes:
        amount_cents: Amount in integer cents
        cost_center_id: Mandatory at creation, may later dangle
        supplier_id: Party of a payable
        member_id: Party of a receivable
    """

    __tablename__ = "documents"
    __table_args__ = (
        CheckConstraint(
            "(type = 'PAYABLE' AND member_id IS NULL) "
            "OR (type = 'RECEIVABLE' AND supplier_id IS NULL)",
            name="ck_document_party",
        ),
        CheckConstraint("amount_cents >= 0", name="ck_document_amount"),
    )

    type: Mapped[DocumentType] = mapped_column(enum_column(DocumentType), nullable=False)
    description: Mapped[str] = mapped_column(String(500), nullable=False)
    amount_cents: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    issue_date: Mapped[date] = mapped_column(Date, nullable=False)
    due_date: Mapped[date] = mapped_column(Date, nullable=False)
    payment_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    status: Mapped[DocumentStatus] = mapped_column(
        enum_column(DocumentStatus),
        nullable=False,
        default=DocumentStatus.OPEN,
    )

    # No foreign key: may reference a deleted cost center
    cost_center_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        nullable=False,
        index=True,
    )
    category_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("categories.id", ondelete="SET NULL"),
        nullable=True,
    )
    supplier_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("suppliers.id", ondelete="SET NULL"),
        nullable=True,
    )
    member_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("members.id", ondelete="SET NULL"),
        nullable=True,
    )

    def __repr__(self) -> str:
        return f"<Document(id={self.id}, type={self.type}, amount_cents={self.amount_cents})>"
