"""
Organization Model
==================

Represents a tenant in the multi-tenant architecture.

Each organization:
- Is isolated from other organizations
- Owns members, suppliers, documents, cost centers, assets, ministries
  and categories
- Acts as a security boundary

Database Indexes:
- Primary key: id (UUID)
"""

from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import String
from sqlalchemy.orm import relationship, Mapped, mapped_column

from contacerta.db.base import Base
from contacerta.models.mixins import IdMixin, TimestampMixin, SerializableMixin

if TYPE_CHECKING:
    from contacerta.models.membership import Membership


class Organization(IdMixin, TimestampMixin, SerializableMixin, Base):
    """
    Organization Entity (Tenant Root).

    Security Boundary:
        Organizations provide complete data isolation. An identity sees an
        organization's rows only while it holds a membership in it.

    Attributes:
        id: UUID primary key
        name: Display name
        tax_id: Optional CNPJ
        memberships: Identities granted access
    """

    __tablename__ = "organizations"

    name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    tax_id: Mapped[Optional[str]] = mapped_column(String(32), nullable=True)

    memberships: Mapped[List["Membership"]] = relationship(
        "Membership",
        back_populates="organization",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        return f"<Organization(id={self.id}, name={self.name})>"
