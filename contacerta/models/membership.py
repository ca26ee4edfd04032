"""
Membership Models
=================

Membership binds one identity to one organization with exactly one role.
Invites grant a membership to whoever redeems their token.

Database Indexes:
- Unique: (organization_id, identity_id)
- Unique: invites.token
"""

import uuid
from datetime import datetime
from typing import TYPE_CHECKING, Optional

from sqlalchemy import DateTime, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship, Mapped, mapped_column

from contacerta.db.base import Base
from contacerta.models.mixins import (
    IdMixin,
    TenantMixin,
    TimestampMixin,
    SerializableMixin,
    enum_column,
)
from contacerta.models.role_enum import Role

if TYPE_CHECKING:
    from contacerta.models.organization import Organization


class Membership(IdMixin, TenantMixin, TimestampMixin, SerializableMixin, Base):
    """
    Identity-to-organization binding.

    Never mutated by the client core; role changes and revocation are
    external.
    """

    __tablename__ = "memberships"
    __table_args__ = (
        UniqueConstraint("organization_id", "identity_id", name="uq_membership_org_identity"),
    )

    identity_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        nullable=False,
        index=True,
    )

    role: Mapped[Role] = mapped_column(enum_column(Role), nullable=False, default=Role.READ_ONLY)

    organization: Mapped["Organization"] = relationship(
        "Organization",
        back_populates="memberships",
    )

    def __repr__(self) -> str:
        return (
            f"<Membership(organization_id={self.organization_id}, "
            f"identity_id={self.identity_id}, role={self.role})>"
        )


class Invite(IdMixin, TenantMixin, TimestampMixin, SerializableMixin, Base):
    """Single-use invitation to join an organization with a given role."""

    __tablename__ = "invites"

    token: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        nullable=False,
        unique=True,
        default=uuid.uuid4,
    )
    role: Mapped[Role] = mapped_column(enum_column(Role), nullable=False)
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    accepted_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    accepted_by: Mapped[Optional[uuid.UUID]] = mapped_column(UUID(as_uuid=True), nullable=True)
    created_by: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), nullable=False)
