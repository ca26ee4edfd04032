"""
Ministry Models
===============

Ministries group members around a church activity. A ministry may be bound
to exactly one MINISTRY cost center.

Database Indexes:
- Unique: (organization_id, name)
- Unique: member_ministries (member_id, ministry_id)
"""

import uuid
from typing import Optional

from sqlalchemy import Boolean, ForeignKey, String, Text, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from contacerta.db.base import Base
from contacerta.models.mixins import IdMixin, TenantMixin, TimestampMixin, SerializableMixin


class Ministry(IdMixin, TenantMixin, TimestampMixin, SerializableMixin, Base):
    __tablename__ = "ministries"
    __table_args__ = (
        UniqueConstraint("organization_id", "name", name="uq_ministry_org_name"),
    )

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    def __repr__(self) -> str:
        return f"<Ministry(id={self.id}, name={self.name})>"


class MemberMinistry(IdMixin, TenantMixin, TimestampMixin, SerializableMixin, Base):
    """Link between a member and a ministry they serve in."""

    __tablename__ = "member_ministries"
    __table_args__ = (
        UniqueConstraint("member_id", "ministry_id", name="uq_member_ministry"),
    )

    member_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("members.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    ministry_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("ministries.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
