"""
Asset Model
===========

Physical asset (patrimônio) owned by the organization.
"""

import uuid
from datetime import date
from typing import Optional

from sqlalchemy import Date, ForeignKey, Integer, String, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from contacerta.core.enums import AssetStatus
from contacerta.db.base import Base
from contacerta.models.mixins import (
    IdMixin,
    TenantMixin,
    TimestampMixin,
    SerializableMixin,
    enum_column,
)


class Asset(IdMixin, TenantMixin, TimestampMixin, SerializableMixin, Base):
    __tablename__ = "assets"

    code: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
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
    status: Mapped[AssetStatus] = mapped_column(
        enum_column(AssetStatus),
        nullable=False,
        default=AssetStatus.IN_USE,
    )
    location: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    acquisition_at: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    acquisition_value_cents: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    def __repr__(self) -> str:
        return f"<Asset(id={self.id}, name={self.name})>"
