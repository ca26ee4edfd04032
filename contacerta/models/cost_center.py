"""
Cost Center Model
=================

Budget bucket against which financial documents are allocated.

Constraints:
- kind = MINISTRY  <=>  ministry_id IS NOT NULL   (ck_cost_center_ministry)
- ministry_id unique: one cost center per ministry (uq_cost_center_ministry)
"""

import uuid
from typing import Optional

from sqlalchemy import CheckConstraint, ForeignKey, String, Text, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from contacerta.core.enums import CostCenterKind, RecordStatus
from contacerta.db.base import Base
from contacerta.models.mixins import (
    IdMixin,
    TenantMixin,
    TimestampMixin,
    SerializableMixin,
    enum_column,
)


class CostCenter(IdMixin, TenantMixin, TimestampMixin, SerializableMixin, Base):
    """
    Cost center entity.

    MINISTRY cost centers take their name from the bound ministry; EVENT and
    GROUP cost centers carry a free-text name and no ministry.
    """

    __tablename__ = "cost_centers"
    __table_args__ = (
        CheckConstraint(
            "(kind = 'MINISTRY' AND ministry_id IS NOT NULL) "
            "OR (kind <> 'MINISTRY' AND ministry_id IS NULL)",
            name="ck_cost_center_ministry",
        ),
        UniqueConstraint("ministry_id", name="uq_cost_center_ministry"),
    )

    kind: Mapped[CostCenterKind] = mapped_column(enum_column(CostCenterKind), nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    ministry_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("ministries.id", ondelete="CASCADE"),
        nullable=True,
    )
    status: Mapped[RecordStatus] = mapped_column(
        enum_column(RecordStatus),
        nullable=False,
        default=RecordStatus.ACTIVE,
    )
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    def __repr__(self) -> str:
        return f"<CostCenter(id={self.id}, kind={self.kind}, name={self.name})>"
