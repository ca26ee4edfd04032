"""
Category Model
==============

Classifies documents (FINANCE scope, split into INCOME and EXPENSE),
suppliers and assets.
"""

from typing import Optional

from sqlalchemy import String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from contacerta.core.enums import CategoryScope, FinanceKind
from contacerta.db.base import Base
from contacerta.models.mixins import (
    IdMixin,
    TenantMixin,
    TimestampMixin,
    SerializableMixin,
    enum_column,
)


class Category(IdMixin, TenantMixin, TimestampMixin, SerializableMixin, Base):
    __tablename__ = "categories"
    __table_args__ = (
        UniqueConstraint(
            "organization_id",
            "scope",
            "finance_kind",
            "name",
            name="uq_category_org_scope_kind_name",
        ),
    )

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    scope: Mapped[CategoryScope] = mapped_column(enum_column(CategoryScope), nullable=False)
    finance_kind: Mapped[Optional[FinanceKind]] = mapped_column(
        enum_column(FinanceKind),
        nullable=True,
    )

    def __repr__(self) -> str:
        return f"<Category(id={self.id}, scope={self.scope}, name={self.name})>"
