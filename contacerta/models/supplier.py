"""
Supplier Model
==============

Natural person (PF) or company (PJ) the organization pays.
"""

from typing import Optional

from sqlalchemy import JSON, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from contacerta.core.enums import RecordStatus, SupplierType
from contacerta.db.base import Base
from contacerta.models.mixins import (
    IdMixin,
    TenantMixin,
    TimestampMixin,
    SerializableMixin,
    enum_column,
)


class Supplier(IdMixin, TenantMixin, TimestampMixin, SerializableMixin, Base):
    """
    Supplier entity.

    Attributes:
        type: PF or PJ
        tax_id: CPF or CNPJ digits
        address: Structured address (see schemas.common.Address)
        bank_info: Structured bank account (see schemas.common.BankInfo)
    """

    __tablename__ = "suppliers"

    type: Mapped[SupplierType] = mapped_column(
        enum_column(SupplierType),
        nullable=False,
        default=SupplierType.PJ,
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    tax_id: Mapped[Optional[str]] = mapped_column(String(32), nullable=True)
    email: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    phone: Mapped[Optional[str]] = mapped_column(String(32), nullable=True)
    address: Mapped[Optional[dict]] = mapped_column(JSON, nullable=True)
    bank_info: Mapped[Optional[dict]] = mapped_column(JSON, nullable=True)
    category: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    status: Mapped[RecordStatus] = mapped_column(
        enum_column(RecordStatus),
        nullable=False,
        default=RecordStatus.ACTIVE,
    )
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    def __repr__(self) -> str:
        return f"<Supplier(id={self.id}, name={self.name})>"
