"""
Member Model
============

A person in the church community (member or visitor).
"""

from datetime import date
from typing import Optional

from sqlalchemy import Date, JSON, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from contacerta.core.enums import MemberStatus
from contacerta.db.base import Base
from contacerta.models.mixins import (
    IdMixin,
    TenantMixin,
    TimestampMixin,
    SerializableMixin,
    enum_column,
)


class Member(IdMixin, TenantMixin, TimestampMixin, SerializableMixin, Base):
    """
    Church member.

    Attributes:
        full_name: Display name
        status: ACTIVE, INACTIVE or VISITOR
        address: Structured address (see schemas.common.Address)
    """

    __tablename__ = "members"

    full_name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    email: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    phone: Mapped[Optional[str]] = mapped_column(String(32), nullable=True)
    birth_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    membership_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    baptism_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    status: Mapped[MemberStatus] = mapped_column(
        enum_column(MemberStatus),
        nullable=False,
        default=MemberStatus.ACTIVE,
    )
    address: Mapped[Optional[dict]] = mapped_column(JSON, nullable=True)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    def __repr__(self) -> str:
        return f"<Member(id={self.id}, full_name={self.full_name})>"
