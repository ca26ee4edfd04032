"""
Model Mixins
============

Columns and helpers shared by the tenant-scoped tables.

Every tenant-scoped entity carries an ``organization_id`` foreign key;
row-level security (see ``contacerta.core.tenant``) filters on it.
"""

import enum
import uuid
from datetime import date, datetime, UTC
from typing import Any

from sqlalchemy import DateTime, Enum as SAEnum, ForeignKey
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column


def utcnow() -> datetime:
    return datetime.now(UTC)


def enum_column(enum_cls: type[enum.Enum]) -> SAEnum:
    """Store enum members by their wire value."""
    return SAEnum(
        enum_cls,
        native_enum=False,
        length=32,
        values_callable=lambda members: [member.value for member in members],
    )


def to_wire(value: Any) -> Any:
    """Convert a column value to its JSON wire representation."""
    if isinstance(value, enum.Enum):
        return value.value
    if isinstance(value, uuid.UUID):
        return str(value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return value


class IdMixin:
    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
        index=True,
    )


class TimestampMixin:
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        nullable=False,
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        onupdate=utcnow,
        nullable=False,
    )


class TenantMixin:
    """Owning organization of a tenant-scoped row."""

    organization_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("organizations.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )


class SerializableMixin:
    def to_dict(self) -> dict:
        """
        Convert the row to a wire dictionary.

        Returns:
            Dictionary keyed by column name with JSON-compatible values
        """
        return {
            column.key: to_wire(getattr(self, column.key))
            for column in self.__table__.columns
        }
