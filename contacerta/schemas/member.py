"""
Member Schemas Module
=====================

Pydantic models for church members.
"""

from datetime import date
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from contacerta.core.enums import MemberStatus
from contacerta.schemas.common import Address, TenantRecord


class MemberFields(BaseModel):
    """Editable member fields."""

    full_name: str = Field(..., min_length=1, max_length=255, description="Full name")
    email: Optional[str] = None
    phone: Optional[str] = None
    birth_date: Optional[date] = None
    membership_date: Optional[date] = None
    baptism_date: Optional[date] = None
    status: MemberStatus = MemberStatus.ACTIVE
    address: Optional[Address] = None
    notes: Optional[str] = None

    @field_validator("address", mode="before")
    @classmethod
    def parse_address(cls, value):
        return Address.parse(value)


class MemberCreate(MemberFields):
    organization_id: UUID


class MemberUpdate(BaseModel):
    """Partial update; only fields explicitly set are sent."""

    full_name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    email: Optional[str] = None
    phone: Optional[str] = None
    birth_date: Optional[date] = None
    membership_date: Optional[date] = None
    baptism_date: Optional[date] = None
    status: Optional[MemberStatus] = None
    address: Optional[Address] = None
    notes: Optional[str] = None

    @field_validator("address", mode="before")
    @classmethod
    def parse_address(cls, value):
        return Address.parse(value)


class MemberRecord(TenantRecord, MemberFields):
    """Member as stored by the backend."""
