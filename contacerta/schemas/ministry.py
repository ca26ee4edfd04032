"""
Ministry Schemas Module
=======================
"""

from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field

from contacerta.schemas.common import TenantRecord


class MinistryCreate(BaseModel):
    organization_id: UUID
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    active: bool = True


class MinistryUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = None
    active: Optional[bool] = None


class MinistryRecord(TenantRecord):
    name: str
    description: Optional[str] = None
    active: bool = True


class MemberMinistryRecord(TenantRecord):
    member_id: UUID
    ministry_id: UUID
