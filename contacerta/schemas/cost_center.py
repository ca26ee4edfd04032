"""
Cost Center Schemas Module
==========================

A MINISTRY cost center is bound to one ministry and named after it; EVENT
and GROUP cost centers carry a free-text name. The binding rules are
checked by CostCenterService so that violations come back as specific
messages instead of schema errors.
"""

from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field

from contacerta.core.enums import CostCenterKind, RecordStatus
from contacerta.schemas.common import TenantRecord


class CostCenterCreate(BaseModel):
    organization_id: UUID
    kind: CostCenterKind
    name: Optional[str] = Field(default=None, max_length=255)
    ministry_id: Optional[UUID] = None
    status: RecordStatus = RecordStatus.ACTIVE
    description: Optional[str] = None


class CostCenterUpdate(BaseModel):
    kind: Optional[CostCenterKind] = None
    name: Optional[str] = Field(default=None, max_length=255)
    ministry_id: Optional[UUID] = None
    status: Optional[RecordStatus] = None
    description: Optional[str] = None


class CostCenterRecord(TenantRecord):
    kind: CostCenterKind
    name: str
    ministry_id: Optional[UUID] = None
    status: RecordStatus = RecordStatus.ACTIVE
    description: Optional[str] = None
