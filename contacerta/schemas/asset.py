"""
Asset Schemas Module
====================
"""

from datetime import date
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field

from contacerta.core.enums import AssetStatus
from contacerta.schemas.common import TenantRecord
from contacerta.utils.formatting import format_asset_code


class AssetCreate(BaseModel):
    organization_id: UUID
    name: str = Field(..., min_length=1, max_length=255)
    code: Optional[str] = Field(default=None, max_length=64)
    description: Optional[str] = None
    category_id: Optional[UUID] = None
    supplier_id: Optional[UUID] = None
    status: AssetStatus = AssetStatus.IN_USE
    location: Optional[str] = None
    acquisition_at: Optional[date] = None
    acquisition_value_cents: int = Field(default=0, ge=0)


class AssetUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    code: Optional[str] = Field(default=None, max_length=64)
    description: Optional[str] = None
    category_id: Optional[UUID] = None
    supplier_id: Optional[UUID] = None
    status: Optional[AssetStatus] = None
    location: Optional[str] = None
    acquisition_at: Optional[date] = None
    acquisition_value_cents: Optional[int] = Field(default=None, ge=0)


class AssetRecord(TenantRecord):
    name: str
    code: Optional[str] = None
    description: Optional[str] = None
    category_id: Optional[UUID] = None
    supplier_id: Optional[UUID] = None
    status: AssetStatus = AssetStatus.IN_USE
    location: Optional[str] = None
    acquisition_at: Optional[date] = None
    acquisition_value_cents: int = 0

    @property
    def display_code(self) -> str:
        """Stored code, or ``PAT-XXXXXXXX`` derived from the id."""
        return format_asset_code(self.id, self.code)
