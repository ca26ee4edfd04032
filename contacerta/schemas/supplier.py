"""
Supplier Schemas Module
=======================

Pydantic models for suppliers. Address and bank information are parsed
into structured sub-records on the way in.
"""

from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from contacerta.core.enums import RecordStatus, SupplierType
from contacerta.schemas.common import Address, BankInfo, TenantRecord


class _StructuredFields(BaseModel):
    address: Optional[Address] = None
    bank_info: Optional[BankInfo] = None

    @field_validator("address", mode="before")
    @classmethod
    def parse_address(cls, value):
        return Address.parse(value)

    @field_validator("bank_info", mode="before")
    @classmethod
    def parse_bank_info(cls, value):
        return BankInfo.parse(value)


class SupplierFields(_StructuredFields):
    type: SupplierType = SupplierType.PJ
    name: str = Field(..., min_length=1, max_length=255)
    tax_id: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    category: Optional[str] = None
    status: RecordStatus = RecordStatus.ACTIVE
    notes: Optional[str] = None


class SupplierCreate(SupplierFields):
    organization_id: UUID


class SupplierUpdate(_StructuredFields):
    type: Optional[SupplierType] = None
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    tax_id: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    category: Optional[str] = None
    status: Optional[RecordStatus] = None
    notes: Optional[str] = None


class SupplierRecord(TenantRecord, SupplierFields):
    """Supplier as stored by the backend."""

    @property
    def is_active(self) -> bool:
        return self.status == RecordStatus.ACTIVE
