"""
Category Schemas Module
=======================
"""

from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field

from contacerta.core.enums import CategoryScope, FinanceKind
from contacerta.schemas.common import TenantRecord


class CategoryCreate(BaseModel):
    organization_id: UUID
    name: str = Field(..., min_length=1, max_length=255)
    scope: CategoryScope = CategoryScope.FINANCE
    finance_kind: Optional[FinanceKind] = None


class CategoryRecord(TenantRecord):
    name: str
    scope: CategoryScope
    finance_kind: Optional[FinanceKind] = None
