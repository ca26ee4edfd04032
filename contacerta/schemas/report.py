"""
Report Schemas Module
=====================

Aggregated totals over financial documents.
"""

from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field

NO_COST_CENTER_LABEL = "Sem centro de custo"


class CostCenterBreakdown(BaseModel):
    """Totals for one cost center, or for documents without one."""

    cost_center_id: Optional[UUID] = Field(
        default=None,
        description="Cost center UUID, None for the no-cost-center group",
    )
    name: str
    payable_cents: int = 0
    receivable_cents: int = 0
    document_count: int = 0

    @property
    def balance_cents(self) -> int:
        return self.receivable_cents - self.payable_cents


class ReportSummary(BaseModel):
    total_payable_cents: int = 0
    total_receivable_cents: int = 0
    total_paid_cents: int = 0
    total_open_cents: int = 0
    document_count: int = 0
    by_cost_center: List[CostCenterBreakdown] = Field(default_factory=list)

    @property
    def balance_cents(self) -> int:
        return self.total_receivable_cents - self.total_payable_cents
