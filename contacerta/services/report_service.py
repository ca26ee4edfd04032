"""
Report Service Module
=====================

Totals over an organization's documents, broken down by cost center.

Documents whose cost center no longer exists are not dropped: they are
grouped under ``NO_COST_CENTER_LABEL``.
"""

from typing import Dict, Iterable, Optional
from uuid import UUID

from contacerta.backend.base import Backend, Query
from contacerta.core.enums import DocumentStatus, DocumentType
from contacerta.core.error_messages import translate_backend_error
from contacerta.core.exceptions import BackendError
from contacerta.core.logging import get_logger
from contacerta.core.result import ServiceResult
from contacerta.schemas.cost_center import CostCenterRecord
from contacerta.schemas.document import DocumentRecord
from contacerta.schemas.report import CostCenterBreakdown, NO_COST_CENTER_LABEL, ReportSummary

# Initialize logger
logger = get_logger(__name__)


def summarize(
    documents: Iterable[DocumentRecord],
    cost_centers: Iterable[CostCenterRecord],
) -> ReportSummary:
    """
    Reduce documents to totals.

    Args:
        documents: Documents of one organization
        cost_centers: Existing cost centers of the same organization

    Returns:
        ReportSummary with per-cost-center rows ordered by name and the
        no-cost-center group last
    """
    names = {cost_center.id: cost_center.name for cost_center in cost_centers}
    summary = ReportSummary()
    groups: Dict[Optional[UUID], CostCenterBreakdown] = {}

    for document in documents:
        key = document.cost_center_id if document.cost_center_id in names else None
        group = groups.get(key)
        if group is None:
            group = CostCenterBreakdown(
                cost_center_id=key,
                name=names[key] if key is not None else NO_COST_CENTER_LABEL,
            )
            groups[key] = group

        if document.type == DocumentType.PAYABLE:
            summary.total_payable_cents += document.amount_cents
            group.payable_cents += document.amount_cents
        else:
            summary.total_receivable_cents += document.amount_cents
            group.receivable_cents += document.amount_cents

        if document.status == DocumentStatus.PAID:
            summary.total_paid_cents += document.amount_cents
        else:
            summary.total_open_cents += document.amount_cents

        group.document_count += 1
        summary.document_count += 1

    summary.by_cost_center = sorted(
        groups.values(),
        key=lambda group: (group.cost_center_id is None, group.name.casefold()),
    )
    return summary


class ReportService:
    """Fetches documents and cost centers and summarizes them."""

    def __init__(self, backend: Backend):
        self.backend = backend

    summarize = staticmethod(summarize)

    async def summary(self, organization_id: UUID) -> ServiceResult[ReportSummary]:
        try:
            document_rows = await self.backend.select(
                Query(table="documents", organization_id=organization_id)
            )
            cost_center_rows = await self.backend.select(
                Query(table="cost_centers", organization_id=organization_id)
            )
        except BackendError as e:
            logger.warning("report_fetch_failed", organization_id=str(organization_id), code=e.code)
            return ServiceResult.failure(translate_backend_error(e, "documents"), e.code)

        documents = [DocumentRecord.model_validate(row) for row in document_rows]
        cost_centers = [CostCenterRecord.model_validate(row) for row in cost_center_rows]
        return ServiceResult.success(summarize(documents, cost_centers))
