"""
Services Package Initialization
===============================

Per-entity operations over the backend collaborator. Every operation
returns a ServiceResult.

Usage:
    services = ServiceRegistry(backend)
    result = await services.members.list(organization_id, search="ana")
"""

from contacerta.backend.base import Backend
from contacerta.services.asset_service import AssetService
from contacerta.services.base import TableService
from contacerta.services.category_service import CategoryService, finance_kind_for
from contacerta.services.cost_center_service import CostCenterService
from contacerta.services.document_service import DocumentService
from contacerta.services.member_service import MemberService
from contacerta.services.ministry_service import MinistryService
from contacerta.services.organization_service import OrganizationService
from contacerta.services.report_service import ReportService, summarize
from contacerta.services.supplier_service import SupplierService


class ServiceRegistry:
    """All services bound to one backend."""

    def __init__(self, backend: Backend):
        self.backend = backend
        self.members = MemberService(backend)
        self.ministries = MinistryService(backend)
        self.suppliers = SupplierService(backend)
        self.cost_centers = CostCenterService(backend)
        self.categories = CategoryService(backend)
        self.documents = DocumentService(backend)
        self.assets = AssetService(backend)
        self.organizations = OrganizationService(backend)
        self.reports = ReportService(backend)


__all__ = [
    "ServiceRegistry",
    "TableService",
    "AssetService",
    "CategoryService",
    "CostCenterService",
    "DocumentService",
    "MemberService",
    "MinistryService",
    "OrganizationService",
    "ReportService",
    "SupplierService",
    "finance_kind_for",
    "summarize",
]
