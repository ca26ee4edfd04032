"""
Schemas Package Initialization
==============================

Pydantic schemas for identities, organizations and tenant-scoped records.

Usage:
    from contacerta.schemas import MemberCreate, MemberRecord
"""

from contacerta.schemas.identity import Identity
from contacerta.schemas.common import Address, BankInfo, TenantRecord
from contacerta.schemas.organization import (
    OrgListItem,
    ActiveOrganization,
    OrganizationCreate,
    InviteCreate,
    InviteToken,
)
from contacerta.schemas.member import MemberCreate, MemberUpdate, MemberRecord
from contacerta.schemas.ministry import (
    MinistryCreate,
    MinistryUpdate,
    MinistryRecord,
    MemberMinistryRecord,
)
from contacerta.schemas.supplier import SupplierCreate, SupplierUpdate, SupplierRecord
from contacerta.schemas.cost_center import CostCenterCreate, CostCenterUpdate, CostCenterRecord
from contacerta.schemas.category import CategoryCreate, CategoryRecord
from contacerta.schemas.document import (
    SupplierParty,
    MemberParty,
    NoParty,
    DocumentParty,
    DocumentCreate,
    DocumentUpdate,
    DocumentRecord,
    party_from_ids,
)
from contacerta.schemas.asset import AssetCreate, AssetUpdate, AssetRecord
from contacerta.schemas.report import CostCenterBreakdown, ReportSummary

__all__ = [
    "Identity",
    "Address",
    "BankInfo",
    "TenantRecord",
    "OrgListItem",
    "ActiveOrganization",
    "OrganizationCreate",
    "InviteCreate",
    "InviteToken",
    "MemberCreate",
    "MemberUpdate",
    "MemberRecord",
    "MinistryCreate",
    "MinistryUpdate",
    "MinistryRecord",
    "MemberMinistryRecord",
    "SupplierCreate",
    "SupplierUpdate",
    "SupplierRecord",
    "CostCenterCreate",
    "CostCenterUpdate",
    "CostCenterRecord",
    "CategoryCreate",
    "CategoryRecord",
    "SupplierParty",
    "MemberParty",
    "NoParty",
    "DocumentParty",
    "DocumentCreate",
    "DocumentUpdate",
    "DocumentRecord",
    "party_from_ids",
    "AssetCreate",
    "AssetUpdate",
    "AssetRecord",
    "CostCenterBreakdown",
    "ReportSummary",
]
