"""
Model Package Initialization
============================

Ensures models are properly registered when imported by the application.

All SQLAlchemy ORM models are exported from this module.

Usage:
    from contacerta.models import Organization, Membership, Role
"""

from .organization import Organization
from .membership import Membership, Invite
from .member import Member
from .ministry import Ministry, MemberMinistry
from .supplier import Supplier
from .cost_center import CostCenter
from .category import Category
from .document import Document
from .asset import Asset
from .role_enum import Role

__all__ = [
    "Organization",
    "Membership",
    "Invite",
    "Member",
    "Ministry",
    "MemberMinistry",
    "Supplier",
    "CostCenter",
    "Category",
    "Document",
    "Asset",
    "Role",
]
