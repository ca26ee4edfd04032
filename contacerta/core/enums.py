"""
Enumeration Module
==================

Defines enumerations used across the application.

Each entity has exactly one status representation; wire values are the
ones stored by the backend.
"""

from enum import Enum


class RecordStatus(str, Enum):
    """Active/inactive status for suppliers and cost centers."""

    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"


class MemberStatus(str, Enum):
    """Church member status."""

    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    VISITOR = "VISITOR"


class AssetStatus(str, Enum):
    """Lifecycle status of a physical asset."""

    IN_USE = "IN_USE"
    IN_STORAGE = "IN_STORAGE"
    IN_MAINTENANCE = "IN_MAINTENANCE"
    DISPOSED = "DISPOSED"


class SupplierType(str, Enum):
    """Natural person (PF) or legal entity (PJ)."""

    PF = "PF"
    PJ = "PJ"


class BankAccountType(str, Enum):
    CHECKING = "corrente"
    SAVINGS = "poupanca"


class CostCenterKind(str, Enum):
    """Budget bucket kind. MINISTRY cost centers are bound to a ministry."""

    MINISTRY = "MINISTRY"
    EVENT = "EVENT"
    GROUP = "GROUP"


class CategoryScope(str, Enum):
    FINANCE = "FINANCE"
    SUPPLIER = "SUPPLIER"
    ASSET = "ASSET"


class FinanceKind(str, Enum):
    INCOME = "INCOME"
    EXPENSE = "EXPENSE"


class DocumentType(str, Enum):
    """Payable: owed by the organization. Receivable: owed to it."""

    PAYABLE = "PAYABLE"
    RECEIVABLE = "RECEIVABLE"


class DocumentStatus(str, Enum):
    OPEN = "OPEN"
    PAID = "PAID"
    OVERDUE = "OVERDUE"
