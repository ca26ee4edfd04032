"""Row-level security helpers."""

from .tenant_query import TenantQuery, tenant_query

__all__ = ["TenantQuery", "tenant_query"]
