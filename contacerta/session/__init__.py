"""
Session Package Initialization
==============================

Identity, active organization pointer and organization directory.

Usage:
    from contacerta.session import ActiveOrganizationSelector, OrganizationDirectoryCache
"""

from contacerta.session.identity import SessionStore
from contacerta.session.storage import FileStorage, KeyValueStorage, MemoryStorage
from contacerta.session.active_org import ActiveOrganizationSelector
from contacerta.session.org_directory import CacheRecord, OrganizationDirectoryCache

__all__ = [
    "SessionStore",
    "KeyValueStorage",
    "MemoryStorage",
    "FileStorage",
    "ActiveOrganizationSelector",
    "CacheRecord",
    "OrganizationDirectoryCache",
]
