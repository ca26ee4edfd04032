"""
Tenant Query Utilities Module
=============================

Row-level security for the reference backend.

An identity may read rows of every organization it holds a membership in,
and write rows of those where its role permits writes.

Features:
- Automatic tenant filtering for queries
- Access denied by absence: queries against other organizations return
  no rows instead of raising
- Writable-organization lookup for inserts, updates and deletes

Security:
- Enforces tenant isolation at the query level
- Logs tenant isolation violations
"""

from typing import Optional, Set, Type, TypeVar
from uuid import UUID

from sqlalchemy import false
from sqlalchemy.orm import Query, Session

from contacerta.core.logging import get_logger, security_logger
from contacerta.core.rbac import WRITER_ROLES
from contacerta.models.membership import Membership

# Initialize logger
logger = get_logger(__name__)

# Generic type for models with organization_id
T = TypeVar("T")


class TenantQuery:
    """
    Helper class for tenant-isolated database queries.

    Usage:
        tenant_query = TenantQuery(db, Member, identity_id)
        members = tenant_query.filter_by_tenant_id(org_id).all()
    """

    def __init__(self, db: Session, model: Type[T], identity_id: UUID):
        """
        Initialize tenant query helper.

        Args:
            db: Database session
            model: SQLAlchemy model class
            identity_id: Identity performing the query
        """
        self.db = db
        self.model = model
        self.identity_id = identity_id
        self._base_query = db.query(model)

    def accessible_organization_ids(self, writable: bool = False) -> Set[UUID]:
        """
        Organizations the identity holds a membership in.

        Args:
            writable: Only organizations where the role permits writes

        Returns:
            Set of organization UUIDs
        """
        query = self.db.query(Membership.organization_id).filter(
            Membership.identity_id == self.identity_id
        )
        if writable:
            query = query.filter(Membership.role.in_(list(WRITER_ROLES)))
        return {row[0] for row in query.all()}

    def filter_by_tenant(self) -> Query:
        """
        Get query filtered to every organization the identity can read.

        Returns:
            Filtered SQLAlchemy query
        """
        if not hasattr(self.model, "organization_id"):
            # Model is not tenant-scoped (e.g. Organization)
            return self._base_query

        return self._base_query.filter(
            self.model.organization_id.in_(self.accessible_organization_ids())
        )

    def filter_by_tenant_id(self, organization_id: UUID) -> Query:
        """
        Get query filtered by a specific organization.

        Without a membership the query matches nothing; the attempt is
        logged and never raised.

        Args:
            organization_id: Organization UUID to filter by

        Returns:
            Filtered SQLAlchemy query
        """
        if not self.has_access(organization_id):
            security_logger.log_tenant_isolation_violation(
                identity_id=str(self.identity_id),
                target_organization=str(organization_id),
                resource=self.model.__tablename__,
            )
            return self._base_query.filter(false())

        return self._base_query.filter(self.model.organization_id == organization_id)

    def get_by_id(self, resource_id: UUID) -> Optional[T]:
        """
        Get a resource by ID with tenant validation.

        Args:
            resource_id: Resource UUID

        Returns:
            Resource instance, or None when missing or owned by an
            organization the identity cannot read
        """
        resource = self._base_query.filter(self.model.id == resource_id).first()

        if resource is None:
            return None

        if hasattr(resource, "organization_id"):
            if not self.has_access(resource.organization_id):
                security_logger.log_tenant_isolation_violation(
                    identity_id=str(self.identity_id),
                    target_organization=str(resource.organization_id),
                    resource=self.model.__tablename__,
                )
                return None

        return resource

    def has_access(self, organization_id: UUID, writable: bool = False) -> bool:
        """
        Check that the identity holds a (writable) membership.

        Args:
            organization_id: Organization UUID to check
            writable: Require a role that permits writes

        Returns:
            True if access is allowed
        """
        return organization_id in self.accessible_organization_ids(writable=writable)


# =====================================
# Convenience Functions
# =====================================

def tenant_query(db: Session, model: Type[T], identity_id: UUID, organization_id: UUID) -> Query:
    """
    Get an organization-scoped query for a model.

    Usage:
        members = tenant_query(db, Member, identity_id, org_id).all()
    """
    return TenantQuery(db, model, identity_id).filter_by_tenant_id(organization_id)
