"""
Tenant Query Utilities Unit Tests
==================================

Tests for row-level security emulation including:
- TenantQuery class
- filter_by_tenant method
- filter_by_tenant_id method (access denied by absence)
- get_by_id with tenant validation
- Writable organizations per role
"""

import pytest
from uuid import uuid4

from sqlalchemy.orm import Session

from contacerta.core.tenant.tenant_query import TenantQuery, tenant_query
from contacerta.models import Member, Organization, Role


pytestmark = pytest.mark.tenant


@pytest.fixture
def members(db_session: Session, sample_organization: Organization, second_organization: Organization):
    """One member in each organization."""
    own = Member(organization_id=sample_organization.id, full_name="Ana Souza")
    foreign = Member(organization_id=second_organization.id, full_name="Bruno Lima")
    db_session.add_all([own, foreign])
    db_session.commit()
    return own, foreign


class TestTenantQueryFilterByTenant:
    """Tests for TenantQuery.filter_by_tenant method."""

    def test_filter_by_tenant_returns_only_member_organizations(
        self,
        db_session: Session,
        identity,
        owner_membership,
        members,
        sample_organization: Organization,
    ):
        """Test that an identity only sees rows of its organizations."""
        # Arrange
        helper = TenantQuery(db_session, Member, identity.id)

        # Act
        rows = helper.filter_by_tenant().all()

        # Assert
        assert len(rows) == 1
        assert rows[0].organization_id == sample_organization.id

    def test_filter_by_tenant_spans_every_membership(
        self,
        db_session: Session,
        identity,
        add_membership,
        sample_organization: Organization,
        second_organization: Organization,
        members,
    ):
        """Test that two memberships expose both organizations' rows."""
        # Arrange
        add_membership(sample_organization, identity, Role.OWNER)
        add_membership(second_organization, identity, Role.READ_ONLY)
        helper = TenantQuery(db_session, Member, identity.id)

        # Act
        rows = helper.filter_by_tenant().all()

        # Assert
        assert {row.full_name for row in rows} == {"Ana Souza", "Bruno Lima"}

    def test_filter_by_tenant_without_memberships_is_empty(self, db_session: Session, members):
        """Test that an identity without memberships sees nothing."""
        # Act
        rows = TenantQuery(db_session, Member, uuid4()).filter_by_tenant().all()

        # Assert
        assert rows == []


class TestTenantQueryFilterByTenantId:
    """Tests for TenantQuery.filter_by_tenant_id method."""

    def test_own_organization_rows_are_returned(
        self,
        db_session: Session,
        identity,
        owner_membership,
        members,
        sample_organization: Organization,
    ):
        """Test filtering by a member organization succeeds."""
        # Act
        rows = TenantQuery(db_session, Member, identity.id).filter_by_tenant_id(sample_organization.id).all()

        # Assert
        assert [row.full_name for row in rows] == ["Ana Souza"]

    def test_other_organization_returns_empty_instead_of_raising(
        self,
        db_session: Session,
        identity,
        owner_membership,
        members,
        second_organization: Organization,
    ):
        """Test that reading another organization yields no rows."""
        # Act
        rows = TenantQuery(db_session, Member, identity.id).filter_by_tenant_id(second_organization.id).all()

        # Assert
        assert rows == []

    def test_convenience_function_matches_helper(
        self,
        db_session: Session,
        identity,
        owner_membership,
        members,
        sample_organization: Organization,
    ):
        """Test tenant_query() convenience wrapper."""
        # Act
        rows = tenant_query(db_session, Member, identity.id, sample_organization.id).all()

        # Assert
        assert len(rows) == 1


class TestTenantQueryGetById:
    """Tests for TenantQuery.get_by_id method."""

    def test_get_own_row(self, db_session: Session, identity, owner_membership, members):
        """Test that a visible row is returned."""
        # Arrange
        own, _ = members

        # Act
        row = TenantQuery(db_session, Member, identity.id).get_by_id(own.id)

        # Assert
        assert row is not None
        assert row.id == own.id

    def test_get_foreign_row_returns_none(self, db_session: Session, identity, owner_membership, members):
        """Test that a row of another organization is invisible."""
        # Arrange
        _, foreign = members

        # Act
        row = TenantQuery(db_session, Member, identity.id).get_by_id(foreign.id)

        # Assert
        assert row is None

    def test_get_missing_row_returns_none(self, db_session: Session, identity, owner_membership):
        """Test that an unknown id returns None."""
        # Act & Assert
        assert TenantQuery(db_session, Member, identity.id).get_by_id(uuid4()) is None


class TestWritableOrganizations:
    """Tests for has_access with writable=True."""

    @pytest.mark.parametrize(
        "role,expected",
        [
            (Role.OWNER, True),
            (Role.ADMIN, True),
            (Role.TREASURY, True),
            (Role.SECRETARY, True),
            (Role.ACCOUNTANT, True),
            (Role.READ_ONLY, False),
        ],
    )
    def test_write_access_by_role(
        self,
        db_session: Session,
        identity,
        add_membership,
        sample_organization: Organization,
        role: Role,
        expected: bool,
    ):
        """Test that only read-only members lack write access."""
        # Arrange
        add_membership(sample_organization, identity, role)
        helper = TenantQuery(db_session, Member, identity.id)

        # Act & Assert
        assert helper.has_access(sample_organization.id) is True
        assert helper.has_access(sample_organization.id, writable=True) is expected
