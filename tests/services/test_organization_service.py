"""
Organization Service Tests
==========================

Tests for onboarding: organization creation, invites and name lookup.
"""

import pytest
from uuid import uuid4

from contacerta.backend.sql import SqlBackend
from contacerta.core.error_messages import EMPTY_INVITE_TOKEN_MESSAGE, INVALID_INVITE_TOKEN_MESSAGE
from contacerta.core.exceptions import INSUFFICIENT_PRIVILEGE
from contacerta.models import Role
from contacerta.services import OrganizationService
from contacerta.services.base import VALIDATION_FAILED
from contacerta.services.organization_service import ORGANIZATION_NAME_MESSAGE


pytestmark = [pytest.mark.services, pytest.mark.asyncio]


@pytest.fixture
def organizations(backend):
    return OrganizationService(backend)


@pytest.fixture
def other_organizations(other_backend):
    return OrganizationService(other_backend)


class TestCreateOrganization:
    async def test_creator_becomes_owner(self, organizations, backend):
        # Act
        result = await organizations.create_organization("  Igreja Batista Esperança ", "12.345.678/0001-90")

        # Assert
        assert result.ok
        rows = await backend.list_memberships()
        assert [(row["organization_id"], row["role"]) for row in rows] == [
            (str(result.data), Role.OWNER.value)
        ]

    @pytest.mark.parametrize("name", ["", "  ", "AB"])
    async def test_short_name(self, organizations, name):
        # Act
        result = await organizations.create_organization(name)

        # Assert
        assert result.error == ORGANIZATION_NAME_MESSAGE
        assert result.code == VALIDATION_FAILED


class TestInvites:
    """Tests for issuing and accepting invites."""

    @pytest.mark.parametrize(
        "token, message",
        [
            ("", EMPTY_INVITE_TOKEN_MESSAGE),
            ("   ", EMPTY_INVITE_TOKEN_MESSAGE),
            ("not-a-uuid", INVALID_INVITE_TOKEN_MESSAGE),
        ],
    )
    async def test_token_checked_before_backend(self, organizations, token, message):
        # Act
        result = await organizations.accept_invite(token)

        # Assert
        assert result.error == message
        assert result.code == VALIDATION_FAILED

    async def test_unknown_token(self, organizations):
        # Act
        result = await organizations.accept_invite(str(uuid4()))

        # Assert
        assert result.error == "Token de convite inválido. Verifique e tente novamente."

    async def test_owner_invites_and_other_joins(
        self, organizations, other_organizations, owner_membership, sample_organization
    ):
        # Arrange
        invite = await organizations.create_invite(sample_organization.id, Role.TREASURY)

        # Act
        joined = await other_organizations.accept_invite(f"  {invite.data}  ")

        # Assert
        assert joined.data == sample_organization.id
        name = await other_organizations.get_organization_name(sample_organization.id)
        assert name.data == "Igreja Central"

    async def test_non_manager_cannot_invite(
        self, organizations, add_membership, sample_organization, identity
    ):
        # Arrange
        add_membership(sample_organization, identity, Role.SECRETARY)

        # Act
        result = await organizations.create_invite(sample_organization.id)

        # Assert
        assert result.code == INSUFFICIENT_PRIVILEGE
        assert result.error == "Você não tem permissão para realizar esta operação."


class TestOrganizationName:
    async def test_member_sees_name(self, organizations, owner_membership, sample_organization):
        # Act
        result = await organizations.get_organization_name(sample_organization.id)

        # Assert
        assert result.data == "Igreja Central"

    async def test_non_member_gets_none(self, organizations, sample_organization):
        # Act
        result = await organizations.get_organization_name(sample_organization.id)

        # Assert
        assert result.ok
        assert result.data is None

    async def test_signed_out(self, session_factory, sample_organization):
        # Arrange
        service = OrganizationService(SqlBackend(session_factory, lambda: None))

        # Act
        result = await service.get_organization_name(sample_organization.id)

        # Assert
        assert result.code == INSUFFICIENT_PRIVILEGE
