"""
Organization Session Integration Tests
======================================

AppContext over the SQL reference backend including:
- Sign-in restores, revalidates and auto-selects the active organization
- Onboarding when the identity has no organization
- Identity switches never leak the previous identity's selection
- Views follow the active organization
"""

import pytest
import pytest_asyncio
from uuid import uuid4

from contacerta.context import AppContext
from contacerta.core.exceptions import NotAMemberError
from contacerta.models import Role
from contacerta.schemas.organization import ActiveOrganization
from contacerta.session.storage import MemoryStorage
from contacerta.views.state import ViewStatus


pytestmark = [pytest.mark.session, pytest.mark.asyncio]


@pytest.fixture
def storage():
    return MemoryStorage()


@pytest_asyncio.fixture
async def context(session_backend, storage, settings, session_store):
    app_context = AppContext(session_backend, storage, settings, session_store)
    yield app_context
    await app_context.aclose()


def stored_pointer(storage, identity):
    raw = storage.get(f"contacerta:org:{identity.id}")
    return ActiveOrganization.from_storage(raw) if raw else None


class TestSignIn:
    """Tests for sign-in and restoration."""

    async def test_single_membership_is_auto_selected(
        self,
        context,
        storage,
        identity,
        owner_membership,
        sample_organization,
    ):
        # Act
        entries = await context.sign_in(identity)

        # Assert
        assert [entry.name for entry in entries] == ["Igreja Central"]
        assert context.active_organization.organization_id == sample_organization.id
        assert stored_pointer(storage, identity).organization_id == sample_organization.id
        assert context.active_role == Role.OWNER
        assert context.can_write and context.can_manage_access

    async def test_restored_pointer_survives_restart(
        self,
        session_backend,
        storage,
        settings,
        session_store,
        identity,
        add_membership,
        sample_organization,
        second_organization,
    ):
        """Test that the persisted choice is restored when several organizations exist."""
        # Arrange
        add_membership(sample_organization, identity, Role.OWNER)
        add_membership(second_organization, identity, Role.SECRETARY)
        first = AppContext(session_backend, storage, settings, session_store)
        await first.sign_in(identity)
        first.switch_organization(second_organization.id)
        await first.aclose()
        session_store.sign_out()

        # Act
        restarted = AppContext(session_backend, storage, settings, session_store)
        await restarted.sign_in(identity)

        # Assert
        assert restarted.active_organization.organization_id == second_organization.id
        assert restarted.active_role == Role.SECRETARY
        assert restarted.can_write and not restarted.can_manage_access
        await restarted.aclose()

    async def test_stale_pointer_is_cleared_and_replaced(
        self,
        context,
        storage,
        identity,
        owner_membership,
        sample_organization,
    ):
        """Test that a stored organization the identity no longer belongs to is dropped."""
        # Arrange
        stale = ActiveOrganization(organization_id=uuid4(), organization_name="Igreja Antiga")
        storage.set(f"contacerta:org:{identity.id}", stale.to_storage())

        # Act
        await context.sign_in(identity)

        # Assert
        assert context.active_organization.organization_id == sample_organization.id

    async def test_corrupt_pointer_is_ignored(self, context, storage, identity, db_session):
        # Arrange
        storage.set(f"contacerta:org:{identity.id}", "{corrupt")

        # Act
        await context.sign_in(identity)

        # Assert
        assert context.active_organization is None
        assert storage.get(f"contacerta:org:{identity.id}") is None

    async def test_read_only_role(self, context, identity, add_membership, sample_organization):
        # Arrange
        add_membership(sample_organization, identity, Role.READ_ONLY)

        # Act
        await context.sign_in(identity)

        # Assert
        assert context.active_role == Role.READ_ONLY
        assert not context.can_write


class TestOnboarding:
    """Tests for identities without organizations."""

    async def test_zero_memberships_need_onboarding(self, context, identity, db_session):
        # Act
        entries = await context.sign_in(identity)

        # Assert
        assert entries == ()
        assert context.needs_onboarding
        assert context.active_organization is None
        assert context.active_role is None

    async def test_create_organization_activates_it(self, context, identity, db_session):
        # Arrange
        await context.sign_in(identity)

        # Act
        result = await context.create_organization("Igreja Batista Esperança")

        # Assert
        assert result.ok
        assert context.active_organization.organization_id == result.data
        assert context.active_organization.organization_name == "Igreja Batista Esperança"
        assert context.active_role == Role.OWNER
        assert not context.needs_onboarding

    async def test_create_organization_rejects_short_name(self, context, identity, db_session):
        # Arrange
        await context.sign_in(identity)

        # Act
        result = await context.create_organization("  ab ")

        # Assert
        assert not result.ok
        assert context.needs_onboarding

    async def test_accept_invite_activates_organization(
        self,
        context,
        backend,
        other_identity,
        identity,
        session_store,
        owner_membership,
        sample_organization,
    ):
        # Arrange
        token = await backend.rpc("create_invite", {"org_id": str(sample_organization.id), "role": "TESOURARIA"})
        await context.sign_in(other_identity)

        # Act
        result = await context.accept_invite(token)

        # Assert
        assert result.ok
        assert context.active_organization.organization_id == sample_organization.id
        assert context.active_role == Role.TREASURY

    async def test_accept_invalid_invite(self, context, other_identity, db_session):
        # Arrange
        await context.sign_in(other_identity)

        # Act
        result = await context.accept_invite(str(uuid4()))

        # Assert
        assert not result.ok
        assert context.needs_onboarding


class TestIdentitySwitch:
    """Tests for switching identities and organizations."""

    async def test_new_identity_never_sees_previous_selection(
        self,
        context,
        identity,
        other_identity,
        owner_membership,
        add_membership,
        sample_organization,
        second_organization,
    ):
        # Arrange
        add_membership(second_organization, other_identity, Role.OWNER)
        add_membership(sample_organization, other_identity, Role.READ_ONLY)
        await context.sign_in(identity)
        assert context.active_organization.organization_id == sample_organization.id

        # Act
        await context.sign_in(other_identity)

        # Assert
        assert context.active_organization is None
        assert [entry.name for entry in context.directory.entries] == ["Igreja Central", "Igreja Nova Vida"]

    async def test_logout_forgets_pointer(self, context, storage, identity, owner_membership):
        # Arrange
        await context.sign_in(identity)

        # Act
        await context.logout()

        # Assert
        assert context.active_organization is None
        assert context.session.identity is None
        assert stored_pointer(storage, identity) is None
        assert not context.directory.is_loaded

    async def test_identity_change_through_session_store_resets_state(
        self,
        context,
        session_store,
        identity,
        other_identity,
        owner_membership,
        sample_organization,
    ):
        """Test that a sign-in reported straight to the store drops the previous directory and role."""
        # Arrange
        await context.sign_in(identity)
        assert context.active_role == Role.OWNER

        # Act
        session_store.sign_in(other_identity)

        # Assert
        assert context.directory.entries == ()
        assert context.active_organization is None
        assert context.active_role is None
        with pytest.raises(NotAMemberError):
            context.switch_organization(sample_organization.id)

    async def test_sign_out_through_session_store_resets_state(
        self,
        context,
        storage,
        session_store,
        identity,
        owner_membership,
        sample_organization,
    ):
        # Arrange
        await context.sign_in(identity)

        # Act
        session_store.sign_out()

        # Assert
        assert not context.directory.is_loaded
        assert context.active_organization is None
        assert not context.can_write
        assert stored_pointer(storage, identity).organization_id == sample_organization.id

    async def test_switch_to_non_member_organization(
        self,
        context,
        identity,
        owner_membership,
        second_organization,
    ):
        # Arrange
        await context.sign_in(identity)

        # Act & Assert
        with pytest.raises(NotAMemberError):
            context.switch_organization(second_organization.id)


class TestViewsFollowOrganization:
    """Tests for views bound to the active organization."""

    async def test_views_reload_on_switch(
        self,
        context,
        backend,
        identity,
        add_membership,
        sample_organization,
        second_organization,
    ):
        """Test that switching organizations replaces every view's items."""
        # Arrange
        add_membership(sample_organization, identity, Role.OWNER)
        add_membership(second_organization, identity, Role.OWNER)
        await backend.insert("members", {"organization_id": str(sample_organization.id), "full_name": "Ana"})
        await backend.insert("members", {"organization_id": str(second_organization.id), "full_name": "Bruno"})
        await context.sign_in(identity)
        assert context.views.members.state.status == ViewStatus.IDLE

        # Act
        context.switch_organization(sample_organization.id)
        await context.views.wait_idle()
        first = [member.full_name for member in context.views.members.items]
        context.switch_organization(second_organization.id)
        await context.views.wait_idle()
        second = [member.full_name for member in context.views.members.items]

        # Assert
        assert first == ["Ana"]
        assert second == ["Bruno"]
        assert all(view.state.organization_id == second_organization.id for view in context.views)
