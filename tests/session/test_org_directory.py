"""
Organization Directory Cache Tests
==================================

Tests for OrganizationDirectoryCache including:
- A single fetch shared by concurrent callers
- Ordering and auto-selection
- Failures keep the previous record
- Fetches completing after an identity change are discarded
"""

import asyncio

import pytest
from datetime import datetime, UTC
from uuid import uuid4

from contacerta.core.exceptions import BackendError, DirectoryFetchError, NETWORK_ERROR
from contacerta.core.error_messages import NETWORK_ERROR_MESSAGE
from contacerta.models import Role
from contacerta.schemas.identity import Identity
from contacerta.session.active_org import ActiveOrganizationSelector
from contacerta.session.identity import SessionStore
from contacerta.session.org_directory import OrganizationDirectoryCache
from contacerta.session.storage import MemoryStorage


pytestmark = [pytest.mark.session, pytest.mark.asyncio]

FETCHED_AT = datetime(2025, 3, 1, 12, 0, tzinfo=UTC)


@pytest.fixture
def signed_in(identity):
    return SessionStore(identity)


@pytest.fixture
def selector(identity):
    selector = ActiveOrganizationSelector(MemoryStorage())
    selector.restore(identity.id)
    return selector


@pytest.fixture
def directory(gated_backend, selector, signed_in):
    return OrganizationDirectoryCache(
        gated_backend,
        selector,
        lambda: signed_in.identity,
        clock=lambda: FETCHED_AT,
    )


class TestRefresh:
    """Tests for refresh()."""

    async def test_concurrent_callers_share_one_fetch(
        self,
        directory,
        gated_backend,
        make_membership_row,
        settle_tasks,
    ):
        # Arrange
        gated_backend.rows = [make_membership_row(uuid4(), "Igreja Central")]

        # Act
        first = asyncio.create_task(directory.refresh())
        second = asyncio.create_task(directory.refresh())
        await settle_tasks()
        assert directory.is_refreshing
        gated_backend.release()
        results = await asyncio.gather(first, second)

        # Assert
        assert gated_backend.calls == 1
        assert results[0] == results[1]
        assert not directory.is_refreshing

    async def test_entries_sorted_case_insensitively(self, directory, gated_backend, make_membership_row):
        # Arrange
        gated_backend.rows = [
            make_membership_row(uuid4(), "igreja Nova Vida", Role.READ_ONLY),
            make_membership_row(uuid4(), "Assembleia Centro"),
            make_membership_row(uuid4(), "Igreja Central", Role.TREASURY),
        ]
        gated_backend.release()

        # Act
        entries = await directory.refresh()

        # Assert
        assert [entry.name for entry in entries] == ["Assembleia Centro", "Igreja Central", "igreja Nova Vida"]
        assert directory.record.fetched_at == FETCHED_AT

    async def test_record_keyed_by_identity(self, directory, gated_backend, identity):
        # Arrange
        gated_backend.release()

        # Act
        await directory.refresh()

        # Assert
        assert directory.record.key == identity.id
        assert directory.is_loaded

    async def test_failure_keeps_previous_record(self, directory, gated_backend, make_membership_row):
        """Test that a failed refresh raises and keeps the cached entries."""
        # Arrange
        gated_backend.rows = [make_membership_row(uuid4(), "Igreja Central")]
        gated_backend.release()
        entries = await directory.refresh()
        gated_backend.error = BackendError(NETWORK_ERROR, "timeout")

        # Act
        with pytest.raises(DirectoryFetchError) as exc_info:
            await directory.refresh()

        # Assert
        assert exc_info.value.message == NETWORK_ERROR_MESSAGE
        assert exc_info.value.code == NETWORK_ERROR
        assert directory.entries == entries
        assert not directory.is_refreshing

    async def test_signed_out_fails(self, gated_backend, selector):
        # Arrange
        directory = OrganizationDirectoryCache(gated_backend, selector, lambda: None)

        # Act & Assert
        with pytest.raises(DirectoryFetchError):
            await directory.refresh()
        assert gated_backend.calls == 0

    async def test_ensure_loaded_fetches_once(self, directory, gated_backend):
        # Arrange
        gated_backend.release()

        # Act
        await directory.ensure_loaded()
        await directory.ensure_loaded()

        # Assert
        assert gated_backend.calls == 1


class TestAutoSelect:
    """Tests for single-organization auto-selection."""

    async def test_single_entry_becomes_active(self, directory, gated_backend, selector, make_membership_row):
        # Arrange
        organization_id = uuid4()
        gated_backend.rows = [make_membership_row(organization_id, "Igreja Central")]
        gated_backend.release()

        # Act
        await directory.refresh()

        # Assert
        assert selector.organization_id == organization_id
        assert selector.get_active().organization_name == "Igreja Central"

    async def test_existing_selection_is_kept(self, directory, gated_backend, selector, make_membership_row):
        # Arrange
        kept = uuid4()
        selector.set_active(kept, "Igreja Antiga")
        gated_backend.rows = [make_membership_row(uuid4(), "Igreja Central")]
        gated_backend.release()

        # Act
        await directory.refresh()

        # Assert
        assert selector.organization_id == kept

    async def test_several_entries_select_nothing(self, directory, gated_backend, selector, make_membership_row):
        # Arrange
        gated_backend.rows = [
            make_membership_row(uuid4(), "Igreja Central"),
            make_membership_row(uuid4(), "Igreja Nova Vida"),
        ]
        gated_backend.release()

        # Act
        await directory.refresh()

        # Assert
        assert selector.get_active() is None

    async def test_zero_memberships(self, directory, gated_backend, selector):
        # Arrange
        gated_backend.release()

        # Act
        entries = await directory.refresh()

        # Assert
        assert entries == ()
        assert directory.is_loaded
        assert selector.get_active() is None


class TestIdentityChange:
    """Tests for stale fetches."""

    async def test_fetch_completing_after_identity_change_is_discarded(
        self,
        directory,
        gated_backend,
        signed_in,
        selector,
        make_membership_row,
        settle_tasks,
    ):
        """Test that the old identity's organizations are never cached or selected."""
        # Arrange
        gated_backend.rows = [make_membership_row(uuid4(), "Igreja Central")]
        pending = asyncio.create_task(directory.refresh())
        await settle_tasks()

        # Act
        signed_in.sign_in(Identity(id=uuid4(), email="outra@igreja.org"))
        gated_backend.release()
        result = await pending

        # Assert
        assert result == ()
        assert directory.record is None
        assert selector.get_active() is None

    async def test_invalidate_detaches_in_flight_fetch(
        self,
        directory,
        gated_backend,
        make_membership_row,
        settle_tasks,
    ):
        # Arrange
        gated_backend.rows = [make_membership_row(uuid4(), "Igreja Central")]
        stale = asyncio.create_task(directory.refresh())
        await settle_tasks()

        # Act
        directory.invalidate()
        fresh = asyncio.create_task(directory.refresh())
        await settle_tasks()
        gated_backend.release()
        stale_result, fresh_result = await asyncio.gather(stale, fresh)

        # Assert
        assert gated_backend.calls == 2
        assert len(fresh_result) == 1
        assert directory.is_loaded

    async def test_is_loaded_false_for_other_identity(self, directory, gated_backend, signed_in):
        # Arrange
        gated_backend.release()
        await directory.refresh()

        # Act
        signed_in.sign_in(Identity(id=uuid4(), email="outra@igreja.org"))

        # Assert
        assert not directory.is_loaded

    async def test_entries_hidden_from_other_identity(
        self,
        directory,
        gated_backend,
        signed_in,
        make_membership_row,
    ):
        # Arrange
        organization_id = uuid4()
        gated_backend.rows = [make_membership_row(organization_id, "Igreja Central")]
        gated_backend.release()
        await directory.refresh()

        # Act
        signed_in.sign_in(Identity(id=uuid4(), email="outra@igreja.org"))

        # Assert
        assert directory.entries == ()
        assert directory.find(organization_id) is None
