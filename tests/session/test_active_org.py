"""
Active Organization Selector Unit Tests
=======================================

Tests for ActiveOrganizationSelector and SessionStore including:
- Persistence per identity
- Corrupt stored values
- Change notification
"""

import json

import pytest
from uuid import uuid4

from contacerta.core.logging import organization_id_context
from contacerta.schemas.identity import Identity
from contacerta.schemas.organization import ActiveOrganization
from contacerta.session.active_org import ActiveOrganizationSelector
from contacerta.session.identity import SessionStore
from contacerta.session.storage import MemoryStorage


pytestmark = pytest.mark.session


@pytest.fixture
def storage():
    return MemoryStorage()


@pytest.fixture
def selector(storage):
    return ActiveOrganizationSelector(storage)


class TestPersistence:
    """Tests for set_active / restore / clear_active."""

    def test_pointer_survives_restart(self, storage, selector):
        """Test that a new selector over the same storage restores the pointer."""
        # Arrange
        identity_id, organization_id = uuid4(), uuid4()
        selector.restore(identity_id)
        selector.set_active(organization_id, "Igreja Central")

        # Act
        restarted = ActiveOrganizationSelector(storage)
        restored = restarted.restore(identity_id)

        # Assert
        assert restored == ActiveOrganization(organization_id=organization_id, organization_name="Igreja Central")
        assert restarted.organization_id == organization_id

    def test_stored_format(self, storage, selector):
        # Arrange
        identity_id, organization_id = uuid4(), uuid4()
        selector.restore(identity_id)

        # Act
        selector.set_active(organization_id, "Igreja Central")

        # Assert
        raw = storage.get(f"contacerta:org:{identity_id}")
        assert json.loads(raw) == {"organizationId": str(organization_id), "organizationName": "Igreja Central"}

    def test_pointers_are_per_identity(self, selector):
        # Arrange
        first, second = uuid4(), uuid4()
        selector.restore(first)
        selector.set_active(uuid4(), "Igreja Central")

        # Act
        restored = selector.restore(second)

        # Assert
        assert restored is None
        assert selector.get_active() is None

    @pytest.mark.parametrize(
        "raw",
        ["{broken", '{"organizationId": "nope", "organizationName": "X"}', '{"organizationName": "X"}'],
    )
    def test_corrupt_value_is_absent_and_removed(self, storage, selector, raw):
        # Arrange
        identity_id = uuid4()
        storage.set(f"contacerta:org:{identity_id}", raw)

        # Act
        restored = selector.restore(identity_id)

        # Assert
        assert restored is None
        assert storage.get(f"contacerta:org:{identity_id}") is None

    def test_clear_active_removes_stored_pointer(self, storage, selector):
        # Arrange
        identity_id = uuid4()
        selector.restore(identity_id)
        selector.set_active(uuid4(), "Igreja Central")

        # Act
        selector.clear_active()

        # Assert
        assert selector.get_active() is None
        assert storage.get(selector.storage_key(identity_id)) is None

    def test_reset_keeps_storage(self, storage, selector):
        # Arrange
        identity_id = uuid4()
        selector.restore(identity_id)
        selector.set_active(uuid4(), "Igreja Central")

        # Act
        selector.reset()

        # Assert
        assert selector.get_active() is None
        assert selector.identity_id is None
        assert storage.get(selector.storage_key(identity_id)) is not None

    def test_set_without_identity_is_memory_only(self, storage, selector):
        # Act
        selector.set_active(uuid4(), "Igreja Central")

        # Assert
        assert selector.get_active() is not None
        assert storage._data == {}

    def test_custom_prefix(self, storage):
        # Arrange
        identity_id = uuid4()
        selector = ActiveOrganizationSelector(storage, key_prefix="app:")

        # Assert
        assert selector.storage_key(identity_id) == f"app:{identity_id}"


class TestNotification:
    """Tests for selector listeners."""

    def test_listener_called_only_on_change(self, selector):
        # Arrange
        seen = []
        selector.subscribe(seen.append)
        organization_id = uuid4()

        # Act
        selector.set_active(organization_id, "Igreja Central")
        selector.set_active(organization_id, "Igreja Central")
        selector.clear_active()
        selector.clear_active()

        # Assert
        assert [pointer.organization_id if pointer else None for pointer in seen] == [organization_id, None]

    def test_unsubscribe(self, selector):
        # Arrange
        seen = []
        unsubscribe = selector.subscribe(seen.append)

        # Act
        unsubscribe()
        selector.set_active(uuid4(), "Igreja Central")

        # Assert
        assert seen == []

    def test_logging_context_follows_pointer(self, selector):
        # Arrange
        organization_id = uuid4()

        # Act
        selector.set_active(organization_id, "Igreja Central")

        # Assert
        assert organization_id_context.get() == str(organization_id)


class TestSessionStore:
    """Tests for SessionStore."""

    def test_sign_in_and_out_notify(self):
        # Arrange
        store = SessionStore()
        events = []
        store.subscribe(lambda previous, current: events.append((previous, current)))
        identity = Identity(id=uuid4(), email="ana@igreja.org")

        # Act
        store.sign_in(identity)
        store.sign_out()
        store.sign_out()

        # Assert
        assert events == [(None, identity), (identity, None)]
        assert store.identity is None

    def test_token_refresh_notifies_same_identity(self):
        # Arrange
        identity = Identity(id=uuid4(), email="ana@igreja.org", access_token="a")
        store = SessionStore(identity)
        events = []
        store.subscribe(lambda previous, current: events.append(current.access_token))

        # Act
        store.sign_in(identity.model_copy(update={"access_token": "b"}))

        # Assert
        assert events == ["b"]
