"""
Collection State Unit Tests
===========================
"""

import pytest
from dataclasses import dataclass
from uuid import UUID, uuid4

from contacerta.views import state as reducers
from contacerta.views.state import CollectionState, ViewStatus


pytestmark = pytest.mark.views


@dataclass(frozen=True)
class Row:
    id: UUID
    name: str


def rows(*names):
    return tuple(Row(id=uuid4(), name=name) for name in names)


class TestTransitions:
    """Tests for the pure state transitions."""

    def test_organization_changed_drops_items_keeps_search(self):
        # Arrange
        state = CollectionState(
            status=ViewStatus.LOADED,
            items=rows("Ana"),
            organization_id=uuid4(),
            search="an",
            error="x",
        )
        organization_id = uuid4()

        # Act
        changed = reducers.organization_changed(state, organization_id)

        # Assert
        assert changed == CollectionState(
            status=ViewStatus.LOADING,
            organization_id=organization_id,
            search="an",
        )

    def test_loading_is_identity_when_already_loading(self):
        # Arrange
        state = CollectionState(status=ViewStatus.LOADING)

        # Assert
        assert reducers.loading(state) is state

    def test_failed_keeps_items(self):
        # Arrange
        state = reducers.loaded(CollectionState(), rows("Ana", "Bruno"))

        # Act
        failed = reducers.failed(state, "Erro")

        # Assert
        assert failed.status == ViewStatus.ERROR
        assert failed.items == state.items
        assert reducers.dismiss_error(failed).status == ViewStatus.LOADED

    def test_transitions_never_mutate(self):
        # Arrange
        state = reducers.loaded(CollectionState(), rows("Ana"))
        items = state.items

        # Act
        reducers.item_added(state, rows("Bruno")[0])
        reducers.item_removed(state, items[0].id)

        # Assert
        assert state.items is items

    def test_item_replaced_unknown_id(self):
        # Arrange
        state = reducers.loaded(CollectionState(), rows("Ana"))

        # Act
        replaced = reducers.item_replaced(state, uuid4(), Row(id=uuid4(), name="X"))

        # Assert
        assert replaced.items == state.items

    def test_item_inserted_at_position_once(self):
        # Arrange
        original = rows("Ana", "Bruno", "Carla")
        state = reducers.loaded(CollectionState(), original)
        removed = reducers.item_removed(state, original[1].id)

        # Act
        restored = reducers.item_inserted(removed, 1, original[1])
        twice = reducers.item_inserted(restored, 0, original[1])

        # Assert
        assert restored.items == original
        assert twice is restored

    def test_item_inserted_clamps_index(self):
        # Arrange
        extra = rows("Zeca")[0]

        # Act
        state = reducers.item_inserted(CollectionState(), 5, extra)

        # Assert
        assert state.items == (extra,)

    def test_idle_keeps_only_search(self):
        # Act
        state = reducers.idle("ana")

        # Assert
        assert state == CollectionState(status=ViewStatus.IDLE, search="ana")
        assert not state.loading
