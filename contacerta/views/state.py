"""
Collection State Module
=======================

Immutable state of a list view and the pure transitions between states.

Every transition returns a new ``CollectionState``; views never mutate
a state in place, which is what lets an optimistic mutation restore the
exact state it replaced.
"""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Generic, Optional, Tuple, TypeVar
from uuid import UUID

T = TypeVar("T")


class ViewStatus(str, Enum):
    IDLE = "IDLE"
    LOADING = "LOADING"
    LOADED = "LOADED"
    ERROR = "ERROR"


@dataclass(frozen=True)
class CollectionState(Generic[T]):
    """
    Attributes:
        status: Load status
        items: Records, in display order
        error: Human-readable message of the last failure
        organization_id: Organization the items belong to
        search: Current search text
    """

    status: ViewStatus = ViewStatus.IDLE
    items: Tuple[T, ...] = ()
    error: Optional[str] = None
    organization_id: Optional[UUID] = None
    search: str = ""

    @property
    def loading(self) -> bool:
        return self.status == ViewStatus.LOADING


def _id(item: Any) -> Any:
    return getattr(item, "id", None)


# ==========================
# Transitions
# ==========================

def idle(search: str = "") -> CollectionState:
    """No active organization: nothing to show, nothing to fetch."""
    return CollectionState(status=ViewStatus.IDLE, search=search)


def organization_changed(state: CollectionState, organization_id: UUID) -> CollectionState:
    """Drop every item of the previous organization and start loading."""
    return CollectionState(
        status=ViewStatus.LOADING,
        organization_id=organization_id,
        search=state.search,
    )


def loading(state: CollectionState) -> CollectionState:
    if state.status == ViewStatus.LOADING and state.error is None:
        return state
    return replace(state, status=ViewStatus.LOADING, error=None)


def loaded(state: CollectionState, items) -> CollectionState:
    return replace(state, status=ViewStatus.LOADED, items=tuple(items), error=None)


def failed(state: CollectionState, error: str) -> CollectionState:
    """Keep the items already shown and report the error."""
    return replace(state, status=ViewStatus.ERROR, error=error)


def search_changed(state: CollectionState, search: str) -> CollectionState:
    return replace(state, search=search)


def item_added(state: CollectionState, item) -> CollectionState:
    return replace(state, items=state.items + (item,))


def item_replaced(state: CollectionState, item_id, item) -> CollectionState:
    """Replace the item with ``item_id``; unknown ids leave the state unchanged."""
    return replace(
        state,
        items=tuple(item if _id(existing) == item_id else existing for existing in state.items),
    )


def item_removed(state: CollectionState, item_id) -> CollectionState:
    return replace(state, items=tuple(item for item in state.items if _id(item) != item_id))


def item_inserted(state: CollectionState, index: int, item) -> CollectionState:
    """Put an item back at a position, unless an item with its id is already present."""
    if any(_id(existing) == _id(item) for existing in state.items):
        return state
    index = min(index, len(state.items))
    return replace(state, items=state.items[:index] + (item,) + state.items[index:])


def dismiss_error(state: CollectionState) -> CollectionState:
    status = ViewStatus.LOADED if state.status == ViewStatus.ERROR else state.status
    return replace(state, status=status, error=None)
