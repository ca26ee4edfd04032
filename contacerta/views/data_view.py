"""
Dependent Data View Module
==========================

A list of records scoped to the active organization.

Contract:
- The view reads the active organization from the selector and never
  writes it
- No active organization: empty IDLE state, no fetch
- Active organization changes: items are dropped at once (LOADING) and
  the list is fetched again for the new organization
- Search changes are debounced
- Responses are applied last-write-wins by issue order: a response to a
  request that is no longer the latest, or whose organization is no
  longer active, is dropped
- Mutations either apply locally first and roll back on failure
  (OPTIMISTIC) or reload the list after success (REFETCH)
- Deletes go through an explicit confirmation

Usage:
    view = DataView("members", selector, services.members)
    await view.reload()
    view.set_search("ana")
    confirmation = view.request_delete(member.id, member.full_name)
    await confirmation.confirm()
"""

import asyncio
from enum import Enum
from typing import Any, Callable, Generic, List, Optional, Protocol, Set, TypeVar
from uuid import UUID

from pydantic import BaseModel

from contacerta.core.error_messages import GENERIC_ERROR_MESSAGE, ORGANIZATION_REQUIRED_MESSAGE
from contacerta.core.logging import get_logger
from contacerta.core.result import ServiceResult
from contacerta.schemas.organization import ActiveOrganization
from contacerta.services.base import VALIDATION_FAILED
from contacerta.session.active_org import ActiveOrganizationSelector
from contacerta.views import state as reducers
from contacerta.views.debounce import Debouncer
from contacerta.views.state import CollectionState

# Initialize logger
logger = get_logger(__name__)

T = TypeVar("T", bound=BaseModel)

DEFAULT_DELETE_CONSEQUENCE = "Esta ação não pode ser desfeita."
DELETE_ALREADY_SETTLED_MESSAGE = "Esta exclusão já foi confirmada ou cancelada."

StateListener = Callable[[CollectionState], None]


class MutationStrategy(str, Enum):
    OPTIMISTIC = "OPTIMISTIC"
    REFETCH = "REFETCH"


class ListService(Protocol):
    """Operations a view needs from a service."""

    async def list(self, organization_id: UUID, search: str = "") -> ServiceResult: ...

    async def create(self, data: Any) -> ServiceResult: ...

    async def update(self, organization_id: UUID, record_id: UUID, data: Any) -> ServiceResult: ...

    async def delete(self, organization_id: UUID, record_id: UUID) -> ServiceResult: ...


def _as_uuid(value: Any) -> UUID:
    return value if isinstance(value, UUID) else UUID(str(value))


def _apply_changes(item: BaseModel, data: BaseModel) -> BaseModel:
    """Local preview of an update: explicitly set fields the record also has."""
    fields = type(item).model_fields
    changes = {
        key: getattr(data, key)
        for key in data.model_fields_set
        if key in fields
    }
    return item.model_copy(update=changes)


# ==========================
# Delete Confirmation
# ==========================

class DeleteConfirmation:
    """
    Pending delete waiting for an explicit decision.

    Attributes:
        record_id: Record to delete
        message: Human-readable question including the consequences
    """

    def __init__(self, view: "DataView", record_id: UUID, message: str):
        self._view = view
        self.record_id = record_id
        self.message = message
        self.confirmed = False
        self.cancelled = False

    @property
    def settled(self) -> bool:
        return self.confirmed or self.cancelled

    async def confirm(self) -> ServiceResult[None]:
        if self.settled:
            return ServiceResult.failure(DELETE_ALREADY_SETTLED_MESSAGE, VALIDATION_FAILED)
        self.confirmed = True
        return await self._view.delete(self.record_id)

    def cancel(self) -> None:
        if not self.settled:
            self.cancelled = True


# ==========================
# Data View
# ==========================

class DataView(Generic[T]):
    """
    List view bound to the active organization.

    Args:
        name: View name used in logs
        selector: Active organization selector (read only)
        service: Service providing list/create/update/delete
        strategy: How mutations update the list
        debounce_seconds: Quiet period before a search re-fetch
        delete_consequence: Sentence appended to delete confirmations
    """

    def __init__(
        self,
        name: str,
        selector: ActiveOrganizationSelector,
        service: ListService,
        strategy: MutationStrategy = MutationStrategy.REFETCH,
        debounce_seconds: float = 0.25,
        delete_consequence: str = DEFAULT_DELETE_CONSEQUENCE,
    ):
        self.name = name
        self.strategy = strategy
        self.delete_consequence = delete_consequence
        self._selector = selector
        self._service = service
        self._state: CollectionState = reducers.idle()
        self._sequence = 0
        self._tasks: Set[asyncio.Task] = set()
        self._listeners: List[StateListener] = []
        self._debouncer = Debouncer(debounce_seconds, self.reload)
        self._unsubscribe = selector.subscribe(self._on_active_changed)

        active = selector.get_active()
        if active is not None:
            self._state = reducers.organization_changed(self._state, active.organization_id)
            self._schedule_reload()

    # --------------------------
    # State
    # --------------------------

    @property
    def state(self) -> CollectionState:
        return self._state

    @property
    def items(self) -> tuple:
        return self._state.items

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _set(self, new_state: CollectionState) -> None:
        if new_state is self._state:
            return
        self._state = new_state
        for listener in list(self._listeners):
            listener(new_state)

    def _find(self, record_id: UUID):
        for index, item in enumerate(self._state.items):
            if item.id == record_id:
                return index, item
        return None, None

    def dismiss_error(self) -> None:
        self._set(reducers.dismiss_error(self._state))

    # --------------------------
    # Organization Changes
    # --------------------------

    def _on_active_changed(self, pointer: Optional[ActiveOrganization]) -> None:
        organization_id = pointer.organization_id if pointer else None
        if organization_id == self._state.organization_id:
            return

        self._debouncer.cancel()
        self._sequence += 1
        if organization_id is None:
            logger.debug("view_cleared", view=self.name)
            self._set(reducers.idle(self._state.search))
            return

        logger.debug("view_organization_changed", view=self.name, organization_id=str(organization_id))
        self._set(reducers.organization_changed(self._state, organization_id))
        self._schedule_reload()

    def _running_loop(self) -> Optional[asyncio.AbstractEventLoop]:
        try:
            return asyncio.get_running_loop()
        except RuntimeError:
            # Outside an event loop the owner calls reload() explicitly
            logger.debug("view_reload_deferred", view=self.name)
            return None

    def _schedule_reload(self) -> None:
        loop = self._running_loop()
        if loop is None:
            return
        task = loop.create_task(self.reload())
        self._tasks.add(task)
        task.add_done_callback(self._reload_done)

    def _reload_done(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        # reload() handles its own failures; retrieve the outcome anyway
        if not task.cancelled():
            task.exception()

    # --------------------------
    # Loading
    # --------------------------

    def _is_stale(self, sequence: int, organization_id: UUID) -> bool:
        return sequence != self._sequence or self._selector.organization_id != organization_id

    async def reload(self) -> None:
        """
        Fetch the list for the active organization and current search.

        An unexpected error from the service puts the view in ERROR, unless
        a newer request or another organization has taken over since.
        """
        organization_id = self._selector.organization_id
        if organization_id is None:
            self._set(reducers.idle(self._state.search))
            return

        self._sequence += 1
        sequence = self._sequence
        search = self._state.search
        if self._state.organization_id != organization_id:
            self._set(reducers.organization_changed(self._state, organization_id))
        else:
            self._set(reducers.loading(self._state))

        try:
            result = await self._service.list(organization_id, search)
        except Exception as e:
            if self._is_stale(sequence, organization_id):
                logger.debug("view_failure_dropped", view=self.name, sequence=sequence)
                return
            logger.error(
                "view_reload_failed",
                view=self.name,
                error=str(e),
                error_type=type(e).__name__,
            )
            self._set(reducers.failed(self._state, GENERIC_ERROR_MESSAGE))
            return

        if self._is_stale(sequence, organization_id):
            logger.debug("view_response_dropped", view=self.name, sequence=sequence)
            return
        if result.ok:
            self._set(reducers.loaded(self._state, result.data))
        else:
            self._set(reducers.failed(self._state, result.error))

    def set_search(self, text: str) -> None:
        """Change the search text; the re-fetch runs after the debounce delay."""
        self._set(reducers.search_changed(self._state, text or ""))
        if self._selector.organization_id is not None and self._running_loop() is not None:
            self._debouncer.call()

    async def wait_idle(self) -> None:
        """Wait until no reload is scheduled or running."""
        while self._tasks or self._debouncer.pending:
            if self._tasks:
                await asyncio.gather(*list(self._tasks), return_exceptions=True)
            await self._debouncer.wait()
        await self._debouncer.wait()

    # --------------------------
    # Mutations
    # --------------------------

    def _rollback(
        self,
        snapshot: CollectionState,
        applied: CollectionState,
        revert: Callable[[CollectionState], CollectionState],
    ) -> None:
        """Undo an optimistic change, exactly when nothing else changed since."""
        if self._state is applied:
            self._set(snapshot)
        elif self._state.organization_id == snapshot.organization_id:
            self._set(revert(self._state))
        logger.info("view_optimistic_rollback", view=self.name)

    async def create(self, data: BaseModel) -> ServiceResult[T]:
        """
        Create a record.

        The backend assigns the id, so an OPTIMISTIC view appends the
        stored row once it is returned.
        """
        result = await self._service.create(data)
        if not result.ok:
            return result
        if self.strategy == MutationStrategy.REFETCH:
            await self.reload()
        elif result.data.organization_id == self._state.organization_id:
            self._set(reducers.item_added(self._state, result.data))
        return result

    async def update(self, record_id: Any, data: BaseModel) -> ServiceResult[T]:
        organization_id = self._selector.organization_id
        if organization_id is None:
            return ServiceResult.failure(ORGANIZATION_REQUIRED_MESSAGE, VALIDATION_FAILED)
        record_id = _as_uuid(record_id)

        if self.strategy == MutationStrategy.REFETCH:
            result = await self._service.update(organization_id, record_id, data)
            if result.ok:
                await self.reload()
            return result

        snapshot = self._state
        _, previous = self._find(record_id)
        applied = snapshot
        if previous is not None:
            applied = reducers.item_replaced(snapshot, record_id, _apply_changes(previous, data))
            self._set(applied)

        result = await self._service.update(organization_id, record_id, data)
        if result.ok:
            if self._state.organization_id == organization_id:
                self._set(reducers.item_replaced(self._state, record_id, result.data))
        elif previous is not None:
            self._rollback(
                snapshot,
                applied,
                lambda current: reducers.item_replaced(current, record_id, previous),
            )
        return result

    async def delete(self, record_id: Any) -> ServiceResult[None]:
        organization_id = self._selector.organization_id
        if organization_id is None:
            return ServiceResult.failure(ORGANIZATION_REQUIRED_MESSAGE, VALIDATION_FAILED)
        record_id = _as_uuid(record_id)

        if self.strategy == MutationStrategy.REFETCH:
            result = await self._service.delete(organization_id, record_id)
            if result.ok:
                await self.reload()
            return result

        snapshot = self._state
        index, previous = self._find(record_id)
        applied = reducers.item_removed(snapshot, record_id)
        self._set(applied)

        result = await self._service.delete(organization_id, record_id)
        if not result.ok and previous is not None:
            self._rollback(
                snapshot,
                applied,
                lambda current: reducers.item_inserted(current, index, previous),
            )
        return result

    def request_delete(self, record_id: Any, description: str) -> DeleteConfirmation:
        """
        Ask before deleting.

        Args:
            record_id: Record to delete
            description: How the record is named to the user

        Returns:
            DeleteConfirmation; nothing is deleted until confirm()
        """
        message = f'Excluir "{description}"? {self.delete_consequence}'
        return DeleteConfirmation(self, _as_uuid(record_id), message)

    # --------------------------
    # Shutdown
    # --------------------------

    async def close(self) -> None:
        self._unsubscribe()
        self._debouncer.cancel()
        for task in list(self._tasks):
            task.cancel()
        if self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)
        await self._debouncer.wait()
