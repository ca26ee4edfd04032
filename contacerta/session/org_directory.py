"""
Organization Directory Cache Module
===================================

Organizations the current identity belongs to, with its role in each.

Rules:
- At most one fetch is in flight; concurrent callers await the same result
- A successful fetch replaces the cache record; a failed one keeps it
- A fetch that completes after the identity changed (or after
  invalidate()) is discarded
- With exactly one entry and nothing active, that entry becomes active
- No automatic retry
"""

import asyncio
from dataclasses import dataclass
from datetime import datetime, UTC
from typing import Callable, Optional, Set, Tuple
from uuid import UUID

from contacerta.backend.base import Backend, IdentityProvider
from contacerta.core.error_messages import translate_backend_error
from contacerta.core.exceptions import BackendError, DirectoryFetchError
from contacerta.core.logging import get_logger, log_execution_time
from contacerta.schemas.organization import OrgListItem
from contacerta.session.active_org import ActiveOrganizationSelector

# Initialize logger
logger = get_logger(__name__)

NOT_AUTHENTICATED_MESSAGE = "Sessão expirada. Entre novamente."


def _utcnow() -> datetime:
    return datetime.now(UTC)


@dataclass(frozen=True)
class CacheRecord:
    """
    One directory snapshot.

    Attributes:
        key: Identity the snapshot belongs to
        value: Entries ordered by name
        fetched_at: When the snapshot was fetched
    """

    key: UUID
    value: Tuple[OrgListItem, ...]
    fetched_at: datetime


class OrganizationDirectoryCache:
    """
    Directory of the current identity's organizations.

    Usage:
        directory = OrganizationDirectoryCache(backend, selector, lambda: session.identity)
        entries = await directory.refresh()
    """

    def __init__(
        self,
        backend: Backend,
        selector: ActiveOrganizationSelector,
        identity_provider: IdentityProvider,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self._backend = backend
        self._selector = selector
        self._identity_provider = identity_provider
        self._clock = clock
        self._record: Optional[CacheRecord] = None
        self._in_flight: Optional[asyncio.Task] = None
        self._tasks: Set[asyncio.Task] = set()
        self._generation = 0

    # --------------------------
    # Accessors
    # --------------------------

    @property
    def record(self) -> Optional[CacheRecord]:
        return self._record

    @property
    def entries(self) -> Tuple[OrgListItem, ...]:
        """Entries of the current identity; empty when another identity's snapshot is held."""
        return self._record.value if self.is_loaded else ()

    @property
    def is_loaded(self) -> bool:
        identity = self._identity_provider()
        return (
            self._record is not None
            and identity is not None
            and self._record.key == identity.id
        )

    @property
    def is_refreshing(self) -> bool:
        return self._in_flight is not None

    def find(self, organization_id: UUID) -> Optional[OrgListItem]:
        for entry in self.entries:
            if entry.organization_id == organization_id:
                return entry
        return None

    # --------------------------
    # Refresh
    # --------------------------

    async def refresh(self) -> Tuple[OrgListItem, ...]:
        """
        Fetch the directory, joining any fetch already in flight.

        Returns:
            Entries ordered by organization name

        Raises:
            DirectoryFetchError: If the backend call fails; the previous
                cache record is kept
        """
        if self._in_flight is None:
            task = asyncio.get_running_loop().create_task(self._fetch(self._generation))
            self._in_flight = task
            self._tasks.add(task)
            task.add_done_callback(self._clear_in_flight)
        return await asyncio.shield(self._in_flight)

    async def ensure_loaded(self) -> Tuple[OrgListItem, ...]:
        """Entries for the current identity, fetching only when not loaded."""
        if self.is_loaded:
            return self.entries
        return await self.refresh()

    def _clear_in_flight(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if self._in_flight is task:
            self._in_flight = None
        # Retrieve the outcome so an unawaited failure is not reported as lost
        if not task.cancelled():
            task.exception()

    @log_execution_time(logger, "directory_fetch")
    async def _fetch(self, generation: int) -> Tuple[OrgListItem, ...]:
        identity = self._identity_provider()
        if identity is None:
            raise DirectoryFetchError(NOT_AUTHENTICATED_MESSAGE)

        logger.debug("directory_fetch_started", identity_id=str(identity.id))
        try:
            rows = await self._backend.list_memberships()
        except BackendError as e:
            logger.warning("directory_fetch_failed", identity_id=str(identity.id), code=e.code)
            raise DirectoryFetchError(translate_backend_error(e), e.code) from e

        entries = tuple(sorted(
            (OrgListItem.from_membership_row(row) for row in rows),
            key=lambda entry: (entry.name.casefold(), str(entry.organization_id)),
        ))

        current = self._identity_provider()
        if generation != self._generation or current is None or current.id != identity.id:
            logger.info("directory_fetch_discarded", identity_id=str(identity.id))
            return self.entries

        self._record = CacheRecord(key=identity.id, value=entries, fetched_at=self._clock())
        logger.info("directory_refreshed", identity_id=str(identity.id), count=len(entries))
        self.auto_select()
        return entries

    # --------------------------
    # Selection and Invalidation
    # --------------------------

    def auto_select(self) -> Optional[OrgListItem]:
        """
        Activate the only organization when nothing is active.

        Returns:
            The entry made active, or None when nothing changed
        """
        if not self.is_loaded or len(self.entries) != 1:
            return None
        if self._selector.get_active() is not None:
            return None
        entry = self.entries[0]
        self._selector.set_active(entry.organization_id, entry.name)
        logger.info("organization_auto_selected", organization_id=str(entry.organization_id))
        return entry

    def invalidate(self) -> None:
        """Drop the cache and detach any in-flight fetch."""
        self._generation += 1
        self._record = None
        self._in_flight = None
        logger.debug("directory_invalidated")
