"""
Active Organization Selector Module
===================================

Holds the organization whose data is currently displayed and persists it
per identity, so the choice survives restarts.

The selector never checks membership: a stale pointer is detected by the
organization session after the directory is refreshed.

Storage layout:
    key   = "<prefix><identity_id>"
    value = '{"organizationId": "...", "organizationName": "..."}'
"""

from typing import Callable, List, Optional
from uuid import UUID

from contacerta.core.logging import get_logger, organization_id_context
from contacerta.schemas.organization import ActiveOrganization
from contacerta.session.storage import KeyValueStorage

# Initialize logger
logger = get_logger(__name__)

ActiveOrganizationListener = Callable[[Optional[ActiveOrganization]], None]

DEFAULT_KEY_PREFIX = "contacerta:org:"


class ActiveOrganizationSelector:
    """
    Active organization pointer shared by every data view.

    Usage:
        selector = ActiveOrganizationSelector(storage)
        selector.restore(identity.id)
        selector.set_active(organization_id, "Igreja Central")
    """

    def __init__(self, storage: KeyValueStorage, key_prefix: str = DEFAULT_KEY_PREFIX):
        self._storage = storage
        self._key_prefix = key_prefix
        self._identity_id: Optional[UUID] = None
        self._active: Optional[ActiveOrganization] = None
        self._listeners: List[ActiveOrganizationListener] = []

    # --------------------------
    # Accessors
    # --------------------------

    def storage_key(self, identity_id: UUID) -> str:
        return f"{self._key_prefix}{identity_id}"

    @property
    def identity_id(self) -> Optional[UUID]:
        return self._identity_id

    def get_active(self) -> Optional[ActiveOrganization]:
        return self._active

    @property
    def organization_id(self) -> Optional[UUID]:
        return self._active.organization_id if self._active else None

    # --------------------------
    # Mutations
    # --------------------------

    def set_active(self, organization_id: UUID, organization_name: str) -> ActiveOrganization:
        """
        Make an organization active and persist it for the current identity.

        Args:
            organization_id: Organization UUID
            organization_name: Display name stored alongside the id

        Returns:
            The new pointer
        """
        pointer = ActiveOrganization(
            organization_id=organization_id,
            organization_name=organization_name,
        )
        if self._identity_id is not None:
            self._storage.set(self.storage_key(self._identity_id), pointer.to_storage())
        logger.info("active_organization_set", organization_id=str(organization_id))
        self._replace(pointer)
        return pointer

    def clear_active(self) -> None:
        """Forget the pointer in memory and in storage."""
        if self._identity_id is not None:
            self._storage.remove(self.storage_key(self._identity_id))
        if self._active is not None:
            logger.info("active_organization_cleared", organization_id=str(self._active.organization_id))
        self._replace(None)

    def restore(self, identity_id: UUID) -> Optional[ActiveOrganization]:
        """
        Load the pointer persisted for an identity.

        A value that cannot be parsed is removed and treated as absent.

        Args:
            identity_id: Identity whose pointer to load

        Returns:
            The restored pointer, or None
        """
        self._identity_id = identity_id
        key = self.storage_key(identity_id)
        raw = self._storage.get(key)

        pointer: Optional[ActiveOrganization] = None
        if raw is not None:
            try:
                pointer = ActiveOrganization.from_storage(raw)
            except ValueError:
                # pydantic.ValidationError is a ValueError
                logger.warning("active_organization_corrupt", identity_id=str(identity_id))
                self._storage.remove(key)

        if pointer is not None:
            logger.info("active_organization_restored", organization_id=str(pointer.organization_id))
        self._replace(pointer)
        return pointer

    def reset(self) -> None:
        """Drop the in-memory pointer and identity; storage is untouched."""
        self._identity_id = None
        self._replace(None)

    # --------------------------
    # Notification
    # --------------------------

    def subscribe(self, listener: ActiveOrganizationListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _replace(self, pointer: Optional[ActiveOrganization]) -> None:
        previous = self._active
        self._active = pointer
        organization_id_context.set(str(pointer.organization_id) if pointer else None)
        if previous == pointer:
            return
        for listener in list(self._listeners):
            listener(pointer)
