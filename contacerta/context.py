"""
Organization Session Module
===========================

Application state for one client: the signed-in identity, the active
organization, the organization directory, services and data views.

It is built once and passed to whoever needs it; nothing here is global.

Lifecycle:
- sign_in(identity): restore the persisted pointer, then refresh the
  directory (auto-selecting a single organization)
- any identity change reported to the session store (another identity,
  sign-out) invalidates the directory and the in-memory selection
- logout(): clear the pointer, invalidate the directory, sign out

Usage:
    context = AppContext(backend, FileStorage(settings.storage_file))
    await context.sign_in(identity)
    if context.needs_onboarding:
        await context.create_organization("Igreja Central")
"""

from typing import Optional, Tuple
from uuid import UUID

from contacerta.backend.base import Backend
from contacerta.core.config import Settings, get_settings
from contacerta.core.exceptions import NotAMemberError
from contacerta.core.logging import get_logger
from contacerta.core.rbac import can_manage_access, can_write
from contacerta.core.result import ServiceResult
from contacerta.models.role_enum import Role
from contacerta.schemas.identity import Identity
from contacerta.schemas.organization import ActiveOrganization, OrgListItem
from contacerta.services import ServiceRegistry
from contacerta.session.active_org import ActiveOrganizationSelector
from contacerta.session.identity import SessionStore
from contacerta.session.org_directory import OrganizationDirectoryCache
from contacerta.session.storage import KeyValueStorage
from contacerta.views.registry import ViewRegistry, build_views

# Initialize logger
logger = get_logger(__name__)


class AppContext:
    """
    Organization session shared by services and views.

    Attributes:
        session: Identity holder
        selector: Active organization pointer
        directory: Organizations of the current identity
        services: Per-entity services
        views: Dependent data views
    """

    def __init__(
        self,
        backend: Backend,
        storage: KeyValueStorage,
        settings: Optional[Settings] = None,
        session: Optional[SessionStore] = None,
    ):
        self.settings = settings or get_settings()
        self.backend = backend
        self.storage = storage
        self.session = session or SessionStore()
        self.selector = ActiveOrganizationSelector(storage, self.settings.storage_key_prefix)
        self.directory = OrganizationDirectoryCache(
            backend,
            self.selector,
            lambda: self.session.identity,
        )
        self.services = ServiceRegistry(backend)
        self.views: ViewRegistry = build_views(self.services, self.selector, self.settings)
        self._unsubscribe_session = self.session.subscribe(self._on_identity_changed)

    # =====================================
    # Identity
    # =====================================

    async def sign_in(self, identity: Identity) -> Tuple[OrgListItem, ...]:
        """
        Start (or refresh) the session for an identity.

        Returns:
            Directory entries after the refresh

        Raises:
            DirectoryFetchError: If the directory cannot be fetched; the
                restored pointer stays active
        """
        self.session.sign_in(identity)
        return await self.refresh_organizations()

    def _on_identity_changed(self, previous: Optional[Identity], current: Optional[Identity]) -> None:
        """
        Reset organization state whenever the identity changes.

        Runs for every change reported to the session store, including a
        sign-in or sign-out made by the auth collaborator directly. A token
        refresh for the same identity keeps everything.
        """
        previous_id = previous.id if previous else None
        current_id = current.id if current else None
        if previous_id == current_id:
            return

        if previous_id is not None:
            logger.info("identity_changed", previous_identity_id=str(previous_id))
        self.directory.invalidate()
        self.selector.reset()
        if current_id is not None:
            self.selector.restore(current_id)

    async def refresh_organizations(self) -> Tuple[OrgListItem, ...]:
        """Refresh the directory and drop an active pointer it no longer lists."""
        entries = await self.directory.refresh()
        if not self.directory.is_loaded:
            return entries

        active = self.selector.get_active()
        if (
            self.settings.revalidate_active_org
            and active is not None
            and self.directory.find(active.organization_id) is None
        ):
            logger.warning("active_organization_stale", organization_id=str(active.organization_id))
            self.selector.clear_active()
            self.directory.auto_select()
        return entries

    async def logout(self) -> None:
        identity = self.session.identity
        self.selector.clear_active()
        self.session.sign_out()
        self.directory.invalidate()
        logger.info("logout_completed", identity_id=str(identity.id) if identity else None)

    # =====================================
    # Active Organization
    # =====================================

    @property
    def active_organization(self) -> Optional[ActiveOrganization]:
        return self.selector.get_active()

    def switch_organization(
        self,
        organization_id: UUID,
        organization_name: Optional[str] = None,
    ) -> ActiveOrganization:
        """
        Make another organization active.

        Args:
            organization_id: Target organization
            organization_name: Display name, defaults to the directory's

        Raises:
            NotAMemberError: If membership revalidation is on and the
                organization is not in the loaded directory
        """
        entry = self.directory.find(organization_id)
        if entry is None and self.settings.revalidate_active_org:
            raise NotAMemberError(str(organization_id))
        name = organization_name or (entry.name if entry else "")
        return self.selector.set_active(organization_id, name)

    @property
    def needs_onboarding(self) -> bool:
        """Signed in, directory loaded and empty: create or join an organization."""
        return (
            self.session.identity is not None
            and self.directory.is_loaded
            and not self.directory.entries
        )

    @property
    def active_role(self) -> Optional[Role]:
        organization_id = self.selector.organization_id
        if organization_id is None:
            return None
        entry = self.directory.find(organization_id)
        return entry.role if entry else None

    @property
    def can_write(self) -> bool:
        role = self.active_role
        return role is not None and can_write(role)

    @property
    def can_manage_access(self) -> bool:
        role = self.active_role
        return role is not None and can_manage_access(role)

    # =====================================
    # Onboarding
    # =====================================

    async def create_organization(self, name: str, tax_id: Optional[str] = None) -> ServiceResult[UUID]:
        """Create an organization, refresh the directory and activate it."""
        result = await self.services.organizations.create_organization(name, tax_id)
        if result.ok:
            await self._join(result.data)
        return result

    async def accept_invite(self, token: str) -> ServiceResult[UUID]:
        """Join an organization by invite, refresh the directory and activate it."""
        result = await self.services.organizations.accept_invite(token)
        if result.ok:
            await self._join(result.data)
        return result

    async def _join(self, organization_id: UUID) -> None:
        await self.directory.refresh()
        entry = self.directory.find(organization_id)
        if entry is not None:
            self.selector.set_active(entry.organization_id, entry.name)

    async def aclose(self) -> None:
        self._unsubscribe_session()
        await self.views.close()
        await self.backend.aclose()
