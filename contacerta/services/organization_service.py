"""
Organization Service Module
===========================

Onboarding operations: creating an organization, joining one through
an invite, and issuing invites.

Usage:
    service = OrganizationService(backend)
    result = await service.create_organization("Igreja Central", None)
    if result.ok:
        organization_id = result.data
"""

from typing import Optional, Union
from uuid import UUID

from pydantic import ValidationError

from contacerta.backend.base import ACCEPT_INVITE, Backend, CREATE_INVITE, CREATE_ORG_AND_JOIN
from contacerta.core.error_messages import (
    EMPTY_INVITE_TOKEN_MESSAGE,
    INVALID_INVITE_TOKEN_MESSAGE,
    translate_backend_error,
    translate_invite_error,
)
from contacerta.core.exceptions import BackendError
from contacerta.core.logging import get_logger
from contacerta.core.result import ServiceResult
from contacerta.models.role_enum import Role
from contacerta.schemas.organization import OrganizationCreate
from contacerta.services.base import VALIDATION_FAILED

# Initialize logger
logger = get_logger(__name__)

ORGANIZATION_NAME_MESSAGE = "O nome da organização deve ter pelo menos 3 caracteres."


class OrganizationService:
    """
    Service for organization onboarding.

    Handles:
    - Create organization and join as owner
    - Accept invite
    - Create invite (owners and admins)
    """

    def __init__(self, backend: Backend):
        """
        Initialize organization service.

        Args:
            backend: Backend collaborator bound to the current identity
        """
        self.backend = backend

    # --------------------------
    # Create Organization
    # --------------------------

    async def create_organization(self, name: str, tax_id: Optional[str] = None) -> ServiceResult[UUID]:
        """
        Create an organization; the caller becomes its owner.

        Args:
            name: Organization name (at least 3 characters after trimming)
            tax_id: Optional CNPJ

        Returns:
            ServiceResult with the new organization id
        """
        try:
            data = OrganizationCreate(name=name or "", tax_id=tax_id)
        except ValidationError:
            return ServiceResult.failure(ORGANIZATION_NAME_MESSAGE, VALIDATION_FAILED)

        try:
            organization_id = await self.backend.rpc(
                CREATE_ORG_AND_JOIN,
                {"org_name": data.name, "org_tax_id": data.tax_id},
            )
        except BackendError as e:
            logger.warning("organization_create_failed", code=e.code)
            return ServiceResult.failure(translate_backend_error(e, "organizations"), e.code)

        logger.info("organization_joined_as_owner", organization_id=str(organization_id))
        return ServiceResult.success(UUID(str(organization_id)))

    # --------------------------
    # Invites
    # --------------------------

    async def accept_invite(self, token: str) -> ServiceResult[UUID]:
        """
        Join the organization an invite token belongs to.

        The token format is checked before calling the backend; backend
        failures (unknown, used or expired token) are translated.

        Args:
            token: Invite token, a UUID

        Returns:
            ServiceResult with the joined organization id
        """
        token = (token or "").strip()
        if not token:
            return ServiceResult.failure(EMPTY_INVITE_TOKEN_MESSAGE, VALIDATION_FAILED)
        try:
            token_uuid = UUID(token)
        except ValueError:
            return ServiceResult.failure(INVALID_INVITE_TOKEN_MESSAGE, VALIDATION_FAILED)

        try:
            organization_id = await self.backend.rpc(ACCEPT_INVITE, {"invite_token": str(token_uuid)})
        except BackendError as e:
            logger.warning("invite_accept_failed", code=e.code)
            return ServiceResult.failure(translate_invite_error(e), e.code)

        logger.info("invite_accepted", organization_id=str(organization_id))
        return ServiceResult.success(UUID(str(organization_id)))

    async def create_invite(
        self,
        organization_id: UUID,
        role: Union[Role, str] = Role.READ_ONLY,
    ) -> ServiceResult[UUID]:
        """Issue an invite token for an organization (owners and admins only)."""
        role_value = role.value if isinstance(role, Role) else str(role)
        try:
            token = await self.backend.rpc(
                CREATE_INVITE,
                {"org_id": str(organization_id), "role": role_value},
            )
        except BackendError as e:
            logger.warning("invite_create_failed", organization_id=str(organization_id), code=e.code)
            return ServiceResult.failure(translate_backend_error(e, "invites"), e.code)

        logger.info("invite_created", organization_id=str(organization_id), role=role_value)
        return ServiceResult.success(UUID(str(token)))

    # --------------------------
    # Lookup
    # --------------------------

    async def get_organization_name(self, organization_id: UUID) -> ServiceResult[Optional[str]]:
        """Name of an organization the caller belongs to, or None."""
        try:
            rows = await self.backend.list_memberships()
        except BackendError as e:
            return ServiceResult.failure(translate_backend_error(e), e.code)

        for row in rows:
            if str(row.get("organization_id")) == str(organization_id):
                return ServiceResult.success((row.get("organization") or {}).get("name"))
        return ServiceResult.success(None)
