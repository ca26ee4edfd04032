"""
API Dependencies Module
=======================

FastAPI dependencies for authentication and backend access.

Identities are issued by the external auth collaborator; the API only
verifies bearer tokens and acts on behalf of the identity they carry.

Usage:
    @router.get("/memberships")
    async def list_memberships(backend: Backend = Depends(get_backend)):
        return await backend.list_memberships()
"""

from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import sessionmaker

from contacerta.backend.base import Backend
from contacerta.backend.sql import SqlBackend
from contacerta.core.exceptions import AuthenticationError, TokenInvalidError
from contacerta.core.logging import get_logger, identity_id_context, security_logger
from contacerta.core.security import decode_access_token
from contacerta.db.session import get_session_factory
from contacerta.schemas.identity import Identity

# Initialize logger
logger = get_logger(__name__)


# =====================================
# Bearer Scheme
# =====================================

bearer_scheme = HTTPBearer(
    auto_error=False,
    description="Access token issued by the auth provider",
)


# =====================================
# Current Identity
# =====================================

def get_current_identity(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Identity:
    """
    Validate the bearer token and return the identity it carries.

    Raises:
        AuthenticationError: If the token is missing
        TokenInvalidError: If the token fails validation
    """
    if credentials is None:
        raise AuthenticationError()

    try:
        identity = decode_access_token(credentials.credentials)
    except TokenInvalidError as e:
        security_logger.log_token_invalid(reason=e.details.get("reason", e.message))
        raise

    identity_id_context.set(str(identity.id))
    return identity


# =====================================
# Backend
# =====================================

def get_request_session_factory(request: Request) -> sessionmaker:
    """Session factory injected into the app, or the process-wide one."""
    return getattr(request.app.state, "session_factory", None) or get_session_factory()


def get_backend(
    identity: Identity = Depends(get_current_identity),
    session_factory: sessionmaker = Depends(get_request_session_factory),
) -> Backend:
    """Reference backend acting for the authenticated identity."""
    return SqlBackend(session_factory, lambda: identity)
