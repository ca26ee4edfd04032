"""
Token Security Module
=====================

JWT helpers for the HTTP surface.

Identities and their tokens belong to the auth collaborator; the backend
only verifies them. create_access_token exists so development servers and
tests can mint tokens signed with the same settings.

Security Features:
- Issuer and audience validation
- Expiration enforcement
- Token type discrimination
"""

from datetime import datetime, timedelta, UTC
from typing import Optional
from uuid import UUID

from jose import jwt, JWTError

from contacerta.core.config import get_settings
from contacerta.core.exceptions import TokenInvalidError
from contacerta.core.logging import get_logger
from contacerta.schemas.identity import Identity

# Initialize logger
logger = get_logger(__name__)

ACCESS_TOKEN_TYPE = "access"


def create_access_token(
    identity_id: UUID,
    email: str,
    expires_delta: Optional[timedelta] = None,
) -> str:
    """
    Create a signed access token for an identity.

    Args:
        identity_id: Identity UUID (token subject)
        email: Identity email
        expires_delta: Custom lifetime, defaults to the configured one

    Returns:
        Encoded JWT string
    """
    settings = get_settings()
    now = datetime.now(UTC)
    expire = now + (expires_delta or timedelta(minutes=settings.access_token_expire_minutes))

    payload = {
        "sub": str(identity_id),
        "email": email,
        "type": ACCESS_TOKEN_TYPE,
        "iat": now,
        "exp": expire,
        "iss": settings.jwt_issuer,
        "aud": settings.jwt_audience,
    }
    return jwt.encode(payload, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> Identity:
    """
    Verify an access token and return the identity it represents.

    Args:
        token: Encoded JWT string

    Returns:
        Identity carrying the original token

    Raises:
        TokenInvalidError: If signature, claims or type are invalid
    """
    settings = get_settings()
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret_key,
            algorithms=[settings.jwt_algorithm],
            audience=settings.jwt_audience,
            issuer=settings.jwt_issuer,
        )
    except JWTError as e:
        logger.debug("token_decode_failed", error=str(e))
        raise TokenInvalidError(reason=str(e))

    if payload.get("type") != ACCESS_TOKEN_TYPE:
        raise TokenInvalidError(reason="wrong token type")

    try:
        identity_id = UUID(payload["sub"])
    except (KeyError, ValueError):
        raise TokenInvalidError(reason="malformed subject")

    return Identity(id=identity_id, email=payload.get("email", ""), access_token=token)
