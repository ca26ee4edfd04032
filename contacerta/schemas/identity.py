"""
Identity Schema Module
======================

The authenticated principal supplied by the auth collaborator.
"""

from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class Identity(BaseModel):
    """
    Opaque external principal.

    Created and destroyed by the auth collaborator; read-only here.
    """

    id: UUID = Field(..., description="Identity UUID")
    email: str = Field(..., description="Identity email")
    access_token: Optional[str] = Field(
        default=None,
        description="Bearer token presented to the HTTP backend",
        repr=False,
    )

    model_config = ConfigDict(frozen=True)
