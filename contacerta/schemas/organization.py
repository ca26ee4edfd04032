"""
Organization Schemas Module
===========================

Pydantic models for the organization directory, the active organization
pointer and onboarding requests.
"""

import json
from typing import Any, Mapping, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from contacerta.models.role_enum import Role


# ==========================
# Directory
# ==========================

class OrgListItem(BaseModel):
    """One entry of the organization directory."""

    organization_id: UUID = Field(..., description="Organization UUID")
    name: str = Field(..., description="Organization display name")
    role: Role = Field(..., description="Caller's role in the organization")

    model_config = ConfigDict(frozen=True)

    @classmethod
    def from_membership_row(cls, row: Mapping[str, Any]) -> "OrgListItem":
        """
        Build an entry from a membership row joined to its organization.

        Args:
            row: ``{organization_id, role, organization: {id, name}}``
        """
        organization = row.get("organization") or {}
        return cls(
            organization_id=row["organization_id"],
            name=organization.get("name", ""),
            role=row["role"],
        )


# ==========================
# Active Organization Pointer
# ==========================

class ActiveOrganization(BaseModel):
    """
    Client-side pointer to the organization currently displayed.

    Serialized as ``{"organizationId": ..., "organizationName": ...}``.
    """

    organization_id: UUID = Field(..., alias="organizationId")
    organization_name: str = Field(..., alias="organizationName")

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    def to_storage(self) -> str:
        return json.dumps(self.model_dump(mode="json", by_alias=True))

    @classmethod
    def from_storage(cls, raw: str) -> "ActiveOrganization":
        """
        Parse a stored pointer.

        Raises:
            pydantic.ValidationError: If the value is not a valid pointer
        """
        return cls.model_validate_json(raw)


# ==========================
# Onboarding
# ==========================

class OrganizationCreate(BaseModel):
    """Schema for creating an organization and joining it as owner."""

    name: str = Field(..., min_length=3, max_length=255, description="Organization name")
    tax_id: Optional[str] = Field(default=None, max_length=32, description="CNPJ")

    @field_validator("name")
    @classmethod
    def strip_name(cls, value: str) -> str:
        value = value.strip()
        if len(value) < 3:
            raise ValueError("name must have at least 3 characters")
        return value

    @field_validator("tax_id")
    @classmethod
    def blank_tax_id(cls, value: Optional[str]) -> Optional[str]:
        if value is None or not value.strip():
            return None
        return value.strip()


class InviteCreate(BaseModel):
    organization_id: UUID
    role: Role = Role.READ_ONLY


class InviteToken(BaseModel):
    token: UUID
