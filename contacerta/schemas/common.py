"""
Common Schemas Module
=====================

Structured sub-records shared by several entities.

Address and bank information arrive from the backend as JSON objects,
JSON text or, for rows written by older clients, a comma-joined address
line. They are parsed once here, at the boundary; consumers only ever see
the structured models or None.
"""

import json
from datetime import datetime
from typing import Any, Optional
from uuid import UUID

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError

from contacerta.core.enums import BankAccountType
from contacerta.core.logging import get_logger

logger = get_logger(__name__)


class TenantRecord(BaseModel):
    """Fields every tenant-scoped row carries."""

    id: UUID = Field(..., description="Record UUID")
    organization_id: UUID = Field(..., description="Owning organization UUID")
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True, extra="ignore")

# Positional layout of the legacy comma-joined address line
_LEGACY_ADDRESS_FIELDS = (
    "street",
    "number",
    "complement",
    "neighborhood",
    "city",
    "state",
    "zip_code",
)


class Address(BaseModel):
    """Postal address."""

    street: str = ""
    number: str = ""
    complement: Optional[str] = None
    neighborhood: str = ""
    city: str = ""
    state: str = ""
    zip_code: str = Field(default="", validation_alias=AliasChoices("zip_code", "zipCode"))

    model_config = ConfigDict(frozen=True, extra="ignore")

    def is_empty(self) -> bool:
        return not any(self.model_dump().values())

    def one_line(self) -> str:
        """Render the address as a single comma-separated line."""
        parts = [
            self.street,
            self.number,
            self.complement,
            self.neighborhood,
            self.city,
            self.state,
            self.zip_code,
        ]
        return ", ".join(part for part in parts if part)

    @classmethod
    def parse(cls, value: Any) -> Optional["Address"]:
        """
        Parse an address from any stored representation.

        Args:
            value: Address, dict, JSON text, legacy comma-joined line or None

        Returns:
            Address, or None when absent or unparseable
        """
        if value is None or isinstance(value, cls):
            return value

        if isinstance(value, str):
            text = value.strip()
            if not text:
                return None
            if text.startswith("{"):
                try:
                    value = json.loads(text)
                except json.JSONDecodeError:
                    logger.debug("address_json_invalid")
                    return None
            else:
                parts = text.split(", ")
                if len(parts) < 2:
                    return None
                value = dict(zip(_LEGACY_ADDRESS_FIELDS, parts))
                value["complement"] = value.get("complement") or None

        if not isinstance(value, dict):
            return None

        try:
            address = cls.model_validate(value)
        except ValidationError:
            logger.debug("address_invalid")
            return None
        return None if address.is_empty() else address


class BankInfo(BaseModel):
    """Bank account used to pay a supplier."""

    bank: str = ""
    agency: str = ""
    account: str = ""
    account_type: BankAccountType = Field(
        default=BankAccountType.CHECKING,
        validation_alias=AliasChoices("account_type", "accountType"),
    )

    model_config = ConfigDict(frozen=True, extra="ignore")

    @classmethod
    def parse(cls, value: Any) -> Optional["BankInfo"]:
        """
        Parse bank information from a dict or JSON text.

        Returns:
            BankInfo, or None when absent or unparseable
        """
        if value is None or isinstance(value, cls):
            return value

        if isinstance(value, str):
            if not value.strip():
                return None
            try:
                value = json.loads(value)
            except json.JSONDecodeError:
                logger.debug("bank_info_json_invalid")
                return None

        if not isinstance(value, dict):
            return None

        try:
            info = cls.model_validate(value)
        except ValidationError:
            logger.debug("bank_info_invalid")
            return None
        if not (info.bank or info.agency or info.account):
            return None
        return info
