"""
Display Formatting Helpers
==========================
"""

from datetime import date, datetime
from typing import Optional, Union
from uuid import UUID


def format_date_br(value: Optional[Union[date, datetime, str]]) -> str:
    """
    Format a date as ``dd/mm/yyyy``.

    ISO strings are accepted; anything unparseable renders as an empty
    string.
    """
    if value is None:
        return ""
    if isinstance(value, str):
        try:
            value = date.fromisoformat(value[:10])
        except ValueError:
            return ""
    return value.strftime("%d/%m/%Y")


def format_asset_code(asset_id: Union[UUID, str], code: Optional[str]) -> str:
    """
    Asset code shown to users.

    Falls back to ``PAT-`` plus the first eight characters of the id when
    the asset has no code.
    """
    if code and code.strip():
        return code
    return f"PAT-{str(asset_id)[:8].upper()}"
