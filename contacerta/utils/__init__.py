"""Formatting helpers."""

from .currency import digits_only, format_brl, parse_cents_from_masked
from .formatting import format_asset_code, format_date_br

__all__ = [
    "digits_only",
    "format_brl",
    "parse_cents_from_masked",
    "format_asset_code",
    "format_date_br",
]
