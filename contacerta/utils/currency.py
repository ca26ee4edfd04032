"""
BRL Currency Helpers
====================

Money is carried as integer cents everywhere; these helpers convert to and
from the ``R$ 1.234,56`` display form.
"""

import re
from typing import Optional

_NON_DIGITS = re.compile(r"\D")


def digits_only(text: str) -> str:
    """Remove every non-digit character."""
    return _NON_DIGITS.sub("", text or "")


def format_brl(cents: Optional[int]) -> str:
    """
    Format cents as Brazilian reais.

    Examples:
        >>> format_brl(123456)
        'R$ 1.234,56'
        >>> format_brl(-500)
        '-R$ 5,00'
        >>> format_brl(None)
        ''
    """
    if cents is None:
        return ""
    sign = "-" if cents < 0 else ""
    reais, centavos = divmod(abs(cents), 100)
    grouped = f"{reais:,}".replace(",", ".")
    return f"{sign}R$ {grouped},{centavos:02d}"


def parse_cents_from_masked(text: str) -> int:
    """
    Parse a masked currency input into cents.

    Every digit typed counts, so ``"R$ 1.234,56"`` becomes ``123456``.
    """
    digits = digits_only(text)
    return int(digits) if digits else 0
