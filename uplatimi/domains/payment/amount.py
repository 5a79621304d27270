"""
Normalize free-form amount input ("12,50 EUR", "1.234", "007") to a canonical decimal string.
"""

from __future__ import annotations

import re

# Amount field width on the HUB3 slip
MAX_AMOUNT_LENGTH = 15

_NOT_AMOUNT_CHARS = re.compile(r"[^0-9.,]")
_SEPARATORS = re.compile(r"[,.]")


def _collapse_int(digits: str) -> str:
    # leading zeros collapse; an empty integer part reads as zero
    return digits.lstrip("0") or "0"


def normalize_amount(raw: str) -> str:
    """
    Return the canonical form of a typed amount: ``digits`` or ``digits.digits``.

    Everything except digits, commas and periods is dropped. Comma and period are
    both decimal separators; the fraction (the digits between the first and second
    separator) is truncated, not rounded, to two digits. A trailing separator is
    kept so partially typed input like ``"12,"`` survives as ``"12."``.

    Never raises: malformed input degrades to a best-effort result.
    """
    amount = _NOT_AMOUNT_CHARS.sub("", raw or "")
    if not amount:
        return ""
    if "," not in amount and "." not in amount:
        return _collapse_int(amount)
    parts = _SEPARATORS.split(amount)
    fraction = parts[1][:2] if len(parts) > 1 else ""
    return f"{_collapse_int(parts[0])}.{fraction}"


def clamp_amount(raw: str) -> str:
    """normalize_amount limited to the slip's amount width."""
    return normalize_amount(raw)[:MAX_AMOUNT_LENGTH]
