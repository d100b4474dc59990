"""
Display helpers shared by the API, the seeders and the tool server.
"""

from __future__ import annotations

import re
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

_DISALLOWED = re.compile(r"[^a-z0-9\s-]")
_WHITESPACE = re.compile(r"\s+")
_HYPHENS = re.compile(r"-+")

# currency code → (symbol, minor-unit digits)
CURRENCY_FORMATS: dict[str, tuple[str, int]] = {
    "USD": ("$", 2),
    "CAD": ("CA$", 2),
    "AUD": ("A$", 2),
    "EUR": ("€", 2),
    "GBP": ("£", 2),
    "INR": ("₹", 2),
    "JPY": ("¥", 0),
}


def slugify(name: Optional[str]) -> str:
    """
    Derive a URL-safe slug from a display name.

    'Tokyo Sushi Bar' → 'tokyo-sushi-bar', 'Café  Rouge!' → 'caf-rouge'.
    Returns '' when nothing usable is left.
    """
    if not name:
        return ""
    slug = name.strip().lower()
    slug = _DISALLOWED.sub("", slug)
    slug = _WHITESPACE.sub("-", slug)
    slug = _HYPHENS.sub("-", slug)
    return slug.strip("-")


def format_price(price_cents: Optional[int], currency_code: str = "USD") -> str:
    """
    Render integer minor units as a price string.

    format_price(1234, "USD") → "$12.34"; unknown codes → "CHF 12.34".
    """
    code = (currency_code or "USD").upper()
    symbol, digits = CURRENCY_FORMATS.get(code, (None, 2))
    amount = Decimal(int(price_cents or 0)) / Decimal(100)
    sign = "-" if amount < 0 else ""
    # halves round away from zero, like browser currency formatting
    rounded = abs(amount).quantize(Decimal(1).scaleb(-digits), rounding=ROUND_HALF_UP)
    text = f"{rounded:,.{digits}f}"
    if symbol is None:
        return f"{sign}{code} {text}"
    return f"{sign}{symbol}{text}"


def split_list(value: Optional[str]) -> list[str]:
    """Split a comma-separated free-text field, dropping blanks and 'None'."""
    if not value:
        return []
    parts = [p.strip() for p in value.split(",")]
    return [p for p in parts if p and p.lower() != "none"]
