"""Utilities shared by extractors and retailer policies."""

from __future__ import annotations

import re
from decimal import Decimal, InvalidOperation
from typing import Optional

from .models import PRICE_SENTINEL

CURRENCY_RE = re.compile(r"\$\s?([0-9][0-9,]*(?:\.[0-9]{0,2})?)")
_FONT_SIZE_RE = re.compile(r"(-?[0-9]+(?:\.[0-9]+)?)")


def to_decimal(amount_text: str | None) -> Optional[Decimal]:
    """Convert US price digits ("1,333.99") to Decimal."""
    if not amount_text:
        return None

    cleaned = amount_text.replace(",", "").strip()
    if cleaned.endswith("."):
        cleaned = cleaned[:-1]
    if not cleaned:
        return None
    try:
        value = Decimal(cleaned)
    except (InvalidOperation, ValueError):
        return None
    if not value.is_finite() or value < 0:
        return None
    return value


def parse_display_price(display: str | None) -> Optional[Decimal]:
    """Parse a formatted display price ("$1,333.99") back into a Decimal."""
    if not display or display == PRICE_SENTINEL:
        return None
    return to_decimal(display.replace("$", "").strip())


def format_usd(value: Decimal | None) -> str:
    """Format Decimal values as US dollars, or the sentinel when unknown."""
    if value is None:
        return PRICE_SENTINEL

    quantized = value.quantize(Decimal("0.01"))
    return f"${quantized:,.2f}"


def normalize_whitespace(value: str) -> str:
    """Collapse repeated spaces and newlines."""
    return re.sub(r"\s+", " ", value).strip()


def normalize_label(value: object) -> str:
    """Trim, collapse whitespace and lower-case a control label."""
    if not isinstance(value, str):
        return ""
    return normalize_whitespace(value).lower()


def font_size_px(value: object) -> float:
    """Read a computed CSS font size ("24px", "1.5", 18) as pixels."""
    if isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        match = _FONT_SIZE_RE.search(value)
        if match:
            return float(match.group(1))
    return 0.0


def as_float(value: object, default: float = 0.0) -> float:
    """Coerce a geometry value coming back from the browser."""
    if isinstance(value, bool):
        return default
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return default
    return default
