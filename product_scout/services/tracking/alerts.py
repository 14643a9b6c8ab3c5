"""Decide whether a fresh check result deserves a restock alert."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from .models import CheckResult
from .utils import parse_display_price

logger = logging.getLogger("tracking.alerts")


@dataclass(frozen=True, slots=True)
class AlertDecision:
    should_alert: bool
    reason: str


def should_alert(
    previously_available: Optional[bool],
    result: CheckResult,
    price_limit: Optional[Decimal] = None,
) -> AlertDecision:
    """Fire only when a product becomes available at or under its price limit.

    ``previously_available`` is None for a product that was never checked,
    which counts as not available. A product that stays available does not
    alert again.
    """
    if not result.is_available:
        return AlertDecision(False, "Product is not available")
    if previously_available:
        return AlertDecision(False, "Product was already available")

    if price_limit is None:
        return AlertDecision(True, f"Back in stock at {result.price}")

    price = parse_display_price(result.price)
    if price is None:
        logger.debug("Cannot compare %r with limit %s", result.price, price_limit)
        return AlertDecision(False, "Price unknown, cannot compare with the limit")
    if price > price_limit:
        return AlertDecision(False, f"Price {result.price} is above the limit")
    return AlertDecision(True, f"Back in stock at {result.price}, within the limit")
