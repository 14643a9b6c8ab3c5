"""Fallback policy for websites the engine does not support."""

from __future__ import annotations

from decimal import Decimal
from typing import Optional, Sequence

from ..models import (
    AvailabilitySignals,
    PageContext,
    PriceCandidate,
    Retailer,
    RetailerDecision,
)
from .base import RetailerPolicy, Verdict

NOT_SUPPORTED_LABEL = "Not Supported"
NOT_SUPPORTED_DETAIL = "This website is not supported for automatic tracking"


class UnsupportedPolicy(RetailerPolicy):
    """Never reports availability."""

    retailer = Retailer.UNSUPPORTED

    def _decide(
        self,
        candidates: Sequence[PriceCandidate],
        signals: AvailabilitySignals,
        context: PageContext,
    ) -> RetailerDecision:
        return self._build(None, False, NOT_SUPPORTED_LABEL, NOT_SUPPORTED_DETAIL, context)

    def _listing_verdict(
        self,
        price: Optional[Decimal],
        signals: AvailabilitySignals,
        context: PageContext,
    ) -> Verdict:
        return False, NOT_SUPPORTED_LABEL, NOT_SUPPORTED_DETAIL
