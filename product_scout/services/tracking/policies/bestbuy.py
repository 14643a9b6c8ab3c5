"""Best Buy availability policy."""

from __future__ import annotations

import logging
import re
from decimal import Decimal
from typing import List, Optional, Sequence

from ..models import AvailabilitySignals, PageContext, PriceBand, PriceCandidate, Retailer
from .base import SingleChannelPolicy, Verdict

logger = logging.getLogger("tracking.policy.bestbuy")

_ADD_TO_CART_STATE = re.compile(r'"buttonState"\s*:\s*"ADD_TO_CART"', re.IGNORECASE)
_SOLD_OUT_STATE = re.compile(r'"buttonState"\s*:\s*"SOLD_OUT"', re.IGNORECASE)
_ELIGIBLE = re.compile(r'"(?:shippingEligible|pickupEligible)"\s*:\s*true', re.IGNORECASE)


class BestBuyPolicy(SingleChannelPolicy):
    """Camera-gear tuned rules for bestbuy.com, including open-box listings."""

    retailer = Retailer.BESTBUY
    price_band = PriceBand(Decimal("200"), Decimal("50000"))
    json_price_fields = ("customerPrice", "currentPrice", "openBoxPrice")
    positive_page_states = (_ADD_TO_CART_STATE, _ELIGIBLE)
    negative_page_states = (_SOLD_OUT_STATE,)

    available_label = "Available"
    unavailable_label = "Unavailable"

    def rank_candidates(self, candidates: Sequence[PriceCandidate]) -> List[PriceCandidate]:
        """The main price is the largest visible one."""
        return sorted(candidates, key=lambda c: (not c.visible, -c.font_size_px))

    def _listing_verdict(
        self,
        price: Optional[Decimal],
        signals: AvailabilitySignals,
        context: PageContext,
    ) -> Verdict:
        markup = context.markup.lower()
        if "page not found" in markup and "add to cart" not in markup:
            logger.info("Best Buy returned a not-found page for %s", context.url)
            return False, self.unavailable_label, "Product page not found"
        return super()._listing_verdict(price, signals, context)
