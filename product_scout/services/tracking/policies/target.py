"""Target availability policy."""

from __future__ import annotations

from decimal import Decimal
from typing import List, Optional

from ..extractors.availability_signals import ChannelRule, SignalVocabulary
from ..models import AvailabilitySignals, PageContext, Retailer
from .base import INDETERMINATE_LABEL, RetailerPolicy, Verdict

OUT_OF_STOCK_PREFIX = "OutOfStock:"

TARGET_CHANNELS = (
    ChannelRule(
        name="shipping",
        label="Shipping",
        positive_markers=("arrives", "get it by"),
        control_ids=("shippingButton",),
    ),
    ChannelRule(
        name="pickup",
        label="Pickup",
        positive_markers=("ready", "available"),
        control_ids=("orderPickupButton",),
    ),
    ChannelRule(
        name="delivery",
        label="Delivery",
        positive_markers=("available", "get it"),
        control_ids=("scheduledDeliveryButton",),
    ),
    ChannelRule(
        name="stores",
        label="In Stores",
        positive_markers=(),
        control_ids=("showInStockPrimaryButton",),
        suppressed_by=(OUT_OF_STOCK_PREFIX,),
    ),
)


class TargetPolicy(RetailerPolicy):
    """Shipping, pickup and delivery are read independently; any one is enough."""

    retailer = Retailer.TARGET
    json_price_fields = ("current_retail", "currentPrice")
    vocabulary = SignalVocabulary(
        primary_actions=frozenset({"add to cart", "ship it", "pick it up", "deliver it"}),
        channels=TARGET_CHANNELS,
    )
    available_label = "Available"

    def _listing_verdict(
        self,
        price: Optional[Decimal],
        signals: AvailabilitySignals,
        context: PageContext,
    ) -> Verdict:
        open_channels = self.available_channels(signals)
        if open_channels:
            label = f"{self.available_label}: {', '.join(open_channels)}"
            return True, label, f"Can be bought via {', '.join(open_channels).lower()}"

        if any(text.startswith(OUT_OF_STOCK_PREFIX) for text in signals.raw_status_texts):
            return False, self.unavailable_label, "Target shows an out-of-stock message"

        if signals.has_explicit_unavailable_text or "notifyMeButton" in signals.visible_controls:
            return False, self.unavailable_label, "Only a notify-me option is offered"

        return False, INDETERMINATE_LABEL, "No fulfillment option reported availability"

    def available_channels(self, signals: AvailabilitySignals) -> List[str]:
        """Labels of open channels, declared ones first in declared order."""
        declared = {rule.name for rule in self.vocabulary.channels}
        labels = [
            rule.label
            for rule in self.vocabulary.channels
            if signals.fulfillment_channels.get(rule.name, False)
        ]
        labels.extend(
            name.title()
            for name, is_open in signals.fulfillment_channels.items()
            if is_open and name not in declared
        )
        return labels
