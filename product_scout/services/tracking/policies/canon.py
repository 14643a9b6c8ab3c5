"""Canon USA availability policy."""

from __future__ import annotations

from ..extractors.availability_signals import DEFAULT_UNAVAILABLE_LABELS, SignalVocabulary
from ..models import Retailer
from .base import DEALBREAKER_PHRASES, SingleChannelPolicy


class CanonPolicy(SingleChannelPolicy):
    retailer = Retailer.CANON
    json_price_fields = ("finalPrice", "currentPrice")
    dealbreakers = DEALBREAKER_PHRASES + ("notify me", "temporarily unavailable")
    vocabulary = SignalVocabulary(
        primary_actions=frozenset({"add to cart", "add to bag"}),
        unavailable_labels=DEFAULT_UNAVAILABLE_LABELS | {"notify me", "temporarily unavailable"},
    )
