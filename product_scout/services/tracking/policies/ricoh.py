"""Ricoh Imaging store availability policy."""

from __future__ import annotations

from ..extractors.availability_signals import DEFAULT_UNAVAILABLE_LABELS, SignalVocabulary
from ..models import Retailer
from .base import DEALBREAKER_PHRASES, SingleChannelPolicy


class RicohPolicy(SingleChannelPolicy):
    """The Ricoh store accepts "Buy Now" and "Purchase" as well as add-to-cart."""

    retailer = Retailer.RICOH
    json_price_fields = ("price", "currentPrice")
    dealbreakers = DEALBREAKER_PHRASES + ("notify me", "temporarily unavailable")
    vocabulary = SignalVocabulary(
        primary_actions=frozenset({"add to cart", "add to bag", "buy now", "purchase"}),
        unavailable_labels=DEFAULT_UNAVAILABLE_LABELS
        | {"notify me", "temporarily unavailable", "sold out - notify me"},
    )
