"""Base class for retailer policies."""

from __future__ import annotations

import logging
import re
from abc import ABC, abstractmethod
from decimal import Decimal
from typing import ClassVar, Iterable, List, Optional, Sequence, Tuple

from ..extractors.availability_signals import SignalVocabulary
from ..models import (
    AvailabilitySignals,
    PageContext,
    PriceBand,
    PriceCandidate,
    Retailer,
    RetailerDecision,
)
from ..utils import format_usd, to_decimal

logger = logging.getLogger("tracking.policy")

DEALBREAKER_PHRASES: Tuple[str, ...] = (
    "sold out",
    "currently unavailable",
    "not available",
    "out of stock",
    "coming soon",
    "no longer available",
    "unavailable online",
    "unavailable for delivery",
)

INDETERMINATE_LABEL = "Check Website"
STILL_LOADING_NOTE = "(page still loading when read)"

Verdict = Tuple[bool, str, str]


def find_dealbreaker(
    status_texts: Iterable[str],
    phrases: Sequence[str] = DEALBREAKER_PHRASES,
) -> Optional[str]:
    """Return the first dealbreaker phrase found in the joined status texts."""
    joined = " ".join(status_texts).lower()
    for phrase in phrases:
        if phrase in joined:
            return phrase
    return None


def markup_has(markup: str, pattern: re.Pattern[str]) -> bool:
    return bool(markup) and pattern.search(markup) is not None


class RetailerPolicy(ABC):
    """Turn extractor output into one availability and price verdict.

    Subclasses supply the retailer-specific vocabulary, price band and
    positive-path rules. The dealbreaker scan and the condition-variant rule
    are shared and always run first.
    """

    retailer: ClassVar[Retailer]
    price_band: ClassVar[PriceBand] = PriceBand(Decimal("0"), Decimal("100000"))
    fallback_band: ClassVar[PriceBand] = PriceBand(Decimal("50"), Decimal("50000"))
    condition_fallback_floor: ClassVar[Decimal] = Decimal("100")
    json_price_fields: ClassVar[Tuple[str, ...]] = ()
    dealbreakers: ClassVar[Tuple[str, ...]] = DEALBREAKER_PHRASES
    vocabulary: ClassVar[SignalVocabulary] = SignalVocabulary()

    available_label: ClassVar[str] = "In Stock"
    unavailable_label: ClassVar[str] = "Out of Stock"

    def decide(
        self,
        candidates: Sequence[PriceCandidate],
        signals: AvailabilitySignals,
        context: PageContext,
    ) -> RetailerDecision:
        """Public entry point; never raises."""
        try:
            return self._decide(candidates, signals, context)
        except Exception:  # pragma: no cover
            logger.exception("Policy %s failed on %s", self.retailer.value, context.url)
            return self._build(None, False, INDETERMINATE_LABEL, "Could not analyse page", context)

    def _decide(
        self,
        candidates: Sequence[PriceCandidate],
        signals: AvailabilitySignals,
        context: PageContext,
    ) -> RetailerDecision:
        price = self.select_price(candidates, context)

        dealbreaker = find_dealbreaker(signals.raw_status_texts, self.dealbreakers)
        if dealbreaker is not None:
            logger.debug("Dealbreaker '%s' on %s", dealbreaker, context.url)
            return self._build(
                price,
                False,
                self.unavailable_label,
                f"Page says '{dealbreaker}'",
                context,
            )

        if context.is_condition_variant:
            available, label, detail = self._condition_variant_verdict(signals)
        else:
            available, label, detail = self._listing_verdict(price, signals, context)
        return self._build(price, available, label, detail, context)

    def _condition_variant_verdict(self, signals: AvailabilitySignals) -> Verdict:
        if not signals.has_enabled_primary_action:
            return False, self.unavailable_label, "No enabled add-to-cart control for this condition"
        if signals.has_explicit_unavailable_text:
            return False, self.unavailable_label, "Add-to-cart control is marked sold out"
        return True, self.available_label, "Add-to-cart control is enabled for this condition"

    @abstractmethod
    def _listing_verdict(
        self,
        price: Optional[Decimal],
        signals: AvailabilitySignals,
        context: PageContext,
    ) -> Verdict:
        """Return (is_available, status_label, detail) for a primary listing."""
        raise NotImplementedError

    # -- price selection -------------------------------------------------

    def select_price(
        self,
        candidates: Sequence[PriceCandidate],
        context: PageContext,
    ) -> Optional[Decimal]:
        in_band = [c for c in candidates if self.price_band.contains(c.numeric_value)]
        if not in_band:
            return self.price_from_markup(context)

        ranked = self.rank_candidates(in_band)
        if context.is_condition_variant:
            chosen = self._condition_price(ranked, context.condition)
            if chosen is not None:
                return chosen
        return ranked[0].numeric_value

    def rank_candidates(self, candidates: Sequence[PriceCandidate]) -> List[PriceCandidate]:
        """Visible first, then by selector priority, then document order."""
        return sorted(candidates, key=lambda c: (not c.visible, c.selector_rank))

    @staticmethod
    def _condition_price(
        ranked: Sequence[PriceCandidate],
        condition: Optional[str],
    ) -> Optional[Decimal]:
        visible = [c for c in ranked if c.visible]
        if condition:
            for candidate in visible:
                if condition in candidate.raw_text.lower():
                    return candidate.numeric_value

        if visible and "buy new" not in visible[0].raw_text.lower():
            return visible[0].numeric_value

        not_new = [c for c in visible if "buy new" not in c.raw_text.lower()]
        if not_new:
            return min(c.numeric_value for c in not_new)
        return None

    def price_from_markup(self, context: PageContext) -> Optional[Decimal]:
        """Search raw markup for known JSON price fields."""
        if not context.markup or not self.json_price_fields:
            return None

        found = set()
        for field_name in self.json_price_fields:
            pattern = re.compile(
                rf'"{re.escape(field_name)}"\s*:\s*"?([0-9]+(?:\.[0-9]+)?)',
                re.IGNORECASE,
            )
            for match in pattern.finditer(context.markup):
                value = to_decimal(match.group(1))
                if value is not None:
                    found.add(value)

        values = sorted(found)
        if context.is_condition_variant:
            for value in values:
                if value > self.condition_fallback_floor:
                    return value
        for value in values:
            if self.fallback_band.contains(value):
                return value
        return None

    # -- helpers ---------------------------------------------------------

    def _page_loaded(self, price: Optional[Decimal], context: PageContext) -> bool:
        return bool(context.title) or price is not None

    def _build(
        self,
        price: Optional[Decimal],
        available: bool,
        label: str,
        detail: str,
        context: PageContext,
    ) -> RetailerDecision:
        if context.still_loading:
            detail = f"{detail} {STILL_LOADING_NOTE}"
        return RetailerDecision(
            price=price,
            price_display=format_usd(price),
            is_available=available,
            status_label=label,
            detail=detail,
        )


class SingleChannelPolicy(RetailerPolicy):
    """Policy for retailers with a single add-to-cart purchase path."""

    positive_page_states: ClassVar[Tuple[re.Pattern[str], ...]] = ()
    negative_page_states: ClassVar[Tuple[re.Pattern[str], ...]] = ()
    loaded_without_action_label: ClassVar[str] = "Unavailable"

    def _listing_verdict(
        self,
        price: Optional[Decimal],
        signals: AvailabilitySignals,
        context: PageContext,
    ) -> Verdict:
        if signals.has_enabled_primary_action and not signals.has_explicit_unavailable_text:
            detail = f"'{signals.action_label}' is enabled"
            if price is not None:
                detail = f"{detail} at {format_usd(price)}"
            return True, self.available_label, detail

        if signals.has_explicit_unavailable_text:
            return False, self.unavailable_label, f"Button reads '{signals.action_label}'"

        # Page data can see controls rendered after the scan ran.
        for pattern in self.positive_page_states:
            if markup_has(context.markup, pattern):
                return True, self.available_label, "Page data reports the item can be added to cart"

        for pattern in self.negative_page_states:
            if markup_has(context.markup, pattern):
                return False, self.unavailable_label, "Page data reports the item sold out"

        if self._page_loaded(price, context):
            return (
                False,
                self.loaded_without_action_label,
                "Product page loaded without a purchase control",
            )
        return False, INDETERMINATE_LABEL, "No clear availability signals"
