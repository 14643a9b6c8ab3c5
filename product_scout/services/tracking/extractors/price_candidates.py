"""Turn raw price-bearing elements into price candidates."""

from __future__ import annotations

import logging
import math
from typing import Any, Dict, List, Optional, Sequence

from ..models import PageSnapshot, PriceBand, PriceCandidate
from ..utils import CURRENCY_RE, as_float, font_size_px, normalize_whitespace, to_decimal

logger = logging.getLogger("tracking.extractors.price")


class PriceCandidateExtractor:
    """Read dollar amounts off the rendered page.

    Comparison prices ("Save $50", "Was $399.99") are dropped here so that
    policies only ever see amounts that could be the purchase price.
    """

    EXCLUDED_WORDS: Sequence[str] = ("save", "was")

    def extract(
        self,
        snapshot: PageSnapshot,
        band: Optional[PriceBand] = None,
    ) -> List[PriceCandidate]:
        candidates: List[PriceCandidate] = []
        for element in snapshot.price_elements:
            candidate = self._to_candidate(element, snapshot.viewport_height)
            if candidate is None:
                continue
            if band is not None and not band.contains(candidate.numeric_value):
                logger.debug(
                    "Dropping %s outside band %s-%s",
                    candidate.numeric_value,
                    band.low,
                    band.high,
                )
                continue
            candidates.append(candidate)

        logger.debug(
            "Kept %d of %d price elements", len(candidates), len(snapshot.price_elements)
        )
        return candidates

    def _to_candidate(
        self,
        element: Dict[str, Any],
        viewport_height: float,
    ) -> Optional[PriceCandidate]:
        if not isinstance(element, dict):
            return None
        raw = element.get("text")
        if not isinstance(raw, str):
            return None
        text = normalize_whitespace(raw)
        lowered = text.lower()
        if any(word in lowered for word in self.EXCLUDED_WORDS):
            return None

        match = CURRENCY_RE.search(text)
        if not match:
            return None
        value = to_decimal(match.group(1))
        if value is None:
            return None

        height = as_float(element.get("height"))
        top = as_float(element.get("top"))
        visible = height > 0 and 0 <= top <= viewport_height
        return PriceCandidate(
            raw_text=text,
            numeric_value=value,
            visible=visible,
            font_size_px=font_size_px(element.get("fontSize")),
            dom_top=top,
            dom_left=as_float(element.get("left")),
            selector_rank=_rank(element.get("rank")),
        )


def _rank(value: Any) -> int:
    rank = as_float(value)
    if not math.isfinite(rank) or rank < 0:
        return 0
    return int(rank)
