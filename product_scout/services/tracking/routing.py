"""Utilities for routing product URLs to the retailer that sells them."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Optional, Tuple
from urllib.parse import parse_qs, urlsplit

from .models import Retailer, RetailerClassification

CONDITIONS: Tuple[str, ...] = ("excellent", "good", "fair")


@dataclass(frozen=True)
class DomainRule:
    """Domain substrings that identify one retailer."""

    retailer: Retailer
    patterns: Tuple[str, ...]
    primary: Tuple[str, ...]
    secondary_confidence: float

    def match(self, url: str) -> Optional[RetailerClassification]:
        for pattern in self.patterns:
            if pattern in url:
                confidence = (
                    1.0
                    if any(domain in url for domain in self.primary)
                    else self.secondary_confidence
                )
                return RetailerClassification(
                    retailer=self.retailer,
                    confidence=confidence,
                    reason=f"Detected {self.retailer.display_name} domain: {pattern}",
                )
        return None


DOMAIN_RULES: Tuple[DomainRule, ...] = (
    DomainRule(
        Retailer.BESTBUY,
        ("bestbuy.com", "bestbuy.ca"),
        primary=("bestbuy.com",),
        secondary_confidence=0.9,
    ),
    DomainRule(
        Retailer.TARGET,
        ("target.com", "target.ca"),
        primary=("target.com",),
        secondary_confidence=0.9,
    ),
    DomainRule(
        Retailer.CANON,
        ("canon.com", "canon.ca", "canon.co.uk"),
        primary=("canon.com",),
        secondary_confidence=0.95,
    ),
    DomainRule(
        Retailer.RICOH,
        ("ricoh-imaging.com", "ricoh-imaging.co.jp", "ricoh-imaging.co.uk"),
        primary=("ricoh-imaging.com",),
        secondary_confidence=0.95,
    ),
)


class RetailerRouter:
    """Classify a URL by substring matching against a static domain table."""

    def __init__(self, rules: Tuple[DomainRule, ...] = DOMAIN_RULES) -> None:
        self.rules = rules

    def classify(self, url: str) -> RetailerClassification:
        normalized = (url or "").strip().lower()
        for rule in self.rules:
            result = rule.match(normalized)
            if result is not None:
                return result
        return RetailerClassification(
            retailer=Retailer.UNSUPPORTED,
            confidence=1.0,
            reason="Website not recognized or supported",
        )


def is_valid_url(url: str) -> bool:
    """True when the URL has both a scheme and a host."""
    if not url or any(ch.isspace() for ch in url.strip()):
        return False
    try:
        parts = urlsplit(url.strip())
    except ValueError:
        return False
    return bool(parts.scheme) and bool(parts.netloc)


def normalize_url(url: str) -> str:
    """Trim the URL and add https:// when no http(s) scheme is present."""
    normalized = (url or "").strip()
    if not normalized.startswith(("http://", "https://")):
        normalized = "https://" + normalized
    return normalized


def is_condition_variant(url: str) -> bool:
    """Open-box and other pre-owned listings are detected from the URL shape."""
    lowered = (url or "").lower()
    return "/openbox" in lowered or "condition=" in lowered


def stated_condition(url: str, markup: str = "") -> Optional[str]:
    """Return the condition grade the URL (or page) asks for, if any."""
    try:
        query = parse_qs(urlsplit(url or "").query)
    except ValueError:
        query = {}
    for value in query.get("condition", []):
        lowered = value.strip().lower()
        if lowered in CONDITIONS:
            return lowered

    haystack = f"{url} {markup}".lower()
    for condition in CONDITIONS:
        if f"condition={condition}" in haystack:
            return condition
    return None


def supported_retailers() -> List[Retailer]:
    return [retailer for retailer in Retailer if retailer.is_supported]


def extract_name(url: str) -> str:
    """Best-effort product name from the URL slug."""
    for component in (url or "").split("/"):
        if not component:
            continue
        if any(token in component for token in ("www.", ".com", "http", "site", "pdp")):
            continue
        if "-" in component and len(component) > 15:
            slug = component.split("?", 1)[0]
            words = [word for word in re.split(r"-+", slug) if word][:6]
            return " ".join(words).title()[:50]

    retailer = RetailerRouter().classify(url).retailer
    if retailer.is_supported:
        return f"{retailer.display_name} Product"
    return "Product"
