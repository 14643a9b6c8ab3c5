"""Domain models for availability and price checks."""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Tuple

PRICE_SENTINEL = "—"


class Retailer(str, Enum):
    """Closed set of retailers the engine knows how to read."""

    BESTBUY = "bestbuy"
    TARGET = "target"
    CANON = "canon"
    RICOH = "ricoh"
    UNSUPPORTED = "unsupported"

    @property
    def display_name(self) -> str:
        return _DISPLAY_NAMES[self]

    @property
    def is_supported(self) -> bool:
        return self is not Retailer.UNSUPPORTED


_DISPLAY_NAMES = {
    Retailer.BESTBUY: "Best Buy",
    Retailer.TARGET: "Target",
    Retailer.CANON: "Canon",
    Retailer.RICOH: "Ricoh",
    Retailer.UNSUPPORTED: "Not Supported",
}


@dataclass(frozen=True, slots=True)
class PriceBand:
    """Open interval of prices considered realistic for a retailer."""

    low: Decimal
    high: Optional[Decimal] = None

    def contains(self, value: Decimal) -> bool:
        if value <= self.low:
            return False
        return self.high is None or value < self.high


@dataclass(frozen=True, slots=True)
class PriceCandidate:
    """A dollar amount seen on the rendered page.

    ``selector_rank`` is the position of the price selector that matched,
    lower is more specific.
    """

    raw_text: str
    numeric_value: Decimal
    visible: bool
    font_size_px: float = 0.0
    dom_top: float = 0.0
    dom_left: float = 0.0
    selector_rank: int = 0


@dataclass(frozen=True, slots=True)
class AvailabilitySignals:
    """Stock signals read from buttons, status regions and fulfillment cells."""

    has_enabled_primary_action: bool = False
    has_explicit_unavailable_text: bool = False
    action_label: str = ""
    fulfillment_channels: Mapping[str, bool] = field(default_factory=dict)
    raw_status_texts: Tuple[str, ...] = ()
    visible_controls: Tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class PageContext:
    """Facts about the page that are not price or stock signals."""

    url: str = ""
    is_condition_variant: bool = False
    condition: Optional[str] = None
    markup: str = ""
    title: Optional[str] = None
    still_loading: bool = False


@dataclass(frozen=True, slots=True)
class RetailerDecision:
    """Final verdict of a retailer policy for one page."""

    price: Optional[Decimal]
    price_display: str
    is_available: bool
    status_label: str
    detail: str

    def __post_init__(self) -> None:
        if self.price is None and self.price_display != PRICE_SENTINEL:
            raise ValueError("price_display must be the sentinel when price is unknown")


@dataclass(frozen=True, slots=True)
class CheckResult:
    """Outcome of one check, handed to callers outside the engine."""

    status: str
    price: str
    is_available: bool
    details: str
    retailer: Retailer


@dataclass(frozen=True, slots=True)
class RetailerClassification:
    """Result of matching a URL against the retailer domain table."""

    retailer: Retailer
    confidence: float
    reason: str


@dataclass(slots=True)
class PageSnapshot:
    """Structured results of the page-interrogation scripts.

    Price elements come grouped by selector priority, everything else in
    document order. Nothing here is interpreted yet; the extractors do that.
    """

    url: str = ""
    price_elements: List[Dict[str, Any]] = field(default_factory=list)
    status_texts: List[str] = field(default_factory=list)
    buttons: List[Dict[str, Any]] = field(default_factory=list)
    channel_regions: Dict[str, Optional[str]] = field(default_factory=dict)
    markup: str = ""
    title: Optional[str] = None
    viewport_height: float = 1080.0
    ready_state: str = "complete"

    @property
    def still_loading(self) -> bool:
        return self.ready_state != "complete"


class TrackingError(RuntimeError):
    """Raised inside the engine when a check cannot complete."""

    def __init__(self, retailer: Retailer, message: str) -> None:
        super().__init__(message)
        self.retailer = retailer
        self.message = message


class InvalidURLError(TrackingError):
    """The URL is malformed; no page load was attempted."""


class NavigationError(TrackingError):
    """The renderer failed to load the page."""


class PageEvaluationError(TrackingError):
    """A page-interrogation script failed or returned garbage."""
