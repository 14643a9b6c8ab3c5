"""Price and stock tracking engine."""

from .alerts import AlertDecision, should_alert
from .models import (
    PRICE_SENTINEL,
    CheckResult,
    NavigationError,
    PageEvaluationError,
    Retailer,
    RetailerClassification,
    TrackingError,
)
from .orchestrator import CheckOrchestrator, CheckTimings
from .renderer import PlaywrightRenderer, RendererPool
from .routing import RetailerRouter, extract_name, is_valid_url, normalize_url, supported_retailers

__all__ = [
    "PRICE_SENTINEL",
    "AlertDecision",
    "CheckOrchestrator",
    "CheckResult",
    "CheckTimings",
    "NavigationError",
    "PageEvaluationError",
    "PlaywrightRenderer",
    "RendererPool",
    "Retailer",
    "RetailerClassification",
    "RetailerRouter",
    "TrackingError",
    "extract_name",
    "is_valid_url",
    "normalize_url",
    "should_alert",
    "supported_retailers",
]
