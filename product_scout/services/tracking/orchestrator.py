"""Run one availability check end to end."""

from __future__ import annotations

import asyncio
import logging
import random
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Tuple

from configs import Settings, settings

from .extractors.availability_signals import AvailabilitySignalExtractor
from .extractors.price_candidates import PriceCandidateExtractor
from .models import (
    PRICE_SENTINEL,
    AvailabilitySignals,
    CheckResult,
    InvalidURLError,
    NavigationError,
    PageContext,
    PageEvaluationError,
    PageSnapshot,
    Retailer,
    RetailerDecision,
)
from .policies import policy_for
from .renderer import RendererPool
from .routing import RetailerRouter, is_condition_variant, is_valid_url, stated_condition
from .scripts import SCRIPT_VERSION, scripts_for
from .utils import as_float

logger = logging.getLogger("tracking.orchestrator")

INVALID_URL_STATUS = "Invalid URL"
LOAD_FAILED_STATUS = "Load Failed"
TIMEOUT_STATUS = "Timeout"
ERROR_STATUS = "Error"

AVAILABLE_GLYPH = "✅"
UNAVAILABLE_GLYPH = "❌"


@dataclass(frozen=True)
class CheckTimings:
    """Timeouts and delays for one orchestrator, in seconds."""

    bestbuy_timeout: float = 60.0
    default_timeout: float = 15.0
    bestbuy_settle_delay: float = 4.0
    default_settle_delay: float = 3.0
    inter_check_delay: float = 2.0
    user_agents: Tuple[str, ...] = ()

    @classmethod
    def from_settings(cls, config: Settings = settings) -> "CheckTimings":
        return cls(
            bestbuy_timeout=config.BESTBUY_TIMEOUT_SECONDS,
            default_timeout=config.DEFAULT_TIMEOUT_SECONDS,
            bestbuy_settle_delay=config.BESTBUY_SETTLE_DELAY_SECONDS,
            default_settle_delay=config.DEFAULT_SETTLE_DELAY_SECONDS,
            inter_check_delay=config.INTER_CHECK_DELAY_SECONDS,
            user_agents=tuple(config.USER_AGENTS),
        )

    def timeout_for(self, retailer: Retailer) -> float:
        if retailer is Retailer.BESTBUY:
            return self.bestbuy_timeout
        return self.default_timeout

    def settle_delay_for(self, retailer: Retailer) -> float:
        if retailer is Retailer.BESTBUY:
            return self.bestbuy_settle_delay
        return self.default_settle_delay

    def pick_user_agent(self) -> str:
        if not self.user_agents:
            return ""
        return random.choice(self.user_agents)


class CheckOrchestrator:
    """Drive a renderer through load, settle, interrogate and decide.

    Checks for the same retailer share one renderer and are serialised with a
    per-retailer lock. Every failure is turned into a ``CheckResult``; this
    class never raises out of ``check``.
    """

    def __init__(
        self,
        pool: Optional[RendererPool] = None,
        router: Optional[RetailerRouter] = None,
        timings: Optional[CheckTimings] = None,
        price_extractor: Optional[PriceCandidateExtractor] = None,
    ) -> None:
        self.pool = pool if pool is not None else RendererPool()
        self.router = router or RetailerRouter()
        self.timings = timings or CheckTimings.from_settings()
        self.price_extractor = price_extractor or PriceCandidateExtractor()
        self._signal_extractors: Dict[Retailer, AvailabilitySignalExtractor] = {}
        self._locks: Dict[Retailer, asyncio.Lock] = {}

    async def check(self, url: str) -> CheckResult:
        url = (url or "").strip()
        try:
            self.validate(url)
        except InvalidURLError as exc:
            logger.warning("Rejected malformed URL %r", url)
            return self._failure(exc.retailer, INVALID_URL_STATUS, exc.message)

        retailer = self.router.classify(url).retailer
        if not retailer.is_supported:
            decision = policy_for(retailer).decide((), AvailabilitySignals(), PageContext(url=url))
            logger.info("Skipping unsupported website %s", url)
            return self._to_result(retailer, decision)

        timeout = self.timings.timeout_for(retailer)
        async with self._lock_for(retailer):
            try:
                return await asyncio.wait_for(self._run(url, retailer), timeout=timeout)
            except (asyncio.TimeoutError, TimeoutError):
                logger.warning("Check of %s timed out after %.0fs", url, timeout)
                return self._failure(retailer, TIMEOUT_STATUS, "Page took too long to load")
            except NavigationError as exc:
                logger.warning("Failed to load %s: %s", url, exc.message)
                return self._failure(retailer, LOAD_FAILED_STATUS, f"Failed to load page: {exc.message}")
            except PageEvaluationError as exc:
                logger.warning("Could not read %s: %s", url, exc.message)
                return self._failure(retailer, ERROR_STATUS, f"Could not read page: {exc.message}")
            except Exception as exc:
                logger.exception("Unexpected failure checking %s", url)
                return self._failure(retailer, ERROR_STATUS, str(exc) or type(exc).__name__)

    @staticmethod
    def validate(url: str) -> None:
        if not is_valid_url(url):
            raise InvalidURLError(Retailer.UNSUPPORTED, "Invalid URL format")

    async def check_many(self, urls: Iterable[str]) -> List[CheckResult]:
        """Check products one at a time, pausing between them."""
        results: List[CheckResult] = []
        for index, url in enumerate(urls):
            if index:
                await asyncio.sleep(self.timings.inter_check_delay)
            results.append(await self.check(url))
        return results

    async def close(self) -> None:
        await self.pool.close_all()

    async def _run(self, url: str, retailer: Retailer) -> CheckResult:
        renderer = self.pool.get_or_create(retailer)
        logger.info(
            "Checking %s at %s (scripts v%s)", url, retailer.display_name, SCRIPT_VERSION
        )

        await renderer.load(url, self.timings.pick_user_agent())
        await asyncio.sleep(self.timings.settle_delay_for(retailer))

        results: Dict[str, Any] = {}
        for name, script, arg in scripts_for(retailer).evaluation_plan():
            results[name] = await renderer.evaluate(script, arg)

        snapshot = self.build_snapshot(url, results)
        if snapshot.still_loading:
            logger.warning("%s was still loading (%s) when read", url, snapshot.ready_state)

        variant = is_condition_variant(url)
        context = PageContext(
            url=url,
            is_condition_variant=variant,
            condition=stated_condition(url, snapshot.markup) if variant else None,
            markup=snapshot.markup,
            title=snapshot.title,
            still_loading=snapshot.still_loading,
        )

        policy = policy_for(retailer)
        candidates = self.price_extractor.extract(snapshot, policy.price_band)
        signals = self._signals_for(retailer).extract(snapshot)
        logger.debug("Status texts for %s: %s", url, list(signals.raw_status_texts))

        decision = policy.decide(candidates, signals, context)
        logger.info(
            "%s: %s at %s (%s)",
            retailer.display_name,
            decision.status_label,
            decision.price_display,
            decision.detail,
        )
        return self._to_result(retailer, decision)

    @staticmethod
    def build_snapshot(url: str, results: Dict[str, Any]) -> PageSnapshot:
        """Coerce raw script results into a snapshot, dropping malformed parts."""
        meta = results.get("meta")
        if not isinstance(meta, dict):
            meta = {}
        markup = results.get("markup")
        title = meta.get("title")
        viewport_height = as_float(meta.get("viewportHeight"))
        ready_state = meta.get("readyState")
        channels = results.get("channels")
        if not isinstance(channels, dict):
            channels = {}

        return PageSnapshot(
            url=url,
            price_elements=_list_of(results.get("prices"), dict),
            status_texts=_list_of(results.get("status_texts"), str),
            buttons=_list_of(results.get("buttons"), dict),
            channel_regions={
                str(name): text if isinstance(text, str) else None
                for name, text in channels.items()
            },
            markup=markup if isinstance(markup, str) else "",
            title=title if isinstance(title, str) and title.strip() else None,
            viewport_height=viewport_height if viewport_height > 0 else 1080.0,
            ready_state=ready_state if isinstance(ready_state, str) else "complete",
        )

    def _signals_for(self, retailer: Retailer) -> AvailabilitySignalExtractor:
        extractor = self._signal_extractors.get(retailer)
        if extractor is None:
            extractor = AvailabilitySignalExtractor(policy_for(retailer).vocabulary)
            self._signal_extractors[retailer] = extractor
        return extractor

    def _lock_for(self, retailer: Retailer) -> asyncio.Lock:
        lock = self._locks.get(retailer)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[retailer] = lock
        return lock

    @staticmethod
    def _to_result(retailer: Retailer, decision: RetailerDecision) -> CheckResult:
        glyph = AVAILABLE_GLYPH if decision.is_available else UNAVAILABLE_GLYPH
        return CheckResult(
            status=f"{glyph} {decision.status_label}",
            price=decision.price_display,
            is_available=decision.is_available,
            details=decision.detail,
            retailer=retailer,
        )

    @staticmethod
    def _failure(retailer: Retailer, status: str, details: str) -> CheckResult:
        return CheckResult(
            status=status,
            price=PRICE_SENTINEL,
            is_available=False,
            details=details,
            retailer=retailer,
        )


def _list_of(value: Any, kind: type) -> List[Any]:
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, kind)]


_cached_orchestrator: Optional[CheckOrchestrator] = None


def get_orchestrator() -> CheckOrchestrator:
    """FastAPI dependency returning the process-wide orchestrator."""
    global _cached_orchestrator
    if _cached_orchestrator is None:
        _cached_orchestrator = CheckOrchestrator()
    return _cached_orchestrator


async def shutdown_orchestrator() -> None:
    """Close every browser opened by the process-wide orchestrator."""
    global _cached_orchestrator
    if _cached_orchestrator is not None:
        await _cached_orchestrator.close()
        _cached_orchestrator = None
