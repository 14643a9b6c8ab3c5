"""Browser rendering surfaces used by the orchestrator."""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Optional, Protocol

from playwright.async_api import Browser, BrowserContext, Page, Playwright, async_playwright
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from configs import settings

from .models import NavigationError, PageEvaluationError, Retailer

logger = logging.getLogger("tracking.renderer")


class Renderer(Protocol):
    """One rendering surface; handles one retailer's checks serially."""

    async def load(self, url: str, user_agent: str) -> None:
        ...

    async def evaluate(self, script: str, arg: Any = None) -> Any:
        ...

    async def close(self) -> None:
        ...


class PlaywrightRenderer:
    """Headless Chromium page kept alive between checks.

    The browser is started lazily on the first load. A timed-out navigation
    may still be running when the next load arrives; ``goto`` simply
    redirects the page.
    """

    def __init__(
        self,
        retailer: Retailer,
        headless: Optional[bool] = None,
        viewport: Optional[Dict[str, int]] = None,
        navigation_timeout_ms: Optional[int] = None,
    ) -> None:
        self.retailer = retailer
        self.headless = settings.BROWSER_HEADLESS if headless is None else headless
        self.viewport = viewport or {
            "width": settings.VIEWPORT_WIDTH,
            "height": settings.VIEWPORT_HEIGHT,
        }
        self.navigation_timeout_ms = (
            navigation_timeout_ms
            if navigation_timeout_ms is not None
            else settings.NAVIGATION_TIMEOUT_MS
        )
        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None
        self._context: Optional[BrowserContext] = None
        self._page: Optional[Page] = None

    async def _ensure_page(self) -> Page:
        if self._page is not None and not self._page.is_closed():
            return self._page

        if self._playwright is None:
            self._playwright = await async_playwright().start()
        if self._browser is None or not self._browser.is_connected():
            logger.info("Launching Chromium for %s", self.retailer.display_name)
            self._browser = await self._playwright.chromium.launch(
                headless=self.headless,
                args=["--disable-blink-features=AutomationControlled"],
            )
            self._context = None
        if self._context is None:
            self._context = await self._browser.new_context(
                viewport=self.viewport,
                locale="en-US",
            )
        self._page = await self._context.new_page()
        return self._page

    async def load(self, url: str, user_agent: str) -> None:
        try:
            page = await self._ensure_page()
            await page.set_extra_http_headers({"User-Agent": user_agent})
            response = await page.goto(
                url,
                wait_until="load",
                timeout=self.navigation_timeout_ms,
            )
        except PlaywrightTimeoutError as exc:
            raise TimeoutError(f"Navigation to {url} timed out") from exc
        except PlaywrightError as exc:
            raise NavigationError(self.retailer, str(exc).splitlines()[0]) from exc

        if response is not None:
            logger.debug("Loaded %s with HTTP %s", url, response.status)

    async def evaluate(self, script: str, arg: Any = None) -> Any:
        if self._page is None:
            raise PageEvaluationError(self.retailer, "No page has been loaded")
        try:
            return await self._page.evaluate(script, arg)
        except PlaywrightError as exc:
            raise PageEvaluationError(self.retailer, str(exc).splitlines()[0]) from exc

    async def close(self) -> None:
        if self._browser is not None:
            try:
                await self._browser.close()
            except PlaywrightError:
                logger.warning("Browser for %s was already gone", self.retailer.display_name)
        if self._playwright is not None:
            await self._playwright.stop()
        self._page = None
        self._context = None
        self._browser = None
        self._playwright = None


RendererFactory = Callable[[Retailer], Renderer]


class RendererPool:
    """Registry of one renderer per retailer, owned by the orchestrator."""

    def __init__(self, factory: RendererFactory = PlaywrightRenderer) -> None:
        self._factory = factory
        self._renderers: Dict[Retailer, Renderer] = {}

    def get_or_create(self, retailer: Retailer) -> Renderer:
        renderer = self._renderers.get(retailer)
        if renderer is None:
            logger.debug("Creating renderer for %s", retailer.display_name)
            renderer = self._factory(retailer)
            self._renderers[retailer] = renderer
        return renderer

    async def discard(self, retailer: Retailer) -> None:
        """Close and forget a renderer so the next check starts fresh."""
        renderer = self._renderers.pop(retailer, None)
        if renderer is None:
            return
        try:
            await renderer.close()
        except Exception:
            logger.exception("Failed to close renderer for %s", retailer.display_name)

    async def close_all(self) -> None:
        for retailer in list(self._renderers):
            await self.discard(retailer)

    def __contains__(self, retailer: object) -> bool:
        return retailer in self._renderers

    def __len__(self) -> int:
        return len(self._renderers)
