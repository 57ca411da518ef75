"""Render capability used by the search pipeline, plus its Playwright backend."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional, Protocol

from playwright.async_api import (
    Browser,
    Page,
    Playwright,
    async_playwright,
)

from .config import SearchConfig

logger = logging.getLogger("search_extract.browser")


@dataclass(frozen=True)
class NavigationResult:
    """Outcome of a page navigation.

    ``status_code`` is 0 when no response arrived; ``final_url`` is the page URL
    after redirects, when the driver reports one.
    """

    status_code: int
    final_url: Optional[str] = None


class PageHandle(Protocol):
    """A single browser tab owned by exactly one task."""

    async def goto(self, url: str, wait_until: str = "domcontentloaded") -> NavigationResult:
        ...

    async def wait_for_selector(self, selector: str, timeout_ms: float) -> None:
        ...

    async def evaluate(self, script: str, arg: Any = None) -> Any:
        ...

    async def content(self) -> str:
        ...

    async def close(self) -> None:
        ...


class RenderCapability(Protocol):
    """A browser instance that can hand out independent pages."""

    async def open_page(self) -> PageHandle:
        ...


class PlaywrightPage:
    """``PageHandle`` backed by a Playwright page."""

    def __init__(self, page: Page) -> None:
        self._page = page

    async def goto(self, url: str, wait_until: str = "domcontentloaded") -> NavigationResult:
        logger.debug("Loading %s", url)
        response = await self._page.goto(url, wait_until=wait_until)
        return NavigationResult(
            status_code=response.status if response else 0,
            final_url=self._page.url or None,
        )

    async def wait_for_selector(self, selector: str, timeout_ms: float) -> None:
        await self._page.wait_for_selector(selector, timeout=timeout_ms)

    async def evaluate(self, script: str, arg: Any = None) -> Any:
        if arg is None:
            return await self._page.evaluate(script)
        return await self._page.evaluate(script, arg)

    async def content(self) -> str:
        return await self._page.content()

    async def close(self) -> None:
        await self._page.close()


class PlaywrightRenderer:
    """Launches one headless Chromium per request and opens pages on it.

    Use as an async context manager; the browser and the Playwright driver are
    shut down on exit.
    """

    def __init__(self, config: SearchConfig) -> None:
        self.config = config
        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None

    async def __aenter__(self) -> "PlaywrightRenderer":
        self._playwright = await async_playwright().start()
        try:
            self._browser = await self._playwright.chromium.launch(
                headless=self.config.headless
            )
        except BaseException:
            await self._playwright.stop()
            self._playwright = None
            raise
        logger.debug("Launched Chromium (headless=%s)", self.config.headless)
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        try:
            if self._browser is not None:
                await self._browser.close()
        finally:
            self._browser = None
            if self._playwright is not None:
                await self._playwright.stop()
                self._playwright = None

    async def open_page(self) -> PlaywrightPage:
        if self._browser is None:
            raise RuntimeError("PlaywrightRenderer must be entered before opening pages")
        page = await self._browser.new_page()
        page.set_default_navigation_timeout(self.config.navigation_timeout * 1000)
        return PlaywrightPage(page)
