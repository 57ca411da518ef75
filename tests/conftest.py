import asyncio
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import pytest

from search_extract.browser import NavigationResult
from search_extract.config import DEFAULT_SEARCH_URL, SearchConfig


class RenderTimeout(Exception):
    """Stand-in for a driver timeout error."""


@dataclass
class Site:
    """Canned behaviour for one URL served by the fake renderer."""

    html: str = "<html><head><title>Example</title></head><body><p>Hello</p></body></html>"
    status: int = 200
    goto_error: Optional[Exception] = None
    goto_delay: float = 0.0
    evaluate_result: Any = 0
    evaluate_error: Optional[Exception] = None
    selector_error: Optional[Exception] = None
    final_url: Optional[str] = None


class FakePage:
    """Page double that records what was asked of it and whether it was closed."""

    def __init__(self, renderer: "FakeRenderer"):
        self.renderer = renderer
        self.site: Optional[Site] = None
        self.url: Optional[str] = None
        self.closed = False
        self.selectors: List[tuple] = []
        self.scripts: List[tuple] = []

    async def goto(self, url, wait_until="domcontentloaded"):
        self.url = url
        self.wait_until = wait_until
        self.renderer.visited.append(url)
        self.site = self.renderer.site_for(url)
        if self.site.goto_delay:
            await asyncio.sleep(self.site.goto_delay)
        if self.site.goto_error is not None:
            raise self.site.goto_error
        return NavigationResult(status_code=self.site.status, final_url=self.site.final_url)

    async def wait_for_selector(self, selector, timeout_ms):
        self.selectors.append((selector, timeout_ms))
        if self.site.selector_error is not None:
            raise self.site.selector_error

    async def evaluate(self, script, arg=None):
        self.scripts.append((script, arg))
        if self.site.evaluate_error is not None:
            raise self.site.evaluate_error
        return self.site.evaluate_result

    async def content(self):
        return self.site.html

    async def close(self):
        self.closed = True


class FakeRenderer:
    """Render capability double serving canned ``Site`` objects by URL."""

    def __init__(
        self,
        sites: Optional[Dict[str, Site]] = None,
        search_site: Optional[Site] = None,
        search_url: str = DEFAULT_SEARCH_URL,
        open_error: Optional[Exception] = None,
        enter_error: Optional[Exception] = None,
    ):
        self.sites = sites or {}
        self.search_site = search_site or Site(evaluate_result=[])
        self.search_url = search_url
        self.open_error = open_error
        self.enter_error = enter_error
        self.pages: List[FakePage] = []
        self.visited: List[str] = []
        self.entered = False
        self.exited = False

    def site_for(self, url: str) -> Site:
        if url.startswith(self.search_url + "?"):
            return self.search_site
        return self.sites.get(url, Site())

    async def open_page(self):
        if self.open_error is not None:
            raise self.open_error
        page = FakePage(self)
        self.pages.append(page)
        return page

    async def __aenter__(self):
        if self.enter_error is not None:
            raise self.enter_error
        self.entered = True
        return self

    async def __aexit__(self, *exc_info):
        self.exited = True

    def factory(self, config):
        return self

    @property
    def open_pages(self) -> List[FakePage]:
        return [page for page in self.pages if not page.closed]


def page_html(title="Example", description=None, body="<p>Hello</p>"):
    meta = f'<meta name="description" content="{description}">' if description is not None else ""
    return f"<html><head><title>{title}</title>{meta}</head><body>{body}</body></html>"


@pytest.fixture
def config():
    """Config with no settle delay so tests stay fast."""
    return SearchConfig(settle_delay=0)
