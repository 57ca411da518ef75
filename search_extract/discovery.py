"""Search-provider result discovery."""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional
from urllib.parse import quote, urlencode, urlparse

from .browser import RenderCapability
from .config import SearchConfig, clamp_limit
from .models import SearchFailure

logger = logging.getLogger("search_extract.discovery")

FETCHABLE_SCHEMES = {"http", "https"}

ORGANIC_LINKS_SCRIPT = """(selector) => Array.from(document.querySelectorAll(selector))
    .map((link) => link.href)"""


def build_search_url(
    query: str,
    config: SearchConfig,
    lang: Optional[str] = None,
    country: Optional[str] = None,
) -> str:
    """Percent-encode ``query`` into the provider URL, adding a region when given."""
    params = {"q": query}
    if lang or country:
        params["kl"] = f"{(country or 'us').lower()}-{(lang or 'en').lower()}"
    return f"{config.search_url}?{urlencode(params, quote_via=quote)}"


def filter_result_urls(candidates: Iterable[object], limit: int) -> List[str]:
    """Keep fetchable URLs in provider order, truncated to ``limit``."""
    urls: List[str] = []
    for candidate in candidates:
        if not isinstance(candidate, str) or not candidate:
            continue
        if urlparse(candidate).scheme.lower() not in FETCHABLE_SCHEMES:
            continue
        urls.append(candidate)
        if len(urls) >= limit:
            break
    return urls


async def discover(
    renderer: RenderCapability,
    query: str,
    limit: int,
    config: SearchConfig,
    lang: Optional[str] = None,
    country: Optional[str] = None,
) -> List[str]:
    """Return up to ``limit`` organic result URLs for ``query``.

    Raises ``SearchFailure`` when the provider cannot be loaded or its results
    do not appear within ``config.results_timeout``. A provider page reporting
    no results yields an empty list.
    """
    if not query or not query.strip():
        logger.warning("Empty search query; skipping discovery")
        return []

    limit = clamp_limit(limit, config.max_results)
    search_url = build_search_url(query, config, lang=lang, country=country)

    try:
        page = await renderer.open_page()
    except Exception as exc:  # pylint: disable=broad-except
        raise SearchFailure(f"Search failed: could not open a page: {exc}") from exc

    try:
        await page.goto(search_url, wait_until="domcontentloaded")
        await page.wait_for_selector(
            f"{config.results_selector}, {config.no_results_selector}",
            timeout_ms=config.results_timeout * 1000,
        )
        candidates = await page.evaluate(
            ORGANIC_LINKS_SCRIPT, config.organic_result_selector
        )
    except Exception as exc:  # pylint: disable=broad-except
        raise SearchFailure(f"Search failed: {exc}") from exc
    finally:
        await page.close()

    urls = filter_result_urls(candidates or [], limit)
    logger.info("Discovered %d result(s) for %r", len(urls), query)
    return urls
