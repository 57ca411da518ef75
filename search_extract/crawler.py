"""High-level orchestration for discovering results and extracting their pages."""

from __future__ import annotations

import asyncio
import logging
import time
from contextlib import AsyncExitStack
from typing import AsyncContextManager, Callable, List, Optional, Sequence

from .browser import PlaywrightRenderer, RenderCapability
from .config import SearchConfig, clamp_limit
from .discovery import discover
from .extractor import extract_page
from .models import ExtractedPage, NotExtractable, SearchFailure, SearchResponse
from .schemas import SearchRequest

logger = logging.getLogger("search_extract")

RendererFactory = Callable[[SearchConfig], AsyncContextManager[RenderCapability]]


async def _extract_or_none(
    renderer: RenderCapability,
    url: str,
    config: SearchConfig,
    timeout: Optional[float],
) -> Optional[ExtractedPage]:
    try:
        return await extract_page(renderer, url, config, timeout=timeout)
    except NotExtractable as exc:
        logger.warning("Dropping %s: %s", exc.url, exc.reason)
        return None


async def extract_all(
    renderer: RenderCapability,
    urls: Sequence[str],
    config: SearchConfig,
    timeout: Optional[float] = None,
) -> List[ExtractedPage]:
    """Extract every URL concurrently and return the successes in input order.

    Each page gets ``timeout`` seconds; a page that fails or runs out of time
    is omitted without affecting the others.
    """
    if not urls:
        return []
    if timeout is not None and timeout <= 0:
        logger.warning("No time left to extract %d page(s); skipping", len(urls))
        return []

    results = await asyncio.gather(
        *(_extract_or_none(renderer, url, config, timeout) for url in urls)
    )
    return [page for page in results if page is not None]


async def run_search(
    request: SearchRequest,
    config: Optional[SearchConfig] = None,
    renderer_factory: Optional[RendererFactory] = None,
) -> SearchResponse:
    """Discover results for ``request`` and extract each result page.

    Raises ``SearchFailure`` when discovery fails or the request deadline
    expires before any result URLs are known.
    """
    config = config or SearchConfig()
    factory = renderer_factory or PlaywrightRenderer
    limit = clamp_limit(request.limit, config.max_results)
    budget = request.timeout / 1000
    start = time.perf_counter()

    async with AsyncExitStack() as stack:
        try:
            renderer = await stack.enter_async_context(factory(config))
        except Exception as exc:  # pylint: disable=broad-except
            raise SearchFailure(f"Search failed: could not start the browser: {exc}") from exc

        try:
            urls = await asyncio.wait_for(
                discover(
                    renderer,
                    request.query,
                    limit,
                    config,
                    lang=request.lang,
                    country=request.country,
                ),
                budget,
            )
        except asyncio.TimeoutError as exc:
            raise SearchFailure(
                f"Search failed: no results within {request.timeout}ms"
            ) from exc

        remaining = budget - (time.perf_counter() - start)
        pages = await extract_all(renderer, urls, config, timeout=remaining)

    elapsed = time.perf_counter() - start
    logger.info(
        "Finished %r in %.2fs (%d/%d extracted)",
        request.query,
        elapsed,
        len(pages),
        len(urls),
    )

    warning = None
    dropped = len(urls) - len(pages)
    if dropped:
        warning = f"{dropped} of {len(urls)} results could not be extracted and were omitted"
    return SearchResponse(data=tuple(pages), warning=warning)
