"""Single-page content extraction."""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

from .browser import PageHandle, RenderCapability
from .config import SearchConfig
from .content import (
    collect_links,
    parse_document,
    prune_content,
    read_description,
    read_title,
)
from .markdown import to_markdown
from .models import ExtractedPage, NotExtractable, PageMetadata

logger = logging.getLogger("search_extract.extractor")

DISMISS_POPUPS_SCRIPT = """(glyphs) => {
    const buttons = Array.from(document.querySelectorAll("button, a")).filter((el) => {
        const text = el.textContent || "";
        return text.toLowerCase().includes("close") || glyphs.some((g) => text.includes(g));
    });
    buttons.forEach((btn) => btn.click());
    return buttons.length;
}"""


async def dismiss_popups(page: PageHandle, config: SearchConfig) -> None:
    """Click anything that looks like a close button, then let the page settle."""
    try:
        clicked = await page.evaluate(DISMISS_POPUPS_SCRIPT, list(config.close_glyphs))
        if clicked:
            logger.debug("Clicked %s close button(s)", clicked)
    except Exception as exc:  # pylint: disable=broad-except
        logger.debug("Popup dismissal failed: %s", exc)
    if config.settle_delay:
        await asyncio.sleep(config.settle_delay)


async def _render_and_extract(
    renderer: RenderCapability,
    url: str,
    config: SearchConfig,
) -> ExtractedPage:
    page = await renderer.open_page()
    try:
        navigation = await page.goto(url, wait_until="domcontentloaded")
        await dismiss_popups(page, config)
        raw_html = await page.content()
    finally:
        await page.close()

    document = parse_document(raw_html)
    title = read_title(document)
    description = read_description(document)
    links = tuple(collect_links(document, navigation.final_url or url))
    cleaned = prune_content(raw_html)

    return ExtractedPage(
        title=title,
        description=description,
        url=url,
        markdown=to_markdown(cleaned),
        html=raw_html,
        raw_html=raw_html,
        links=links,
        metadata=PageMetadata(
            title=title,
            description=description,
            source_url=url,
            status_code=navigation.status_code,
        ),
    )


async def extract_page(
    renderer: RenderCapability,
    url: str,
    config: SearchConfig,
    timeout: Optional[float] = None,
) -> ExtractedPage:
    """Extract one result page, raising ``NotExtractable`` on any failure.

    ``timeout`` is in seconds; when it elapses the in-flight work is
    cancelled and the page is still closed.
    """
    try:
        return await asyncio.wait_for(_render_and_extract(renderer, url, config), timeout)
    except asyncio.TimeoutError as exc:
        logger.error("Timeout while extracting %s", url)
        reason = "timed out" if timeout is None else f"timed out after {timeout:.1f}s"
        raise NotExtractable(url, reason) from exc
    except Exception as exc:  # pylint: disable=broad-except
        logger.exception("Content extraction failed for %s", url)
        raise NotExtractable(url, str(exc) or exc.__class__.__name__) from exc
