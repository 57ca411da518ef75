"""HTML pruning and metadata parsing utilities."""

from __future__ import annotations

from typing import List
from urllib.parse import urljoin

from bs4 import BeautifulSoup

from .config import CONTENT_FALLBACK, DESCRIPTION_FALLBACK, TITLE_FALLBACK

NON_CONTENT_TAGS = ("script", "style", "nav", "header", "footer")


def parse_document(html: str) -> BeautifulSoup:
    """Parse rendered page HTML."""
    return BeautifulSoup(html or "", "html.parser")


def read_title(soup: BeautifulSoup) -> str:
    """Return the document title, or the literal fallback when absent."""
    if soup.title is not None:
        title = " ".join(soup.title.get_text().split())
        if title:
            return title
    return TITLE_FALLBACK


def read_description(soup: BeautifulSoup) -> str:
    """Return the meta description content, or the literal fallback when absent."""
    tag = soup.find("meta", attrs={"name": "description"})
    if tag is None:
        return DESCRIPTION_FALLBACK
    content = tag.get("content")
    if content is None:
        return DESCRIPTION_FALLBACK
    return content.strip()


def prune_content(html: str) -> str:
    """Serialize the document body with non-content subtrees removed.

    Works on a freshly parsed scratch tree so the caller's document is never
    touched.
    """
    scratch = parse_document(html)
    for tag in scratch(list(NON_CONTENT_TAGS)):
        tag.decompose()
    root = scratch.body if scratch.body is not None else scratch
    cleaned = root.decode().strip()
    return cleaned or CONTENT_FALLBACK


def _resolve(base_url: str, href: str) -> str:
    try:
        return urljoin(base_url, href)
    except ValueError:
        return href


def collect_links(soup: BeautifulSoup, page_url: str) -> List[str]:
    """Return resolved anchor hrefs in document order, skipping empty ones."""
    base_url = page_url
    base_tag = soup.find("base", href=True)
    if base_tag is not None and base_tag["href"].strip():
        base_url = _resolve(page_url, base_tag["href"].strip())

    links: List[str] = []
    for anchor in soup.find_all("a"):
        href = anchor.get("href")
        if href is None or not href.strip():
            continue
        links.append(_resolve(base_url, href.strip()))
    return links