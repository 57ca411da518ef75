"""Markdown conversion helpers for extracted page content."""

from __future__ import annotations

import datetime as dt
import logging
import re
from typing import Optional

from bs4 import BeautifulSoup
from markdownify import markdownify

from .models import ExtractedPage

logger = logging.getLogger("search_extract")

_EXCESS_NEWLINES = re.compile(r"\n{3,}")


def _normalize(text: str) -> str:
    return _EXCESS_NEWLINES.sub("\n\n", text).strip()


def to_markdown(html_fragment: str) -> str:
    """Convert a cleaned HTML fragment into Markdown using default rules.

    Never raises: if conversion fails the fragment's visible text is returned
    instead.
    """
    if not html_fragment:
        return ""
    try:
        return _normalize(markdownify(html_fragment))
    except Exception as exc:  # pylint: disable=broad-except
        logger.debug("Markdown conversion failed (%s); falling back to plain text", exc)
    soup = BeautifulSoup(html_fragment, "html.parser")
    return _normalize(soup.get_text("\n", strip=True))


def _front_matter_value(value: str) -> str:
    return " ".join(value.split())


def compose_markdown(page: ExtractedPage, retrieved_at: Optional[dt.datetime] = None) -> str:
    """Generate a standalone Markdown document including front matter."""
    timestamp = (
        (retrieved_at or dt.datetime.now(dt.timezone.utc))
        .astimezone(dt.timezone.utc)
        .replace(microsecond=0)
        .isoformat()
        .replace("+00:00", "Z")
    )
    front_matter_lines = ["---"]
    front_matter_lines.append(f"title: {_front_matter_value(page.title)}")
    front_matter_lines.append(f"source_url: {page.url}")
    front_matter_lines.append(f"retrieved_at: {timestamp}")
    front_matter_lines.append(f"description: {_front_matter_value(page.description)}")
    front_matter_lines.append(f"status_code: {page.metadata.status_code}")
    front_matter_lines.append("---\n")

    return "\n".join(front_matter_lines) + page.markdown.strip() + "\n"
