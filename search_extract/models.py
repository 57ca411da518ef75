"""Data models used throughout the search pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple


class SearchFailure(Exception):
    """Result discovery could not produce any result URLs."""


class NotExtractable(Exception):
    """A single result page could not be turned into an ``ExtractedPage``."""

    def __init__(self, url: str, reason: str) -> None:
        super().__init__(f"Could not extract {url}: {reason}")
        self.url = url
        self.reason = reason


@dataclass(frozen=True)
class PageMetadata:
    """Metadata describing an extracted page."""

    title: str
    description: str
    source_url: str
    status_code: int
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "description": self.description,
            "sourceUrl": self.source_url,
            "statusCode": self.status_code,
            "error": self.error,
        }


@dataclass(frozen=True)
class ExtractedPage:
    """Normalized content captured from one search result."""

    title: str
    description: str
    url: str
    markdown: str
    html: str
    raw_html: str
    links: Tuple[str, ...]
    metadata: PageMetadata
    screenshot: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "description": self.description,
            "url": self.url,
            "markdown": self.markdown,
            "html": self.html,
            "rawHtml": self.raw_html,
            "links": list(self.links),
            "screenshot": self.screenshot,
            "metadata": self.metadata.to_dict(),
        }


@dataclass(frozen=True)
class SearchResponse:
    """Aggregate returned for a search request."""

    data: Tuple[ExtractedPage, ...] = field(default_factory=tuple)
    success: bool = True
    warning: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "success": self.success,
            "data": [page.to_dict() for page in self.data],
        }
        if self.warning:
            payload["warning"] = self.warning
        return payload
