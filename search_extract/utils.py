"""Utility helpers for turning extracted pages into filesystem paths."""

from __future__ import annotations

import re
from pathlib import Path
from urllib.parse import urlparse

SLUG_PATTERN = re.compile(r"[^a-z0-9]+")
MAX_SLUG_CHARS = 80


def slugify(value: str, fallback: str = "page", max_length: int = MAX_SLUG_CHARS) -> str:
    """Generate an ASCII-only slug no longer than ``max_length``."""
    normalized = value.encode("ascii", "ignore").decode("ascii").lower()
    normalized = SLUG_PATTERN.sub("-", normalized).strip("-")
    return normalized[:max_length].rstrip("-") or fallback


def page_output_dir(output_root: Path, url: str, title: str) -> Path:
    """Return ``<root>/<domain>/<title>`` for a page, preferring the URL path when untitled."""
    parsed = urlparse(url)
    domain = slugify(parsed.netloc or "site", fallback="site")
    return output_root / domain / slugify(title or parsed.path or "page")
