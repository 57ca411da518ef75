"""Configuration objects and constants for the search pipeline."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field, replace
from typing import Tuple

logger = logging.getLogger("search_extract")

DEFAULT_SEARCH_URL = "https://duckduckgo.com/"
DEFAULT_LIMIT = 5
MAX_LIMIT = 10
DEFAULT_TIMEOUT_MS = 60_000

TITLE_FALLBACK = "No title available"
DESCRIPTION_FALLBACK = "No description available"
CONTENT_FALLBACK = "No content extracted"


@dataclass
class SearchConfig:
    """Settings that control discovery and page extraction behaviour."""

    search_url: str = DEFAULT_SEARCH_URL
    results_selector: str = '[data-testid="result-title-a"]'
    organic_result_selector: str = (
        'li[data-layout="organic"] [data-testid="result-title-a"]'
    )
    no_results_selector: str = '[data-testid="no-results-message"]'
    results_timeout: float = 10.0
    settle_delay: float = 1.0
    navigation_timeout: float = 30.0
    headless: bool = True
    max_results: int = MAX_LIMIT
    close_glyphs: Tuple[str, ...] = field(default=("×", "✕", "✖"))

    @classmethod
    def from_env(cls) -> "SearchConfig":
        """Build a config, applying ``SEARCH_EXTRACT_*`` overrides when present."""
        config = cls()
        overrides = {}

        url = os.getenv("SEARCH_EXTRACT_URL")
        if url:
            overrides["search_url"] = url

        for env_var, name in (
            ("SEARCH_EXTRACT_RESULTS_TIMEOUT", "results_timeout"),
            ("SEARCH_EXTRACT_SETTLE_DELAY", "settle_delay"),
            ("SEARCH_EXTRACT_NAVIGATION_TIMEOUT", "navigation_timeout"),
        ):
            raw = os.getenv(env_var)
            if not raw:
                continue
            try:
                value = float(raw)
            except ValueError:
                logger.warning("%s is set to %r which is not a number; ignoring", env_var, raw)
                continue
            if value < 0:
                logger.warning("%s must not be negative (got %s); ignoring", env_var, raw)
                continue
            overrides[name] = value

        headless = os.getenv("SEARCH_EXTRACT_HEADLESS")
        if headless:
            lowered = headless.strip().lower()
            if lowered in {"1", "true", "yes", "on"}:
                overrides["headless"] = True
            elif lowered in {"0", "false", "no", "off"}:
                overrides["headless"] = False
            else:
                logger.warning(
                    "SEARCH_EXTRACT_HEADLESS is set to %r which is not a boolean; ignoring",
                    headless,
                )

        if overrides:
            logger.debug(
                "Applying environment overrides: %s",
                ", ".join(sorted(overrides)),
            )
        return replace(config, **overrides)


def clamp_limit(limit: int, maximum: int = MAX_LIMIT) -> int:
    """Clamp a requested result count into ``[1, maximum]``."""
    return max(1, min(int(limit), maximum))
