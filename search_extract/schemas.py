"""
Pydantic schemas for validated search requests.
"""
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .config import DEFAULT_LIMIT, DEFAULT_TIMEOUT_MS, clamp_limit

ScrapeFormat = Literal[
    "markdown",
    "html",
    "rawHtml",
    "links",
    "screenshot",
    "screenshot@fullPage",
    "extract",
]


class ScrapeOptions(BaseModel):
    """Per-page output options; accepted for compatibility."""

    model_config = ConfigDict(extra="forbid")

    formats: Optional[list[ScrapeFormat]] = Field(default=None, description="Requested output formats")


class SearchRequest(BaseModel):
    """A search to run and the result pages to extract."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    query: str = Field(min_length=1, description="Search query")
    limit: int = Field(default=DEFAULT_LIMIT, description="Number of results to extract (1-10)")
    tbs: Optional[str] = Field(default=None, description="Time-based search filter")
    lang: Optional[str] = Field(default=None, description="Language hint, e.g. 'en'")
    country: Optional[str] = Field(default=None, description="Country hint, e.g. 'us'")
    location: Optional[str] = Field(default=None, description="Location hint")
    timeout: int = Field(default=DEFAULT_TIMEOUT_MS, gt=0, description="End-to-end timeout in milliseconds")
    scrape_options: Optional[ScrapeOptions] = Field(default=None, alias="scrapeOptions")

    @field_validator("query")
    @classmethod
    def _query_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("query must not be blank")
        return value

    @field_validator("limit")
    @classmethod
    def _clamp_limit(cls, value: int) -> int:
        return clamp_limit(value)
