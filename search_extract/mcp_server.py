"""MCP server exposing the search-extract tool."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from mcp.server.fastmcp import FastMCP
from pydantic import ValidationError

from .config import DEFAULT_LIMIT, DEFAULT_TIMEOUT_MS, SearchConfig
from .crawler import run_search
from .schemas import SearchRequest

logger = logging.getLogger("search_extract.mcp")
logger.setLevel(logging.ERROR)

mcp = FastMCP(name="search-extract")


@mcp.tool()
async def search(
    query: str,
    limit: int = DEFAULT_LIMIT,
    lang: Optional[str] = None,
    country: Optional[str] = None,
    location: Optional[str] = None,
    timeout: int = DEFAULT_TIMEOUT_MS,
) -> Dict[str, Any]:
    """Search the web and return title, description, Markdown and links for each top result."""

    try:
        request = SearchRequest(
            query=query,
            limit=limit,
            lang=lang,
            country=country,
            location=location,
            timeout=timeout,
        )
    except ValidationError as exc:
        return {"success": False, "error": str(exc)}

    response = await run_search(request, SearchConfig.from_env())
    return response.to_dict()


def main() -> None:
    """Entry point for running the MCP server."""
    logging.basicConfig(level=logging.ERROR)
    mcp.run()


if __name__ == "__main__":
    main()
