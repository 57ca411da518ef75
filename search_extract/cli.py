"""Command-line entry point for search-extract."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional, Sequence

from pydantic import ValidationError

from .config import DEFAULT_LIMIT, DEFAULT_TIMEOUT_MS, SearchConfig
from .crawler import RendererFactory, run_search
from .markdown import compose_markdown
from .models import ExtractedPage, SearchFailure, SearchResponse
from .schemas import SearchRequest
from .utils import page_output_dir

logger = logging.getLogger("search_extract.cli")


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description=(
            "Search the web, render the top results via Playwright and extract their content as Markdown."
        ),
    )
    parser.add_argument("query", help="Search query")
    parser.add_argument(
        "--limit",
        type=int,
        default=DEFAULT_LIMIT,
        help="Number of results to extract (clamped to 1-10)",
    )
    parser.add_argument(
        "--timeout",
        type=int,
        default=DEFAULT_TIMEOUT_MS,
        help="End-to-end timeout in milliseconds",
    )
    parser.add_argument("--lang", default=None, help="Language hint, e.g. 'en'")
    parser.add_argument("--country", default=None, help="Country hint, e.g. 'us'")
    parser.add_argument("--location", default=None, help="Location hint")
    parser.add_argument(
        "--output",
        default=None,
        type=Path,
        help="Write one Markdown file per extracted page under this directory instead of printing JSON",
    )
    parser.add_argument(
        "--headless",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Run Chromium headless (default: on, or SEARCH_EXTRACT_HEADLESS)",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )
    return parser.parse_args(argv)


def build_output_path(output_root: Path, page: ExtractedPage) -> Path:
    """Create an output directory based on the page URL and title."""
    output_dir = page_output_dir(output_root, page.url, page.title)
    output_dir.mkdir(parents=True, exist_ok=True)
    return output_dir / "index.md"


def write_markdown(output_root: Path, response: SearchResponse) -> List[Path]:
    paths: List[Path] = []
    for page in response.data:
        output_path = build_output_path(output_root, page)
        output_path.write_text(compose_markdown(page), encoding="utf-8")
        logger.info("Saved Markdown to %s", output_path)
        paths.append(output_path)
    return paths


def main(
    argv: Sequence[str] | None = None,
    renderer_factory: Optional[RendererFactory] = None,
) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
        force=True,
    )

    try:
        request = SearchRequest(
            query=args.query,
            limit=args.limit,
            timeout=args.timeout,
            lang=args.lang,
            country=args.country,
            location=args.location,
        )
    except ValidationError as exc:
        sys.stdout.write(json.dumps({"success": False, "error": str(exc)}) + "\n")
        return 2

    config = SearchConfig.from_env()
    if args.headless is not None:
        config.headless = args.headless

    try:
        response = asyncio.run(run_search(request, config, renderer_factory))
    except SearchFailure as exc:
        logger.error("%s", exc)
        return 1

    if response.warning:
        logger.warning("%s", response.warning)

    if args.output:
        write_markdown(Path(args.output).resolve(), response)
    else:
        sys.stdout.write(json.dumps(response.to_dict(), ensure_ascii=False, indent=2) + "\n")
    sys.stdout.flush()
    return 0


def run() -> None:
    sys.exit(main())


if __name__ == "__main__":
    run()
