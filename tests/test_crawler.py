import asyncio
import time

import pytest

from conftest import FakeRenderer, RenderTimeout, Site, page_html
from search_extract.crawler import extract_all, run_search
from search_extract.extractor import extract_page
from search_extract.models import SearchFailure
from search_extract.schemas import SearchRequest

URLS = [
    "https://one.example/",
    "https://two.example/",
    "https://three.example/",
]


def _sites(**overrides):
    sites = {
        url: Site(html=page_html(title=f"Page {i}", description=f"About {i}"))
        for i, url in enumerate(URLS, start=1)
    }
    sites.update(overrides)
    return sites


class TestExtractAll:
    def test_preserves_input_order(self, config):
        renderer = FakeRenderer(_sites())

        pages = asyncio.run(extract_all(renderer, URLS, config))

        assert [page.url for page in pages] == URLS
        assert [page.title for page in pages] == ["Page 1", "Page 2", "Page 3"]

    def test_empty_input_returns_empty(self, config):
        renderer = FakeRenderer()

        assert asyncio.run(extract_all(renderer, [], config)) == []
        assert renderer.pages == []

    def test_drops_failed_pages_and_keeps_survivor_order(self, config):
        renderer = FakeRenderer(
            _sites(**{URLS[1]: Site(goto_error=RenderTimeout("net::ERR_FAILED"))})
        )

        pages = asyncio.run(extract_all(renderer, URLS, config))

        assert [page.url for page in pages] == [URLS[0], URLS[2]]
        assert len(renderer.pages) == 3
        assert renderer.open_pages == []

    def test_fault_does_not_change_sibling_output(self, config):
        healthy = FakeRenderer(_sites())
        faulty = FakeRenderer(_sites(**{URLS[0]: Site(goto_error=ValueError("boom"))}))

        expected = asyncio.run(extract_page(healthy, URLS[2], config))
        pages = asyncio.run(extract_all(faulty, URLS, config))

        assert pages[-1] == expected

    def test_runs_extractions_concurrently(self, config):
        sites = {url: Site(goto_delay=0.3) for url in URLS}
        renderer = FakeRenderer(sites)

        start = time.perf_counter()
        pages = asyncio.run(extract_all(renderer, URLS, config))
        elapsed = time.perf_counter() - start

        assert len(pages) == 3
        assert elapsed < 0.8

    def test_slow_page_does_not_delay_siblings_beyond_budget(self, config):
        renderer = FakeRenderer(_sites(**{URLS[0]: Site(goto_delay=10)}))

        start = time.perf_counter()
        pages = asyncio.run(extract_all(renderer, URLS, config, timeout=0.2))
        elapsed = time.perf_counter() - start

        assert [page.url for page in pages] == URLS[1:]
        assert elapsed < 2
        assert renderer.open_pages == []

    def test_no_budget_left_skips_without_opening_pages(self, config):
        renderer = FakeRenderer(_sites())

        assert asyncio.run(extract_all(renderer, URLS, config, timeout=0)) == []
        assert renderer.pages == []


class TestRunSearch:
    def test_partial_success_scenario(self, config):
        renderer = FakeRenderer(
            _sites(**{URLS[1]: Site(goto_delay=30)}),
            search_site=Site(evaluate_result=URLS + ["https://four.example/"]),
        )
        request = SearchRequest(query="rust borrow checker", limit=3, timeout=1000)

        response = asyncio.run(run_search(request, config, renderer.factory))

        assert response.success is True
        assert [page.url for page in response.data] == [URLS[0], URLS[2]]
        assert response.warning == "1 of 3 results could not be extracted and were omitted"
        assert renderer.visited[0] == "https://duckduckgo.com/?q=rust%20borrow%20checker"
        assert renderer.open_pages == []
        assert renderer.entered and renderer.exited

    def test_all_pages_failing_is_an_empty_success(self, config):
        sites = {url: Site(goto_error=RenderTimeout("down")) for url in URLS}
        renderer = FakeRenderer(sites, search_site=Site(evaluate_result=URLS))

        response = asyncio.run(run_search(SearchRequest(query="q"), config, renderer.factory))

        assert response.success is True
        assert response.data == ()
        assert response.to_dict()["data"] == []
        assert response.warning is not None

    def test_no_results_is_an_empty_success_without_warning(self, config):
        renderer = FakeRenderer(search_site=Site(evaluate_result=[]))

        response = asyncio.run(run_search(SearchRequest(query="q"), config, renderer.factory))

        assert response.to_dict() == {"success": True, "data": []}

    def test_results_never_appearing_surfaces_search_failure(self, config):
        renderer = FakeRenderer(search_site=Site(selector_error=RenderTimeout("Timeout 10000ms")))

        with pytest.raises(SearchFailure):
            asyncio.run(run_search(SearchRequest(query="q"), config, renderer.factory))

        assert renderer.open_pages == []
        assert renderer.exited

    def test_request_deadline_during_discovery_is_search_failure(self, config):
        renderer = FakeRenderer(search_site=Site(goto_delay=5, evaluate_result=URLS))
        request = SearchRequest(query="q", timeout=50)

        with pytest.raises(SearchFailure, match="50ms"):
            asyncio.run(run_search(request, config, renderer.factory))

        assert renderer.open_pages == []

    def test_limit_is_applied_to_discovery(self, config):
        renderer = FakeRenderer(_sites(), search_site=Site(evaluate_result=URLS))

        response = asyncio.run(
            run_search(SearchRequest(query="q", limit=2), config, renderer.factory)
        )

        assert [page.url for page in response.data] == URLS[:2]
        assert response.warning is None

    def test_browser_launch_failure_is_search_failure(self, config):
        renderer = FakeRenderer(enter_error=RuntimeError("Executable doesn't exist"))

        with pytest.raises(SearchFailure, match="could not start the browser"):
            asyncio.run(run_search(SearchRequest(query="q"), config, renderer.factory))

        assert renderer.pages == []
