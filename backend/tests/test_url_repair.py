"""Website URL repair tests — the four-stage chain and the targeted search pass.

Targeted searches mock the Tavily client at the repair module's import site.
"""

import os
import sys

# Ensure the backend package is importable
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import asyncio
import json
from unittest.mock import AsyncMock, patch

import httpx
import pytest

from marketpulse.schemas.analysis_schema import CompetitorRecord, MarketAnalysis
from marketpulse.schemas.search_schema import SearchResult
from marketpulse.services.context_builder import build_index
from marketpulse.services.errors import SearchProviderError
from marketpulse.services.url_repair import (
    RepairContext,
    find_best_url,
    needs_targeted_search,
    repair_website_urls,
    resolve_missing_websites,
)

TECHCRUNCH_URL = "https://techcrunch.com/2024/03/12/acme-robotics-raises/"


def _analysis(*competitors):
    return MarketAnalysis(summary=["test"], competitors_details=list(competitors))


def _repair(competitor, results):
    analysis = repair_website_urls(_analysis(competitor), build_index(results), results)
    return analysis.competitors_details[0]


@pytest.fixture(autouse=True)
def default_targeted_limit(monkeypatch):
    monkeypatch.delenv("TARGETED_SEARCH_MAX_RESULTS", raising=False)


# ===================================================================== #
#  Pass 1 — repair chain                                                  #
# ===================================================================== #

class TestRepairChain:
    def test_synthesia_matched_from_product_result(self):
        results = [
            SearchResult(
                url="https://www.synthesia.io/",
                title="Synthesia — AI video generation platform",
                content="Create studio-quality videos with AI avatars.",
            )
        ]
        repaired = _repair(CompetitorRecord(name="Synthesia"), results)
        assert repaired.website_url == "https://www.synthesia.io/"

    def test_article_url_replaced_via_company_mapping(self):
        results = [
            SearchResult(url="https://clickup.com", title="ClickUp | One app to replace them all"),
            SearchResult(url="https://techcrunch.com/2024/01/05/clickup/", title="ClickUp raises"),
        ]
        competitor = CompetitorRecord(
            name="ClickUp", website_url="https://techcrunch.com/2024/01/05/clickup/"
        )
        assert _repair(competitor, results).website_url == "https://clickup.com"

    def test_name_token_matched_via_word_index(self):
        results = [SearchResult(url="https://hourone.ai/", title="AI video studio")]
        repaired = _repair(CompetitorRecord(name="HourOne Studio"), results)
        # "hourone" is the domain token, "studio" a title word; both point at the same URL
        assert repaired.website_url == "https://hourone.ai/"

    def test_name_found_in_result_content(self):
        results = [
            SearchResult(
                url="https://videotool.app/",
                title="VideoTool",
                content="VideoTool is the Loom alternative for sales teams.",
            )
        ]
        repaired = _repair(CompetitorRecord(name="Loom"), results)
        assert repaired.website_url == "https://videotool.app/"

    def test_article_embeds_used_while_score_negative(self):
        results = [
            SearchResult(
                url=TECHCRUNCH_URL,
                title="Funding roundup",
                content="Visit https://acmerobotics.org/en/home/index today.",
            )
        ]
        competitor = CompetitorRecord(name="Acme Robotics", website_url=TECHCRUNCH_URL)
        assert _repair(competitor, results).website_url == "https://acmerobotics.org/en/home/index"

    def test_article_embeds_stop_at_first_improvement(self):
        results = [
            SearchResult(
                url=TECHCRUNCH_URL,
                title="Funding roundup",
                content=(
                    "Docs at https://acmerobotics.org/en/home/index and the homepage "
                    "is https://acmerobotics.com"
                ),
            )
        ]
        competitor = CompetitorRecord(name="Acme Robotics", website_url=TECHCRUNCH_URL)
        best_url, best_score = find_best_url(competitor, RepairContext(index=build_index([]), results=results))
        assert best_url == "https://acmerobotics.org/en/home/index"
        assert best_score == 2

    def test_article_embeds_skipped_when_score_non_negative(self):
        results = [
            SearchResult(
                url=TECHCRUNCH_URL,
                title="Funding roundup",
                content="See https://acmerobotics.com",
            )
        ]
        competitor = CompetitorRecord(name="Acme Robotics", website_url="https://acme.dev/a/b/c")
        ctx = RepairContext(index=build_index([]), results=results)
        assert find_best_url(competitor, ctx) == ("https://acme.dev/a/b/c", 2)

    def test_better_llm_url_kept(self):
        results = [SearchResult(url="https://clickup.com/pricing?plan=pro", title="ClickUp pricing")]
        competitor = CompetitorRecord(name="ClickUp", website_url="https://clickup.com")
        assert _repair(competitor, results).website_url == "https://clickup.com"

    def test_no_candidates_leaves_competitor_untouched(self):
        competitor = CompetitorRecord(name="Ghost", key_features=["x"])
        repaired = _repair(competitor, [])
        assert repaired == competitor
        assert repaired.website_url is None

    def test_order_preserved_and_input_not_mutated(self):
        results = [SearchResult(url="https://clickup.com", title="ClickUp")]
        original = _analysis(
            CompetitorRecord(name="Notion"),
            CompetitorRecord(name="ClickUp", website_url=TECHCRUNCH_URL),
        )
        repaired = repair_website_urls(original, build_index(results), results)

        assert [c.name for c in repaired.competitors_details] == ["Notion", "ClickUp"]
        assert repaired.competitors_details[1].website_url == "https://clickup.com"
        assert original.competitors_details[1].website_url == TECHCRUNCH_URL


# ===================================================================== #
#  Pass 2 — targeted search                                               #
# ===================================================================== #

class TestTargetedSearch:
    def test_needs_targeted_search(self):
        assert needs_targeted_search(CompetitorRecord(name="A")) is True
        assert needs_targeted_search(CompetitorRecord(name="A", website_url=TECHCRUNCH_URL)) is True
        assert needs_targeted_search(CompetitorRecord(name="A", website_url="https://a.io/")) is False

    def test_missing_url_resolved_from_best_result(self):
        mock_search = AsyncMock(
            return_value=[
                SearchResult(url="https://www.youtube.com/watch?v=hourone"),
                SearchResult(url="https://hourone.ai/"),
                SearchResult(url=""),
            ]
        )
        with patch("marketpulse.services.url_repair.search_web", mock_search):
            analysis = asyncio.run(resolve_missing_websites(_analysis(CompetitorRecord(name="Hour One"))))

        mock_search.assert_awaited_once_with("Hour One official website homepage", 5)
        assert analysis.competitors_details[0].website_url == "https://hourone.ai/"

    def test_competitor_with_product_url_not_searched(self):
        mock_search = AsyncMock(return_value=[])
        competitor = CompetitorRecord(name="Loom", website_url="https://www.loom.com/")
        with patch("marketpulse.services.url_repair.search_web", mock_search):
            analysis = asyncio.run(resolve_missing_websites(_analysis(competitor)))

        mock_search.assert_not_awaited()
        assert analysis.competitors_details[0] == competitor

    def test_only_articles_found_keeps_missing_url(self):
        mock_search = AsyncMock(return_value=[SearchResult(url="https://forbes.com/sites/x")])
        with patch("marketpulse.services.url_repair.search_web", mock_search):
            analysis = asyncio.run(resolve_missing_websites(_analysis(CompetitorRecord(name="Ghost"))))

        assert analysis.competitors_details[0].website_url is None

    def test_failure_isolated_per_competitor(self):
        async def fake_search(query, max_results=None):
            if query.startswith("Broken"):
                raise SearchProviderError("Tavily search returned HTTP 502")
            return [SearchResult(url="https://colossyan.com/")]

        mock_search = AsyncMock(side_effect=fake_search)
        analysis = _analysis(
            CompetitorRecord(name="Broken Co", website_url=TECHCRUNCH_URL),
            CompetitorRecord(name="Colossyan"),
        )
        with patch("marketpulse.services.url_repair.search_web", mock_search):
            resolved = asyncio.run(resolve_missing_websites(analysis))

        assert mock_search.await_count == 2
        broken, colossyan = resolved.competitors_details
        assert broken.website_url == TECHCRUNCH_URL
        assert colossyan.website_url == "https://colossyan.com/"

    def test_malformed_provider_reply_isolated_per_competitor(self, monkeypatch):
        monkeypatch.setenv("TAVILY_API_KEY", "tvly-test")
        real_client = httpx.AsyncClient
        queries = []

        def handler(request):
            query = json.loads(request.content)["query"]
            queries.append(query)
            if query.startswith("Broken"):
                return httpx.Response(200, json={"results": [{"url": "https://x.com", "title": 123}]})
            return httpx.Response(200, json={"results": [{"url": "https://colossyan.com/", "title": "Colossyan"}]})

        def client_factory(*args, **kwargs):
            kwargs["transport"] = httpx.MockTransport(handler)
            return real_client(*args, **kwargs)

        analysis = _analysis(CompetitorRecord(name="Broken Co"), CompetitorRecord(name="Colossyan"))
        with patch.object(httpx, "AsyncClient", client_factory):
            resolved = asyncio.run(resolve_missing_websites(analysis))

        assert queries == [
            "Broken Co official website homepage",
            "Colossyan official website homepage",
        ]
        broken, colossyan = resolved.competitors_details
        assert broken.website_url is None
        assert colossyan.website_url == "https://colossyan.com/"
