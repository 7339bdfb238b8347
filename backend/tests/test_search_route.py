"""Search endpoint tests — response envelope, omitted fields, health checks."""

import os
import sys

# Ensure the backend package is importable
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from unittest.mock import AsyncMock, patch

from fastapi.testclient import TestClient

from marketpulse.main import app
from marketpulse.schemas.analysis_schema import (
    CompetitorRecord,
    MarketAnalysis,
    ResponseMetadata,
    SearchResponse,
)

client = TestClient(app)


def _success_response():
    return SearchResponse(
        success=True,
        data=MarketAnalysis(
            summary=["One competitor found"],
            competitors_details=[
                CompetitorRecord(
                    name="Synthesia",
                    website_url="https://www.synthesia.io/",
                    key_features=["AI avatars"],
                )
            ],
        ),
        metadata=ResponseMetadata(
            query="AI video tools",
            timestamp="2026-10-19T12:00:00+00:00",
            sources_count=9,
        ),
    )


class TestSearchEndpoint:
    def test_success_envelope(self):
        mock_pipeline = AsyncMock(return_value=_success_response())
        with patch("marketpulse.routes.search.search_and_summarize", mock_pipeline):
            res = client.get("/search", params={"query": "AI video tools"})

        assert res.status_code == 200
        body = res.json()
        assert body["success"] is True
        assert "error" not in body
        assert body["metadata"]["sources_count"] == 9
        competitor = body["data"]["competitors_details"][0]
        assert competitor == {
            "name": "Synthesia",
            "website_url": "https://www.synthesia.io/",
            "key_features": ["AI avatars"],
        }
        mock_pipeline.assert_awaited_once_with("AI video tools")

    def test_missing_query_reports_error(self):
        res = client.get("/search")

        assert res.status_code == 200
        assert res.json() == {"success": False, "error": "Query cannot be empty"}

    def test_provider_failure_envelope(self):
        failure = SearchResponse(
            success=False,
            error="TAVILY_API_KEY environment variable not set",
            metadata=ResponseMetadata(query="x", timestamp="t", sources_count=0),
        )
        with patch("marketpulse.routes.search.search_and_summarize", AsyncMock(return_value=failure)):
            res = client.get("/search", params={"query": "x"})

        body = res.json()
        assert body["success"] is False
        assert "data" not in body
        assert body["metadata"]["sources_count"] == 0


class TestGeneralEndpoints:
    def test_root(self):
        res = client.get("/")
        assert res.status_code == 200
        assert res.json()["name"] == "MarketPulse"

    def test_health(self):
        assert client.get("/health").json()["status"] == "healthy"
        assert client.get("/search/health").json() == {
            "status": "healthy",
            "service": "competitor-search",
        }
