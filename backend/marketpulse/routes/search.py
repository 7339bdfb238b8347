"""
Search Router with Timing Instrumentation

Handles the /search endpoint for competitor research queries.
"""

import time

from fastapi import APIRouter, Query, status

from ..schemas.analysis_schema import SearchResponse
from ..services.market_analysis_service import search_and_summarize


router = APIRouter(
    prefix="/search",
    tags=["Search"],
)


@router.get(
    "",
    response_model=SearchResponse,
    response_model_exclude_none=True,
    status_code=status.HTTP_200_OK,
    summary="Analyze Competitors",
    response_description="Competitor comparison (features, pricing, tech stack, positioning)",
)
async def search(
    query: str = Query(
        "",
        description="Free-text competitor research query",
        examples=["AI video generation tools like Synthesia"],
    ),
) -> SearchResponse:
    """
    Search the web for competitors matching *query* and summarize them.

    Failures are reported in the body (``success: false``), not as HTTP errors.
    """
    start_time = time.perf_counter()
    print(f"[TIMING] search_endpoint: START")

    response = await search_and_summarize(query)

    total_duration = (time.perf_counter() - start_time) * 1000
    print(f"[TIMING] search_endpoint: END — duration={total_duration:.0f}ms success={response.success}")
    return response


@router.get(
    "/health",
    summary="Health Check",
    description="Check if the search service is running",
    response_description="Health status"
)
async def health_check():
    """Simple health check endpoint."""
    return {"status": "healthy", "service": "competitor-search"}
