"""Competitor analysis pipeline.

query -> dual search -> context + URL index -> LLM -> parse/validate
      -> URL repair -> SearchResponse

Every lookup table is created per call and passed explicitly between steps;
nothing is shared across requests.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Optional, Sequence

from ..constants import RAW_RESPONSE_LOG_CHARS
from ..schemas.analysis_schema import MarketAnalysis, ResponseMetadata, SearchResponse
from ..schemas.search_schema import SearchResult
from ..timing import StepTimer
from .analysis_parser import parse_market_analysis
from .context_builder import SourceIndex, build_context
from .errors import AnalysisParseError, InputError
from .ollama_client import call_ollama_json
from .prompts import build_analysis_prompt
from .query_dispatcher import search_competitors, validate_query
from .url_repair import repair_website_urls, resolve_missing_websites

logger = logging.getLogger(__name__)


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


def degraded_analysis(query: str, sources_count: int) -> MarketAnalysis:
    """Fallback analysis used when the LLM reply cannot be parsed."""
    return MarketAnalysis(
        summary=[
            f"Analysis for: {query}. Search found {sources_count} relevant sources "
            "but failed to parse results."
        ],
        competitors_details=[],
    )


async def request_analysis(context: str, query: str) -> str:
    """Send the composed prompt to the local LLM and return its raw reply."""
    prompt = build_analysis_prompt(query=query, context=context)
    return await call_ollama_json(prompt)


async def parse_and_repair(
    raw: str,
    *,
    query: str,
    index: SourceIndex,
    results: Sequence[SearchResult],
) -> MarketAnalysis:
    """Parse the LLM reply and correct every competitor's website URL.

    An unparseable or schema-invalid reply is not retried: it degrades to an
    analysis with no competitors and a summary explaining the failure.
    """
    try:
        analysis = parse_market_analysis(raw)
    except AnalysisParseError as exc:
        logger.error("Failed to parse AI response, using fallback: %s", exc)
        logger.debug("Full AI response that failed to parse: %s", raw)
        return degraded_analysis(query, len(results))

    analysis = repair_website_urls(analysis, index, results)
    analysis = await resolve_missing_websites(analysis)
    print("✅ [LLM] Analysis completed successfully")
    return analysis


async def search_and_summarize(query: Optional[str]) -> SearchResponse:
    """Run the full pipeline for *query*. Never raises.

    Returns
    -------
    SearchResponse
        ``success=True`` with ``data`` + ``metadata``, or ``success=False``
        with ``error`` (plus zero-valued ``metadata`` for provider failures).
    """
    try:
        try:
            clean_query = validate_query(query)
        except InputError as exc:
            return SearchResponse(success=False, error=str(exc))

        timer = StepTimer("market_analysis")

        async with timer.async_step("search"):
            results = await search_competitors(clean_query)

        with timer.step("context"):
            context, index = build_context(results)

        async with timer.async_step("llm"):
            raw = await request_analysis(context, clean_query)
        print(f"🔍 [LLM] Raw AI response: {raw[:RAW_RESPONSE_LOG_CHARS]}")

        async with timer.async_step("parse_and_repair"):
            analysis = await parse_and_repair(
                raw, query=clean_query, index=index, results=results
            )

        timer.summary()

        return SearchResponse(
            success=True,
            data=analysis,
            metadata=ResponseMetadata(
                query=query,
                timestamp=_timestamp(),
                sources_count=len(results),
            ),
        )

    except Exception as exc:
        logger.exception("Error in search_and_summarize")
        return SearchResponse(
            success=False,
            error=str(exc) or "Failed to search and summarize",
            metadata=ResponseMetadata(
                query=query or "",
                timestamp=_timestamp(),
                sources_count=0,
            ),
        )
