"""Tavily integration — web search provider for competitor research.

A single async entry point, ``search_web``, returning normalised
``SearchResult`` objects. Errors are raised as ``SearchProviderError`` and
never swallowed here; callers decide whether a failure is fatal.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Union

import httpx
from pydantic import ValidationError

from ..config import (
    get_search_depth,
    get_search_max_results,
    get_search_timeout,
    get_tavily_key,
)
from ..schemas.search_schema import SearchResult
from .errors import SearchProviderError

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Tavily API configuration
# ---------------------------------------------------------------------------
_TAVILY_API_URL = "https://api.tavily.com/search"


def _get_tavily_key() -> str:
    """Read the Tavily API key from the environment."""
    key = get_tavily_key()
    if not key:
        print("⚠️  [TAVILY] API key missing (TAVILY_API_KEY)")
        raise SearchProviderError("TAVILY_API_KEY environment variable not set")
    return key


def normalize_results(payload: Union[Dict[str, Any], List[Any], None]) -> List[SearchResult]:
    """Accept either a bare result list or ``{"results": [...]}``.

    ``content`` falls back to ``snippet`` when the provider uses that key.
    Non-dict entries and entries with non-string fields are skipped.
    """
    if isinstance(payload, list):
        raw_results = payload
    elif isinstance(payload, dict):
        raw_results = payload.get("results") or []
    else:
        raw_results = []
    if not isinstance(raw_results, list):
        raw_results = []

    results: List[SearchResult] = []
    for item in raw_results:
        if not isinstance(item, dict):
            continue
        try:
            result = SearchResult(
                url=item.get("url") or "",
                title=item.get("title") or "",
                content=item.get("content") or item.get("snippet") or "",
            )
        except ValidationError as exc:
            logger.warning("Skipping malformed Tavily result %r: %s", item.get("url"), exc)
            continue
        results.append(result)
    return results


async def search_web(query: str, max_results: Optional[int] = None) -> List[SearchResult]:
    """Execute a single Tavily search (async) and return normalised results.

    Parameters
    ----------
    query : str
        Free-text search query.
    max_results : int, optional
        Result cap (default: ``SEARCH_MAX_RESULTS``).

    Raises
    ------
    SearchProviderError
        Missing key, transport failure, non-200 status or non-JSON body.
    """
    api_key = _get_tavily_key()
    if max_results is None:
        max_results = get_search_max_results()

    payload = {
        "api_key": api_key,
        "query": query,
        "search_depth": get_search_depth(),
        "max_results": max_results,
        "include_answer": False,
    }

    print(f"🔎 [TAVILY] Searching: {query!r} (max_results={max_results})")

    try:
        async with httpx.AsyncClient(timeout=get_search_timeout()) as client:
            response = await client.post(_TAVILY_API_URL, json=payload)
    except httpx.TimeoutException as exc:
        logger.warning("Tavily timeout for query=%r", query)
        raise SearchProviderError(f"Tavily search timed out for {query!r}") from exc
    except httpx.HTTPError as exc:
        logger.warning("Tavily transport error for query=%r: %s", query, exc)
        raise SearchProviderError(f"Tavily search failed: {exc}") from exc

    if response.status_code != 200:
        logger.warning("Tavily HTTP %d for query=%r", response.status_code, query)
        raise SearchProviderError(
            f"Tavily search returned HTTP {response.status_code}: {response.text[:200]}"
        )

    try:
        data = response.json()
    except ValueError as exc:
        raise SearchProviderError("Tavily search returned a non-JSON body") from exc

    results = normalize_results(data)
    print(f"📦 [TAVILY] {len(results)} results for {query!r}")
    return results
