"""Query dispatcher — dual web search for competitor research.

Runs a broad search on the raw query and a website-focused search
(``"<query> official website homepage"``) concurrently, then merges both
lists into one deduplicated, quality-ranked result list.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Iterable, List, Optional

from ..constants import WEBSITE_QUERY_SUFFIX
from ..schemas.search_schema import SearchResult
from .errors import InputError
from .tavily_client import search_web
from .url_scoring import is_article_url, score_url

logger = logging.getLogger(__name__)


def validate_query(query: Optional[str]) -> str:
    """Return the stripped query or raise ``InputError`` if it is blank."""
    if not query or not query.strip():
        raise InputError("Query cannot be empty")
    return query.strip()


def merge_results(*result_lists: Iterable[SearchResult]) -> List[SearchResult]:
    """Concatenate, dedupe by exact URL (first occurrence wins), sort by score.

    The sort is stable, so equal-score results keep their merge order
    (general results before website-focused ones).
    """
    seen_urls: set[str] = set()
    unique: List[SearchResult] = []
    for results in result_lists:
        for result in results:
            if result.url in seen_urls:
                continue
            seen_urls.add(result.url)
            unique.append(result)

    return sorted(unique, key=lambda r: score_url(r.url), reverse=True)


async def search_competitors(query: str, max_results: Optional[int] = None) -> List[SearchResult]:
    """Run the general + website-focused searches and merge them.

    Provider failures propagate as ``SearchProviderError``.
    """
    query = validate_query(query)
    website_query = f"{query} {WEBSITE_QUERY_SUFFIX}"

    print(f"🔍 [SEARCH] Processing query: {query!r}")

    outcomes = await asyncio.gather(
        search_web(query, max_results),
        search_web(website_query, max_results),
        return_exceptions=True,
    )
    # Both searches are awaited to completion; the first failure is re-raised
    for outcome in outcomes:
        if isinstance(outcome, BaseException):
            raise outcome
    general_results, website_results = outcomes

    results = merge_results(general_results, website_results)

    article_count = sum(1 for r in results if is_article_url(r.url))
    print(
        f"📊 [SEARCH] Found {len(results)} unique search results "
        f"({len(general_results)} general + {len(website_results)} website-focused)"
    )
    print(f"   📰 Article URLs: {article_count}, 🏢 Product URLs: {len(results) - article_count}")

    if not results:
        logger.warning("No search results found for %r — analysis quality will suffer", query)

    return results
