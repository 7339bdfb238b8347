"""Website URL repair for LLM-extracted competitors.

The LLM regularly returns a news article, a blog post or nothing at all as a
competitor's ``website_url``. Two passes correct that:

Pass 1 — repair chain (no I/O)
    An ordered list of candidate strategies, each evaluated against the
    running best score. A candidate replaces the current URL only when it
    scores strictly higher.

      1. company index   best URL listed under the full competitor name
      2. word index      URL indexed under any name token (len > 2)
      3. search results  first non-article result mentioning the name
      4. article embeds  product links inside article text whose domain
                         contains a name token; only while the best score
                         is still negative, stops at the first improvement

Pass 2 — targeted search (I/O)
    Competitors still without a URL, or still pointing at an article, get one
    ``"<name> official website homepage"`` search. A failing search is logged
    and skipped; sibling competitors are unaffected.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Callable, Iterable, Iterator, List, NamedTuple, Optional, Sequence, Tuple

from ..config import get_targeted_search_max_results
from ..constants import MIN_NAME_TOKEN_LENGTH, MISSING_URL_SCORE, WEBSITE_QUERY_SUFFIX
from ..schemas.analysis_schema import CompetitorRecord, MarketAnalysis
from ..schemas.search_schema import SearchResult
from .context_builder import SourceIndex
from .errors import ProviderError
from .tavily_client import search_web
from .url_scoring import extract_host, extract_urls_from_content, is_article_url, score_url

logger = logging.getLogger(__name__)

_NAME_SPLIT_RE = re.compile(r"[\s\-]")


@dataclass(frozen=True)
class RepairContext:
    """Everything the repair strategies may consult for one request."""

    index: SourceIndex
    results: Sequence[SearchResult]


CandidateFn = Callable[[str, RepairContext], Iterable[str]]


class RepairStage(NamedTuple):
    label: str
    candidates: CandidateFn
    only_while_negative: bool = False
    stop_on_first_improvement: bool = False


def name_tokens(name_lower: str) -> List[str]:
    return [t for t in _NAME_SPLIT_RE.split(name_lower) if len(t) >= MIN_NAME_TOKEN_LENGTH]


def url_score_or_missing(url: Optional[str]) -> int:
    return score_url(url) if url else MISSING_URL_SCORE


# ===================================================================== #
#  Candidate strategies                                                   #
# ===================================================================== #

def company_index_candidates(name_lower: str, ctx: RepairContext) -> Iterator[str]:
    url = ctx.index.best_company_url(name_lower)
    if url:
        yield url


def word_index_candidates(name_lower: str, ctx: RepairContext) -> Iterator[str]:
    for token in name_tokens(name_lower):
        url = ctx.index.domain_urls.get(token)
        if url:
            yield url


def search_result_candidates(name_lower: str, ctx: RepairContext) -> Iterator[str]:
    for result in ctx.results:
        if not result.url or is_article_url(result.url):
            continue
        if name_lower in result.title.lower() or name_lower in result.content.lower():
            yield result.url
            return


def article_embed_candidates(name_lower: str, ctx: RepairContext) -> Iterator[str]:
    tokens = name_tokens(name_lower)
    if not tokens:
        return
    for result in ctx.results:
        if not is_article_url(result.url):
            continue
        for embedded_url in extract_urls_from_content(result.content):
            host = extract_host(embedded_url)
            if any(token in host for token in tokens):
                yield embedded_url


REPAIR_STAGES: Tuple[RepairStage, ...] = (
    RepairStage("company mapping", company_index_candidates),
    RepairStage("domain/word mapping", word_index_candidates),
    RepairStage("search results", search_result_candidates),
    RepairStage(
        "article content",
        article_embed_candidates,
        only_while_negative=True,
        stop_on_first_improvement=True,
    ),
)


# ===================================================================== #
#  Pass 1 — repair chain                                                  #
# ===================================================================== #

def find_best_url(
    competitor: CompetitorRecord,
    ctx: RepairContext,
    stages: Sequence[RepairStage] = REPAIR_STAGES,
) -> Tuple[Optional[str], int]:
    """Run *stages* in order and return ``(best_url, best_score)``."""
    name_lower = competitor.name.lower()
    best_url = competitor.website_url
    best_score = url_score_or_missing(best_url)

    for stage in stages:
        if stage.only_while_negative and best_score >= 0:
            continue
        for candidate in stage.candidates(name_lower, ctx):
            candidate_score = score_url(candidate)
            if candidate_score <= best_score:
                continue
            best_url, best_score = candidate, candidate_score
            print(
                f"🔗 [REPAIR] Better URL for {competitor.name} from {stage.label}: "
                f"{best_url} (score: {best_score})"
            )
            if stage.stop_on_first_improvement:
                break

    return best_url, best_score


def repair_competitor(competitor: CompetitorRecord, ctx: RepairContext) -> CompetitorRecord:
    original_url = competitor.website_url
    if original_url and is_article_url(original_url):
        print(f"⚠️  [REPAIR] Replacing article URL for {competitor.name}: {original_url}")

    best_url, _ = find_best_url(competitor, ctx)
    if best_url == original_url:
        return competitor
    return competitor.model_copy(update={"website_url": best_url})


def repair_website_urls(
    analysis: MarketAnalysis,
    index: SourceIndex,
    results: Sequence[SearchResult],
) -> MarketAnalysis:
    """Apply the repair chain to every competitor, preserving order."""
    ctx = RepairContext(index=index, results=results)
    repaired = [repair_competitor(c, ctx) for c in analysis.competitors_details]
    return analysis.model_copy(update={"competitors_details": repaired})


# ===================================================================== #
#  Pass 2 — targeted website search                                       #
# ===================================================================== #

def needs_targeted_search(competitor: CompetitorRecord) -> bool:
    url = competitor.website_url
    return not url or is_article_url(url)


def pick_targeted_url(
    current_url: Optional[str],
    results: Sequence[SearchResult],
) -> Tuple[Optional[str], int]:
    best_url = current_url
    best_score = url_score_or_missing(current_url)
    for result in results:
        if not result.url:
            continue
        candidate_score = score_url(result.url)
        print(f"   - {result.url} (score: {candidate_score})")
        if candidate_score > best_score:
            best_url, best_score = result.url, candidate_score
    return best_url, best_score


async def resolve_missing_websites(analysis: MarketAnalysis) -> MarketAnalysis:
    """Run one targeted search per competitor still lacking a product URL.

    Searches run sequentially. A ``ProviderError`` for one competitor is
    logged and that competitor keeps its current URL.
    """
    print("🔍 [REPAIR] Performing targeted searches for competitors with missing/article URLs...")
    max_results = get_targeted_search_max_results()
    resolved: List[CompetitorRecord] = []

    for competitor in analysis.competitors_details:
        if not needs_targeted_search(competitor):
            print(f"✅ [REPAIR] {competitor.name}: already has product URL ({competitor.website_url})")
            resolved.append(competitor)
            continue

        print(f"🎯 [REPAIR] Searching for official website: {competitor.name}")
        try:
            results = await search_web(f"{competitor.name} {WEBSITE_QUERY_SUFFIX}", max_results)
        except ProviderError as exc:
            logger.warning("Targeted search failed for %s: %s", competitor.name, exc)
            resolved.append(competitor)
            continue

        print(f"   Found {len(results)} results for {competitor.name}")
        current_url = competitor.website_url
        best_url, best_score = pick_targeted_url(current_url, results)

        if best_url != current_url and best_score > 0:
            print(f"   ✅ Found official website: {best_url} (score: {best_score})")
            competitor = competitor.model_copy(update={"website_url": best_url})
        elif best_score < 0:
            print("   ❌ No product URL found, all results are articles")

        resolved.append(competitor)

    return analysis.model_copy(update={"competitors_details": resolved})
