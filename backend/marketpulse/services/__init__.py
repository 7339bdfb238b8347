from .market_analysis_service import parse_and_repair, search_and_summarize
from .query_dispatcher import merge_results, search_competitors
from .context_builder import SourceIndex, build_context
from .url_scoring import is_article_url, score_url

__all__ = [
    "parse_and_repair",
    "search_and_summarize",
    "merge_results",
    "search_competitors",
    "SourceIndex",
    "build_context",
    "is_article_url",
    "score_url",
]
