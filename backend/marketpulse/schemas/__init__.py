# Schemas package
from .analysis_schema import (
    CompetitorRecord,
    MarketAnalysis,
    ResponseMetadata,
    SearchResponse,
)
from .search_schema import SearchResult

__all__ = [
    "CompetitorRecord",
    "MarketAnalysis",
    "ResponseMetadata",
    "SearchResponse",
    "SearchResult",
]
