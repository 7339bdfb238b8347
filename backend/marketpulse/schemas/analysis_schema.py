"""Pydantic schemas for competitor analysis results.

The LLM is asked for strict JSON but routinely returns a bare string where a
list is expected, or ``null`` for fields it could not fill. The ``mode="before"``
validators below normalise those shapes before type validation runs:

  - optional list fields: ``null`` -> absent, ``"x"`` -> ``["x"]``
  - ``key_features``: ``null`` -> ``[]``, ``"x"`` -> ``["x"]``
"""

from __future__ import annotations

from typing import Any, List, Optional

from pydantic import BaseModel, Field, field_validator


def normalize_to_list(value: Any) -> Optional[List[Any]]:
    """Coerce an optional list field. Unknown shapes become absent."""
    if value is None:
        return None
    if isinstance(value, str):
        return [value]
    if isinstance(value, list):
        return value
    return None


def normalize_to_required_list(value: Any) -> List[Any]:
    """Coerce a required list field. Unknown shapes become an empty list."""
    normalized = normalize_to_list(value)
    return normalized if normalized is not None else []


class CompetitorRecord(BaseModel):
    """Structured facts about one competitor extracted by the LLM."""

    name: str = Field(..., description="Competitor product/company name")
    website_url: Optional[str] = Field(
        default=None,
        description="Official website URL of the competitor (e.g., https://example.com)",
    )
    key_features: List[str] = Field(
        default_factory=list,
        description="Comprehensive list of features, capabilities and functionalities",
    )
    pricing_model: Optional[List[str]] = Field(
        default=None, description="Pricing information specific to this competitor"
    )
    tech_stack: Optional[List[str]] = Field(
        default=None, description="Technology stack used by this competitor"
    )
    target_market: Optional[List[str]] = Field(
        default=None, description="Target audience for this competitor"
    )
    market_positioning: Optional[List[str]] = Field(
        default=None, description="How this competitor positions itself"
    )

    @field_validator("key_features", mode="before")
    @classmethod
    def _required_list(cls, v: Any) -> List[Any]:
        return normalize_to_required_list(v)

    @field_validator(
        "pricing_model", "tech_stack", "target_market", "market_positioning",
        mode="before",
    )
    @classmethod
    def _optional_list(cls, v: Any) -> Optional[List[Any]]:
        return normalize_to_list(v)

    @field_validator("website_url", mode="before")
    @classmethod
    def _blank_url_is_absent(cls, v: Any) -> Any:
        if v is None:
            return None
        if isinstance(v, str) and not v.strip():
            return None
        return v.strip() if isinstance(v, str) else v


class MarketAnalysis(BaseModel):
    """Summary bullets plus one record per competitor."""

    summary: List[str] = Field(
        ..., description="Brief overview in 2-3 bullet points about what was found"
    )
    competitors_details: List[CompetitorRecord] = Field(
        ..., description="Detailed information for each competitor individually"
    )

    @field_validator("summary", mode="before")
    @classmethod
    def _summary_list(cls, v: Any) -> Any:
        if isinstance(v, str):
            return [v]
        return v


class ResponseMetadata(BaseModel):
    """Request metadata attached to every pipeline response."""

    query: str
    timestamp: str = Field(..., description="ISO-8601 time the response was assembled")
    sources_count: int = Field(..., ge=0, description="Deduplicated search result count")


class SearchResponse(BaseModel):
    """Envelope returned by the search endpoint.

    ``data`` is set when ``success`` is true, ``error`` when it is false.
    """

    success: bool
    data: Optional[MarketAnalysis] = None
    metadata: Optional[ResponseMetadata] = None
    error: Optional[str] = None
