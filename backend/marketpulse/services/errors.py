"""Exception hierarchy for the competitor analysis pipeline."""

from __future__ import annotations


class MarketPulseError(Exception):
    """Base class for every pipeline error."""


class InputError(MarketPulseError):
    """The incoming query is unusable (empty or whitespace only)."""


class AnalysisParseError(MarketPulseError):
    """LLM output is not valid JSON or does not match the analysis schema."""


class ProviderError(MarketPulseError):
    """An external collaborator (search or LLM) failed."""


class SearchProviderError(ProviderError):
    """The web search provider failed or returned an unusable payload."""


class LLMProviderError(ProviderError):
    """The local LLM provider failed or returned an unusable payload."""
