"""MarketPulse — competitor research over web search and a local LLM."""

__version__ = "0.1.0"
