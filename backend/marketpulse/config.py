"""Environment configuration for the MarketPulse backend.

Every setting is read lazily through a getter so tests can override the
environment with ``monkeypatch.setenv`` without reloading modules.
"""

from __future__ import annotations

import os
from typing import List

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

_DEFAULT_CORS_ORIGINS = "http://localhost:3000,http://localhost:3001"


def _env_float(key: str, default: float) -> float:
    try:
        return float(os.getenv(key, str(default)))
    except ValueError:
        return default


def _env_int(key: str, default: int) -> int:
    try:
        return int(os.getenv(key, str(default)))
    except ValueError:
        return default


def _env_bool(key: str, default: bool = False) -> bool:
    return os.getenv(key, str(default)).strip().lower() == "true"


# ---------------------------------------------------------------------------
# Tavily (web search provider)
# ---------------------------------------------------------------------------
def get_tavily_key() -> str:
    """Read TAVILY_API_KEY from the environment. Empty string if missing."""
    return os.getenv("TAVILY_API_KEY", "").strip()


def get_search_depth() -> str:
    return os.getenv("TAVILY_SEARCH_DEPTH", "basic").strip() or "basic"


def get_search_max_results() -> int:
    """Result cap for each of the two dispatcher searches."""
    return _env_int("SEARCH_MAX_RESULTS", 8)


def get_targeted_search_max_results() -> int:
    """Result cap for the per-competitor website search."""
    return _env_int("TARGETED_SEARCH_MAX_RESULTS", 5)


def get_search_timeout() -> float:
    return _env_float("SEARCH_REQUEST_TIMEOUT", 30.0)


# ---------------------------------------------------------------------------
# Ollama (local LLM provider)
# ---------------------------------------------------------------------------
def get_ollama_base_url() -> str:
    return os.getenv("OLLAMA_BASE_URL", "http://localhost:11434").strip().rstrip("/")


def get_ollama_model() -> str:
    return os.getenv("OLLAMA_MODEL", "llama3.1").strip()


def get_ollama_temperature() -> float:
    return _env_float("OLLAMA_TEMPERATURE", 0.2)


def get_ollama_timeout() -> float:
    return _env_float("OLLAMA_REQUEST_TIMEOUT", 300.0)


# ---------------------------------------------------------------------------
# Server
# ---------------------------------------------------------------------------
def get_cors_origins() -> List[str]:
    raw = os.getenv("CORS_ORIGINS", _DEFAULT_CORS_ORIGINS)
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


def get_host() -> str:
    return os.getenv("HOST", "127.0.0.1")


def get_port() -> int:
    return _env_int("PORT", 8000)


def is_debug() -> bool:
    return _env_bool("DEBUG", False)
