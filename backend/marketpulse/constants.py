"""Centralized constants shared by the search, scoring and repair services.

This module is the SINGLE SOURCE OF TRUTH for article detection patterns,
URL scoring weights and search phrasing. Reused by:
  - URL classifier / scorer
  - Context builder
  - Website URL repair chain
"""

from __future__ import annotations

# ── Article / editorial detection ───────────────────────────────────────
# Matched as case-insensitive substrings of the full URL.

ARTICLE_PATH_PATTERNS: tuple[str, ...] = (
    "/blog/",
    "/news/",
    "/article/",
    "/post/",
    "/press/",
    "/newsletter",
    "/20",          # Year paths like /2023/, /2024/
    "/watch?v=",    # YouTube videos
)

ARTICLE_DOMAINS: tuple[str, ...] = (
    "medium.com",
    "techcrunch.com",
    "forbes.com",
    "entrepreneur.com",
    "venturebeat.com",
    "theverge.com",
    "wired.com",
    "cnet.com",
    "businessinsider.com",
    "reuters.com",
    "bloomberg.com",
    "futurism.com",
    "yourstory.com",
    "technologyreview.com",
    "observer.com",
    "voicebot.ai",
    "youtube.com",
    "socialmediaexaminer.com",
    "boardsi.com",
    "genape.ai",    # Tutorial site
)

ARTICLE_PATTERNS: tuple[str, ...] = ARTICLE_PATH_PATTERNS + ARTICLE_DOMAINS

# ── URL scoring weights ─────────────────────────────────────────────────
# Raw integer scale, only meaningful for relative ranking.

ARTICLE_PENALTY = -100
SHALLOW_PATH_MAX_SLASHES = 3      # https://example.com/ = 3 slashes
SHALLOW_PATH_BONUS = 10
DEEP_PATH_MIN_SLASHES = 6         # penalised when slash count > 5
DEEP_PATH_PENALTY = -5
PRODUCT_TLDS: frozenset[str] = frozenset({"io", "com", "ai", "app", "tech"})
PRODUCT_TLD_BONUS = 5
QUERY_STRING_PENALTY = -3
HTTPS_BONUS = 2

# Score given to a competitor with no website URL at all.
MISSING_URL_SCORE = -1000

# ── Search phrasing ─────────────────────────────────────────────────────

WEBSITE_QUERY_SUFFIX = "official website homepage"

# ── Name matching ───────────────────────────────────────────────────────

MIN_TITLE_WORD_LENGTH = 4   # title words indexed when len > 3
MIN_NAME_TOKEN_LENGTH = 3   # competitor name tokens used when len > 2
TOP_COMPANIES_LOGGED = 5
RAW_RESPONSE_LOG_CHARS = 500
