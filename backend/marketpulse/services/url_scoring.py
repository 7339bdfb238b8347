"""URL classification and quality scoring.

Pure string heuristics, no I/O:
  - ``is_article_url``   editorial / media / video page vs product homepage
  - ``score_url``        additive integer score, higher is better
  - ``extract_urls_from_content``  non-article links embedded in article text
"""

from __future__ import annotations

import re
from typing import List
from urllib.parse import urlparse

from ..constants import (
    ARTICLE_PATTERNS,
    ARTICLE_PENALTY,
    DEEP_PATH_MIN_SLASHES,
    DEEP_PATH_PENALTY,
    HTTPS_BONUS,
    PRODUCT_TLD_BONUS,
    PRODUCT_TLDS,
    QUERY_STRING_PENALTY,
    SHALLOW_PATH_BONUS,
    SHALLOW_PATH_MAX_SLASHES,
)

_URL_RE = re.compile(r"https?://[^\s<>\"{}|\\^`\[\]]+")
_TRAILING_PUNCT_RE = re.compile(r"[.,;:!?)'\"]+$")
_SCHEME_WWW_RE = re.compile(r"^https?://(?:www\.)?", re.IGNORECASE)


def is_article_url(url: str) -> bool:
    """Return True if *url* looks like editorial, video or social content."""
    url_lower = (url or "").lower()
    return any(pattern in url_lower for pattern in ARTICLE_PATTERNS)


def _tld(url: str) -> str:
    try:
        host = urlparse(url).hostname or ""
    except ValueError:
        return ""
    return host.rsplit(".", 1)[-1] if "." in host else ""


def score_url(url: str) -> int:
    """Score a URL for "official homepage" quality.

    Only meaningful for relative ranking between candidates.
    """
    score = 0

    if is_article_url(url):
        score += ARTICLE_PENALTY

    slashes = url.count("/")
    if slashes <= SHALLOW_PATH_MAX_SLASHES:
        score += SHALLOW_PATH_BONUS
    if slashes >= DEEP_PATH_MIN_SLASHES:
        score += DEEP_PATH_PENALTY

    if _tld(url) in PRODUCT_TLDS:
        score += PRODUCT_TLD_BONUS

    if "?" in url:
        score += QUERY_STRING_PENALTY

    if url.lower().startswith("https://"):
        score += HTTPS_BONUS

    return score


def strip_scheme(url: str) -> str:
    """Drop the scheme and a leading ``www.``."""
    return _SCHEME_WWW_RE.sub("", url or "")


def extract_host(url: str) -> str:
    """Return the lower-cased host without ``www.`` (e.g. 'clickup.com')."""
    return strip_scheme(url).split("/")[0].split("?")[0].lower()


def extract_domain_token(url: str) -> str:
    """Return the first label of the host (e.g. 'clickup' for clickup.com)."""
    return extract_host(url).split(".")[0]


def extract_urls_from_content(content: str) -> List[str]:
    """Find ``http(s)://`` links in free text, keeping only non-article ones."""
    urls: List[str] = []
    for match in _URL_RE.findall(content or ""):
        url = _TRAILING_PUNCT_RE.sub("", match)
        if url and not is_article_url(url):
            urls.append(url)
    return urls
