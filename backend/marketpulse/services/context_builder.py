"""Context builder — LLM grounding text plus request-scoped URL lookups.

``build_context`` walks the ranked search results once and produces:

  1. The ``[Source N]`` text block that is the only material the LLM sees.
  2. A ``SourceIndex`` used afterwards to correct competitor website URLs:
       - ``domain_urls``   domain token / title word -> single URL (first wins)
       - ``company_urls``  company name / domain token / title word -> URLs,
                           ranked best-first by ``score_url``

Article results contribute only the product links embedded in their text.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

from ..constants import MIN_TITLE_WORD_LENGTH, TOP_COMPANIES_LOGGED
from ..schemas.search_schema import SearchResult
from .url_scoring import (
    extract_domain_token,
    extract_urls_from_content,
    is_article_url,
    score_url,
)

_COMPANY_PREFIX_RE = re.compile(r"^([^-:|]+)")
_TITLE_SPLIT_RE = re.compile(r"[\s\-|:]")

SOURCE_SEPARATOR = "\n\n---\n\n"


@dataclass
class SourceIndex:
    """URL lookups built from one request's search results."""

    domain_urls: Dict[str, str] = field(default_factory=dict)
    company_urls: Dict[str, List[str]] = field(default_factory=dict)

    def add_domain(self, key: str, url: str) -> None:
        if key and key not in self.domain_urls:
            self.domain_urls[key] = url

    def add_company(self, key: str, url: str) -> None:
        if not key:
            return
        urls = self.company_urls.setdefault(key, [])
        if url not in urls:
            urls.append(url)

    def rank(self) -> None:
        """Re-sort every company URL list best-first (stable)."""
        for key, urls in self.company_urls.items():
            self.company_urls[key] = sorted(urls, key=score_url, reverse=True)

    def best_company_url(self, name: str) -> Optional[str]:
        urls = self.company_urls.get(name)
        return urls[0] if urls else None


def company_name_from_title(title: str) -> str:
    """Text before the first ``-``, ``:`` or ``|``, lower-cased."""
    match = _COMPANY_PREFIX_RE.match(title or "")
    return match.group(1).strip().lower() if match else ""


def title_words(title: str) -> List[str]:
    return [w for w in _TITLE_SPLIT_RE.split((title or "").lower()) if w]


def _index_product_result(index: SourceIndex, result: SearchResult) -> None:
    url = result.url
    domain = extract_domain_token(url)
    index.add_domain(domain, url)

    company = company_name_from_title(result.title)
    if company:
        index.add_company(company, url)
    index.add_company(domain, url)

    for word in title_words(result.title):
        if len(word) >= MIN_TITLE_WORD_LENGTH:
            index.add_domain(word, url)
            index.add_company(word, url)


def _index_article_result(index: SourceIndex, result: SearchResult) -> None:
    company = company_name_from_title(result.title)
    for embedded_url in extract_urls_from_content(result.content):
        domain = extract_domain_token(embedded_url)
        index.add_domain(domain, embedded_url)
        index.add_company(domain, embedded_url)
        if company:
            index.add_company(company, embedded_url)


def format_source(position: int, result: SearchResult) -> str:
    title = result.title or "Untitled"
    url = result.url or "N/A"
    return f"[Source {position}] {title}\n{result.content}\nURL: {url}"


def build_index(results: Sequence[SearchResult]) -> SourceIndex:
    """Build and rank the URL lookups for *results*."""
    index = SourceIndex()
    for result in results:
        if not result.url:
            continue
        if is_article_url(result.url):
            _index_article_result(index, result)
        else:
            _index_product_result(index, result)
    index.rank()
    return index


def build_context(results: Sequence[SearchResult]) -> Tuple[str, SourceIndex]:
    """Return the LLM context block and the URL index for *results*.

    *results* must already be in dispatcher order (deduplicated, ranked);
    source numbering follows that order.
    """
    context = SOURCE_SEPARATOR.join(
        format_source(position, result) for position, result in enumerate(results, start=1)
    )
    index = build_index(results)

    top_companies = [
        (company, urls[0], score_url(urls[0]))
        for company, urls in list(index.company_urls.items())[:TOP_COMPANIES_LOGGED]
    ]
    print(
        f"🔗 [CONTEXT] URL mapping created: {len(index.domain_urls)} mappings, "
        f"{len(index.company_urls)} companies"
    )
    for company, url, score in top_companies:
        print(f"   • {company}: {url} (score: {score})")

    return context, index
