from __future__ import annotations

import asyncio
import logging
import re
from dataclasses import dataclass
from datetime import datetime

import httpx

from .config import get_settings
from .domain_trust import host_matches
from .errors import RateLimitError
from .models import NewsArticle, SearchTerms

logger = logging.getLogger(__name__)

STOP_WORDS = frozenset(
    {
        "the", "a", "an", "and", "or", "but", "in", "on", "at", "to", "for", "of", "with", "by",
        "from", "as", "is", "was", "are", "were", "been", "be", "have", "has", "had", "that",
        "this", "it", "their", "said", "would", "could", "should", "will", "can", "may",
        "might", "must", "shall",
    }
)
_PROPER_NOUN = re.compile(r"\b[A-Z][a-z]+(?:\s+[A-Z][a-z]+){0,2}\b")


@dataclass(frozen=True)
class Outlet:
    key: str
    name: str
    domains: tuple[str, ...]
    source_hint: str

    def owns(self, article: NewsArticle) -> bool:
        return host_matches(article.url, self.domains) or self.source_hint in article.source.lower()


REFERENCE_OUTLETS: tuple[Outlet, ...] = (
    Outlet("bbc", "BBC", ("bbc.com", "bbc.co.uk"), "bbc"),
    Outlet("cnn", "CNN", ("cnn.com",), "cnn"),
    Outlet("abc", "ABC News", ("abcnews.go.com",), "abc"),
    Outlet("guardian", "The Guardian", ("theguardian.com", "guardian.co.uk"), "guardian"),
)

REFERENCE_DOMAINS: tuple[str, ...] = tuple(domain for outlet in REFERENCE_OUTLETS for domain in outlet.domains)


def extract_search_terms(text: str) -> SearchTerms:
    """Headline, keyword and proper-noun queries derived from article text."""
    headline = text.split("\n", 1)[0].strip().strip("'\"").strip()[:100]

    unique_nouns: list[str] = []
    for noun in _PROPER_NOUN.findall(text):
        if noun not in unique_nouns:
            unique_nouns.append(noun)
    entities = " ".join(unique_nouns[:5])

    meaningful = [word for word in text.lower().split() if len(word) > 4 and word not in STOP_WORDS]
    return SearchTerms(
        headline=headline,
        keywords=" ".join(meaningful[:5]),
        entities=entities,
        broad_query=" OR ".join(meaningful[:3]),
    )


class NewsSearchClient:
    """Keyword search against the NewsAPI ``everything`` endpoint, constrained per outlet."""

    def __init__(
        self,
        *,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        settings = get_settings()
        self._endpoint = settings.news_api_url
        self._api_key = settings.news_api_key
        self._page_size = settings.news_page_size
        self._timeout = timeout if timeout is not None else settings.request_timeout
        self._transport = transport

    async def search(self, query: str, domains: tuple[str, ...]) -> list[NewsArticle]:
        """Articles matching ``query`` from ``domains``; an empty list means no matches."""
        if not self._api_key:
            logger.warning("News search skipped: no API key configured")
            return []
        params = {
            "q": query,
            "domains": ",".join(domains),
            "sortBy": "publishedAt",
            "pageSize": self._page_size,
            "language": "en",
        }
        headers = {"X-Api-Key": self._api_key}
        async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
            response = await client.get(self._endpoint, params=params, headers=headers)
        if response.status_code == 429:
            raise RateLimitError(
                "News search rate limit exceeded. Please wait before retrying.",
                status_code=429,
            )
        response.raise_for_status()
        payload = response.json()
        if not isinstance(payload, dict) or payload.get("status") != "ok":
            logger.warning("News search returned an error payload: %s", str(payload)[:200])
            return []
        return [article for article in map(self._to_article, payload.get("articles") or []) if article]

    async def search_outlet(self, outlet: Outlet, terms: SearchTerms) -> list[NewsArticle]:
        queries = [
            terms.entities if len(terms.entities) > 10 else None,
            terms.keywords,
        ]
        for query in queries:
            if not query or len(query) <= 3:
                continue
            logger.debug("Searching %s with: %s", outlet.name, query)
            try:
                articles = await self.search(query, outlet.domains)
            except (httpx.HTTPError, ValueError) as exc:
                logger.error("%s search error: %s", outlet.name, exc)
                continue
            matched = [article for article in articles if outlet.owns(article)]
            if matched:
                logger.info("%s search found %d articles", outlet.name, len(matched))
                return matched
        return []

    async def search_outlets(self, terms: SearchTerms) -> dict[str, list[NewsArticle]]:
        """Fan out the reference-outlet searches and wait for all of them."""
        tasks = [self.search_outlet(outlet, terms) for outlet in REFERENCE_OUTLETS]
        results = await asyncio.gather(*tasks, return_exceptions=True)
        output: dict[str, list[NewsArticle]] = {}
        for outlet, result in zip(REFERENCE_OUTLETS, results, strict=True):
            if isinstance(result, RateLimitError):
                logger.error("News search rate limit exceeded")
                raise result
            if isinstance(result, BaseException):
                logger.error("%s search failed: %s", outlet.name, result)
                output[outlet.key] = []
                continue
            output[outlet.key] = result
        return output

    @staticmethod
    def _to_article(raw: object) -> NewsArticle | None:
        if not isinstance(raw, dict):
            return None
        source = raw.get("source")
        source_name = source.get("name") if isinstance(source, dict) else source
        return NewsArticle(
            title=str(raw.get("title") or ""),
            description=raw.get("description") if isinstance(raw.get("description"), str) else None,
            content=raw.get("content") if isinstance(raw.get("content"), str) else None,
            url=str(raw.get("url") or ""),
            published_at=_parse_datetime(raw.get("publishedAt")),
            source=str(source_name or ""),
        )


def _parse_datetime(value: object) -> datetime | None:
    if not isinstance(value, str) or not value:
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
