import httpx
import pytest

from newsverify.errors import RateLimitError
from newsverify.models import NewsArticle, SearchTerms
from newsverify.sources import REFERENCE_OUTLETS, NewsSearchClient, extract_search_terms

TEXT = "Council reviews budget plans\nThe Prime Minister met London officials"


def _payload(*articles):
    return {"status": "ok", "totalResults": len(articles), "articles": list(articles)}


def _raw(url, source, title="Budget talks continue"):
    return {
        "source": {"id": None, "name": source},
        "title": title,
        "description": "Officials met on Tuesday.",
        "content": "Officials met on Tuesday to discuss the budget.",
        "url": url,
        "publishedAt": "2024-03-05T10:00:00Z",
    }


def _client(handler) -> NewsSearchClient:
    return NewsSearchClient(transport=httpx.MockTransport(handler))


def test_extract_search_terms():
    terms = extract_search_terms(TEXT)
    assert terms.headline == "Council reviews budget plans"
    assert terms.keywords == "council reviews budget plans prime"
    assert terms.broad_query == "council OR reviews OR budget"
    assert "Prime Minister" in terms.entities
    assert "London" in terms.entities


def test_extract_search_terms_strips_quotes_and_truncates():
    terms = extract_search_terms('"' + "Long headline " * 20 + '"\nbody')
    assert not terms.headline.startswith('"')
    assert len(terms.headline) <= 100


@pytest.mark.asyncio
async def test_search_sends_outlet_constraint_and_key():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["params"] = dict(request.url.params)
        seen["key"] = request.headers["X-Api-Key"]
        return httpx.Response(200, json=_payload(_raw("https://www.bbc.com/news/1", "BBC News")))

    articles = await _client(handler).search("budget council", ("bbc.com", "bbc.co.uk"))

    assert seen["key"] == "test-news-key"
    assert seen["params"]["q"] == "budget council"
    assert seen["params"]["domains"] == "bbc.com,bbc.co.uk"
    assert seen["params"]["sortBy"] == "publishedAt"
    assert len(articles) == 1
    assert isinstance(articles[0], NewsArticle)
    assert articles[0].source == "BBC News"
    assert articles[0].published_at is not None
    assert articles[0].published_at.year == 2024


@pytest.mark.asyncio
async def test_search_outlets_isolates_failures():
    def handler(request: httpx.Request) -> httpx.Response:
        domains = request.url.params["domains"]
        if domains.startswith("bbc.com"):
            return httpx.Response(200, json=_payload(_raw("https://www.bbc.com/news/1", "BBC News")))
        if domains == "cnn.com":
            # Article from somewhere else entirely is not CNN coverage.
            return httpx.Response(200, json=_payload(_raw("https://www.example.org/story", "Example Daily")))
        if domains == "abcnews.go.com":
            return httpx.Response(500, text="boom")
        return httpx.Response(200, json={"status": "error", "code": "apiKeyInvalid"})

    results = await _client(handler).search_outlets(extract_search_terms(TEXT))

    assert set(results) == {"bbc", "cnn", "abc", "guardian"}
    assert len(results["bbc"]) == 1
    assert results["cnn"] == []
    assert results["abc"] == []
    assert results["guardian"] == []


@pytest.mark.asyncio
async def test_search_outlets_raises_on_rate_limit():
    client = _client(lambda request: httpx.Response(429))
    with pytest.raises(RateLimitError):
        await client.search_outlets(extract_search_terms(TEXT))


@pytest.mark.asyncio
async def test_search_without_key_returns_nothing(monkeypatch, fresh_settings):
    monkeypatch.setenv("NEWS_API_KEY", "")
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(200, json=_payload())

    assert await _client(handler).search("budget", ("bbc.com",)) == []
    assert calls == []


@pytest.mark.asyncio
async def test_search_outlet_falls_back_to_keywords():
    queries = []

    def handler(request: httpx.Request) -> httpx.Response:
        queries.append(request.url.params["q"])
        if len(queries) == 1:
            return httpx.Response(200, json=_payload())
        return httpx.Response(200, json=_payload(_raw("https://www.bbc.co.uk/news/2", "BBC News")))

    terms = SearchTerms(
        headline="Council reviews budget plans",
        keywords="council budget plans",
        entities="Council Prime Minister",
        broad_query="council OR budget",
    )
    articles = await _client(handler).search_outlet(REFERENCE_OUTLETS[0], terms)

    assert queries == ["Council Prime Minister", "council budget plans"]
    assert len(articles) == 1


@pytest.mark.asyncio
async def test_search_outlet_skips_short_entity_query():
    queries = []

    def handler(request: httpx.Request) -> httpx.Response:
        queries.append(request.url.params["q"])
        return httpx.Response(200, json=_payload())

    terms = SearchTerms(headline="Rain", keywords="heavy rainfall", entities="Leeds", broad_query="heavy")
    assert await _client(handler).search_outlet(REFERENCE_OUTLETS[0], terms) == []
    assert queries == ["heavy rainfall"]
