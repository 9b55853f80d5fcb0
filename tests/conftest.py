import sys
from pathlib import Path
import os

import pytest


# Ensure project src is on path for imports in tests
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
for p in (ROOT, SRC):
    if str(p) not in sys.path:
        sys.path.insert(0, str(p))

# Collaborators are always faked; point them at unroutable hosts with dummy keys
os.environ.setdefault("LLM_API_KEY", "test-llm-key")
os.environ.setdefault("NEWS_API_KEY", "test-news-key")
os.environ.setdefault("LLM_GATEWAY_URL", "https://llm.test/v1/chat/completions")
os.environ.setdefault("NEWS_API_URL", "https://news.test/v2/everything")

from newsverify.config import get_settings  # noqa: E402
from newsverify.models import AIVerification, NewsArticle, ViralityAssessment  # noqa: E402
from newsverify.trust_engine import VerificationEngine  # noqa: E402

HEADLINE = "Council reviews budget plans"
FILLER = ("the", "council", "reviewed", "the", "budget", "and", "local", "road", "repairs", "on", "tuesday")


def build_article(words: int, headline: str = HEADLINE) -> str:
    """Neutral article with exactly ``words`` whitespace-separated words."""
    body_count = max(0, words - len(headline.split()))
    body = " ".join(FILLER[i % len(FILLER)] for i in range(body_count))
    return f"{headline}\n{body}"


@pytest.fixture
def article():
    return build_article


@pytest.fixture
def fresh_settings():
    """Drop the cached Settings so monkeypatched env vars take effect."""
    get_settings.cache_clear()
    yield get_settings
    get_settings.cache_clear()


class StubSearchClient:
    def __init__(self, outlet_articles=None, error=None):
        self.outlet_articles = outlet_articles or {}
        self.error = error
        self.calls = 0

    async def search_outlets(self, terms):
        self.calls += 1
        if self.error:
            raise self.error
        return {key: list(self.outlet_articles.get(key, [])) for key in ("bbc", "cnn", "abc", "guardian")}


class StubLLM:
    def __init__(self, verification=None, error=None, virality=None):
        self.verification = verification or AIVerification()
        self.error = error
        self.virality = virality or ViralityAssessment()
        self.prompts = []

    async def verify(self, prompt):
        self.prompts.append(prompt)
        if self.error:
            raise self.error
        return self.verification

    async def assess_virality(self, headline, content):
        if self.error:
            raise self.error
        return self.virality


def outlet_article(outlet: str) -> NewsArticle:
    urls = {
        "bbc": "https://www.bbc.com/news/world-1",
        "cnn": "https://edition.cnn.com/2024/03/05/world/story",
        "abc": "https://abcnews.go.com/International/story",
        "guardian": "https://www.theguardian.com/world/2024/mar/05/story",
    }
    return NewsArticle(title=f"{outlet} coverage", url=urls[outlet], source=outlet.upper())


@pytest.fixture
def make_engine():
    def _make(outlet_articles=None, verification=None, search_error=None, llm_error=None, virality=None):
        search = StubSearchClient(outlet_articles, error=search_error)
        llm = StubLLM(verification, error=llm_error, virality=virality)
        return VerificationEngine(search_client=search, llm=llm)  # type: ignore[arg-type]

    return _make


@pytest.fixture
def found_articles():
    """Search hits for the given outlet keys."""

    def _found(*outlets):
        return {outlet: [outlet_article(outlet)] for outlet in outlets}

    return _found
