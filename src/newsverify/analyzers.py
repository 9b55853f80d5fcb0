"""
Heuristic scorers over raw article text.
Keyword and regex matching only; every function is pure and total.
"""

from __future__ import annotations

import re

from .models import EmotionalTone, RSSVerification

RSS_KEYWORDS = (
    "news", "report", "announced", "according", "sources", "officials",
    "government", "president", "minister", "statement", "says", "said",
    "world", "country", "national", "international", "breaking", "update",
)

KNOWN_LOCATIONS = (
    "New York", "London", "Paris", "Tokyo", "Washington", "Moscow",
    "Beijing", "Delhi", "Mumbai", "Sydney", "Berlin", "Kyiv", "Gaza",
    "Jerusalem", "Los Angeles", "Toronto",
)

DATE_PATTERN = re.compile(
    r"\b(?:January|February|March|April|May|June|July|August|September|October|November|December)"
    r"\s+\d{1,2},?\s+\d{4}"
    r"|\b\d{1,2}/\d{1,2}/\d{4}"
    r"|\b\d{4}-\d{2}-\d{2}",
    re.IGNORECASE,
)

POSITIVE_WORDS = ("great", "excellent", "amazing", "wonderful", "success")
NEGATIVE_WORDS = ("terrible", "awful", "disaster", "crisis", "failure")
SENSATIONAL_WORDS = ("shocking", "unbelievable", "incredible", "stunning")

CONTROVERSIAL_WORDS = (
    "shocking", "unbelievable", "exclusive", "breaking", "you won't believe", "doctors hate",
)

BIAS_MARKERS = ("always", "never", "everyone knows", "obviously", "clearly", "definitely")

TRUSTED_SOURCE_DOMAINS = (
    "bbc.com", "bbc.co.uk", "cnn.com", "reuters.com", "ap.org", "apnews.com",
    "npr.org", "abcnews.go.com", "theguardian.com",
)
DISTRUSTED_SOURCE_DOMAINS = ("fake-news.com", "clickbait.net", "unverified.info")

MAX_EXTRACTED = 3
LARGE_NUMBER = 1_000_000


def word_count(text: str) -> int:
    return len(text.split())


def _count_hits(lower_text: str, vocabulary: tuple[str, ...]) -> int:
    return sum(1 for word in vocabulary if word in lower_text)


def rss_pattern_score(text: str) -> RSSVerification:
    """Score how much the text reads like a wire/RSS news item."""
    lower_text = text.lower()
    match_count = _count_hits(lower_text, RSS_KEYWORDS)
    words = word_count(text)
    found = words >= 30 and match_count >= 2
    score = min(90, 50 + match_count * 5) if found else 30
    if found:
        details = f"News structure detected with {match_count} news-style keywords."
    elif words < 30:
        details = "Too little text to resemble a syndicated news item."
    else:
        details = "Few news-style keywords found."
    return RSSVerification(found=found, score=score, match_count=match_count, details=details)


def extract_locations(text: str) -> list[str]:
    lower_text = text.lower()
    return [location for location in KNOWN_LOCATIONS if location.lower() in lower_text][:MAX_EXTRACTED]


def extract_dates(text: str) -> list[str]:
    return [match.group(0) for match in DATE_PATTERN.finditer(text)][:MAX_EXTRACTED]


def location_score(locations: list[str]) -> int:
    return 75 if locations else 30


def timestamp_score(dates: list[str]) -> int:
    return 80 if dates else 40


def detect_emotional_tone(text: str) -> EmotionalTone:
    lower_text = text.lower()
    if _count_hits(lower_text, SENSATIONAL_WORDS) > 0:
        return "sensational"
    positive = _count_hits(lower_text, POSITIVE_WORDS)
    negative = _count_hits(lower_text, NEGATIVE_WORDS)
    if positive > negative:
        return "positive"
    if negative > positive:
        return "negative"
    return "neutral"


def analyze_bias(text: str) -> int:
    return min(80, _count_hits(text.lower(), BIAS_MARKERS) * 15)


def check_controversial_keywords(text: str) -> bool:
    return _count_hits(text.lower(), CONTROVERSIAL_WORDS) > 0


def generate_event_context(text: str) -> str:
    words = word_count(text)
    if words < 50:
        return "Limited context provided. Event details are sparse."
    if words < 150:
        return "Moderate context provided. Some event details available for verification."
    return "Comprehensive context provided. Sufficient detail for thorough event verification."


def find_inconsistencies(text: str) -> list[str]:
    inconsistencies: list[str] = []
    if "said" in text and "denied" in text:
        inconsistencies.append("Contradictory statements detected in the same article.")
    if any(int(number) > LARGE_NUMBER for number in re.findall(r"\d+", text)):
        inconsistencies.append("Unusually large numbers that may require verification.")
    return inconsistencies


def evaluate_source_credibility(url: str | None) -> int:
    if not url:
        return 50
    lower_url = url.lower()
    if any(domain in lower_url for domain in TRUSTED_SOURCE_DOMAINS):
        return 90
    if any(domain in lower_url for domain in DISTRUSTED_SOURCE_DOMAINS):
        return 10
    return 50


def source_reputation(url: str | None) -> str:
    if not url:
        return "Source URL not provided. Credibility assessment limited."
    lower_url = url.lower()
    if any(domain in lower_url for domain in TRUSTED_SOURCE_DOMAINS):
        return "Source is from a well-established, reputable news organization with strong editorial standards."
    if any(domain in lower_url for domain in DISTRUSTED_SOURCE_DOMAINS):
        return "Source is known for publishing unverified or misleading content."
    return "Source credibility requires further investigation. Domain not recognized as major news outlet."
