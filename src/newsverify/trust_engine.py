from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field

from . import analyzers
from .domain_trust import host_matches
from .errors import InputValidationError
from .llm_adapter import LLMGateway
from .models import (
    AIVerification,
    EventCheck,
    FactualConsistency,
    LanguageAnalysis,
    LegitimacyCompartment,
    LocationCheck,
    MatchingArticle,
    NewsArticle,
    NewsVerificationResult,
    OutletVerification,
    RelatabilityCompartment,
    SourceCredibility,
    TimestampCheck,
    TrustworthinessCompartment,
)
from .prompts import build_verification_prompt
from .scoring import OUTLET_KEYS
from .sources import REFERENCE_DOMAINS, NewsSearchClient, extract_search_terms

logger = logging.getLogger(__name__)


def _merge(primary: Sequence[str], extra: Sequence[str]) -> list[str]:
    merged: list[str] = []
    seen: set[str] = set()
    for item in [*primary, *extra]:
        key = item.lower()
        if key in seen:
            continue
        seen.add(key)
        merged.append(item)
    return merged


def build_relatability(content: str, ai: AIVerification) -> RelatabilityCompartment:
    locations = _merge(analyzers.extract_locations(content), ai.locations)
    dates = _merge(analyzers.extract_dates(content), ai.dates)
    controversial = bool(ai.red_flags) or analyzers.check_controversial_keywords(content)
    return RelatabilityCompartment(
        rss_verification=analyzers.rss_pattern_score(content),
        location=LocationCheck(
            score=analyzers.location_score(locations),
            details=(
                f"Located {len(locations)} geographical references that appear consistent with known locations."
                if locations
                else "Limited geographical context found. Location verification challenging."
            ),
            extracted_locations=locations,
        ),
        timestamp=TimestampCheck(
            score=analyzers.timestamp_score(dates),
            details=(
                "Temporal references are consistent and plausible with current timeframe."
                if dates
                else "Limited or inconsistent temporal context found."
            ),
            extracted_dates=dates,
            consistency=bool(dates),
        ),
        event=EventCheck(
            score=45 if controversial else 70,
            details=(
                "Event contains sensational claims that require additional verification."
                if controversial
                else "Event context appears plausible and consistent with known patterns."
            ),
            event_context=analyzers.generate_event_context(content),
            plausibility=45 if controversial else 75,
        ),
    )


def build_legitimacy(
    ai: AIVerification,
    outlet_articles: Mapping[str, Sequence[NewsArticle]],
    source_url: str | None,
) -> LegitimacyCompartment:
    outlets: dict[str, OutletVerification] = {}
    for key in OUTLET_KEYS:
        verified, similarity, articles = ai.outlet(key)
        # An outlet the search returned nothing for can not corroborate the story.
        if not verified or not outlet_articles.get(key):
            outlets[key] = OutletVerification()
            continue
        outlets[key] = OutletVerification(
            found=True,
            similarity=similarity,
            matching_articles=[
                MatchingArticle(title=article.title, url=article.url, similarity=article.similarity)
                for article in articles
            ],
        )
    return LegitimacyCompartment(**outlets, trusted_source=host_matches(source_url, REFERENCE_DOMAINS))


def build_trustworthiness(content: str, source_url: str | None, ai: AIVerification) -> TrustworthinessCompartment:
    return TrustworthinessCompartment(
        language_analysis=LanguageAnalysis(
            bias=analyzers.analyze_bias(content),
            emotional_tone=analyzers.detect_emotional_tone(content),
        ),
        factual_consistency=FactualConsistency(
            inconsistencies=_merge(analyzers.find_inconsistencies(content), ai.red_flags),
        ),
        source_credibility=SourceCredibility(
            score=analyzers.evaluate_source_credibility(source_url),
            reputation=analyzers.source_reputation(source_url),
        ),
    )


def aggregate(
    content: str,
    source_url: str | None,
    ai: AIVerification,
    outlet_articles: Mapping[str, Sequence[NewsArticle]],
) -> NewsVerificationResult:
    return NewsVerificationResult(
        relatability=build_relatability(content, ai),
        legitimacy=build_legitimacy(ai, outlet_articles, source_url),
        trustworthiness=build_trustworthiness(content, source_url, ai),
        overall_assessment=ai.overall_assessment or None,
    )


@dataclass
class VerificationEngine:
    """Stage 2: cross-reference the article and score the three compartments."""

    search_client: NewsSearchClient = field(default_factory=NewsSearchClient)
    llm: LLMGateway = field(default_factory=LLMGateway)

    async def verify(self, content: str, source_url: str | None = None) -> NewsVerificationResult:
        if content is None or not content.strip():
            raise InputValidationError("News content is required")
        logger.info("Stage 2 start: length=%d has_url=%s", len(content), bool(source_url))

        terms = extract_search_terms(content)
        outlet_articles = await self.search_client.search_outlets(terms)
        prompt = build_verification_prompt(content, source_url, outlet_articles)
        ai = await self.llm.verify(prompt)

        result = aggregate(content, source_url, ai, outlet_articles)
        logger.info(
            "Stage 2 complete: relatability=%d legitimacy=%d trustworthiness=%d overall=%d verdict=%s",
            result.relatability.overall_score,
            result.legitimacy.overall_score,
            result.trustworthiness.overall_score,
            result.overall_score,
            result.overall_verdict,
        )
        return result
