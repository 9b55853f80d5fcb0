import pytest

from newsverify.errors import InputValidationError, RateLimitError, UpstreamError
from newsverify.models import AIVerification
from newsverify.pipeline import NewsVerificationPipeline, run_stage2
from newsverify.trust_engine import aggregate, build_legitimacy


def _verified(**outlets):
    """AI answer that confirms each outlet at the given similarity."""
    data = {}
    for key, similarity in outlets.items():
        data[f"{key}Verified"] = True
        data[f"{key}Similarity"] = similarity
        data[f"{key}Articles"] = [{"title": f"{key} story", "similarity": similarity, "url": f"https://{key}.test/1"}]
    return AIVerification.model_validate(data)


@pytest.mark.asyncio
async def test_nothing_found_scores_minimum_legitimacy(make_engine, article):
    engine = make_engine()
    result = await engine.verify(article(200))

    assert not any(result.legitimacy.outlet(key).found for key in ("bbc", "cnn", "abc", "guardian"))
    assert result.legitimacy.cross_reference.score == 20
    assert result.legitimacy.overall_score == 20
    assert result.relatability.event.score == 70


@pytest.mark.asyncio
async def test_single_outlet_match(make_engine, article, found_articles):
    engine = make_engine(outlet_articles=found_articles("guardian"), verification=_verified(guardian=80))
    result = await engine.verify(article(200))

    guardian = result.legitimacy.guardian
    assert guardian.found is True
    assert guardian.similarity == 80
    assert guardian.matching_articles[0].title == "guardian story"
    assert result.legitimacy.cross_reference.score == 85
    assert result.legitimacy.overall_score == 82


@pytest.mark.asyncio
async def test_ai_claim_without_search_hits_is_not_found(make_engine, article):
    engine = make_engine(outlet_articles={}, verification=_verified(bbc=90, cnn=90))
    result = await engine.verify(article(200))

    assert result.legitimacy.bbc.found is False
    assert result.legitimacy.bbc.similarity == 0
    assert result.legitimacy.overall_score == 20


@pytest.mark.asyncio
async def test_red_flags_lower_event_and_add_inconsistencies(make_engine, article):
    verification = AIVerification.model_validate(
        {"redFlags": ["Unnamed sources", "Date conflicts with timeline"], "overallAssessment": "Doubtful"}
    )
    engine = make_engine(verification=verification)
    result = await engine.verify(article(200))

    assert result.relatability.event.score == 45
    assert result.relatability.event.plausibility == 45
    assert "Unnamed sources" in result.trustworthiness.factual_consistency.inconsistencies
    assert result.trustworthiness.factual_consistency.score == 55
    assert result.overall_assessment == "Doubtful"


@pytest.mark.asyncio
async def test_ai_locations_and_dates_are_merged(make_engine):
    content = "Storm hits London\nHeavy rain fell across London on 2024-03-05 and flooded roads."
    verification = AIVerification.model_validate({"locations": ["london", "Kent"], "dates": ["March 5, 2024"]})
    result = await make_engine(verification=verification).verify(content)

    locations = result.relatability.location.extracted_locations
    assert [loc.lower() for loc in locations].count("london") == 1
    assert "Kent" in locations
    assert result.relatability.location.score == 75
    assert "March 5, 2024" in result.relatability.timestamp.extracted_dates
    assert result.relatability.timestamp.consistency is True


@pytest.mark.asyncio
@pytest.mark.parametrize("content", ["", "   \n  "])
async def test_empty_content_is_rejected_before_collaborators(make_engine, content):
    engine = make_engine()
    with pytest.raises(InputValidationError):
        await engine.verify(content)
    assert engine.search_client.calls == 0
    assert engine.llm.prompts == []


@pytest.mark.asyncio
async def test_prompt_lists_found_articles(make_engine, article, found_articles):
    engine = make_engine(outlet_articles=found_articles("bbc", "cnn"))
    await engine.verify(article(200), "https://www.bbc.com/news/1")

    prompt = engine.llm.prompts[0]
    assert "BBC Articles Found: 1" in prompt
    assert "ABC News Articles Found: 0" in prompt
    assert "https://edition.cnn.com/2024/03/05/world/story" in prompt
    assert "User's Source URL: https://www.bbc.com/news/1" in prompt


@pytest.mark.asyncio
@pytest.mark.parametrize("error", [UpstreamError("gateway down", status_code=503), RateLimitError("slow down")])
async def test_llm_errors_propagate(make_engine, article, error):
    engine = make_engine(llm_error=error)
    with pytest.raises(type(error)):
        await engine.verify(article(200))


@pytest.mark.asyncio
async def test_search_rate_limit_propagates(make_engine, article):
    engine = make_engine(search_error=RateLimitError("News search rate limit exceeded"))
    with pytest.raises(RateLimitError):
        await engine.verify(article(200))
    assert engine.llm.prompts == []


def test_trusted_source_url_lifts_cross_reference(found_articles):
    ai = _verified(bbc=80)
    legitimacy = build_legitimacy(ai, found_articles("bbc"), "https://www.bbc.co.uk/news/uk-1")
    assert legitimacy.trusted_source is True
    assert legitimacy.cross_reference.score == 90
    assert legitimacy.overall_score == 85


def test_aggregate_is_deterministic(article, found_articles):
    content = article(200)
    ai = _verified(bbc=75, guardian=85)
    first = aggregate(content, None, ai, found_articles("bbc", "guardian"))
    second = aggregate(content, None, ai, found_articles("bbc", "guardian"))
    assert first.model_dump() == second.model_dump()


@pytest.mark.asyncio
async def test_pipeline_stops_blocked_article(make_engine, article):
    engine = make_engine()
    pipeline = NewsVerificationPipeline(engine=engine)
    report = await pipeline.analyze(article(30))

    assert report.stage1.decision == "BLOCK"
    assert report.stage2 is None
    assert engine.search_client.calls == 0


@pytest.mark.asyncio
async def test_pipeline_runs_stage2_for_passed_article(make_engine, article, found_articles):
    engine = make_engine(outlet_articles=found_articles("guardian"), verification=_verified(guardian=80))
    report = await NewsVerificationPipeline(engine=engine).analyze(article(200))

    assert report.stage1.decision == "PASS"
    assert report.stage2 is not None
    assert report.stage2.legitimacy.overall_score == 82
    assert report.stage2.overall_score == 68
    assert report.stage2.overall_verdict == "SUSPICIOUS"


@pytest.mark.asyncio
async def test_run_stage2_uses_given_engine(make_engine, article):
    engine = make_engine()
    result = await run_stage2(article(200), engine=engine)
    assert result.legitimacy.overall_score == 20
    assert engine.search_client.calls == 1
