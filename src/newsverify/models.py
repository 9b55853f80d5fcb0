from datetime import datetime
from typing import Any, Literal

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    ValidationInfo,
    ValidatorFunctionWrapHandler,
    computed_field,
    field_validator,
)

from .scoring import (
    DEFAULT_WEIGHTS,
    OUTLET_KEYS,
    Verdict,
    cross_reference_details,
    cross_reference_score,
    derive_verdict,
    factual_consistency_score,
    legitimacy_score,
    mean_score,
    weighted_overall,
)

TrustStatus = Literal["trusted", "questionable", "unknown"]
EmotionalTone = Literal["neutral", "positive", "negative", "sensational"]


class _FrozenModel(BaseModel):
    model_config = ConfigDict(frozen=True)


class DomainTrustEntry(_FrozenModel):
    domain: str
    trust_score: float = Field(..., ge=0.0, le=1.0)
    status: TrustStatus
    reason: str


class Stage1Decision(_FrozenModel):
    decision: Literal["PASS", "BLOCK"]
    reason: str
    domain_score: float | None = Field(default=None, ge=0.0, le=1.0)
    domain_status: TrustStatus | None = None
    domain_reason: str | None = None
    content_score: float | None = Field(default=None, ge=0.0, le=1.0)
    overall_authenticity_score: float | None = Field(default=None, ge=0.0, le=1.0)
    word_count: int | None = None
    ready_for_stage2: bool


class ViralityAssessment(_FrozenModel):
    is_viral_worthy: bool = False
    reason: str = "Analysis completed but response format was unexpected. Please try again."
    confidence: float = Field(0.5, ge=0.0, le=1.0)
    category: str = "Other"
    sentiment: str = "Neutral"


class NewsArticle(_FrozenModel):
    """One record returned by the news-search collaborator."""

    title: str = ""
    description: str | None = None
    content: str | None = None
    url: str = ""
    published_at: datetime | None = None
    source: str = ""


class SearchTerms(_FrozenModel):
    headline: str
    keywords: str
    entities: str
    broad_query: str


# Relatability -----------------------------------------------------------


class RSSVerification(_FrozenModel):
    found: bool
    score: int = Field(..., ge=0, le=100)
    match_count: int = 0
    details: str = ""


class LocationCheck(_FrozenModel):
    score: int = Field(..., ge=0, le=100)
    details: str
    extracted_locations: tuple[str, ...] = ()


class TimestampCheck(_FrozenModel):
    score: int = Field(..., ge=0, le=100)
    details: str
    extracted_dates: tuple[str, ...] = ()
    consistency: bool = False


class EventCheck(_FrozenModel):
    score: int = Field(..., ge=0, le=100)
    details: str
    event_context: str
    plausibility: int = Field(..., ge=0, le=100)


class RelatabilityCompartment(_FrozenModel):
    rss_verification: RSSVerification
    location: LocationCheck
    timestamp: TimestampCheck
    event: EventCheck

    @computed_field  # type: ignore[prop-decorator]
    @property
    def overall_score(self) -> int:
        return mean_score(
            [self.rss_verification.score, self.location.score, self.timestamp.score, self.event.score]
        )


# Legitimacy -------------------------------------------------------------


class MatchingArticle(_FrozenModel):
    title: str
    url: str = ""
    similarity: float = Field(0.0, ge=0.0, le=100.0)


class OutletVerification(_FrozenModel):
    found: bool = False
    similarity: float = Field(0.0, ge=0.0, le=100.0)
    matching_articles: tuple[MatchingArticle, ...] = ()


class CrossReference(_FrozenModel):
    score: int
    details: str


class LegitimacyCompartment(_FrozenModel):
    bbc: OutletVerification = OutletVerification()
    cnn: OutletVerification = OutletVerification()
    abc: OutletVerification = OutletVerification()
    guardian: OutletVerification = OutletVerification()
    trusted_source: bool = False

    def outlet(self, key: str) -> OutletVerification:
        if key not in OUTLET_KEYS:
            raise KeyError(key)
        return getattr(self, key)

    def _found(self) -> dict[str, bool]:
        return {key: self.outlet(key).found for key in OUTLET_KEYS}

    @computed_field  # type: ignore[prop-decorator]
    @property
    def cross_reference(self) -> CrossReference:
        found = self._found()
        return CrossReference(
            score=cross_reference_score(found, trusted_source=self.trusted_source),
            details=cross_reference_details(found, trusted_source=self.trusted_source),
        )

    @computed_field  # type: ignore[prop-decorator]
    @property
    def overall_score(self) -> int:
        similarities = {key: self.outlet(key).similarity for key in OUTLET_KEYS}
        return legitimacy_score(
            similarities,
            self._found(),
            cross_reference=self.cross_reference.score,
            trusted_source=self.trusted_source,
        )


# Trustworthiness --------------------------------------------------------


class LanguageAnalysis(_FrozenModel):
    bias: int = Field(..., ge=0, le=100)
    emotional_tone: EmotionalTone

    @computed_field  # type: ignore[prop-decorator]
    @property
    def credibility_score(self) -> int:
        return 100 - self.bias


class FactualConsistency(_FrozenModel):
    inconsistencies: tuple[str, ...] = ()

    @computed_field  # type: ignore[prop-decorator]
    @property
    def score(self) -> int:
        return factual_consistency_score(len(self.inconsistencies))


class SourceCredibility(_FrozenModel):
    score: int = Field(..., ge=0, le=100)
    reputation: str


class TrustworthinessCompartment(_FrozenModel):
    language_analysis: LanguageAnalysis
    factual_consistency: FactualConsistency
    source_credibility: SourceCredibility

    @computed_field  # type: ignore[prop-decorator]
    @property
    def overall_score(self) -> int:
        return mean_score(
            [
                self.language_analysis.credibility_score,
                self.factual_consistency.score,
                self.source_credibility.score,
            ]
        )


class NewsVerificationResult(_FrozenModel):
    relatability: RelatabilityCompartment
    legitimacy: LegitimacyCompartment
    trustworthiness: TrustworthinessCompartment
    overall_assessment: str | None = None

    @computed_field  # type: ignore[prop-decorator]
    @property
    def overall_score(self) -> int:
        return weighted_overall(
            self.relatability.overall_score,
            self.legitimacy.overall_score,
            self.trustworthiness.overall_score,
            DEFAULT_WEIGHTS,
        )

    @computed_field  # type: ignore[prop-decorator]
    @property
    def overall_verdict(self) -> Verdict:
        return derive_verdict(self.overall_score)


class AnalysisReport(_FrozenModel):
    stage1: Stage1Decision
    stage2: NewsVerificationResult | None = None


# LLM payload ------------------------------------------------------------


class _LenientModel(BaseModel):
    """Untyped LLM JSON: a malformed field falls back to its default."""

    @field_validator("*", mode="wrap")
    @classmethod
    def _default_on_error(cls, value: Any, handler: ValidatorFunctionWrapHandler, info: ValidationInfo) -> Any:
        try:
            return handler(value)
        except ValidationError:
            return cls.model_fields[info.field_name].get_default(call_default_factory=True)


class AIArticle(_LenientModel):
    title: str = "Related Article"
    similarity: float = 0.0
    url: str = ""

    @field_validator("similarity", mode="before")
    @classmethod
    def _clamp_similarity(cls, value: Any) -> float:
        return _clamp_percent(value)


def _clamp_percent(value: Any) -> float:
    if isinstance(value, bool) or value is None:
        return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    return max(0.0, min(100.0, number))


def _string_list(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    return [
        str(item).strip()
        for item in value
        if isinstance(item, (str, int, float)) and not isinstance(item, bool) and str(item).strip()
    ]


class AIVerification(_LenientModel):
    """Verification fields parsed from the LLM answer.

    Each field falls back to its default when missing or malformed, and
    each article entry does the same per field, so one bad value never
    fails the whole request.
    """

    model_config = ConfigDict(populate_by_name=True)

    bbc_verified: bool = Field(False, alias="bbcVerified")
    bbc_similarity: float = Field(0.0, alias="bbcSimilarity")
    bbc_articles: list[AIArticle] = Field(default_factory=list, alias="bbcArticles")
    cnn_verified: bool = Field(False, alias="cnnVerified")
    cnn_similarity: float = Field(0.0, alias="cnnSimilarity")
    cnn_articles: list[AIArticle] = Field(default_factory=list, alias="cnnArticles")
    abc_verified: bool = Field(False, alias="abcVerified")
    abc_similarity: float = Field(0.0, alias="abcSimilarity")
    abc_articles: list[AIArticle] = Field(default_factory=list, alias="abcArticles")
    guardian_verified: bool = Field(False, alias="guardianVerified")
    guardian_similarity: float = Field(0.0, alias="guardianSimilarity")
    guardian_articles: list[AIArticle] = Field(default_factory=list, alias="guardianArticles")
    legitimacy_score: float = Field(0.0, alias="legitimacyScore")
    topics: list[str] = Field(default_factory=list)
    locations: list[str] = Field(default_factory=list)
    dates: list[str] = Field(default_factory=list)
    credibility_indicators: list[str] = Field(default_factory=list, alias="credibilityIndicators")
    red_flags: list[str] = Field(default_factory=list, alias="redFlags")
    overall_assessment: str = Field("", alias="overallAssessment")

    @field_validator(
        "bbc_similarity",
        "cnn_similarity",
        "abc_similarity",
        "guardian_similarity",
        "legitimacy_score",
        mode="before",
    )
    @classmethod
    def _percent(cls, value: Any) -> float:
        return _clamp_percent(value)

    @field_validator(
        "topics", "locations", "dates", "credibility_indicators", "red_flags", mode="before"
    )
    @classmethod
    def _strings(cls, value: Any) -> list[str]:
        return _string_list(value)

    @field_validator(
        "bbc_articles", "cnn_articles", "abc_articles", "guardian_articles", mode="before"
    )
    @classmethod
    def _articles(cls, value: Any) -> list[Any]:
        if not isinstance(value, list):
            return []
        return [item for item in value if isinstance(item, dict)]

    def outlet(self, key: str) -> tuple[bool, float, list[AIArticle]]:
        return (
            getattr(self, f"{key}_verified"),
            getattr(self, f"{key}_similarity"),
            getattr(self, f"{key}_articles"),
        )
