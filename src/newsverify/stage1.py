"""
Stage 1 pre-filter.
Three sequential gates (authenticity, minimum length, preprocessing) that
short-circuit on the first BLOCK.
"""

from __future__ import annotations

import logging

from . import domain_trust
from .analyzers import word_count
from .errors import InputValidationError
from .models import Stage1Decision

logger = logging.getLogger(__name__)

DOMAIN_WEIGHT = 0.6
CONTENT_WEIGHT = 0.4
BASE_CONTENT_SCORE = 0.5
CAPS_PENALTY = 0.2
SHORT_PENALTY = 0.3
CAPS_RATIO_LIMIT = 0.5
MIN_AUTHENTICITY = 0.3
MIN_WORDS = 20
PREFERRED_MIN_WORDS = 50
MAX_WORDS = 10000


def first_line(content: str) -> str:
    return content.split("\n", 1)[0].strip()


def uppercase_ratio(line: str) -> float:
    letters = [char for char in line if char.isalpha()]
    if not letters:
        return 0.0
    return sum(1 for char in letters if char.isupper()) / len(letters)


def content_quality_score(content: str, words: int) -> float:
    score = BASE_CONTENT_SCORE
    if uppercase_ratio(first_line(content)) > CAPS_RATIO_LIMIT:
        score -= CAPS_PENALTY
    if words < PREFERRED_MIN_WORDS:
        score -= SHORT_PENALTY
    return round(max(0.0, score), 3)


def authenticity_score(domain_score: float, content_score: float) -> float:
    combined = DOMAIN_WEIGHT * domain_score + CONTENT_WEIGHT * content_score
    return round(min(1.0, max(0.0, combined)), 3)


def run_stage1(content: str, source_url: str | None = None) -> Stage1Decision:
    """Decide whether an article is worth the full Stage 2 analysis."""
    if content is None or not content.strip():
        raise InputValidationError("News content is required")

    domain = domain_trust.lookup(source_url)
    domain_score = domain.trust_score
    words = word_count(content)
    content_score = content_quality_score(content, words)
    overall = authenticity_score(domain_score, content_score)

    scores = {
        "domain_score": domain_score,
        "domain_status": domain.status,
        "domain_reason": domain.reason,
        "content_score": content_score,
        "overall_authenticity_score": overall,
        "word_count": words,
    }

    if overall < MIN_AUTHENTICITY:
        return _block(f"Low authenticity score ({overall:.2f}) from source and content checks", scores)
    if words < MIN_WORDS:
        return _block(f"Insufficient word count ({words} words, minimum {MIN_WORDS})", scores)
    if words < PREFERRED_MIN_WORDS:
        return _block(f"Article too short ({words} words, minimum {PREFERRED_MIN_WORDS})", scores)
    if words > MAX_WORDS:
        return _block(f"Article too long ({words} words, maximum {MAX_WORDS})", scores)
    if not first_line(content):
        return _block("Missing headline", scores)

    logger.info("Stage 1 PASS: words=%d authenticity=%.3f domain=%s", words, overall, domain.domain or "-")
    return Stage1Decision(
        decision="PASS",
        reason="Article passed authenticity and quality checks",
        ready_for_stage2=True,
        **scores,
    )


def _block(reason: str, scores: dict) -> Stage1Decision:
    logger.info("Stage 1 BLOCK: %s", reason)
    return Stage1Decision(decision="BLOCK", reason=reason, ready_for_stage2=False, **scores)
