from __future__ import annotations

import math
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Literal

Verdict = Literal["VERIFIED", "SUSPICIOUS", "NEEDS_REVIEW", "FAKE"]

OUTLET_KEYS: tuple[str, ...] = ("bbc", "cnn", "abc", "guardian")

NO_MATCH_LEGITIMACY = 20


def round_half_up(value: float) -> int:
    """Round to the nearest integer with .5 going up (Python's round() is banker's)."""
    return int(math.floor(value + 0.5))


def mean_score(values: Sequence[float]) -> int:
    if not values:
        return 0
    return round_half_up(sum(values) / len(values))


@dataclass(frozen=True)
class CompartmentWeights:
    relatability: float = 0.35
    legitimacy: float = 0.50
    trustworthiness: float = 0.15

    def as_dict(self) -> dict[str, float]:
        total = self.relatability + self.legitimacy + self.trustworthiness
        if total <= 0:
            raise ValueError("CompartmentWeights sum must be positive")
        return {
            "relatability": self.relatability / total,
            "legitimacy": self.legitimacy / total,
            "trustworthiness": self.trustworthiness / total,
        }


DEFAULT_WEIGHTS = CompartmentWeights()


@dataclass(frozen=True)
class VerdictThresholds:
    verified: int = 75
    suspicious: int = 50
    needs_review: int = 25


DEFAULT_THRESHOLDS = VerdictThresholds()


def weighted_overall(
    relatability: float,
    legitimacy: float,
    trustworthiness: float,
    weights: CompartmentWeights = DEFAULT_WEIGHTS,
) -> int:
    weight_map = weights.as_dict()
    total = (
        relatability * weight_map["relatability"]
        + legitimacy * weight_map["legitimacy"]
        + trustworthiness * weight_map["trustworthiness"]
    )
    return round_half_up(total)


def derive_verdict(score: float, thresholds: VerdictThresholds = DEFAULT_THRESHOLDS) -> Verdict:
    if score >= thresholds.verified:
        return "VERIFIED"
    if score >= thresholds.suspicious:
        return "SUSPICIOUS"
    if score >= thresholds.needs_review:
        return "NEEDS_REVIEW"
    return "FAKE"


def cross_reference_score(found: Mapping[str, bool], *, trusted_source: bool) -> int:
    """Tiered corroboration score over the four reference outlets."""
    bbc = found.get("bbc", False)
    cnn = found.get("cnn", False)
    abc = found.get("abc", False)
    guardian = found.get("guardian", False)
    any_found = bbc or cnn or abc or guardian
    if bbc and cnn and abc and guardian:
        return 98
    if bbc and cnn and (abc or guardian):
        return 95
    if bbc and cnn:
        return 92
    if trusted_source and any_found:
        return 90
    if any_found:
        return 85
    return NO_MATCH_LEGITIMACY


def cross_reference_details(found: Mapping[str, bool], *, trusted_source: bool) -> str:
    any_found = any(found.get(key, False) for key in OUTLET_KEYS)
    if found.get("bbc") and found.get("cnn") and (found.get("abc") or found.get("guardian")):
        return "Content corroborated by multiple authoritative news sources."
    if trusted_source and any_found:
        return "Content verified by a trusted authoritative news source."
    if any_found:
        return "Content matches patterns found in major news outlets."
    return "No verification found in major news databases."


def legitimacy_score(
    similarities: Mapping[str, float],
    found: Mapping[str, bool],
    *,
    cross_reference: int,
    trusted_source: bool,
) -> int:
    matched = [float(similarities.get(key, 0)) for key in OUTLET_KEYS if found.get(key, False)]
    found_count = len(matched)
    if trusted_source and found_count > 0:
        return round_half_up((sum(matched) + cross_reference) / (found_count + 1))
    if found_count >= 2:
        return round_half_up((sum(matched) / found_count) * 0.7 + cross_reference * 0.3)
    if found_count == 1:
        return round_half_up(matched[0] * 0.6 + cross_reference * 0.4)
    return NO_MATCH_LEGITIMACY


def factual_consistency_score(inconsistency_count: int) -> int:
    if inconsistency_count <= 0:
        return 85
    return max(20, 85 - inconsistency_count * 15)
