"""Similarity scoring between a subject property and a candidate comparable.

Scores start at 100 and lose a fixed penalty per mismatching factor. A factor
is only evaluated when both sides carry a finite value; an unknown value on
either side never moves the score. When fewer than ``MIN_CONFIDENT_FACTORS``
factors could be evaluated the score takes an extra confidence penalty, so
sparse records cannot look like perfect matches.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List, Optional, Tuple, Union

from ..models.property import PropertyAttributes, SaleRecord
from ..utils.normalize import SCORE_BOUNDS, percent_difference, tiered_penalty

Candidate = Union[PropertyAttributes, SaleRecord]

MAX_SCORE = 100
MIN_CONFIDENT_FACTORS = 3
CONFIDENCE_PENALTY = 10

PROPERTY_TYPE_PENALTY = 20
BEDROOM_PENALTY = 5
BATHROOM_PENALTY = 5

# (threshold, penalty) pairs, largest threshold first.
AREA_TIERS: Tuple[Tuple[float, float], ...] = ((30, 15), (15, 10), (5, 5))
AGE_TIERS: Tuple[Tuple[float, float], ...] = ((20, 15), (10, 10), (5, 5))


@dataclass(frozen=True)
class FactorPenalty:
    """A single evaluated factor and the points it cost the candidate."""

    name: str
    subject_value: object
    candidate_value: object
    penalty: float


@dataclass(frozen=True)
class SimilarityResult:
    score: int
    factors: List[FactorPenalty]
    confidence_penalty: float

    @property
    def factors_considered(self) -> int:
        return len(self.factors)


def similarity_score(subject: PropertyAttributes, candidate: Candidate) -> int:
    return score_breakdown(subject, candidate).score


def score_breakdown(subject: PropertyAttributes, candidate: Candidate) -> SimilarityResult:
    factors: List[FactorPenalty] = []

    subject_type = _normalise_type(subject.property_type)
    candidate_type = _normalise_type(candidate.property_type)
    if subject_type and candidate_type:
        penalty = 0 if subject_type == candidate_type else PROPERTY_TYPE_PENALTY
        factors.append(FactorPenalty("property_type", subject.property_type, candidate.property_type, penalty))

    for name, unit_penalty in (("bedrooms", BEDROOM_PENALTY), ("bathrooms", BATHROOM_PENALTY)):
        ours, theirs = getattr(subject, name), getattr(candidate, name)
        if _known(ours) and _known(theirs):
            factors.append(FactorPenalty(name, ours, theirs, abs(theirs - ours) * unit_penalty))

    for name in ("land_size", "floor_area"):
        ours, theirs = getattr(subject, name), getattr(candidate, name)
        if not (_known(ours) and _known(theirs)):
            continue
        diff = percent_difference(theirs, ours)
        if diff is None:
            continue
        factors.append(FactorPenalty(name, ours, theirs, tiered_penalty(diff, AREA_TIERS)))

    if _known(subject.year_built) and _known(candidate.year_built):
        gap = abs(candidate.year_built - subject.year_built)
        factors.append(
            FactorPenalty("year_built", subject.year_built, candidate.year_built, tiered_penalty(gap, AGE_TIERS))
        )

    confidence_penalty = 0.0
    if len(factors) < MIN_CONFIDENT_FACTORS:
        confidence_penalty = float((MIN_CONFIDENT_FACTORS - len(factors)) * CONFIDENCE_PENALTY)

    raw = MAX_SCORE - sum(f.penalty for f in factors) - confidence_penalty
    score = int(round(SCORE_BOUNDS.clamp(raw)))
    return SimilarityResult(score=score, factors=factors, confidence_penalty=confidence_penalty)


def _known(value: Optional[float]) -> bool:
    # NaN and infinities count as missing.
    return value is not None and math.isfinite(value)


def _normalise_type(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    cleaned = value.strip().casefold()
    return cleaned or None


__all__ = [
    "FactorPenalty",
    "SimilarityResult",
    "similarity_score",
    "score_breakdown",
]
