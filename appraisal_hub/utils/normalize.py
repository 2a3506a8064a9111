"""Numeric helpers shared by the similarity scorer and the comparable summary."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Bounds:
    minimum: float
    maximum: float

    def clamp(self, value: float) -> float:
        return max(self.minimum, min(self.maximum, value))


SCORE_BOUNDS = Bounds(0.0, 100.0)


def percent_difference(value: float, reference: float) -> Optional[float]:
    """Absolute difference of ``value`` from ``reference`` as a percentage of the reference.

    Returns ``None`` when the reference is not positive, since a percentage of
    a zero-sized lot or floor plate is meaningless.
    """

    if reference <= 0:
        return None
    return abs(value - reference) / reference * 100


def tiered_penalty(difference: float, tiers: tuple[tuple[float, float], ...]) -> float:
    """Return the penalty of the first tier whose threshold ``difference`` exceeds.

    ``tiers`` is ordered from the largest threshold down, e.g.
    ``((30, 15), (15, 10), (5, 5))``.
    """

    for threshold, penalty in tiers:
        if difference > threshold:
            return penalty
    return 0.0


__all__ = ["Bounds", "SCORE_BOUNDS", "percent_difference", "tiered_penalty"]
