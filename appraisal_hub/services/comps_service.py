"""Comparable sales selection logic."""

from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import date
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

import numpy as np

from ..models.property import PropertyAttributes, SaleRecord
from ..models.response import ComparableProperty
from ..utils.logging import get_logger
from .scoring import similarity_score

LOGGER = get_logger("services.comps")

DEFAULT_LIMIT = int(os.getenv("COMPS_LIMIT", "5"))
DEFAULT_MIN_SCORE = int(os.getenv("COMPS_MIN_SCORE", "50"))

UNKNOWN_TYPE = "Unknown"
UNKNOWN_LOCATION = "Unknown"
UNKNOWN_ADDRESS = "Unknown address"


def resolve_comparable_fields(record: SaleRecord, subject: PropertyAttributes) -> Dict[str, object]:
    """Resolve the display fields of a comparable from a sale record.

    Resolution order per field:

    * ``property_type``: record, then subject, then ``"Unknown"``
    * ``bedrooms``, ``bathrooms``: record, then subject
    * ``land_size``, ``floor_area``, ``year_built``, ``sale_date``: record only
    * ``sale_price``: record, then ``0``
    * ``address``: record, then ``"Property {property_id}"``, then ``"Unknown address"``
    * ``suburb``, ``city``: record, then ``"Unknown"``

    Only the room counts and type fall back to the subject; sizes and age are
    left unknown rather than borrowed.
    """

    if record.address:
        address = record.address
    elif record.property_id:
        address = f"Property {record.property_id}"
    else:
        address = UNKNOWN_ADDRESS

    return {
        "address": address,
        "suburb": record.suburb or UNKNOWN_LOCATION,
        "city": record.city or UNKNOWN_LOCATION,
        "property_type": _coalesce(record.property_type, subject.property_type, UNKNOWN_TYPE),
        "bedrooms": _coalesce(record.bedrooms, subject.bedrooms),
        "bathrooms": _coalesce(record.bathrooms, subject.bathrooms),
        "land_size": record.land_size,
        "floor_area": record.floor_area,
        "year_built": record.year_built,
        "sale_date": record.sale_date,
        "sale_price": record.price if record.price is not None else 0.0,
    }


def transform_comparables(
    subject: PropertyAttributes,
    sales: Optional[Sequence[SaleRecord]],
    limit: int = DEFAULT_LIMIT,
    min_score: int = DEFAULT_MIN_SCORE,
) -> List[ComparableProperty]:
    """Score sales against the subject and return the best ``limit`` comparables.

    Sales scoring below ``min_score`` are discarded. Equal scores are ordered
    by sale date, newest first, with undated sales last.
    """

    if not sales:
        return []
    if limit < 1:
        raise ValueError(f"limit must be at least 1, got {limit}")

    scored: List[Tuple[int, SaleRecord]] = []
    for record in sales:
        score = similarity_score(subject, record)
        if score >= min_score:
            scored.append((score, record))

    # Python's sort is stable, so remaining ties keep provider order.
    scored.sort(key=lambda item: (-item[0], _recency_key(item[1].sale_date)))
    LOGGER.debug("comps_scored total=%s kept=%s limit=%s", len(sales), len(scored), limit)

    comps: List[ComparableProperty] = []
    for score, record in scored[:limit]:
        if record.price is None:
            LOGGER.warning("sale_record_missing_price sale_id=%s", record.sale_id)
        comps.append(ComparableProperty(**resolve_comparable_fields(record, subject), similarity_score=score))
    return comps


@dataclass(frozen=True)
class ComparableSummary:
    count: int
    min_price: Optional[float]
    max_price: Optional[float]
    median_price: Optional[float]
    weighted_mean_price: Optional[float]


def summarize_comparables(comps: Iterable[ComparableProperty]) -> ComparableSummary:
    """Price statistics over comparables, weighting the mean by similarity score.

    Comparables without a sale price (recorded as 0) are ignored.
    """

    priced = [c for c in comps if c.sale_price > 0]
    if not priced:
        return ComparableSummary(count=0, min_price=None, max_price=None, median_price=None, weighted_mean_price=None)

    prices = np.array([c.sale_price for c in priced], dtype=float)
    weights = np.array([c.similarity_score for c in priced], dtype=float)
    if weights.sum() > 0:
        weighted = float(np.average(prices, weights=weights))
    else:
        weighted = float(prices.mean())
    return ComparableSummary(
        count=len(priced),
        min_price=float(prices.min()),
        max_price=float(prices.max()),
        median_price=float(np.median(prices)),
        weighted_mean_price=weighted,
    )


class CompsService:
    def __init__(self, limit: int = DEFAULT_LIMIT, min_score: int = DEFAULT_MIN_SCORE) -> None:
        self.limit = limit
        self.min_score = min_score

    def get_ranked_comps(
        self, subject: PropertyAttributes, sales: Optional[Sequence[SaleRecord]], limit: Optional[int] = None
    ) -> List[ComparableProperty]:
        return transform_comparables(subject, sales, limit=self.limit if limit is None else limit, min_score=self.min_score)


def _recency_key(sale_date: Optional[date]) -> Tuple[int, int]:
    if sale_date is None:
        return (1, 0)
    return (0, -sale_date.toordinal())


def _coalesce(*values):
    for val in values:
        if val is not None:
            return val
    return None


__all__ = [
    "ComparableSummary",
    "CompsService",
    "resolve_comparable_fields",
    "summarize_comparables",
    "transform_comparables",
]
