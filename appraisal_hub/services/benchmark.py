"""Timing harness for the comparable transformer on synthetic sales histories."""

from __future__ import annotations

import time
from datetime import date, timedelta
from typing import List, Sequence

import pandas as pd

from ..models.property import PropertyAttributes, SaleRecord
from ..utils.logging import get_logger
from .comps_service import transform_comparables

LOGGER = get_logger("services.benchmark")

_TYPES = ("House", "Apartment", "Townhouse")


def generate_sales_history(count: int, start: date = date(2023, 1, 1)) -> List[SaleRecord]:
    return [
        SaleRecord(
            sale_id=f"SALE-{i}",
            property_id=f"PROP-{i}",
            sale_date=start - timedelta(days=i),
            price=1_000_000 + i * 10_000,
            sale_type="Sale",
            address=f"{i} Test Street",
            suburb="Test Suburb",
            city="Test City",
            property_type=_TYPES[i % 3],
            bedrooms=2 + i % 4,
            bathrooms=1 + i % 3,
            land_size=500 + i * 20,
            floor_area=200 + i * 10,
        )
        for i in range(count)
    ]


def measure(subject: PropertyAttributes, sizes: Sequence[int], iterations: int = 10) -> pd.DataFrame:
    """Average wall time of ``transform_comparables`` per dataset size."""

    if iterations < 1:
        raise ValueError("iterations must be positive")
    rows = []
    for size in sizes:
        sales = generate_sales_history(size)
        total = 0.0
        for _ in range(iterations):
            started = time.perf_counter()
            transform_comparables(subject, sales)
            total += time.perf_counter() - started
        avg_ms = total / iterations * 1000
        rows.append({"size": size, "avg_ms": avg_ms, "per_item_ms": avg_ms / size if size else 0.0})
        LOGGER.info("benchmark size=%s avg_ms=%.3f", size, avg_ms)
    return pd.DataFrame(rows, columns=["size", "avg_ms", "per_item_ms"])


__all__ = ["generate_sales_history", "measure"]
