"""Fetch and assemble property responses for many properties at once."""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from ..models.property import AddressDetails, MarketStatistics, PropertyAttributes, SaleRecord
from ..models.response import PropertyDataResponse
from ..utils.caching import RequestScopedCache, call_fetcher
from ..utils.logging import get_logger
from .assembler import create_property_data_response
from .comps_service import DEFAULT_LIMIT, UNKNOWN_LOCATION

LOGGER = get_logger("services.batch")

# Callbacks may be coroutine functions or plain callables.
FetchById = Callable[[str], Any]
FetchMarketStats = Callable[[Dict[str, str]], Any]


@dataclass
class BatchReport:
    results: Dict[str, PropertyDataResponse]
    durations_ms: Dict[str, float] = field(default_factory=dict)
    market_stats_fetches: int = 0

    @property
    def success_count(self) -> int:
        return sum(1 for r in self.results.values() if r.success)

    @property
    def error_count(self) -> int:
        return len(self.results) - self.success_count

    @property
    def failed_ids(self) -> List[str]:
        return [pid for pid, r in self.results.items() if not r.success]


def location_from_sales(sales: Sequence[SaleRecord]) -> Tuple[str, str]:
    first = sales[0] if sales else None
    suburb = (first.suburb if first else None) or UNKNOWN_LOCATION
    city = (first.city if first else None) or UNKNOWN_LOCATION
    return suburb, city


def address_from_sales(property_id: str, sales: Sequence[SaleRecord]) -> AddressDetails:
    suburb, city = location_from_sales(sales)
    first = sales[0] if sales else None
    return AddressDetails(
        address=(first.address if first else None) or f"Property {property_id}",
        suburb=suburb,
        city=city,
    )


async def batch_assemble_report(
    property_ids: Sequence[str],
    fetch_attributes: FetchById,
    fetch_sales: FetchById,
    fetch_avm: FetchById,
    fetch_market_stats: FetchMarketStats,
    limit: int = DEFAULT_LIMIT,
    max_concurrent: Optional[int] = None,
) -> BatchReport:
    """Assemble every id concurrently, at most ``max_concurrent`` at a time when given."""

    if max_concurrent is not None and max_concurrent < 1:
        raise ValueError(f"max_concurrent must be at least 1, got {max_concurrent}")
    ids = list(dict.fromkeys(property_ids))
    gate = asyncio.Semaphore(max_concurrent) if max_concurrent else None
    market_cache: RequestScopedCache[MarketStatistics] = RequestScopedCache()
    durations: Dict[str, float] = {}
    LOGGER.info("batch_started count=%s max_concurrent=%s", len(ids), max_concurrent)

    async def market_stats_for(suburb: str, city: str) -> MarketStatistics:
        params = {"suburb": suburb, "city": city}
        return await market_cache.get_or_fetch(f"{suburb}|{city}", lambda: call_fetcher(fetch_market_stats, params))

    async def process(property_id: str) -> PropertyDataResponse:
        started = time.perf_counter()
        try:
            attributes: PropertyAttributes = await call_fetcher(fetch_attributes, property_id)
            sales, avm = await asyncio.gather(
                call_fetcher(fetch_sales, property_id),
                call_fetcher(fetch_avm, property_id),
            )
            sales = list(sales or [])
            address = address_from_sales(property_id, sales)
            stats = await market_stats_for(address.suburb, address.city)
            return create_property_data_response(property_id, attributes, address, sales, avm, stats, limit=limit)
        except Exception as exc:
            LOGGER.warning("batch_item_failed property_id=%s error=%s", property_id, exc)
            return PropertyDataResponse.fail(f"Error processing property: {exc}")
        finally:
            durations[property_id] = (time.perf_counter() - started) * 1000

    async def bounded(property_id: str) -> PropertyDataResponse:
        if gate is None:
            return await process(property_id)
        async with gate:
            return await process(property_id)

    responses = await asyncio.gather(*(bounded(pid) for pid in ids))
    report = BatchReport(
        results=dict(zip(ids, responses)),
        durations_ms=durations,
        market_stats_fetches=market_cache.misses,
    )
    LOGGER.info(
        "batch_completed count=%s success=%s errors=%s market_fetches=%s",
        len(ids),
        report.success_count,
        report.error_count,
        report.market_stats_fetches,
    )
    return report


async def batch_assemble(
    property_ids: Sequence[str],
    fetch_attributes: FetchById,
    fetch_sales: FetchById,
    fetch_avm: FetchById,
    fetch_market_stats: FetchMarketStats,
    limit: int = DEFAULT_LIMIT,
    max_concurrent: Optional[int] = None,
) -> Dict[str, PropertyDataResponse]:
    """Assemble responses for every id concurrently; one failure never affects another id."""

    report = await batch_assemble_report(
        property_ids,
        fetch_attributes,
        fetch_sales,
        fetch_avm,
        fetch_market_stats,
        limit=limit,
        max_concurrent=max_concurrent,
    )
    return report.results


def run_batch(
    property_ids: Sequence[str],
    fetch_attributes: FetchById,
    fetch_sales: FetchById,
    fetch_avm: FetchById,
    fetch_market_stats: FetchMarketStats,
    limit: int = DEFAULT_LIMIT,
    max_concurrent: Optional[int] = None,
) -> Dict[str, PropertyDataResponse]:
    """Synchronous helper for callers outside an event loop."""

    return asyncio.run(
        batch_assemble(
            property_ids,
            fetch_attributes,
            fetch_sales,
            fetch_avm,
            fetch_market_stats,
            limit=limit,
            max_concurrent=max_concurrent,
        )
    )


__all__ = [
    "BatchReport",
    "address_from_sales",
    "batch_assemble",
    "batch_assemble_report",
    "location_from_sales",
    "run_batch",
]
