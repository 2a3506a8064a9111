import asyncio
from datetime import date

import pytest

from appraisal_hub.db.mock_provider import MockPropertyProvider
from appraisal_hub.models.property import AVMResponse, MarketStatistics, PropertyAttributes, SaleRecord
from appraisal_hub.services.batch_service import batch_assemble, batch_assemble_report, run_batch


class FakeSource:
    """Provider double where every property sold in the same suburb."""

    def __init__(self, failing=(), empty_sales=(), suburb_by_id=None):
        self.failing = set(failing)
        self.empty_sales = set(empty_sales)
        self.suburb_by_id = suburb_by_id or {}
        self.market_calls = []

    async def attributes(self, property_id):
        await asyncio.sleep(0)
        if property_id in self.failing:
            raise RuntimeError(f"attributes unavailable for {property_id}")
        return PropertyAttributes(property_id=property_id, property_type="house", bedrooms=3, bathrooms=2)

    async def sales(self, property_id):
        await asyncio.sleep(0)
        if property_id in self.empty_sales:
            return []
        return [
            SaleRecord(
                sale_id=f"{property_id}-1",
                property_id=property_id,
                sale_date=date(2024, 3, 1),
                price=1000000,
                address=f"{property_id} Main Street",
                suburb=self.suburb_by_id.get(property_id, "Ponsonby"),
                city="Auckland",
                property_type="house",
                bedrooms=3,
                bathrooms=2,
            )
        ]

    async def avm(self, property_id):
        return AVMResponse(property_id=property_id, valuation_low=900000, valuation_high=1000000)

    async def market_stats(self, params):
        self.market_calls.append((params["suburb"], params["city"]))
        await asyncio.sleep(0.01)
        return MarketStatistics(median_price=1200000, annual_growth=4.1, sales_volume=80, days_on_market=25)


def _run(source, ids):
    return batch_assemble(ids, source.attributes, source.sales, source.avm, source.market_stats)


@pytest.mark.asyncio
async def test_one_failure_does_not_affect_siblings():
    source = FakeSource(failing={"p2"})
    results = await _run(source, ["p1", "p2", "p3"])
    assert set(results) == {"p1", "p2", "p3"}
    assert results["p1"].success and results["p3"].success
    assert results["p2"].success is False
    assert "attributes unavailable for p2" in results["p2"].error


@pytest.mark.asyncio
async def test_market_stats_fetched_once_per_location():
    source = FakeSource(suburb_by_id={"p4": "Grey Lynn"})
    results = await _run(source, ["p1", "p2", "p3", "p4"])
    assert all(r.success for r in results.values())
    assert sorted(source.market_calls) == [("Grey Lynn", "Auckland"), ("Ponsonby", "Auckland")]


@pytest.mark.asyncio
async def test_cache_does_not_outlive_the_batch():
    source = FakeSource()
    await _run(source, ["p1"])
    await _run(source, ["p2"])
    assert len(source.market_calls) == 2


@pytest.mark.asyncio
async def test_property_without_sales_uses_placeholder_location():
    source = FakeSource(empty_sales={"p9"})
    results = await _run(source, ["p9"])
    response = results["p9"]
    assert response.success
    assert response.data.property_details.address == "Property p9"
    assert response.data.property_details.suburb == "Unknown"
    assert response.data.comparable_properties == []
    assert source.market_calls == [("Unknown", "Unknown")]


@pytest.mark.asyncio
async def test_failed_market_fetch_is_isolated_to_its_location():
    source = FakeSource(suburb_by_id={"p2": "Broken"})
    original = source.market_stats

    async def flaky(params):
        if params["suburb"] == "Broken":
            raise ConnectionError("market service down")
        return await original(params)

    results = await batch_assemble(["p1", "p2"], source.attributes, source.sales, source.avm, flaky)
    assert results["p1"].success
    assert results["p2"].error == "Error processing property: market service down"


@pytest.mark.asyncio
async def test_report_counts_and_duplicate_ids():
    source = FakeSource(failing={"p2"})
    report = await batch_assemble_report(
        ["p1", "p2", "p1"], source.attributes, source.sales, source.avm, source.market_stats
    )
    assert list(report.results) == ["p1", "p2"]
    assert report.success_count == 1
    assert report.error_count == 1
    assert report.failed_ids == ["p2"]
    assert set(report.durations_ms) == {"p1", "p2"}
    assert report.market_stats_fetches == 1


@pytest.mark.asyncio
async def test_mock_provider_batch():
    provider = MockPropertyProvider(fail_ids={"missing"}, today=date(2025, 6, 30))
    results = await batch_assemble(
        ["prop1", "missing"],
        provider.get_property_attributes,
        provider.get_sales_history,
        provider.get_avm,
        provider.get_market_statistics,
    )
    assert results["missing"].success is False
    comps = results["prop1"].data.comparable_properties
    assert len(comps) == 5
    assert comps[0].similarity_score == 100


def test_run_batch_accepts_plain_callables():
    def attributes(property_id):
        return PropertyAttributes(property_id=property_id, property_type="unit")

    results = run_batch(
        ["u1"],
        attributes,
        lambda property_id: [],
        lambda property_id: None,
        lambda params: MarketStatistics(median_price=650000),
    )
    assert results["u1"].success
    assert results["u1"].data.market_trends.median_price == 650000


@pytest.mark.asyncio
async def test_max_concurrent_caps_in_flight_properties():
    source = FakeSource()
    in_flight = []
    peak = []

    async def slow_attributes(property_id):
        in_flight.append(property_id)
        peak.append(len(in_flight))
        await asyncio.sleep(0.01)
        in_flight.remove(property_id)
        return await source.attributes(property_id)

    ids = [f"p{i}" for i in range(7)]
    results = await batch_assemble(
        ids, slow_attributes, source.sales, source.avm, source.market_stats, max_concurrent=2
    )
    assert all(r.success for r in results.values())
    assert max(peak) == 2


@pytest.mark.asyncio
async def test_max_concurrent_must_be_positive():
    source = FakeSource()
    with pytest.raises(ValueError):
        await batch_assemble(["p1"], source.attributes, source.sales, source.avm, source.market_stats, max_concurrent=0)
