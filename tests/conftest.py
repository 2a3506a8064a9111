from datetime import date

import pytest

from appraisal_hub.models.property import AddressDetails, AVMResponse, MarketStatistics, PropertyAttributes, SaleRecord


@pytest.fixture
def subject() -> PropertyAttributes:
    return PropertyAttributes(
        property_id="TEST-123",
        property_type="House",
        land_use="Residential",
        bedrooms=3,
        bathrooms=2,
        land_size=500,
        floor_area=200,
        year_built=2000,
        car_spaces=1,
        features=["Pool", "AirConditioning"],
    )


@pytest.fixture
def address() -> AddressDetails:
    return AddressDetails(address="123 Test Street", suburb="Test Suburb", city="Test City", postcode="1234")


@pytest.fixture
def sales_history() -> list:
    return [
        SaleRecord(
            sale_id="SALE-002",
            property_id="TEST-123",
            sale_date=date(2015, 3, 20),
            price=750000,
            sale_type="Sale",
            address="123 Test Street",
            suburb="Test Suburb",
            city="Test City",
        ),
        SaleRecord(
            sale_id="SALE-001",
            property_id="TEST-123",
            sale_date=date(2022, 1, 15),
            price=950000,
            sale_type="Sale",
            address="123 Test Street",
            suburb="Test Suburb",
            city="Test City",
        ),
    ]


@pytest.fixture
def avm() -> AVMResponse:
    return AVMResponse(
        property_id="TEST-123",
        valuation_date=date(2023, 5, 1),
        valuation_low=950000,
        valuation_high=1050000,
        valuation_estimate=1000000,
        confidence_score=0.85,
    )


@pytest.fixture
def market_stats() -> MarketStatistics:
    return MarketStatistics(
        median_price=1100000,
        mean_price=1150000,
        price_per_sqm=5500,
        annual_growth=5.2,
        quarterly_growth=1.3,
        sales_volume=120,
        days_on_market=30,
        listing_count=45,
    )
