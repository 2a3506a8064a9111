"""Map raw provider payloads (camelCase dictionaries) onto the provider models.

Only the fields the models declare are read; anything else the provider sends
is dropped here.
"""

from typing import Any, Dict, List, Optional

from ..models.property import (
    AVMResponse,
    MarketStatistics,
    MatchedAddress,
    PropertyAttributes,
    SaleRecord,
)
from ..utils.coerce import to_date, to_float, to_int, to_optional_str, to_str, to_str_list


def _first(r: Dict[str, Any], *keys: str) -> Any:
    for key in keys:
        value = r.get(key)
        if value is not None:
            return value
    return None


def _non_negative(value: Optional[float]) -> Optional[float]:
    if value is None or value < 0:
        return None
    return value


def map_property_attributes(r: Dict[str, Any]) -> PropertyAttributes:
    return PropertyAttributes(
        property_id=to_optional_str(_first(r, "propertyId", "property_id")),
        property_type=to_optional_str(_first(r, "propertyType", "property_type")),
        land_use=to_optional_str(_first(r, "landUse", "land_use")),
        bedrooms=to_float(r.get("bedrooms")),
        bathrooms=to_float(r.get("bathrooms")),
        land_size=to_float(_first(r, "landSize", "land_size")),
        floor_area=to_float(_first(r, "floorArea", "floor_area")),
        year_built=to_int(_first(r, "yearBuilt", "year_built")),
        car_spaces=to_int(_first(r, "carSpaces", "car_spaces")),
        features=to_str_list(r.get("features")),
    )


def map_sale_record(r: Dict[str, Any]) -> SaleRecord:
    return SaleRecord(
        sale_id=to_optional_str(_first(r, "saleId", "sale_id")),
        property_id=to_optional_str(_first(r, "propertyId", "property_id")),
        sale_date=to_date(_first(r, "date", "saleDate", "sale_date")),
        price=_non_negative(to_float(_first(r, "price", "salePrice", "sale_price"))),
        sale_type=to_optional_str(_first(r, "saleType", "sale_type")),
        address=to_optional_str(r.get("address")),
        suburb=to_optional_str(r.get("suburb")),
        city=to_optional_str(r.get("city")),
        property_type=to_optional_str(_first(r, "propertyType", "property_type")),
        bedrooms=to_float(r.get("bedrooms")),
        bathrooms=to_float(r.get("bathrooms")),
        land_size=to_float(_first(r, "landSize", "land_size")),
        floor_area=to_float(_first(r, "floorArea", "floor_area")),
        year_built=to_int(_first(r, "yearBuilt", "year_built")),
    )


def map_sales_history(rows: Optional[List[Dict[str, Any]]]) -> List[SaleRecord]:
    return [map_sale_record(row) for row in rows or []]


def map_avm(r: Dict[str, Any]) -> AVMResponse:
    confidence = to_float(_first(r, "confidenceScore", "confidence_score"))
    if confidence is not None:
        confidence = max(0.0, min(1.0, confidence))
    return AVMResponse(
        property_id=to_optional_str(_first(r, "propertyId", "property_id")),
        valuation_date=to_date(_first(r, "valuationDate", "valuation_date")),
        valuation_low=to_float(_first(r, "valuationLow", "valuation_low")),
        valuation_high=to_float(_first(r, "valuationHigh", "valuation_high")),
        valuation_estimate=to_float(_first(r, "valuationEstimate", "valuation_estimate")),
        confidence_score=confidence,
    )


def map_market_stats(r: Dict[str, Any]) -> MarketStatistics:
    return MarketStatistics(
        median_price=to_float(_first(r, "medianPrice", "median_price")),
        mean_price=to_float(_first(r, "meanPrice", "mean_price")),
        price_per_sqm=to_float(_first(r, "pricePerSqm", "price_per_sqm")),
        annual_growth=to_float(_first(r, "annualGrowth", "annual_growth")),
        quarterly_growth=to_float(_first(r, "quarterlyGrowth", "quarterly_growth")),
        sales_volume=to_int(_first(r, "salesVolume", "sales_volume")),
        days_on_market=to_float(_first(r, "daysOnMarket", "days_on_market")),
        listing_count=to_int(_first(r, "listingCount", "listing_count")),
    )


def map_matched_address(r: Dict[str, Any]) -> MatchedAddress:
    components = r.get("addressComponents") or {}
    return MatchedAddress(
        property_id=to_str(_first(r, "propertyId", "property_id")),
        address=to_str(r.get("address")),
        full_address=to_optional_str(r.get("fullAddress")),
        suburb=to_optional_str(components.get("suburb") or r.get("suburb")),
        city=to_optional_str(components.get("city") or r.get("city")),
        postcode=to_optional_str(components.get("postcode") or r.get("postcode")),
        confidence=to_float(r.get("confidence")),
    )
