"""Assemble provider records into the unified property data response."""

from __future__ import annotations

from typing import Optional, Sequence

from ..errors import MissingInputError
from ..models.property import AddressDetails, AVMResponse, MarketStatistics, PropertyAttributes, SaleRecord
from ..models.response import MarketTrends, PropertyData, PropertyDataResponse, PropertyDetails, ValuationRange
from ..utils.logging import get_logger
from .comps_service import DEFAULT_LIMIT, DEFAULT_MIN_SCORE, UNKNOWN_TYPE, transform_comparables

LOGGER = get_logger("services.assembler")

ERROR_CONTEXT = "Failed to process property data"
INVALID_REQUEST_CONTEXT = "Invalid property data request"


def transform_property_details(
    property_id: str,
    attributes: PropertyAttributes,
    address: AddressDetails,
) -> PropertyDetails:
    if attributes is None:
        raise MissingInputError("Property attributes are required", property_id)
    if address is None or not address.address or not address.suburb or not address.city:
        raise MissingInputError("Address, suburb and city are required for property details", property_id)

    return PropertyDetails(
        address=address.address,
        suburb=address.suburb,
        city=address.city,
        postcode=address.postcode,
        property_type=attributes.property_type or UNKNOWN_TYPE,
        bedrooms=attributes.bedrooms,
        bathrooms=attributes.bathrooms,
        land_size=attributes.land_size,
        floor_area=attributes.floor_area,
        year_built=attributes.year_built,
        features=list(attributes.features),
    )


def transform_market_trends(stats: MarketStatistics) -> MarketTrends:
    """Copy suburb statistics into the trends view.

    ``annual_growth`` is already a percentage from the provider and is copied
    as is.
    """

    if stats is None:
        raise MissingInputError("Market statistics are required")
    return MarketTrends(
        median_price=stats.median_price or 0.0,
        annual_growth=stats.annual_growth or 0.0,
        sales_volume=stats.sales_volume or 0,
        days_on_market=stats.days_on_market or 0.0,
    )


def transform_valuation_range(avm: AVMResponse) -> ValuationRange:
    if avm is None:
        raise MissingInputError("AVM data is required for valuation range")
    return ValuationRange(
        valuation_low=avm.valuation_low or 0.0,
        valuation_high=avm.valuation_high or 0.0,
        valuation_confidence=avm.confidence_score or 0.0,
    )


def create_property_data_response(
    property_id: str,
    attributes: PropertyAttributes,
    address: AddressDetails,
    sales_history: Optional[Sequence[SaleRecord]],
    avm: Optional[AVMResponse],
    market_stats: MarketStatistics,
    limit: int = DEFAULT_LIMIT,
    min_score: int = DEFAULT_MIN_SCORE,
) -> PropertyDataResponse:
    """Build the response envelope for one property. Never raises.

    ``avm`` is accepted so callers can pass the full provider bundle, but the
    valuation range is produced separately by ``transform_valuation_range``.
    """

    try:
        if not property_id:
            raise MissingInputError("Property ID is required")
        if attributes is None:
            raise MissingInputError("Property attributes are required", property_id)
        if address is None or not address.address:
            raise MissingInputError("Address details are required", property_id)

        details = transform_property_details(property_id, attributes, address)
        comps = transform_comparables(attributes, sales_history or [], limit=limit, min_score=min_score)
        trends = transform_market_trends(market_stats)
        return PropertyDataResponse.ok(
            PropertyData(property_details=details, comparable_properties=comps, market_trends=trends)
        )
    except MissingInputError as exc:
        LOGGER.warning("property_request_invalid property_id=%s error=%s", property_id, exc)
        return PropertyDataResponse.fail(f"{INVALID_REQUEST_CONTEXT}: {exc}")
    except Exception as exc:
        LOGGER.error("property_response_failed property_id=%s error=%s", property_id, exc)
        return PropertyDataResponse.fail(f"{ERROR_CONTEXT}: {exc}")


__all__ = [
    "create_property_data_response",
    "transform_market_trends",
    "transform_property_details",
    "transform_valuation_range",
]
