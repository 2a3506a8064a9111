"""In-memory stand-in for the property-data provider.

Returns deterministic provider payloads so the HTTP layer and tests can run
without provider credentials. Payloads are raw camelCase dictionaries passed
through the same mappers a live client would use.
"""

from __future__ import annotations

import zlib
from datetime import date, timedelta
from typing import Any, Dict, Iterable, List, Optional

from ..errors import PropertyDataError
from ..models.property import AVMResponse, MarketStatistics, MatchedAddress, PropertyAttributes, SaleRecord
from ..utils.logging import get_logger
from .mappers import map_avm, map_market_stats, map_matched_address, map_property_attributes, map_sales_history

LOGGER = get_logger("db.mock_provider")

_CITIES = [
    ("Auckland Central", "Auckland", "1010"),
    ("Wellington Central", "Wellington", "6011"),
    ("Christchurch Central", "Christchurch", "8011"),
]

# (street, type, bedrooms, bathrooms, land, floor, year, price)
_COMPARABLE_TEMPLATES = [
    ("12 Kauri Street", "house", 3, 2, 640, 175, 2004, 965000),
    ("48 Rimu Road", "house", 3, 1, 700, 160, 1998, 910000),
    ("7 Totara Avenue", "house", 4, 2, 720, 210, 2008, 1120000),
    ("3/19 Matai Lane", "townhouse", 3, 2, 250, 150, 2012, 845000),
    ("101 Nikau Crescent", "house", 2, 1, 480, 110, 1975, 720000),
    ("15 Pohutukawa Drive", "house", 3, 2, None, 182, None, 990000),
    ("2B Harbour View", "apartment", 2, 2, None, 95, 2016, 680000),
]


def _location_for(property_id: str):
    return _CITIES[zlib.crc32(property_id.encode("utf-8")) % len(_CITIES)]


class MockPropertyProvider:
    def __init__(self, fail_ids: Optional[Iterable[str]] = None, today: Optional[date] = None) -> None:
        self.fail_ids = set(fail_ids or [])
        self.today = today or date.today()
        self.calls: Dict[str, int] = {}

    def _record_call(self, name: str, key: str) -> None:
        LOGGER.debug("mock_provider_call endpoint=%s key=%s", name, key)
        self.calls[name] = self.calls.get(name, 0) + 1
        if key in self.fail_ids:
            raise PropertyDataError(f"Provider lookup failed for {key}", key)

    # ------------------------------------------------------------------
    # Address matching
    def suggest_addresses(self, query: str) -> List[MatchedAddress]:
        suggestions = []
        for index, (suburb, city, postcode) in enumerate(_CITIES):
            suggestions.append(
                map_matched_address(
                    {
                        "propertyId": f"prop{index + 1}00",
                        "address": query,
                        "fullAddress": f"{query}, {suburb}, {city} {postcode}",
                        "addressComponents": {"suburb": suburb, "city": city, "postcode": postcode},
                        "confidence": round(0.95 - index * 0.1, 2),
                    }
                )
            )
        return suggestions

    async def match_address(self, address: str, suburb: Optional[str] = None, city: Optional[str] = None) -> MatchedAddress:
        property_id = f"prop{zlib.crc32(address.lower().encode('utf-8')) % 1000000:06d}"
        self._record_call("match_address", property_id)
        default_suburb, default_city, postcode = _location_for(property_id)
        return map_matched_address(
            {
                "propertyId": property_id,
                "address": address,
                "fullAddress": f"{address}, {suburb or default_suburb}, {city or default_city}",
                "addressComponents": {
                    "suburb": suburb or default_suburb,
                    "city": city or default_city,
                    "postcode": postcode,
                },
                "confidence": 0.95,
            }
        )

    # ------------------------------------------------------------------
    # Property records
    async def get_property_attributes(self, property_id: str) -> PropertyAttributes:
        self._record_call("property_attributes", property_id)
        return map_property_attributes(
            {
                "propertyId": property_id,
                "propertyType": "house",
                "landUse": "residential",
                "bedrooms": 3,
                "bathrooms": 2,
                "landSize": 650,
                "floorArea": 180,
                "yearBuilt": 2005,
                "carSpaces": 2,
                "features": ["Garage", "Garden", "Renovated Kitchen"],
                "zoning": "residential",
            }
        )

    async def get_sales_history(self, property_id: str) -> List[SaleRecord]:
        self._record_call("sales_history", property_id)
        suburb, city, _ = _location_for(property_id)
        rows: List[Dict[str, Any]] = []
        for index, (street, ptype, beds, baths, land, floor, year, price) in enumerate(_COMPARABLE_TEMPLATES):
            sold = self.today - timedelta(days=90 * (index + 1))
            rows.append(
                {
                    "saleId": f"{property_id}-sale{index + 1}",
                    "propertyId": f"{property_id}-comp{index + 1}",
                    "date": sold.isoformat(),
                    "price": price,
                    "saleType": "normal",
                    "address": street,
                    "suburb": suburb,
                    "city": city,
                    "propertyType": ptype,
                    "bedrooms": beds,
                    "bathrooms": baths,
                    "landSize": land,
                    "floorArea": floor,
                    "yearBuilt": year,
                }
            )
        return map_sales_history(rows)

    async def get_avm(self, property_id: str) -> AVMResponse:
        self._record_call("avm", property_id)
        return map_avm(
            {
                "propertyId": property_id,
                "valuationDate": self.today.isoformat(),
                "valuationLow": 920000,
                "valuationHigh": 980000,
                "valuationEstimate": 950000,
                "confidenceScore": 0.85,
                "methodology": "comparative",
            }
        )

    async def get_market_statistics(self, params: Dict[str, str]) -> MarketStatistics:
        key = f"{params.get('suburb', '')}|{params.get('city', '')}"
        self._record_call("market_statistics", key)
        return map_market_stats(
            {
                "medianPrice": 980000,
                "meanPrice": 1050000,
                "pricePerSqm": 7500,
                "annualGrowth": 5.2,
                "quarterlyGrowth": 1.2,
                "salesVolume": 45,
                "daysOnMarket": 28,
                "listingCount": 120,
                "medianRent": 750,
            }
        )


__all__ = ["MockPropertyProvider"]
