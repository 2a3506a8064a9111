"""Pydantic models for records received from the property-data provider."""

from __future__ import annotations

from datetime import date
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class ProviderModel(BaseModel):
    # Provider fields we do not model are dropped, never passed through.
    model_config = ConfigDict(extra="ignore", frozen=True)


class PropertyAttributes(ProviderModel):
    property_id: Optional[str] = None
    property_type: Optional[str] = None
    land_use: Optional[str] = None
    bedrooms: Optional[float] = None
    bathrooms: Optional[float] = None
    land_size: Optional[float] = None
    floor_area: Optional[float] = None
    year_built: Optional[int] = None
    car_spaces: Optional[int] = None
    features: List[str] = Field(default_factory=list)


class SaleRecord(ProviderModel):
    sale_id: Optional[str] = None
    property_id: Optional[str] = None
    sale_date: Optional[date] = None
    price: Optional[float] = Field(default=None, ge=0)
    sale_type: Optional[str] = None
    address: Optional[str] = None
    suburb: Optional[str] = None
    city: Optional[str] = None
    # Attribute snapshot the provider sometimes embeds in the sale itself.
    property_type: Optional[str] = None
    bedrooms: Optional[float] = None
    bathrooms: Optional[float] = None
    land_size: Optional[float] = None
    floor_area: Optional[float] = None
    year_built: Optional[int] = None


class AddressDetails(ProviderModel):
    address: str
    suburb: Optional[str] = None
    city: Optional[str] = None
    postcode: Optional[str] = None


class AVMResponse(ProviderModel):
    property_id: Optional[str] = None
    valuation_date: Optional[date] = None
    valuation_low: Optional[float] = None
    valuation_high: Optional[float] = None
    valuation_estimate: Optional[float] = None
    confidence_score: Optional[float] = Field(default=None, ge=0, le=1)


class MarketStatistics(ProviderModel):
    median_price: Optional[float] = None
    mean_price: Optional[float] = None
    price_per_sqm: Optional[float] = None
    annual_growth: Optional[float] = None
    quarterly_growth: Optional[float] = None
    sales_volume: Optional[int] = None
    days_on_market: Optional[float] = None
    listing_count: Optional[int] = None


class MatchedAddress(ProviderModel):
    property_id: str
    address: str
    full_address: Optional[str] = None
    suburb: Optional[str] = None
    city: Optional[str] = None
    postcode: Optional[str] = None
    confidence: Optional[float] = None

    def to_address_details(self) -> AddressDetails:
        return AddressDetails(address=self.address, suburb=self.suburb, city=self.city, postcode=self.postcode)
