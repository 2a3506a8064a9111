"""Pydantic schemas for the property data responses handed to the application."""

from __future__ import annotations

from datetime import date
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel


class ApiModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_api(self) -> Dict[str, Any]:
        """Serialise with the camelCase keys the portals expect."""
        return self.model_dump(by_alias=True, mode="json")


class PropertyDetails(ApiModel):
    address: str
    suburb: str
    city: str
    postcode: Optional[str] = None
    property_type: str
    bedrooms: Optional[float] = None
    bathrooms: Optional[float] = None
    land_size: Optional[float] = None
    floor_area: Optional[float] = None
    year_built: Optional[int] = None
    features: List[str] = Field(default_factory=list)
    image_url: Optional[str] = None


class ComparableProperty(ApiModel):
    address: str = Field(..., min_length=1)
    suburb: str
    city: str
    property_type: str
    bedrooms: Optional[float] = None
    bathrooms: Optional[float] = None
    land_size: Optional[float] = None
    floor_area: Optional[float] = None
    year_built: Optional[int] = None
    sale_date: Optional[date] = None
    sale_price: float = 0.0
    similarity_score: int = Field(..., ge=0, le=100)
    image_url: Optional[str] = None


class MarketTrends(ApiModel):
    median_price: float = 0.0
    annual_growth: float = 0.0
    sales_volume: int = 0
    days_on_market: float = 0.0


class ValuationRange(ApiModel):
    valuation_low: float = 0.0
    valuation_high: float = 0.0
    valuation_confidence: float = 0.0


class PropertyData(ApiModel):
    property_details: PropertyDetails
    comparable_properties: List[ComparableProperty]
    market_trends: MarketTrends


class PropertyDataResponse(ApiModel):
    success: bool
    data: Optional[PropertyData] = None
    error: Optional[str] = None

    @model_validator(mode="after")
    def _exactly_one_outcome(self) -> "PropertyDataResponse":
        if self.success:
            if self.data is None or self.error is not None:
                raise ValueError("successful response requires data and no error")
        elif self.data is not None or not self.error:
            raise ValueError("failed response requires a non-empty error and no data")
        return self

    @classmethod
    def ok(cls, data: PropertyData) -> "PropertyDataResponse":
        return cls(success=True, data=data)

    @classmethod
    def fail(cls, message: str) -> "PropertyDataResponse":
        return cls(success=False, error=message or "Unknown error")

    def to_api(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, mode="json", exclude_none=True)
