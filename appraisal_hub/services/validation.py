"""Advisory shape checks for assembled property data responses.

Each validator returns a list of human readable violations; an empty list
means the response passed. They are diagnostics for tests and tooling, not
gates inside the pipeline.
"""

from __future__ import annotations

import re
from numbers import Real
from typing import Any, Dict, List, Union

from ..models.response import PropertyDataResponse

# "unknown" is what the assembler writes when the provider sends no type.
PROPERTY_TYPES = {"house", "apartment", "townhouse", "unit", "land", "rural", "other", "unknown"}
SALE_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")

ResponseLike = Union[PropertyDataResponse, Dict[str, Any]]

_DETAIL_NUMERICS = {
    "bedrooms": "Bedrooms",
    "bathrooms": "Bathrooms",
    "landSize": "Land size",
    "floorArea": "Floor area",
    "yearBuilt": "Year built",
}


def _as_dict(response: ResponseLike) -> Dict[str, Any]:
    if isinstance(response, PropertyDataResponse):
        return response.to_api()
    return response or {}


def _is_number(value: Any) -> bool:
    return isinstance(value, Real) and not isinstance(value, bool)


def _data_or_error(payload: Dict[str, Any], errors: List[str]) -> Dict[str, Any]:
    if not payload.get("success"):
        errors.append("Response is not successful")
        return {}
    data = payload.get("data")
    if not data:
        errors.append("Response data is missing")
        return {}
    if not isinstance(data, dict):
        errors.append("Response data should be an object")
        return {}
    return data


def validate_property_details(response: ResponseLike) -> List[str]:
    errors: List[str] = []
    data = _data_or_error(_as_dict(response), errors)
    if not data:
        return errors

    details = data.get("propertyDetails")
    if not details:
        errors.append("Property details are missing")
        return errors
    if not isinstance(details, dict):
        errors.append("Property details should be an object")
        return errors

    address = details.get("address")
    if not address:
        errors.append("Property address is missing")
    elif not isinstance(address, str):
        errors.append("Property address should be a string")

    for key, label in _DETAIL_NUMERICS.items():
        value = details.get(key)
        if value is not None and not _is_number(value):
            errors.append(f"{label} should be a number")

    property_type = details.get("propertyType")
    if property_type is not None and str(property_type).strip().lower() not in PROPERTY_TYPES:
        errors.append(f"Invalid property type: {property_type}")
    return errors


def validate_comparable_properties(response: ResponseLike) -> List[str]:
    errors: List[str] = []
    data = _data_or_error(_as_dict(response), errors)
    if not data:
        return errors

    comps = data.get("comparableProperties")
    if not isinstance(comps, list):
        errors.append("Comparable properties should be a list")
        return errors

    for index, comp in enumerate(comps):
        if not isinstance(comp, dict):
            errors.append(f"Comparable property {index} should be an object")
            continue
        if not comp.get("address"):
            errors.append(f"Comparable property {index} is missing address")
        if not comp.get("salePrice"):
            errors.append(f"Comparable property {index} is missing sale price")
        sale_date = comp.get("saleDate")
        if not sale_date:
            errors.append(f"Comparable property {index} is missing sale date")
        elif not SALE_DATE_RE.match(str(sale_date)):
            errors.append(f"Comparable property {index} has invalid sale date format: {sale_date}")

        score = comp.get("similarityScore")
        if score is None or not _is_number(score):
            errors.append(f"Comparable property {index} is missing similarity score")
        elif not 0 <= score <= 100:
            errors.append(f"Comparable property {index} has invalid similarity score: {score}")

        for key, label in _DETAIL_NUMERICS.items():
            value = comp.get(key)
            if value is not None and not _is_number(value):
                errors.append(f"Comparable property {index}: {label} should be a number")
    return errors


def validate_market_trends(response: ResponseLike) -> List[str]:
    errors: List[str] = []
    data = _data_or_error(_as_dict(response), errors)
    if not data:
        return errors

    trends = data.get("marketTrends")
    if not trends:
        errors.append("Market trends are missing")
        return errors
    if not isinstance(trends, dict):
        errors.append("Market trends should be an object")
        return errors

    for key, label in (("medianPrice", "Median price"), ("annualGrowth", "Annual growth")):
        if key not in trends or trends[key] is None:
            errors.append(f"{label} is missing")
        elif not _is_number(trends[key]):
            errors.append(f"{label} should be a number")

    for key, label in (("salesVolume", "Sales volume"), ("daysOnMarket", "Days on market")):
        value = trends.get(key)
        if value is not None and not _is_number(value):
            errors.append(f"{label} should be a number")
    return errors


def validate_response(response: ResponseLike) -> List[str]:
    payload = _as_dict(response)
    if not payload.get("success"):
        return ["Response is not successful"]
    return (
        validate_property_details(payload)
        + validate_comparable_properties(payload)
        + validate_market_trends(payload)
    )


__all__ = [
    "PROPERTY_TYPES",
    "validate_comparable_properties",
    "validate_market_trends",
    "validate_property_details",
    "validate_response",
]
