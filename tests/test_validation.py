from appraisal_hub.services.validation import (
    validate_comparable_properties,
    validate_market_trends,
    validate_property_details,
    validate_response,
)


def _payload(**data_overrides):
    data = {
        "propertyDetails": {
            "address": "123 Test Street",
            "suburb": "Test Suburb",
            "city": "Test City",
            "propertyType": "House",
            "bedrooms": 3,
            "landSize": 500,
        },
        "comparableProperties": [
            {
                "address": "12 Kauri Street",
                "suburb": "Test Suburb",
                "city": "Test City",
                "propertyType": "House",
                "saleDate": "2024-02-15",
                "salePrice": 950000,
                "similarityScore": 92,
            }
        ],
        "marketTrends": {"medianPrice": 1100000, "annualGrowth": 5.2, "salesVolume": 120, "daysOnMarket": 30},
    }
    data.update(data_overrides)
    return {"success": True, "data": data}


def test_valid_payload_has_no_violations():
    assert validate_response(_payload()) == []


def test_failed_response_is_reported():
    assert validate_response({"success": False, "error": "boom"}) == ["Response is not successful"]


def test_property_details_type_checks():
    payload = _payload()
    payload["data"]["propertyDetails"].update({"bedrooms": "three", "propertyType": "Castle"})
    errors = validate_property_details(payload)
    assert "Bedrooms should be a number" in errors
    assert "Invalid property type: Castle" in errors


def test_comparable_date_format_and_score_bounds():
    payload = _payload()
    payload["data"]["comparableProperties"][0].update({"saleDate": "15/02/2024", "similarityScore": 140})
    errors = validate_comparable_properties(payload)
    assert "Comparable property 0 has invalid sale date format: 15/02/2024" in errors
    assert "Comparable property 0 has invalid similarity score: 140" in errors


def test_comparable_missing_fields():
    payload = _payload(comparableProperties=[{"similarityScore": 60}])
    errors = validate_comparable_properties(payload)
    assert errors == [
        "Comparable property 0 is missing address",
        "Comparable property 0 is missing sale price",
        "Comparable property 0 is missing sale date",
    ]


def test_market_trends_required_fields():
    payload = _payload(marketTrends={"annualGrowth": "5%"})
    errors = validate_market_trends(payload)
    assert errors == ["Median price is missing", "Annual growth should be a number"]


def test_non_object_entries_are_reported_not_raised():
    payload = _payload(comparableProperties=[None, {"similarityScore": 60}], propertyDetails="oops", marketTrends=[1])
    assert validate_comparable_properties(payload)[0] == "Comparable property 0 should be an object"
    assert "Comparable property 1 is missing address" in validate_comparable_properties(payload)
    assert validate_property_details(payload) == ["Property details should be an object"]
    assert validate_market_trends(payload) == ["Market trends should be an object"]


def test_non_object_data_is_reported():
    assert validate_response({"success": True, "data": "oops"}) == ["Response data should be an object"] * 3


def test_unknown_property_type_is_accepted():
    payload = _payload()
    payload["data"]["propertyDetails"]["propertyType"] = "Unknown"
    assert validate_property_details(payload) == []
