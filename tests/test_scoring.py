from datetime import date

from appraisal_hub.models.property import PropertyAttributes, SaleRecord
from appraisal_hub.services.scoring import score_breakdown, similarity_score


def _house(**overrides) -> PropertyAttributes:
    fields = dict(property_type="house", bedrooms=3, bathrooms=2, land_size=500, floor_area=200, year_built=2000)
    fields.update(overrides)
    return PropertyAttributes(**fields)


def test_near_identical_sale_scores_high():
    sale = SaleRecord(
        property_type="house",
        bedrooms=3,
        bathrooms=2,
        land_size=520,
        floor_area=195,
        year_built=2003,
        price=950000,
        sale_date=date(2024, 2, 15),
    )
    score = similarity_score(_house(), sale)
    assert score >= 85
    assert score <= 100


def test_identical_attributes_score_full_marks():
    assert similarity_score(_house(), _house()) == 100


def test_score_is_clamped_to_zero():
    candidate = _house(property_type="apartment", bedrooms=23, bathrooms=9, land_size=5000, floor_area=40, year_built=1890)
    assert similarity_score(_house(), candidate) == 0


def test_penalties_accumulate_per_factor():
    candidate = _house(property_type="apartment", bedrooms=5, bathrooms=1, land_size=600, floor_area=230, year_built=2012)
    result = score_breakdown(_house(), candidate)
    penalties = {f.name: f.penalty for f in result.factors}
    assert penalties == {
        "property_type": 20,
        "bedrooms": 10,
        "bathrooms": 5,
        "land_size": 10,
        "floor_area": 5,
        "year_built": 10,
    }
    assert result.score == 40
    assert result.confidence_penalty == 0


def test_area_and_age_tiers():
    assert similarity_score(_house(), _house(land_size=520)) == 100
    assert similarity_score(_house(), _house(land_size=530)) == 95
    assert score_breakdown(_house(), _house(land_size=530)).factors[3].penalty == 5
    assert similarity_score(_house(), _house(land_size=700)) == 85
    assert similarity_score(_house(), _house(year_built=2005)) == 100
    assert similarity_score(_house(), _house(year_built=2021)) == 85


def test_missing_subject_field_does_not_move_score():
    subject = _house(land_size=None)
    small = _house(land_size=100)
    huge = _house(land_size=5000)
    assert similarity_score(subject, small) == similarity_score(subject, huge) == 100


def test_missing_candidate_field_is_skipped_not_penalised():
    candidate = SaleRecord(property_type="house", bedrooms=3, bathrooms=2)
    result = score_breakdown(_house(), candidate)
    assert result.factors_considered == 3
    assert result.score == 100


def test_confidence_penalty_when_few_factors():
    sparse = SaleRecord(property_type="house")
    assert similarity_score(_house(), sparse) == 80
    assert similarity_score(_house(), SaleRecord()) == 70


def test_zero_sized_subject_skips_area_factor():
    result = score_breakdown(_house(land_size=0), _house(land_size=800))
    assert "land_size" not in {f.name for f in result.factors}


def test_property_type_match_ignores_case():
    assert similarity_score(_house(property_type="House"), _house(property_type=" house ")) == 100


def test_zero_bedrooms_is_a_real_value():
    studio = _house(bedrooms=0)
    result = score_breakdown(_house(), studio)
    assert {f.name: f.penalty for f in result.factors}["bedrooms"] == 15


def test_non_finite_values_are_treated_as_missing():
    nan_rooms = SaleRecord(property_type="unit", bedrooms=float("nan"), bathrooms=2, land_size=500, floor_area=200)
    result = score_breakdown(_house(), nan_rooms)
    assert "bedrooms" not in {f.name for f in result.factors}
    assert result.score == 80

    sparse = SaleRecord(property_type="house", land_size=float("inf"))
    assert similarity_score(_house(), sparse) == 80
