import logging

import pytest

from modules.validation import filter_valid, validate_place
from schemas.place_record import PlaceRecord

GOOD = {
    "id": "bahia-palace",
    "name": "Bahia Palace",
    "lat": 31.6216,
    "lng": -7.9831,
    "visit_min_minutes": 45,
    "visit_max_minutes": 90,
    "cost_min": 70,
    "cost_max": 100,
    "tourist_trap_level": "Mixed",
    "best_time_windows": ("morning", "afternoon"),
}


def test_valid_place():
    result = validate_place(GOOD)
    assert result.valid
    assert result.errors == []
    assert bool(result)


def test_place_without_coordinates_is_valid():
    result = validate_place({**GOOD, "lat": None, "lng": None})
    assert result.valid


@pytest.mark.parametrize("override, fragment", [
    ({"name": "  "}, "name must not be empty"),
    ({"id": ""}, "id must not be empty"),
    ({"lng": None}, "both present or both absent"),
    ({"lat": 95.0}, "outside valid range [-90, 90]"),
    ({"lat": 0.0, "lng": 0.0}, "likely a missing/default value"),
    ({"visit_min_minutes": 120}, "visit_min=120 is greater than visit_max=90"),
    ({"cost_min": -5}, "cost_min=-5 must be >= 0"),
    ({"tourist_trap_level": "extreme"}, "tourist_trap_level"),
    ({"best_time_windows": ("dawn",)}, "not a known time window"),
])
def test_invalid_place(override, fragment):
    result = validate_place({**GOOD, **override})
    assert not result.valid
    assert any(fragment in e for e in result.errors)


def test_filter_valid_logs_rejections(make_place, caplog):
    places = [
        make_place("ok", lat=31.62, lng=-7.98),
        make_place("half-located", lat=31.62),
        make_place("also-ok"),
    ]
    with caplog.at_level(logging.WARNING):
        kept = filter_valid(places)
    assert [p.id for p in kept] == ["ok", "also-ok"]
    assert "half-located" in caplog.text


def test_place_record_from_content_json():
    record = PlaceRecord.model_validate({
        "id": "cafe-clock",
        "name": "Café Clock",
        "regionId": "kasbah",
        "category": "cafe",
        "lat": 31.6180,
        "lng": -7.9880,
        "hoursWeekly": ["daily 09:00-22:00"],
        "hoursVerifiedAt": "2025-11-02",
        "touristTrapLevel": "low",
        "visitMinMinutes": 30,
        "visitMaxMinutes": 60,
        "expectedCostMinMad": 40,
        "expectedCostMaxMad": 90,
        "bestTimeWindows": ["lunch"],
        "tags": ["lunch", "local"],
    })
    place = record.to_place()

    assert place.region_id == "kasbah"
    assert place.hours_weekly == ("daily 09:00-22:00",)
    assert place.cost_min == 40 and place.cost_max == 90
    assert place.best_time_windows == ("lunch",)
    assert place.tags == ("lunch", "local")
    assert validate_place(place.__dict__).valid


def test_place_record_accepts_field_names():
    place = PlaceRecord(id="x", name="X", region_id="medina", visit_min_minutes=20).to_place()
    assert place.region_id == "medina"
    assert place.visit_min_minutes == 20
