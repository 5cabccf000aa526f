"""
Tests for submission validation
"""

import pytest

from app.core.exceptions import EventValidationError
from app.schemas.event import EventCreate
from app.services.validation import ensure_valid, is_valid_time, validate_event_fields


def valid_fields(**overrides):
    data = {
        "title": "Jarmark",
        "category": "Slavnosti",
        "start_date": "2025-06-10",
        "end_date": "2025-06-12",
        "start": "10:00",
        "end": "18:00",
        "location": "Mírové náměstí",
        "lat": 50.357,
        "lng": 13.797,
        "price": "0",
        "facebook_url": "https://www.facebook.com/events/123/",
    }
    data.update(overrides)
    return EventCreate(**data)


def test_complete_event_is_valid():
    assert validate_event_fields(valid_fields()) == []


def test_optional_fields_may_be_empty():
    event = valid_fields(end_date=None, end=None, start="", category="", facebook_url=None, price="")
    assert validate_event_fields(event) == []


@pytest.mark.parametrize("overrides, field", [
    ({"title": "   "}, "title"),
    ({"location": ""}, "location"),
    ({"lat": 0}, "location_unresolved"),
    ({"lng": 0}, "location_unresolved"),
    ({"start_date": ""}, "start_date"),
    ({"start_date": "2025-02-30"}, "start_date"),
    ({"start_date": "10.06.2025"}, "start_date"),
    ({"end_date": "2025-06-09"}, "end_date"),
    ({"end_date": "tomorrow"}, "end_date"),
    ({"start": "25:00"}, "start"),
    ({"end": "9:00"}, "end"),
    ({"end": "10:00"}, "end"),
    ({"category": "Opera"}, "category"),
    ({"facebook_url": "not a link"}, "facebook_url"),
])
def test_invalid_field_is_reported(overrides, field):
    assert field in validate_event_fields(valid_fields(**overrides))


def test_all_problems_reported_together():
    errors = validate_event_fields(EventCreate())
    assert errors == ["title", "location", "start_date"]


def test_single_day_range_is_valid():
    assert validate_event_fields(valid_fields(end_date="2025-06-10")) == []


def test_is_valid_time():
    assert is_valid_time("00:00")
    assert is_valid_time("23:59")
    assert not is_valid_time("24:00")
    assert not is_valid_time("")
    assert not is_valid_time(None)


def test_ensure_valid_raises_with_field_names():
    with pytest.raises(EventValidationError) as exc_info:
        ensure_valid(valid_fields(title="", lat=0))
    assert exc_info.value.fields == ["title", "location_unresolved"]
