"""
Submission validation, run before any network call
"""

import re
from typing import List

from pydantic import AnyHttpUrl, TypeAdapter, ValidationError

from app.core.exceptions import EventValidationError
from app.schemas.event import Category, EventFields
from app.utils.dates import is_valid_date_key

TIME_PATTERN = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")
CATEGORY_VALUES = {category.value for category in Category}

_http_url = TypeAdapter(AnyHttpUrl)


def is_valid_time(value: str) -> bool:
    return bool(TIME_PATTERN.match(value or ""))


def is_valid_url(value: str) -> bool:
    try:
        _http_url.validate_python(value)
    except ValidationError:
        return False
    return True


def validate_event_fields(event: EventFields) -> List[str]:
    """Return the names of missing or invalid fields, empty when the event can be saved"""
    errors: List[str] = []

    if not event.title.strip():
        errors.append("title")

    if not event.location.strip():
        errors.append("location")
    elif event.lat == 0 or event.lng == 0:
        errors.append("location_unresolved")

    if not is_valid_date_key(event.start_date):
        errors.append("start_date")

    if event.end_date:
        if not is_valid_date_key(event.end_date):
            errors.append("end_date")
        elif "start_date" not in errors and event.end_date < event.start_date:
            errors.append("end_date")

    if event.start and not is_valid_time(event.start):
        errors.append("start")

    if event.end:
        if not is_valid_time(event.end):
            errors.append("end")
        elif event.start and "start" not in errors and event.end <= event.start:
            errors.append("end")

    if event.category and event.category not in CATEGORY_VALUES:
        errors.append("category")

    if event.facebook_url and event.facebook_url.strip() and not is_valid_url(event.facebook_url.strip()):
        errors.append("facebook_url")

    return errors


def ensure_valid(event: EventFields) -> None:
    errors = validate_event_fields(event)
    if errors:
        raise EventValidationError(errors)
