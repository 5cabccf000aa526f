"""
Calendar grouping and filtering of approved events
"""

from datetime import date
from typing import Dict, Iterable, List, Optional, Tuple, Union

from app.schemas.event import EventRecord, MonthSection
from app.utils.dates import (
    format_date_range,
    format_month_heading,
    month_number,
    month_year_key,
    parse_local_date_key,
)


def event_date_range(event: EventRecord) -> Tuple[date, date]:
    """Inclusive (start, end) of an event, a missing or inverted end collapses to one day"""
    start = parse_local_date_key(event.start_date)
    if not event.end_date:
        return start, start

    end = parse_local_date_key(event.end_date)
    if end < start:
        return start, start
    return start, end


def _sort_key(event: EventRecord) -> Tuple[str, str, str, str]:
    return (event.start_date, event.start or "", event.title or "", event.id or "")


def group_by_month(events: Iterable[EventRecord]) -> Dict[str, List[EventRecord]]:
    """Group events by the ``YYYY-MM`` of their start date.

    Keys come out in ascending order and each group is sorted by start date,
    start time, title and id, so the result does not depend on input order.
    """
    grouped: Dict[str, List[EventRecord]] = {}
    for event in events:
        grouped.setdefault(month_year_key(event.start_date), []).append(event)

    return {
        key: sorted(grouped[key], key=_sort_key)
        for key in sorted(grouped)
    }


def matches_category(event: EventRecord, category: Optional[str]) -> bool:
    if not category:
        return True
    return event.category == category


def matches_month(event: EventRecord, month: Optional[Union[int, str]]) -> bool:
    if month is None or month == "":
        return True
    wanted = month_number(month)
    if wanted is None:
        return False
    return parse_local_date_key(event.start_date).month == wanted


def matches_date(event: EventRecord, on_date: Optional[date]) -> bool:
    """Closed interval test, multi-day events match on every day they run"""
    if on_date is None:
        return True
    start, end = event_date_range(event)
    return start <= on_date <= end


def filter_events(
    events: Iterable[EventRecord],
    category: Optional[str] = None,
    month: Optional[Union[int, str]] = None,
    on_date: Optional[date] = None,
) -> List[EventRecord]:
    """Keep the events matching every given filter, in input order"""
    return [
        event for event in events
        if matches_category(event, category)
        and matches_month(event, month)
        and matches_date(event, on_date)
    ]


def is_not_ended(event: EventRecord, today: date) -> bool:
    return event_date_range(event)[1] >= today


def event_card(event: EventRecord) -> dict:
    """JSON shape of an event with its display fields"""
    data = event.model_dump(by_alias=True, mode="json")
    data["displayDate"] = format_date_range(event.start_date, event.end_date)
    data["isFree"] = event.is_free
    return data


def build_calendar(
    events: Iterable[EventRecord],
    category: Optional[str] = None,
    month: Optional[Union[int, str]] = None,
    on_date: Optional[date] = None,
    reference_year: Optional[int] = None,
) -> List[MonthSection]:
    """Filter, then group into month sections with headings"""
    filtered = filter_events(events, category=category, month=month, on_date=on_date)
    return [
        MonthSection(
            key=key,
            heading=format_month_heading(key, reference_year),
            events=group,
        )
        for key, group in group_by_month(filtered).items()
    ]
