"""
Pydantic schemas package
"""

from .common import *
from .event import *

__all__ = [
    "StandardResponse",
    "ErrorResponse",
    "CategoryOption",
    "CalendarSection",
    "EventStatus",
    "Category",
    "CATEGORY_LABELS",
    "EventRecord",
    "EventCreate",
    "EventUpdate",
    "LocationSuggestion",
    "Position",
    "MonthSection",
]
