"""
Domain exceptions raised by the service layer and mapped to HTTP responses in the routers
"""

from typing import List


class CalendarError(Exception):
    """Base class for calendar errors"""


class EventValidationError(CalendarError):
    """Raised before any network call when required fields are missing or invalid"""

    def __init__(self, fields: List[str]):
        self.fields = fields
        super().__init__("Invalid or missing fields: " + ", ".join(fields))


class EventNotFoundError(CalendarError):
    def __init__(self, event_id: str):
        self.event_id = event_id
        super().__init__(f"Event {event_id} not found")


class PermissionDeniedError(CalendarError):
    """Raised when a host touches an event they did not submit"""


class PersistenceError(CalendarError):
    """Wraps a failed write or delete against the event store or poster storage"""


class PosterProcessingError(CalendarError):
    """Raised when an uploaded poster cannot be decoded or compressed"""
