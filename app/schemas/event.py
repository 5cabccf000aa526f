"""
Event-related Pydantic schemas
"""

from enum import Enum
from typing import Any, List, Optional

from pydantic import BaseModel, field_validator, model_validator
from pydantic.alias_generators import to_camel

SCHEMA_VERSION = 1


class EventStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    # Never persisted, rejection deletes the record
    REJECTED = "rejected"


class Category(str, Enum):
    CONCERT = "Koncert"
    SPORT = "Sport/Turistika"
    CHILDREN = "Pro děti"
    THEATRE = "Divadlo"
    CINEMA = "Kino"
    EXHIBITION = "Výstavy"
    LECTURE = "Přednášky"
    FESTIVAL = "Slavnosti"
    OTHER = "Ostatní"


CATEGORY_LABELS = {
    "": "Všechny kategorie",
    Category.CONCERT.value: "Koncerty",
    Category.SPORT.value: "Sport/Turistika",
    Category.CHILDREN.value: "Pro děti",
    Category.THEATRE.value: "Divadlo",
    Category.CINEMA.value: "Kino",
    Category.EXHIBITION.value: "Výstavy",
    Category.LECTURE.value: "Přednášky",
    Category.FESTIVAL.value: "Slavnosti",
    Category.OTHER.value: "Ostatní",
}


class CamelModel(BaseModel):
    """Snake case in Python, camelCase in stored documents and JSON payloads"""

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True


class EventFields(CamelModel):
    """Fields a visitor or host fills in"""
    title: str = ""
    category: str = ""
    start_date: str = ""        # YYYY-MM-DD
    end_date: Optional[str] = None
    start: str = ""             # HH:mm
    end: Optional[str] = None
    location: str = ""
    lat: float = 0
    lng: float = 0
    price: str = ""
    organizer: Optional[str] = None
    facebook_url: Optional[str] = None

    @field_validator("price", mode="before")
    @classmethod
    def price_as_text(cls, value: Any) -> str:
        if value is None:
            return ""
        return str(value)

    @field_validator("category", mode="before")
    @classmethod
    def category_as_text(cls, value: Any) -> str:
        if isinstance(value, Category):
            return value.value
        return value or ""


class EventRecord(EventFields):
    """A calendar entry as stored"""
    id: Optional[str] = None
    poster_url: Optional[str] = None
    poster_path: Optional[str] = None
    resized_poster_path: Optional[str] = None
    status: EventStatus = EventStatus.PENDING
    host_id: Optional[str] = None
    schema_version: int = SCHEMA_VERSION

    @model_validator(mode="before")
    @classmethod
    def upgrade_legacy_shape(cls, data: Any) -> Any:
        # Early documents stored a single ``date`` instead of a start/end range
        if isinstance(data, dict) and not data.get("startDate") and not data.get("start_date") and data.get("date"):
            data = {**data, "startDate": data["date"]}
        return data

    @property
    def effective_end_date(self) -> str:
        return self.end_date or self.start_date

    @property
    def is_free(self) -> bool:
        return self.price.strip() in ("", "0")

    @property
    def has_resolved_location(self) -> bool:
        return self.lat != 0 and self.lng != 0

    def to_document(self) -> dict:
        """Stored shape, without the identifier"""
        return self.model_dump(by_alias=True, exclude={"id"}, mode="json")


class EventCreate(EventFields):
    """Schema for submitting an event"""


class EventUpdate(CamelModel):
    """Schema for editing an event, only set fields are applied.

    Only ``end_date``, ``end``, ``organizer`` and ``facebook_url`` may be sent
    as null, which clears them.
    """
    title: Optional[str] = None
    category: Optional[str] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    start: Optional[str] = None
    end: Optional[str] = None
    location: Optional[str] = None
    lat: Optional[float] = None
    lng: Optional[float] = None
    price: Optional[str] = None
    organizer: Optional[str] = None
    facebook_url: Optional[str] = None

    @field_validator("title", "category", "start_date", "start", "location", "lat", "lng", mode="before")
    @classmethod
    def not_null(cls, value: Any) -> Any:
        if value is None:
            raise ValueError("field cannot be cleared")
        return value

    @field_validator("price", mode="before")
    @classmethod
    def price_as_text(cls, value: Any) -> str:
        if value is None:
            raise ValueError("field cannot be cleared")
        return str(value)


class Position(BaseModel):
    lat: float
    lon: float


class LocationSuggestion(BaseModel):
    """One place returned by the suggestion API"""
    name: str = ""
    label: Optional[str] = None
    position: Optional[Position] = None


class MonthSection(BaseModel):
    """Events of one calendar month, ready for rendering"""
    key: str                    # YYYY-MM
    heading: str
    events: List[EventRecord]
