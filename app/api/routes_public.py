"""
Public API routes - no authentication required
"""

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, Request, UploadFile
from fastapi.responses import FileResponse

from app.api.deps import (
    get_autocomplete_sessions,
    get_moderation_service,
    get_store,
    parse_form_model,
    read_poster,
)
from app.schemas.common import CalendarSection, CategoryOption
from app.schemas.event import CATEGORY_LABELS, EventCreate, EventStatus
from app.services.calendar_service import build_calendar, event_card
from app.services.location_service import AutocompleteSessions
from app.services.moderation_service import ModerationService
from app.services.poster_storage import LocalPosterStorage
from app.services.repositories import EventStore, use_firestore
from app.utils.security import rate_limit_check, get_client_ip, get_optional_host_id
from app.utils.responses import success_response, rate_limit_error, not_found_error

router = APIRouter()

@router.get("/health")
async def health_check():
    """Health check endpoint"""
    return {"status": "ok"}

@router.get("/categories")
async def list_categories():
    """Category options for the filter bar and the submission form"""
    return success_response(
        message="Categories retrieved",
        data=[
            CategoryOption(value=value, label=label).model_dump()
            for value, label in CATEGORY_LABELS.items()
        ]
    )

@router.get("/events")
async def get_calendar(
    category: Optional[str] = None,
    month: Optional[str] = None,
    on_date: Optional[date] = None,
    service: ModerationService = Depends(get_moderation_service)
):
    """Approved events that have not ended yet, grouped by month"""
    today = date.today()
    sections = build_calendar(
        service.list_public(today),
        category=category,
        month=month,
        on_date=on_date,
        reference_year=today.year
    )

    return success_response(
        message="Calendar retrieved successfully",
        data=[
            CalendarSection(
                key=section.key,
                heading=section.heading,
                events=[event_card(event) for event in section.events]
            ).model_dump()
            for section in sections
        ]
    )

@router.get("/events/{event_id}")
async def get_event(
    event_id: str,
    store: EventStore = Depends(get_store)
):
    """Detail of a single approved event"""
    record = store.get(event_id)
    if not record or record.status != EventStatus.APPROVED:
        raise not_found_error("Event")

    return success_response(message="Event retrieved", data=event_card(record))

@router.post("/submissions")
async def submit_event(
    request: Request,
    event: str = Form(...),
    poster: Optional[UploadFile] = File(None),
    host_id: Optional[str] = Depends(get_optional_host_id),
    service: ModerationService = Depends(get_moderation_service)
):
    """Submit an event for review. ``event`` is a JSON object, ``poster`` an optional image."""
    client_ip = get_client_ip(request)
    if not rate_limit_check(client_ip):
        raise rate_limit_error()

    fields = parse_form_model(EventCreate, event)
    upload = await read_poster(poster)
    record = await service.submit(fields, poster=upload, host_id=host_id)

    return success_response(
        message="Event submitted for review",
        data=event_card(record),
        status_code=201
    )

@router.get("/locations/suggest")
async def suggest_locations(
    request: Request,
    q: str = "",
    sessions: AutocompleteSessions = Depends(get_autocomplete_sessions)
):
    """Place suggestions for the location field"""
    client_ip = get_client_ip(request)
    if not rate_limit_check(client_ip):
        raise rate_limit_error()

    suggestions = await sessions.for_client(client_ip).suggest(q)
    return success_response(
        message="Suggestions retrieved",
        data=[s.model_dump() for s in suggestions]
    )

@router.get("/storage/o/{key:path}")
async def get_local_poster(key: str):
    """Serve posters kept in local storage"""
    if use_firestore():
        raise not_found_error("Poster")

    try:
        path = LocalPosterStorage().resolve(key)
    except ValueError:
        raise not_found_error("Poster")

    if not path.is_file():
        raise not_found_error("Poster")
    return FileResponse(path)
