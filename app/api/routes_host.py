"""
Host API routes - a signed-in host managing the events they submitted
"""

from typing import Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile

from app.api.deps import get_moderation_service, parse_form_model, read_poster
from app.schemas.event import EventUpdate
from app.services.calendar_service import event_card
from app.services.moderation_service import ModerationService
from app.utils.security import get_current_host_id
from app.utils.responses import success_response

router = APIRouter()

@router.get("/events")
async def list_my_events(
    host_id: str = Depends(get_current_host_id),
    service: ModerationService = Depends(get_moderation_service)
):
    """Pending and approved events of the signed-in host"""
    events = service.list_for_host(host_id)
    return success_response(
        message="Events retrieved",
        data={
            "pending": [event_card(e) for e in events["pending"]],
            "approved": [event_card(e) for e in events["approved"]],
        }
    )

@router.patch("/events/{event_id}")
async def edit_my_event(
    event_id: str,
    changes: str = Form("{}"),
    poster: Optional[UploadFile] = File(None),
    host_id: str = Depends(get_current_host_id),
    service: ModerationService = Depends(get_moderation_service)
):
    """Edit an own event, approved events go back to review"""
    update = parse_form_model(EventUpdate, changes)
    upload = await read_poster(poster)
    record = await service.edit(event_id, update, poster=upload, actor_host_id=host_id)

    return success_response(message="Event updated", data=event_card(record))

@router.delete("/events/{event_id}")
async def delete_my_event(
    event_id: str,
    host_id: str = Depends(get_current_host_id),
    service: ModerationService = Depends(get_moderation_service)
):
    """Delete an own event together with its poster"""
    service.delete(event_id, actor_host_id=host_id)
    return success_response(message="Event deleted", data={"id": event_id})
