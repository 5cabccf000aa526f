"""
Admin API routes - requires authentication
"""

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile

from app.api.deps import get_moderation_service, parse_form_model, read_poster
from app.schemas.event import EventUpdate
from app.services.calendar_service import event_card
from app.services.moderation_service import ModerationService
from app.utils.security import verify_admin_token
from app.utils.responses import success_response

router = APIRouter()

@router.get("/submissions")
async def list_submissions(
    service: ModerationService = Depends(get_moderation_service),
    token: str = Depends(verify_admin_token)
):
    """Pending submissions awaiting review"""
    pending = service.list_pending()
    return success_response(
        message=f"{len(pending)} submissions pending",
        data=[event_card(e) for e in pending]
    )

@router.post("/submissions/{event_id}/approve")
async def approve_submission(
    event_id: str,
    service: ModerationService = Depends(get_moderation_service),
    token: str = Depends(verify_admin_token)
):
    """Publish a submission on the calendar"""
    record = service.approve(event_id)
    return success_response(message="Event approved", data=event_card(record))

@router.post("/submissions/{event_id}/reject")
async def reject_submission(
    event_id: str,
    service: ModerationService = Depends(get_moderation_service),
    token: str = Depends(verify_admin_token)
):
    """Reject a submission, deleting it and its poster"""
    service.reject(event_id)
    return success_response(message="Event rejected", data={"id": event_id})

@router.patch("/events/{event_id}")
async def edit_event(
    event_id: str,
    changes: str = Form("{}"),
    poster: Optional[UploadFile] = File(None),
    service: ModerationService = Depends(get_moderation_service),
    token: str = Depends(verify_admin_token)
):
    """Edit any event, its status is kept"""
    update = parse_form_model(EventUpdate, changes)
    upload = await read_poster(poster)
    record = await service.edit(event_id, update, poster=upload)

    return success_response(message="Event updated", data=event_card(record))

@router.delete("/events/{event_id}")
async def delete_event(
    event_id: str,
    service: ModerationService = Depends(get_moderation_service),
    token: str = Depends(verify_admin_token)
):
    """Delete any event together with its poster"""
    service.delete(event_id)
    return success_response(message="Event deleted", data={"id": event_id})

@router.post("/events/purge-expired")
async def purge_expired_events(
    service: ModerationService = Depends(get_moderation_service),
    token: str = Depends(verify_admin_token)
):
    """Remove approved events that are already over"""
    purged = service.purge_expired(date.today())
    return success_response(
        message=f"{purged} expired events removed",
        data={"purged": purged}
    )
