"""
Submission and moderation workflows
"""

import logging
from datetime import date
from typing import Dict, List, Optional

import httpx

from app.core.config import settings
from app.core.exceptions import (
    EventNotFoundError,
    PermissionDeniedError,
    PersistenceError,
    PosterProcessingError,
)
from app.schemas.event import EventCreate, EventRecord, EventStatus, EventUpdate
from app.services.calendar_service import is_not_ended
from app.services.facebook_links import normalize_facebook_url
from app.services.poster_service import PosterService, PosterUpload
from app.services.repositories import EventStore
from app.services.validation import ensure_valid
from app.utils.posters import extract_poster_path

logger = logging.getLogger(__name__)


class ModerationService:
    """Service for submitting, editing, approving and removing events.

    ``actor_host_id`` identifies a signed-in host acting on their own events.
    ``None`` means the administrator, who may act on any event.
    """

    def __init__(
        self,
        store: EventStore,
        posters: PosterService,
        http_client: httpx.AsyncClient,
        resolver_endpoint: str = settings.FB_RESOLVER_ENDPOINT,
    ):
        self.store = store
        self.posters = posters
        self.http_client = http_client
        self.resolver_endpoint = resolver_endpoint

    async def _normalize_link(self, url: Optional[str]) -> Optional[str]:
        if not url:
            return url
        return await normalize_facebook_url(url, self.http_client, self.resolver_endpoint)

    def _attach_poster(self, poster: Optional[PosterUpload]) -> Dict[str, str]:
        if poster is None:
            return {}
        try:
            return self.posters.attach(poster)
        except PosterProcessingError as e:
            logger.warning(f"Poster {poster.filename} skipped: {e}")
            return {}

    def _get_owned(self, event_id: str, actor_host_id: Optional[str]) -> EventRecord:
        record = self.store.get(event_id)
        if record is None:
            raise EventNotFoundError(event_id)
        if actor_host_id is not None and record.host_id != actor_host_id:
            raise PermissionDeniedError(f"Event {event_id} belongs to another host")
        return record

    async def submit(
        self,
        fields: EventCreate,
        poster: Optional[PosterUpload] = None,
        host_id: Optional[str] = None,
    ) -> EventRecord:
        """Validate and store a new pending event"""
        ensure_valid(fields)

        record = EventRecord(**fields.model_dump(), status=EventStatus.PENDING, host_id=host_id)
        updates = {
            "facebook_url": await self._normalize_link(record.facebook_url),
            "end_date": record.end_date or record.start_date,
        }
        updates.update(self._attach_poster(poster))
        record = record.model_copy(update=updates)

        try:
            created = self.store.create(record)
        except PersistenceError:
            self.posters.delete_files(record)
            raise

        logger.info(f"Event submitted: {created.id} '{created.title}'")
        return created

    async def edit(
        self,
        event_id: str,
        changes: EventUpdate,
        poster: Optional[PosterUpload] = None,
        actor_host_id: Optional[str] = None,
    ) -> EventRecord:
        """Apply changes to an event.

        A host editing an already approved event sends it back for review.
        A new poster replaces the previous images once it has been stored.
        """
        existing = self._get_owned(event_id, actor_host_id)

        update = changes.model_dump(exclude_unset=True)

        # A single-day event stays single-day when only its start moves
        if "start_date" in update and "end_date" not in update and existing.end_date in (None, existing.start_date):
            update["end_date"] = update["start_date"]
        if "end_date" in update and not update["end_date"]:
            update["end_date"] = update.get("start_date", existing.start_date)

        merged = EventRecord.model_validate({**existing.model_dump(), **update})
        ensure_valid(merged)

        if "facebook_url" in update:
            update["facebook_url"] = await self._normalize_link(merged.facebook_url)

        poster_fields = self._attach_poster(poster)
        if poster_fields:
            update.update(poster_fields)

        if actor_host_id is not None and existing.status == EventStatus.APPROVED:
            update["status"] = EventStatus.PENDING
            logger.info(f"Event {event_id} edited by its host, back to review")

        try:
            updated = self.store.update(event_id, update)
        except PersistenceError:
            if poster_fields:
                self.posters.delete_files(poster_fields)
            raise
        if updated is None:
            raise EventNotFoundError(event_id)

        if poster_fields and extract_poster_path(existing) != poster_fields["poster_path"]:
            self.posters.delete_files(existing)
        return updated

    def approve(self, event_id: str) -> EventRecord:
        if self.store.get(event_id) is None:
            raise EventNotFoundError(event_id)
        approved = self.store.set_status(event_id, EventStatus.APPROVED)
        if approved is None:
            raise EventNotFoundError(event_id)
        logger.info(f"Event approved: {event_id}")
        return approved

    def delete(self, event_id: str, actor_host_id: Optional[str] = None) -> EventRecord:
        """Remove an event and, best effort, its poster images"""
        existing = self._get_owned(event_id, actor_host_id)
        self.store.delete(event_id)
        self.posters.delete_files(existing)
        logger.info(f"Event deleted: {event_id}")
        return existing

    def reject(self, event_id: str) -> EventRecord:
        """Rejection is deletion, no rejected state is kept"""
        return self.delete(event_id)

    def list_pending(self) -> List[EventRecord]:
        return self.store.list_pending()

    def list_public(self, today: date) -> List[EventRecord]:
        return self.store.list_approved(not_ended_before=today)

    def list_for_host(self, host_id: str) -> Dict[str, List[EventRecord]]:
        records = self.store.list_by_host(host_id)
        return {
            "pending": [r for r in records if r.status == EventStatus.PENDING],
            "approved": [r for r in records if r.status == EventStatus.APPROVED],
        }

    def purge_expired(self, today: date) -> int:
        """Delete approved events whose last day is before ``today``"""
        expired = [r for r in self.store.list_approved() if not is_not_ended(r, today)]
        for record in expired:
            self.store.delete(record.id)
            self.posters.delete_files(record)
        if expired:
            logger.info(f"Purged {len(expired)} expired events")
        return len(expired)
