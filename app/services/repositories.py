"""
Repository layer abstracting storage (SQLAlchemy vs Firebase Firestore).

Every event lives in a single logical collection keyed by a stable id, and its
moderation state is the ``status`` field. Approving an event is an in-place
status update, the id never changes.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Any, Dict, List, Optional

from google.api_core.exceptions import GoogleAPICallError
from pydantic.alias_generators import to_camel
from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.exceptions import PersistenceError
from app.models import Event
from app.schemas.event import EventRecord, EventStatus
from app.services.calendar_service import is_not_ended
from app.services.firebase_client import get_firestore_client
from app.utils.dates import to_local_date_key

EVENTS_COLLECTION = "events"


def use_firestore() -> bool:
    return settings.USE_FIREBASE is True


class EventStore:
    """Interface of the event document store"""

    def list_approved(self, not_ended_before: Optional[date] = None) -> List[EventRecord]:
        raise NotImplementedError

    def list_pending(self) -> List[EventRecord]:
        raise NotImplementedError

    def list_by_host(self, host_id: str) -> List[EventRecord]:
        raise NotImplementedError

    def get(self, event_id: str) -> Optional[EventRecord]:
        raise NotImplementedError

    def create(self, record: EventRecord) -> EventRecord:
        raise NotImplementedError

    def update(self, event_id: str, changes: Dict[str, Any]) -> Optional[EventRecord]:
        raise NotImplementedError

    def delete(self, event_id: str) -> bool:
        raise NotImplementedError

    def set_status(self, event_id: str, status: EventStatus) -> Optional[EventRecord]:
        return self.update(event_id, {"status": status})


# -------- SQLAlchemy store --------

RECORD_COLUMNS = [name for name in EventRecord.model_fields if name in Event.__table__.columns]


def _row_to_record(row: Event) -> EventRecord:
    return EventRecord(**{name: getattr(row, name) for name in RECORD_COLUMNS})


def _column_value(value: Any) -> Any:
    return value.value if isinstance(value, EventStatus) else value


class SqlEventStore(EventStore):
    def __init__(self, db: Session):
        self.db = db

    def _commit(self) -> None:
        try:
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise PersistenceError(str(e)) from e

    def list_approved(self, not_ended_before: Optional[date] = None) -> List[EventRecord]:
        query = self.db.query(Event).filter(Event.status == EventStatus.APPROVED.value)
        if not_ended_before is not None:
            query = query.filter(
                func.coalesce(Event.end_date, Event.start_date) >= to_local_date_key(not_ended_before)
            )
        return [_row_to_record(row) for row in query.order_by(Event.start_date).all()]

    def list_pending(self) -> List[EventRecord]:
        rows = self.db.query(Event).filter(
            Event.status == EventStatus.PENDING.value
        ).order_by(Event.created_at).all()
        return [_row_to_record(row) for row in rows]

    def list_by_host(self, host_id: str) -> List[EventRecord]:
        rows = self.db.query(Event).filter(Event.host_id == host_id).order_by(Event.start_date).all()
        return [_row_to_record(row) for row in rows]

    def get(self, event_id: str) -> Optional[EventRecord]:
        row = self.db.query(Event).filter(Event.id == event_id).first()
        return _row_to_record(row) if row else None

    def create(self, record: EventRecord) -> EventRecord:
        values = {
            name: _column_value(getattr(record, name))
            for name in RECORD_COLUMNS
            if name != "id"
        }
        row = Event(**values)
        self.db.add(row)
        self._commit()
        self.db.refresh(row)
        return _row_to_record(row)

    def update(self, event_id: str, changes: Dict[str, Any]) -> Optional[EventRecord]:
        row = self.db.query(Event).filter(Event.id == event_id).first()
        if not row:
            return None
        for name, value in changes.items():
            if name in RECORD_COLUMNS and name != "id":
                setattr(row, name, _column_value(value))
        row.updated_at = datetime.utcnow()
        self._commit()
        self.db.refresh(row)
        return _row_to_record(row)

    def delete(self, event_id: str) -> bool:
        deleted = self.db.query(Event).filter(Event.id == event_id).delete()
        self._commit()
        return deleted > 0


# -------- Firestore store --------

def _document_to_record(doc) -> EventRecord:
    data = doc.to_dict() or {}
    data["id"] = doc.id
    return EventRecord.model_validate(data)


def _to_document_changes(changes: Dict[str, Any]) -> Dict[str, Any]:
    return {
        to_camel(name): _column_value(value)
        for name, value in changes.items()
        if name != "id"
    }


class FirestoreEventStore(EventStore):
    """Firestore shape: collection ``events/{id}`` with camelCase fields"""

    def __init__(self, client=None):
        self.client = client or get_firestore_client()

    @property
    def collection(self):
        return self.client.collection(EVENTS_COLLECTION)

    def _query(self, field: str, value: Any) -> List[EventRecord]:
        try:
            docs = self.collection.where(field, "==", value).get()
        except GoogleAPICallError as e:
            raise PersistenceError(str(e)) from e
        return [_document_to_record(d) for d in docs]

    def list_approved(self, not_ended_before: Optional[date] = None) -> List[EventRecord]:
        records = self._query("status", EventStatus.APPROVED.value)
        # Firestore cannot compare against a fallback field, so the end date is checked here
        if not_ended_before is not None:
            records = [r for r in records if is_not_ended(r, not_ended_before)]
        return sorted(records, key=lambda r: r.start_date)

    def list_pending(self) -> List[EventRecord]:
        return self._query("status", EventStatus.PENDING.value)

    def list_by_host(self, host_id: str) -> List[EventRecord]:
        return sorted(self._query("hostId", host_id), key=lambda r: r.start_date)

    def get(self, event_id: str) -> Optional[EventRecord]:
        try:
            doc = self.collection.document(event_id).get()
        except GoogleAPICallError as e:
            raise PersistenceError(str(e)) from e
        return _document_to_record(doc) if doc.exists else None

    def create(self, record: EventRecord) -> EventRecord:
        data = record.to_document()
        data["createdAt"] = datetime.utcnow().isoformat()
        try:
            doc_ref = self.collection.document()
            doc_ref.set(data)
        except GoogleAPICallError as e:
            raise PersistenceError(str(e)) from e
        return record.model_copy(update={"id": doc_ref.id})

    def update(self, event_id: str, changes: Dict[str, Any]) -> Optional[EventRecord]:
        doc_ref = self.collection.document(event_id)
        data = _to_document_changes(changes)
        data["updatedAt"] = datetime.utcnow().isoformat()
        try:
            if not doc_ref.get().exists:
                return None
            doc_ref.update(data)
        except GoogleAPICallError as e:
            raise PersistenceError(str(e)) from e
        return self.get(event_id)

    def delete(self, event_id: str) -> bool:
        doc_ref = self.collection.document(event_id)
        try:
            if not doc_ref.get().exists:
                return False
            doc_ref.delete()
        except GoogleAPICallError as e:
            raise PersistenceError(str(e)) from e
        return True


def get_event_store(db: Session) -> EventStore:
    """Pick the configured store for a request"""
    if use_firestore():
        return FirestoreEventStore()
    return SqlEventStore(db)
