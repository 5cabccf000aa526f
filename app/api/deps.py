"""
Shared request dependencies
"""

from typing import Optional, Type, TypeVar

import httpx
from fastapi import Depends, HTTPException, Request, UploadFile, status
from pydantic import BaseModel, ValidationError
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.db import get_db
from app.services.location_service import AutocompleteSessions
from app.services.moderation_service import ModerationService
from app.services.poster_service import PosterService, PosterUpload
from app.services.poster_storage import PosterStorage, get_poster_storage
from app.services.repositories import EventStore, get_event_store
from app.utils.responses import validation_error

ModelT = TypeVar("ModelT", bound=BaseModel)


def get_store(db: Session = Depends(get_db)) -> EventStore:
    return get_event_store(db)


def get_storage() -> PosterStorage:
    return get_poster_storage()


def get_http_client(request: Request) -> httpx.AsyncClient:
    """The shared client opened in the application lifespan"""
    return request.app.state.http_client


def get_autocomplete_sessions(request: Request) -> AutocompleteSessions:
    return request.app.state.autocomplete_sessions


def get_moderation_service(
    store: EventStore = Depends(get_store),
    storage: PosterStorage = Depends(get_storage),
    http_client: httpx.AsyncClient = Depends(get_http_client),
) -> ModerationService:
    return ModerationService(store, PosterService(storage), http_client)


def parse_form_model(model: Type[ModelT], raw: str) -> ModelT:
    """Validate a JSON form field against ``model``"""
    try:
        return model.model_validate_json(raw or "{}")
    except ValidationError as e:
        fields = [".".join(str(part) for part in err["loc"]) or "event" for err in e.errors()]
        raise validation_error("Invalid event payload", fields)


async def read_poster(poster: Optional[UploadFile]) -> Optional[PosterUpload]:
    """Read an optional uploaded poster, enforcing the upload size limit"""
    if poster is None or not poster.filename:
        return None

    content = await poster.read()
    if len(content) > settings.MAX_UPLOAD_SIZE:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail="Poster file is too large"
        )
    if not content:
        return None

    return PosterUpload(
        filename=poster.filename,
        content=content,
        content_type=poster.content_type or "application/octet-stream",
    )
