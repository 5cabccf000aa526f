"""
Shared fixtures: sqlite-backed event store and in-memory poster storage
"""

import io

import pytest
from PIL import Image
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from app.core.db import Base
from app.schemas.event import EventRecord, EventStatus
from app.services.poster_service import PosterService
from app.services.poster_storage import PosterStorage
from app.services.repositories import SqlEventStore

# Test database setup
SQLALCHEMY_DATABASE_URL = "sqlite:///./test_calendar.db"
engine = create_engine(SQLALCHEMY_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


class MemoryPosterStorage(PosterStorage):
    """Poster storage keeping blobs in a dict"""

    def __init__(self, fail_deletes: bool = False):
        self.blobs = {}
        self.fail_deletes = fail_deletes

    def upload(self, path, data, content_type):
        self.blobs[path] = (data, content_type)
        return f"https://storage.test/v0/b/bucket/o/{path.replace('/', '%2F')}?alt=media"

    def delete(self, path):
        if self.fail_deletes:
            raise RuntimeError("storage unavailable")
        del self.blobs[path]


def make_image(size=(1200, 1600), image_format="PNG", color=(200, 40, 40)) -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", size, color).save(buffer, format=image_format)
    return buffer.getvalue()


def make_event(**overrides) -> EventRecord:
    data = {
        "title": "Koncert na náměstí",
        "category": "Koncert",
        "start_date": "2025-06-10",
        "start": "19:00",
        "location": "Mírové náměstí",
        "lat": 50.357,
        "lng": 13.797,
        "price": "150",
        "status": EventStatus.APPROVED,
    }
    data.update(overrides)
    return EventRecord(**data)


@pytest.fixture
def db_session():
    """Create test database session"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def store(db_session):
    return SqlEventStore(db_session)


@pytest.fixture
def storage():
    return MemoryPosterStorage()


@pytest.fixture
def posters(storage):
    return PosterService(storage)
