"""
Event model
"""

import uuid
from datetime import datetime
from sqlalchemy import Column, Integer, String, Float, DateTime

from app.core.db import Base
from app.schemas.event import SCHEMA_VERSION, EventStatus

def new_event_id() -> str:
    return uuid.uuid4().hex

class Event(Base):
    __tablename__ = "events"

    id = Column(String(32), primary_key=True, default=new_event_id)
    title = Column(String(255), nullable=False, default="")
    category = Column(String(50), nullable=False, default="", index=True)
    start_date = Column(String(10), nullable=False, index=True)  # YYYY-MM-DD
    end_date = Column(String(10), nullable=True)
    start = Column(String(5), nullable=False, default="")  # HH:mm
    end = Column(String(5), nullable=True)
    location = Column(String(255), nullable=False, default="")
    lat = Column(Float, nullable=False, default=0)
    lng = Column(Float, nullable=False, default=0)
    price = Column(String(50), nullable=False, default="")
    organizer = Column(String(255), nullable=True)
    facebook_url = Column(String(500), nullable=True)
    poster_url = Column(String(1000), nullable=True)
    poster_path = Column(String(500), nullable=True)
    resized_poster_path = Column(String(500), nullable=True)
    status = Column(String(20), nullable=False, default=EventStatus.PENDING.value, index=True)
    host_id = Column(String(128), nullable=True, index=True)
    schema_version = Column(Integer, nullable=False, default=SCHEMA_VERSION)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
