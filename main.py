"""
Culture Calendar - FastAPI Backend
Main application entry point
"""

import logging
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import uvicorn

from app.core.config import settings
from app.core.db import engine, Base
from app.core.exceptions import CalendarError
from app.api import routes_admin, routes_host, routes_public
from app.services.location_service import AutocompleteSessions
from app.services.repositories import use_firestore
from app.utils.responses import calendar_error_handler

# Configure logging
logging.basicConfig(level=settings.LOG_LEVEL.upper())
logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan management"""
    if not use_firestore():
        Base.metadata.create_all(bind=engine)
        logger.info("Database tables created")

    app.state.http_client = httpx.AsyncClient(timeout=settings.HTTP_TIMEOUT)
    app.state.autocomplete_sessions = AutocompleteSessions(app.state.http_client)
    yield
    await app.state.http_client.aclose()
    logger.info("Application shutdown")

# Create FastAPI application
app = FastAPI(
    title="Culture Calendar",
    description="Backend for a community event calendar with moderated submissions",
    version="1.0.0",
    lifespan=lifespan
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOW_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_exception_handler(CalendarError, calendar_error_handler)

# Include routers
app.include_router(routes_public.router, tags=["public"])
app.include_router(routes_host.router, prefix="/host", tags=["host"])
app.include_router(routes_admin.router, prefix="/admin", tags=["admin"])

# Note: Run this ASGI app directly with Uvicorn or Hypercorn. For Gunicorn,
# use `uvicorn.workers.UvicornWorker` instead of wrapping the app.

if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host="127.0.0.1",
        port=8000,
        reload=True
    )
