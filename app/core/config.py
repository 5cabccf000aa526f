"""
Configuration settings for the application
"""

import os
from typing import List
from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    """Application settings"""

    # Database
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./culture_calendar.db")
    USE_FIREBASE: bool = os.getenv("USE_FIREBASE", "false").lower() in ("1", "true", "yes")
    FIREBASE_CREDENTIALS_JSON: str | None = os.getenv("FIREBASE_CREDENTIALS_JSON")
    FIREBASE_CREDENTIALS_FILE: str | None = os.getenv("FIREBASE_CREDENTIALS_FILE")
    FIREBASE_CREDENTIALS_B64: str | None = os.getenv("FIREBASE_CREDENTIALS_B64")
    FIREBASE_STORAGE_BUCKET: str | None = os.getenv("FIREBASE_STORAGE_BUCKET")

    # Security
    ADMIN_TOKEN: str = os.getenv("ADMIN_TOKEN", "admin_token_123")
    ADMIN_EMAILS: List[str] = []

    # Application
    BASE_URL: str = os.getenv("BASE_URL", "http://localhost:8000")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # CORS
    ALLOW_ORIGINS: List[str] = [
        "http://localhost:3000",
        "http://localhost:5173",
        "http://localhost:8000",
    ]

    # Posters
    UPLOAD_DIR: str = os.getenv("UPLOAD_DIR", "uploads")
    MAX_UPLOAD_SIZE: int = 10 * 1024 * 1024  # 10MB
    POSTER_MAX_SIZE_MB: float = 1.0
    POSTER_MAX_DIMENSION: int = 1920
    POSTER_QUALITY: float = 0.8
    RESIZED_POSTER_WIDTH: int = 750
    RESIZED_POSTER_HEIGHT: int = 1080
    RESIZED_POSTER_SUFFIX: str = "_750x1080.webp"

    # External services
    HTTP_TIMEOUT: float = 10.0
    FB_RESOLVER_ENDPOINT: str = os.getenv("FB_RESOLVER_ENDPOINT", "")
    FB_SHORT_LINK_MARKERS: List[str] = ["fb.me"]
    MAPY_API_KEY: str = os.getenv("MAPY_API_KEY", "")
    MAPY_SUGGEST_URL: str = "https://api.mapy.cz/v1/suggest"
    # Louny and surroundings
    MAPY_LOCALITY: str = (
        "BOX(13.630415205275739,50.282424449893824,13.992872427758783,50.429883984497934),"
        "BOX(13.495423078291793,50.21301448055726,14.175776259835118,50.489831390583106)"
    )
    MAPY_PREFER_BBOX: str = "13.495423078291793,50.21301448055726,14.175776259835118,50.489831390583106"

    # Rate limiting
    RATE_LIMIT_PER_MINUTE: int = 30

    class Config:
        env_file = ".env"

settings = Settings()
