"""
Security utilities and authentication
"""

from fastapi import HTTPException, Depends, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from typing import Optional
import time
from collections import defaultdict

from firebase_admin import auth

from app.core.config import settings
from app.services.firebase_client import get_firebase_app
from app.services.repositories import use_firestore

# Simple in-memory rate limiter
rate_limiter = defaultdict(list)

security = HTTPBearer()
optional_security = HTTPBearer(auto_error=False)

def verify_firebase_token(token: str) -> Optional[dict]:
    """Return the decoded claims of a Firebase ID token, or None if it is not valid"""
    get_firebase_app()
    try:
        return auth.verify_id_token(token)
    except (auth.InvalidIdTokenError, auth.UserDisabledError, auth.CertificateFetchError, ValueError):
        return None

def resolve_host_id(token: str) -> Optional[str]:
    """Map a bearer token to the host's user id.

    With Firebase enabled the token must be a valid ID token. For local
    development without Firebase the token itself is the host id.
    """
    if not token:
        return None
    if not use_firestore():
        return token
    claims = verify_firebase_token(token)
    return claims.get("uid") if claims else None

def verify_admin_token(credentials: HTTPAuthorizationCredentials = Depends(security)):
    """Verify admin authentication token"""
    if credentials.credentials == settings.ADMIN_TOKEN:
        return credentials.credentials

    if use_firestore():
        claims = verify_firebase_token(credentials.credentials)
        if claims and claims.get("email") in settings.ADMIN_EMAILS:
            return credentials.credentials

    raise HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Invalid admin token"
    )

def get_current_host_id(credentials: HTTPAuthorizationCredentials = Depends(security)) -> str:
    """Host id of the signed-in user, required"""
    host_id = resolve_host_id(credentials.credentials)
    if not host_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid host token"
        )
    return host_id

def get_optional_host_id(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(optional_security)
) -> Optional[str]:
    """Host id when a token is sent, None for anonymous submissions"""
    if credentials is None:
        return None
    return get_current_host_id(credentials)

def rate_limit_check(client_ip: str, limit: int = None) -> bool:
    """Simple rate limiting by IP address"""
    if limit is None:
        limit = settings.RATE_LIMIT_PER_MINUTE

    current_time = time.time()
    minute_ago = current_time - 60

    # Forget clients with no request inside the window
    idle = [ip for ip, times in rate_limiter.items() if not times or times[-1] <= minute_ago]
    for ip in idle:
        del rate_limiter[ip]

    # Clean old requests
    rate_limiter[client_ip] = [
        req_time for req_time in rate_limiter[client_ip]
        if req_time > minute_ago
    ]

    # Check limit
    if len(rate_limiter[client_ip]) >= limit:
        return False

    # Add current request
    rate_limiter[client_ip].append(current_time)
    return True

def get_client_ip(request) -> str:
    """Extract client IP from request"""
    # Check for forwarded IP first (for reverse proxy setups)
    forwarded_for = request.headers.get("X-Forwarded-For")
    if forwarded_for:
        return forwarded_for.split(",")[0].strip()

    # Check for real IP header
    real_ip = request.headers.get("X-Real-IP")
    if real_ip:
        return real_ip

    # Fall back to direct client IP
    return request.client.host if request.client else "unknown"
