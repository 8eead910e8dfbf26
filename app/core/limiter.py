# File: app/core/limiter.py

from fastapi import Request
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

from app.core.config import settings

# Keyed by client IP. Storage is in-process unless a redis:// URI is given.
limiter = Limiter(
    key_func=get_remote_address,
    storage_uri=settings.rate_limit_storage_uri,
    default_limits=[settings.rate_limit_default],
    enabled=settings.rate_limit_enabled,
)

LOGIN_LIMIT = settings.rate_limit_login
EMAIL_LIMIT = settings.rate_limit_email


async def custom_rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded):
    """
    Custom exception handler for rate-limited requests to return a JSON response.
    """
    return JSONResponse(
        status_code=429,
        content={
            "success": False,
            "message": "Too many requests, please try again later",
            "errors": [f"Rate limit exceeded ({exc.detail})"],
        },
    )
