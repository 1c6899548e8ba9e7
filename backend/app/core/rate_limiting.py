"""
Rate Limiting & Throttling
Request throttling per client IP.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded
from fastapi import Request
from fastapi.responses import JSONResponse
import logging

from app.core.config import settings

logger = logging.getLogger(__name__)

# Initialize rate limiter
limiter = Limiter(key_func=get_remote_address)


# Rate limit definitions
SEARCH_LIMIT = "120/minute"
SUGGEST_LIMIT = "300/minute"
HOLIDAY_SEARCH_LIMIT = "60/minute"
REINDEX_LIMIT = "5/minute"
HEALTH_LIMIT = "1000/minute"


# Path prefix (after the API prefix) -> endpoint group named in 429 responses
ENDPOINT_GROUPS = (
    ("/search/suggestions", "suggestion"),
    ("/search", "search"),
    ("/ai-search/reindex", "reindex"),
    ("/ai-search", "holiday search"),
    ("/health", "health check"),
)


def endpoint_group(path: str) -> str:
    """Human-readable group for a request path; "API" when nothing matches."""
    if path.startswith(settings.api_prefix):
        path = path[len(settings.api_prefix):]
    for prefix, group in ENDPOINT_GROUPS:
        if path.startswith(prefix):
            return group
    return "API"


async def rate_limit_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """Return 429 JSON naming the throttled endpoint group and its limit."""
    client_host = request.client.host if request.client else "unknown"
    group = endpoint_group(request.url.path)
    logger.warning(f"{group} rate limit ({exc.detail}) exceeded for {client_host}: {request.url.path}")

    return JSONResponse(
        status_code=429,
        content={
            "error": "too_many_requests",
            "message": f"Too many {group} requests. Please slow down.",
            "limit": exc.detail,
            "retry_after": 60,
        },
        headers={"Retry-After": "60"},
    )
