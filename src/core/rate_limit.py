"""Rate limiting configuration using slowapi."""

from fastapi import Request
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

from core.config import settings
from core.exceptions import ErrorCode

limiter = Limiter(
    key_func=get_remote_address,
    enabled=settings.rate_limit_enabled,
)

# Per-route limits, e.g. "30/minute"
READ_LIMIT = settings.rate_limit_read
WRITE_LIMIT = settings.rate_limit_write
AUTH_LIMIT = settings.rate_limit_auth


async def rate_limit_exceeded_handler(request: Request, exc: Exception) -> JSONResponse:
    """Return the standard error body with a Retry-After hint."""
    limit = exc.limit.limit if isinstance(exc, RateLimitExceeded) else None
    retry_after = limit.get_expiry() if limit is not None else 60
    return JSONResponse(
        status_code=429,
        headers={"Retry-After": str(retry_after)},
        content={
            "error_code": ErrorCode.RATE_LIMIT_EXCEEDED.value,
            "message": "Too many requests, please slow down",
            "details": {
                "limit": str(limit) if limit is not None else None,
                "request_id": getattr(request.state, "request_id", None),
            },
        },
    )
