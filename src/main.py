"""Main FastAPI application entry point."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import ORJSONResponse
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware

from api.exception_handlers import setup_exception_handlers
from api.middleware.logging import RequestLoggingMiddleware
from api.middleware.request_id import RequestIDMiddleware
from api.middleware.security import SecurityHeadersMiddleware
from api.routes.health import API_VERSION
from api.routes.health import router as health_router
from api.v1 import router as v1_router
from core.config import settings
from core.logging import setup_logging
from core.rate_limit import limiter, rate_limit_exceeded_handler
from infrastructure.database.session import engine

logger = structlog.get_logger()

setup_logging()

DESCRIPTION = f"""\
## Study Groups

Students sign up, form interest groups and manage who belongs to them.

### Groups
- **Public** groups admit anyone who joins.
- **Private** groups queue join requests for an admin to approve or reject.
- The first admin is the *primary admin* and is the only one who may demote
  other admins. The *owner* is tracked separately and may hand ownership to
  another member.

### Authentication
Everything except `/health` and signup/login needs a JWT, sent either as
`Authorization: Bearer <token>` or in the `{settings.auth_cookie_name}` cookie
set by `/api/v1/auth/login`.

### Rate Limits
- Reads: {settings.rate_limit_read}
- Writes: {settings.rate_limit_write}
- Signup and login: {settings.rate_limit_auth}
"""

OPENAPI_TAGS = [
    {"name": "health", "description": "Health check endpoints"},
    {"name": "auth", "description": "Signup, login and session operations"},
    {"name": "students", "description": "Student profile operations"},
    {"name": "groups", "description": "Group management, announcements and resources"},
    {"name": "memberships", "description": "Joining, join requests and admin roles"},
]


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Log startup and release pooled connections on shutdown."""
    logger.info("application_started", environment=settings.app_env)
    yield
    await engine.dispose()
    logger.info("application_stopped")


def _add_middleware(app: FastAPI) -> None:
    """Register middleware. Starlette runs the last one added first."""
    app.add_middleware(SlowAPIMiddleware)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(GZipMiddleware, minimum_size=1000)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        lifespan=lifespan,
        default_response_class=ORJSONResponse,
        title=settings.app_name,
        description=DESCRIPTION,
        version=API_VERSION,
        debug=settings.debug,
        openapi_tags=OPENAPI_TAGS,
    )

    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
    _add_middleware(app)
    setup_exception_handlers(app)

    app.include_router(health_router)
    app.include_router(v1_router, prefix="/api/v1")

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "main:app",
        host=settings.host,
        port=settings.port,
        reload=not settings.is_production,
    )
