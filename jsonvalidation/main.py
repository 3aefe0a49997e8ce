"""FastAPI entrypoint for the validation service."""
from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address
from starlette.middleware.base import BaseHTTPMiddleware

from jsonvalidation import __version__
from jsonvalidation.app.routers import schemas as schemas_router
from jsonvalidation.app.routers import validate as validate_router
from jsonvalidation.observability import attach_instrumentation, init_logging
from jsonvalidation.services import SCHEMA_REGISTRY
from jsonvalidation.settings import settings

app = FastAPI(title="JSON Validation API", version=__version__)

# ---- Rate limiting ----
_rate_limit = (
    f"{settings.RATE_LIMIT_REQUESTS}/{settings.RATE_LIMIT_WINDOW_SECONDS} seconds"
)
limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[_rate_limit],
)
app.state.limiter = limiter


# Decorated once; slowapi accumulates limits per decoration.
@limiter.limit(_rate_limit)
async def _limited(request: Request, call_next):
    return await call_next(request)


@app.middleware("http")
async def _apply_limits(request: Request, call_next):
    """Apply global request rate limits."""
    try:
        return await _limited(request, call_next)
    except RateLimitExceeded:
        return JSONResponse(status_code=429, content={"detail": "Rate limit exceeded"})


class PayloadSizeLimitMiddleware(BaseHTTPMiddleware):
    """Reject request bodies larger than the configured cap."""

    def __init__(self, app, max_bytes: int):
        super().__init__(app)
        self.max_bytes = max_bytes

    async def dispatch(self, request: Request, call_next):
        cl = request.headers.get("content-length")
        if cl and cl.isdigit() and int(cl) > self.max_bytes:
            return JSONResponse(status_code=413, content={"detail": "Payload too large"})
        return await call_next(request)


app.add_middleware(PayloadSizeLimitMiddleware, max_bytes=settings.MAX_PAYLOAD_BYTES)

init_logging(settings.LOG_LEVEL)
attach_instrumentation(app)

# Configure CORS differently for production vs development.
def _resolve_cors_origins() -> list[str]:
    if settings.ENVIRONMENT != "production":
        return ["*"]
    if not settings.ALLOWED_CORS_ORIGINS:
        raise RuntimeError(
            "ALLOWED_ORIGINS must be set when ENVIRONMENT=production"
        )
    return settings.ALLOWED_CORS_ORIGINS


app.add_middleware(
    CORSMiddleware,
    allow_origins=_resolve_cors_origins(),
    allow_methods=["*"],
    allow_headers=["*"],
    allow_credentials=True,
)


@app.get("/health", tags=["ops"])
def health() -> dict[str, object]:
    """Simple readiness probe."""
    return {
        "status": "ok",
        "schemas": len(SCHEMA_REGISTRY),
        "rejected_schemas": sorted(SCHEMA_REGISTRY.failures),
    }


app.include_router(schemas_router.router, prefix="/api")
app.include_router(validate_router.router, prefix="/api")

__all__ = ["app", "limiter"]
