"""Per-client request limiting (slowapi).

One flat limit (RATE_LIMIT, e.g. "100/second") keyed by client address,
applied to every route by SlowAPIMiddleware. RATE_LIMIT_ENABLED=false
turns it off without touching the middleware stack.
"""

import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi.util import get_remote_address

from app.core.config import settings

logger = logging.getLogger(__name__)


def build_limiter(limit: Optional[str] = None, enabled: Optional[bool] = None) -> Limiter:
    return Limiter(
        key_func=get_remote_address,
        default_limits=[limit or settings.RATE_LIMIT],
        enabled=settings.RATE_LIMIT_ENABLED if enabled is None else enabled,
    )


limiter = build_limiter()


def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """429 in the same {error, detail} shape as the domain error handlers."""
    logger.warning(f"Rate limit hit by {get_remote_address(request)} on {request.url.path}")
    return JSONResponse(
        status_code=429,
        content={
            "error": "rate_limit_exceeded",
            "detail": f"Too many requests ({exc.detail}). Please slow down.",
        },
        headers={"Retry-After": "1"},
    )


def install_rate_limiting(app: FastAPI, app_limiter: Optional[Limiter] = None) -> Limiter:
    """Attach limiter state, 429 handler and middleware to an app."""
    app_limiter = app_limiter or limiter
    app.state.limiter = app_limiter
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
    app.add_middleware(SlowAPIMiddleware)
    return app_limiter
