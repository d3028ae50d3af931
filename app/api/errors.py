"""Domain exception → HTTP response mapping.

Every error body is {"error": <category>, "detail": <message>}.
Request-shape failures stay with FastAPI's own 422 handler.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from app.domain.exceptions import DomainValidationError, UpstreamError

logger = logging.getLogger(__name__)


async def domain_validation_handler(request: Request, exc: DomainValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=400,
        content={"error": "validation_error", "detail": exc.detail},
    )


async def upstream_error_handler(request: Request, exc: UpstreamError) -> JSONResponse:
    logger.error(f"Upstream failure on {request.method} {request.url.path}: {exc}")
    return JSONResponse(
        status_code=500,
        content={"error": exc.category, "detail": str(exc)},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(DomainValidationError, domain_validation_handler)
    app.add_exception_handler(UpstreamError, upstream_error_handler)
