from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.errors import register_exception_handlers
from app.api.router import api_router
from app.core.config import settings
from app.core.logging_config import configure_logging
from app.domain.exceptions import UpstreamError
from app.middleware.rate_limit import install_rate_limiting
from app.services.embeddings import get_embedding_provider
from app.services.scheduler import get_scheduler_orchestrator, get_trimming_scheduler
from app.services.vector_store import get_vector_store

logger = logging.getLogger(__name__)


async def _ensure_collection() -> None:
    """Create the memory collection if missing. Failures are logged, startup continues."""
    try:
        dimension = get_embedding_provider().dimension
        await get_vector_store().ensure_collection(dimension)
    except UpstreamError as e:
        logger.error(f"Collection check failed: {e}")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Startup: logging, collection check, trimming job.
    Shutdown: stop the scheduler (waits for an in-flight trim).
    """
    configure_logging()
    logger.info(f"{settings.PROJECT_NAME} {settings.VERSION} starting up...")

    await _ensure_collection()

    scheduler = None
    if settings.ENABLE_BACKGROUND_JOBS:
        scheduler = get_scheduler_orchestrator()
        trimming = get_trimming_scheduler()
        await trimming.register()
        await scheduler.start()
        logger.info(f"Trimming scheduled (cron: \"{trimming.schedule}\")")
    else:
        logger.info("Background jobs DISABLED (ENABLE_BACKGROUND_JOBS=false)")

    yield

    logger.info("Shutting down...")
    if scheduler:
        await scheduler.stop()


app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.VERSION,
    openapi_url=f"{settings.API_PREFIX}/openapi.json",
    lifespan=lifespan,
)

install_rate_limiting(app)
register_exception_handlers(app)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.BACKEND_CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router, prefix=settings.API_PREFIX)


@app.get("/")
async def root():
    return {
        "message": f"{settings.PROJECT_NAME} is running",
        "version": settings.VERSION,
        "docs": "/docs",
    }


if __name__ == "__main__":
    import uvicorn

    # configure_logging() (in lifespan) owns levels and the probe filter
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=settings.PORT,
        log_level=settings.LOG_LEVEL.lower(),
    )
