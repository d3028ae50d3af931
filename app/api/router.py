"""Main API router aggregation."""

from fastapi import APIRouter

from app.api.routes import health, memory, scheduler

api_router = APIRouter()

api_router.include_router(health.router, tags=["health"])
api_router.include_router(memory.router, tags=["memory"])
api_router.include_router(scheduler.router, tags=["scheduler"])
