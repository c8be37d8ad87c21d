"""FastAPI application for the Padel Slot Finder."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from app.config import BACKGROUND_TASKS_ENABLED, VERSION
from app.models import ErrorResponse
from app.rate_limit import limiter
from app.routers import clubs, health, p4, search, sessions
from app.routers import status as status_router
from app.services.errors import SearchValidationError
from app.services.health_checker import health_checker
from app.services.registry import registry
from app.services.session_check import session_check

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    registry.register_all()
    if BACKGROUND_TASKS_ENABLED:
        await session_check.start()
        await health_checker.start()
    else:
        logger.info("Background tasks disabled")
    try:
        yield
    finally:
        await health_checker.stop()
        await session_check.stop()
        await registry.stop()


app = FastAPI(
    title="Padel Slot Finder API",
    description="Free padel court slots across the clubs around Salon-de-Provence and Aix-en-Provence",
    version=VERSION,
    lifespan=lifespan,
)

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)


@app.exception_handler(SearchValidationError)
async def search_validation_handler(request: Request, exc: SearchValidationError) -> JSONResponse:
    body = ErrorResponse(error="validation_error", field=exc.field, message=exc.message)
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=body.model_dump())


app.include_router(health.router)
app.include_router(clubs.router)
app.include_router(search.router)
app.include_router(status_router.router)
app.include_router(sessions.router)
app.include_router(p4.router)
