"""Main FastAPI application."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from busymap import __version__
from busymap.config import get_settings
from busymap.database import close_db, init_db
from busymap.popularity.errors import InvalidInputError, UpstreamUnavailableError
from busymap.routers import (
    checkins_router,
    health_router,
    heatmap_router,
    metrics_router,
    places_router,
)
from busymap.services.places import populate_default_popular_times
from busymap.services.retention import retention_service

settings = get_settings()

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    # Startup
    logger.info("Starting Busymap...")

    await init_db()
    logger.info("Database initialized")

    if settings.generate_missing_popular_times:
        try:
            await populate_default_popular_times()
        except UpstreamUnavailableError as e:
            logger.warning(f"Could not generate default popular times: {e}")

    await retention_service.start()
    logger.info("Retention service started")

    yield

    # Shutdown
    logger.info("Shutting down Busymap...")
    await retention_service.stop()
    await close_db()
    logger.info("Shutdown complete")


app = FastAPI(
    title="Busymap",
    description="Venue popularity and crowd heatmap API",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(InvalidInputError)
async def invalid_input_handler(request: Request, exc: InvalidInputError) -> JSONResponse:
    return JSONResponse(status_code=400, content={"detail": str(exc)})


@app.exception_handler(UpstreamUnavailableError)
async def upstream_unavailable_handler(
    request: Request, exc: UpstreamUnavailableError
) -> JSONResponse:
    logger.error(f"{request.method} {request.url.path}: {exc}")
    return JSONResponse(status_code=503, content={"detail": str(exc)})


# Include routers
app.include_router(health_router)
app.include_router(metrics_router)
app.include_router(places_router)
app.include_router(heatmap_router)
app.include_router(checkins_router)


@app.get("/")
async def root():
    """Root endpoint with API info."""
    return {
        "name": "Busymap",
        "version": __version__,
        "docs": "/docs",
        "health": "/health",
        "metrics": "/metrics",
    }
