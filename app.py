"""
app.py: FastAPI application factory and startup lifecycle.

This is the ASGI application object imported by uvicorn.
It wires all services, registers routers, and runs startup initialization.

Usage (via launcher):
    python main.py

Usage (direct uvicorn):
    uvicorn app:app --reload
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from backend.controllers.booking_controller import router as booking_router
from backend.controllers.catalog_controller import router as catalog_router
from backend.controllers.pricing_controller import router as pricing_router
from backend.domain.constraints import build_pricing_config
from backend.repository.data_repository import DataRepository
from backend.services.availability_service import AvailabilityService
from backend.services.booking_service import BookingWorkflowService
from backend.services.pricing_service import PricingService
from backend.services.reporting_service import ReportingService
from backend.utils.config import Settings, get_settings
from backend.utils.logger import configure_logging, get_logger


logger = get_logger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build and wire the FastAPI application.

    Every service shares one repository and one validated pricing config,
    exposed to controllers through app.state.
    """
    settings = settings or get_settings()
    configure_logging(settings)

    # Invalid weights or fees fail here, before any request is served.
    config = build_pricing_config(settings)

    repository = DataRepository(settings)
    pricing_service = PricingService(
        repository=repository,
        settings=settings,
        config=config,
    )
    availability_service = AvailabilityService(
        repository=repository,
        settings=settings,
    )
    reporting_service = ReportingService(
        repository=repository,
        settings=settings,
        config=config,
    )
    booking_service = BookingWorkflowService(
        repository=repository,
        pricing_service=pricing_service,
        settings=settings,
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Run startup initialization before accepting requests."""
        _startup(app)
        yield

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        lifespan=lifespan,
    )

    app.include_router(catalog_router)
    app.include_router(pricing_router)
    app.include_router(booking_router)

    app.state.settings = settings
    app.state.repository = repository
    app.state.pricing_service = pricing_service
    app.state.availability_service = availability_service
    app.state.reporting_service = reporting_service
    app.state.booking_service = booking_service

    return app


def _startup(app: FastAPI) -> None:
    """Idempotent startup sequence. Schema must exist before seeding."""
    settings: Settings = app.state.settings
    repository: DataRepository = app.state.repository

    logger.info("Startup: initializing database schema")
    repository.initialize_database()

    if settings.seed_on_startup:
        logger.info("Startup: seeding default properties (skipped if catalogue not empty)")
        repository.seed_default_properties()

    logger.info("Startup complete | database=%s", repository.database_path)


# Module-level app object for uvicorn
app = create_app()
