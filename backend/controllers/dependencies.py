"""Shared FastAPI dependency providers for controller layer."""

from __future__ import annotations

from typing import Any

from fastapi import HTTPException, Request, status

from backend.repository.data_repository import DataRepository
from backend.services.availability_service import AvailabilityService
from backend.services.booking_service import BookingWorkflowService
from backend.services.pricing_service import PricingService
from backend.services.reporting_service import ReportingService


def _require_state(request: Request, attribute: str, label: str) -> Any:
    service = getattr(request.app.state, attribute, None)
    if service is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=f"{label} is not initialized",
        )
    return service


def get_repository(request: Request) -> DataRepository:
    return _require_state(request, "repository", "Repository")


def get_pricing_service(request: Request) -> PricingService:
    return _require_state(request, "pricing_service", "Pricing service")


def get_availability_service(request: Request) -> AvailabilityService:
    return _require_state(request, "availability_service", "Availability service")


def get_reporting_service(request: Request) -> ReportingService:
    return _require_state(request, "reporting_service", "Reporting service")


def get_booking_service(request: Request) -> BookingWorkflowService:
    return _require_state(request, "booking_service", "Booking service")
