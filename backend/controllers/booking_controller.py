"""HTTP controller for availability checks and the booking workflow."""

from __future__ import annotations

from datetime import date
from typing import Literal, Optional

from fastapi import APIRouter, Depends, HTTPException, Response, status
from pydantic import BaseModel, Field, model_validator

from backend.controllers.dependencies import get_availability_service, get_booking_service
from backend.controllers.pricing_controller import BookingResponse, QuoteResponse
from backend.services.availability_service import (
    AvailabilityService,
    AvailabilityValidationError,
)
from backend.services.booking_service import (
    BookingConflictError,
    BookingNotFoundError,
    BookingValidationError,
    BookingWorkflowService,
)
from backend.services.pricing_service import PropertyNotFoundError
from backend.utils.logger import get_logger


logger = get_logger(__name__)

router = APIRouter(tags=["bookings"])


class _StayWindow(BaseModel):
    check_in: date
    check_out: date

    @model_validator(mode="after")
    def validate_date_order(self):
        if self.check_out <= self.check_in:
            raise ValueError("check_out must be after check_in")
        return self


class AvailabilityRequest(_StayWindow):
    property_id: str = Field(min_length=1)
    exclude_booking_id: Optional[int] = None


class AvailabilityResponse(BaseModel):
    full_available: bool
    rooms_available: list[int]
    conflicts: list[BookingResponse]


class CreateBookingRequest(_StayWindow):
    property_id: str = Field(min_length=1)
    booking_type: Literal["full", "room"] = "full"
    room_number: Optional[int] = Field(default=None, gt=0)
    guests: int = Field(default=1, gt=0)
    guest_name: Optional[str] = None
    guest_email: Optional[str] = None
    occupancy_rate: Optional[float] = Field(default=None, ge=0.0, le=1.0)
    competitor_avg: Optional[float] = Field(default=None, gt=0.0)
    reference_date: Optional[date] = None


class RescheduleBookingRequest(_StayWindow):
    reference_date: Optional[date] = None


class BookingConfirmationResponse(BaseModel):
    booking: BookingResponse
    quote: QuoteResponse


@router.post(
    "/availability",
    response_model=AvailabilityResponse,
    status_code=status.HTTP_200_OK,
)
async def availability(
    payload: AvailabilityRequest,
    service: AvailabilityService = Depends(get_availability_service),
) -> AvailabilityResponse:
    try:
        result = service.check(
            property_id=payload.property_id,
            check_in=payload.check_in,
            check_out=payload.check_out,
            exclude_booking_id=payload.exclude_booking_id,
        )
        return AvailabilityResponse(**result.to_dict())
    except AvailabilityValidationError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from exc
    except PropertyNotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(exc),
        ) from exc
    except Exception as exc:  # pragma: no cover - defensive fallback
        logger.exception("Unexpected availability failure")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to check availability",
        ) from exc


@router.post(
    "/bookings",
    response_model=BookingConfirmationResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_booking(
    payload: CreateBookingRequest,
    service: BookingWorkflowService = Depends(get_booking_service),
) -> BookingConfirmationResponse:
    """Re-check availability, quote the stay, and store the frozen price."""
    try:
        confirmation = service.create_booking(**payload.model_dump())
        return BookingConfirmationResponse(**confirmation.to_dict())
    except BookingValidationError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from exc
    except PropertyNotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(exc),
        ) from exc
    except BookingConflictError as exc:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=str(exc),
        ) from exc
    except Exception as exc:  # pragma: no cover - defensive fallback
        logger.exception("Unexpected booking failure")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create booking",
        ) from exc


@router.get(
    "/properties/{property_id}/bookings",
    response_model=list[BookingResponse],
    status_code=status.HTTP_200_OK,
)
async def list_bookings(
    property_id: str,
    service: BookingWorkflowService = Depends(get_booking_service),
) -> list[BookingResponse]:
    try:
        bookings = service.list_bookings(property_id)
    except PropertyNotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(exc),
        ) from exc
    return [BookingResponse(**booking.to_dict()) for booking in bookings]


@router.put(
    "/bookings/{booking_id}/dates",
    response_model=BookingConfirmationResponse,
    status_code=status.HTTP_200_OK,
)
async def reschedule_booking(
    booking_id: int,
    payload: RescheduleBookingRequest,
    service: BookingWorkflowService = Depends(get_booking_service),
) -> BookingConfirmationResponse:
    try:
        confirmation = service.reschedule_booking(
            booking_id=booking_id,
            check_in=payload.check_in,
            check_out=payload.check_out,
            reference_date=payload.reference_date,
        )
        return BookingConfirmationResponse(**confirmation.to_dict())
    except BookingValidationError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from exc
    except (BookingNotFoundError, PropertyNotFoundError) as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(exc),
        ) from exc
    except BookingConflictError as exc:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=str(exc),
        ) from exc
    except Exception as exc:  # pragma: no cover - defensive fallback
        logger.exception("Unexpected reschedule failure")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to reschedule booking",
        ) from exc


@router.delete("/bookings/{booking_id}", status_code=status.HTTP_204_NO_CONTENT)
async def cancel_booking(
    booking_id: int,
    service: BookingWorkflowService = Depends(get_booking_service),
) -> Response:
    try:
        service.cancel_booking(booking_id)
    except BookingNotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(exc),
        ) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)
