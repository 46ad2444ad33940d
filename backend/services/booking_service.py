"""Booking workflow: re-check availability, quote, and commit."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from threading import RLock
from typing import Any, Optional

from backend.domain.models import BOOKING_TYPE_ROOM, AvailabilityResult, Booking, Quote
from backend.repository.data_repository import DataRepository
from backend.services.availability_service import check_availability
from backend.services.pricing_service import (
    PricingService,
    PricingValidationError,
    PropertyNotFoundError,
)
from backend.utils.config import Settings, get_settings
from backend.utils.logger import get_logger


logger = get_logger(__name__)


class BookingWorkflowError(Exception):
    """Base exception for booking workflow failures."""


class BookingValidationError(BookingWorkflowError):
    """Raised when booking inputs are invalid."""


class BookingConflictError(BookingWorkflowError):
    """Raised when the requested stay is no longer available."""


class BookingNotFoundError(BookingWorkflowError):
    """Raised when a booking id does not exist."""


@dataclass(frozen=True)
class BookingConfirmation:
    booking: Booking
    quote: Quote

    def to_dict(self) -> dict[str, Any]:
        return {"booking": self.booking.to_dict(), "quote": self.quote.to_dict()}


def _ensure_bookable(
    availability: AvailabilityResult,
    booking_type: str,
    room_number: Optional[int],
) -> None:
    if booking_type == BOOKING_TYPE_ROOM:
        if room_number not in availability.rooms_available:
            raise BookingConflictError(f"room {room_number} is not available for these dates")
        return
    if not availability.full_available:
        raise BookingConflictError("the full unit is not available for these dates")


class BookingWorkflowService:
    """Serializes booking writes so availability is checked against fresh state.

    Prices are frozen on the stored booking; later pricing changes never touch
    existing reservations.
    """

    def __init__(
        self,
        repository: Optional[DataRepository] = None,
        pricing_service: Optional[PricingService] = None,
        settings: Optional[Settings] = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._repository = repository or DataRepository(self._settings)
        self._pricing_service = pricing_service or PricingService(
            repository=self._repository,
            settings=self._settings,
        )
        self._lock = RLock()

    def _quote_and_check(
        self,
        *,
        property_id: str,
        check_in: date,
        check_out: date,
        booking_type: str,
        room_number: Optional[int],
        occupancy_rate: Optional[float],
        competitor_avg: Optional[float],
        reference_date: Optional[date],
        exclude_booking_id: Optional[int] = None,
    ) -> Quote:
        if booking_type == BOOKING_TYPE_ROOM and room_number is None:
            raise BookingValidationError("room_number is required for room bookings")
        try:
            quote = self._pricing_service.quote_stay(
                property_id=property_id,
                check_in=check_in,
                check_out=check_out,
                booking_type=booking_type,
                room_number=room_number,
                occupancy_rate=occupancy_rate,
                competitor_avg=competitor_avg,
                reference_date=reference_date,
            )
        except PricingValidationError as exc:
            raise BookingValidationError(str(exc)) from exc

        property_ = self._pricing_service.get_property(property_id)
        availability = check_availability(
            property_,
            self._repository.list_bookings_for_property(property_id),
            check_in,
            check_out,
            exclude_booking_id=exclude_booking_id,
        )
        _ensure_bookable(availability, booking_type, room_number)
        return quote

    def create_booking(
        self,
        *,
        property_id: str,
        check_in: date,
        check_out: date,
        booking_type: str = "full",
        room_number: Optional[int] = None,
        guests: int = 1,
        guest_name: Optional[str] = None,
        guest_email: Optional[str] = None,
        occupancy_rate: Optional[float] = None,
        competitor_avg: Optional[float] = None,
        reference_date: Optional[date] = None,
    ) -> BookingConfirmation:
        if guests <= 0:
            raise BookingValidationError("guests must be > 0")

        with self._lock:
            quote = self._quote_and_check(
                property_id=property_id,
                check_in=check_in,
                check_out=check_out,
                booking_type=booking_type,
                room_number=room_number,
                occupancy_rate=occupancy_rate,
                competitor_avg=competitor_avg,
                reference_date=reference_date,
            )
            booking = self._repository.save_booking(
                Booking(
                    property_id=property_id,
                    check_in=check_in,
                    check_out=check_out,
                    booking_type=booking_type,
                    room_number=room_number if booking_type == BOOKING_TYPE_ROOM else None,
                    guests=guests,
                    nightly_rate=quote.average_nightly,
                    total_price=quote.total,
                    guest_name=guest_name,
                    guest_email=guest_email,
                )
            )

        logger.info(
            (
                "Booking created | booking_id=%s | property_id=%s | booking_type=%s | "
                "room_number=%s | nights=%s | total_price=%s"
            ),
            booking.booking_id,
            property_id,
            booking_type,
            booking.room_number,
            quote.nights,
            booking.total_price,
        )
        return BookingConfirmation(booking=booking, quote=quote)

    def reschedule_booking(
        self,
        *,
        booking_id: int,
        check_in: date,
        check_out: date,
        reference_date: Optional[date] = None,
    ) -> BookingConfirmation:
        """Move a booking to new dates, ignoring its own current interval."""
        with self._lock:
            existing = self._repository.get_booking(booking_id)
            if existing is None:
                raise BookingNotFoundError(f"booking {booking_id} not found")

            quote = self._quote_and_check(
                property_id=existing.property_id,
                check_in=check_in,
                check_out=check_out,
                booking_type=existing.booking_type,
                room_number=existing.room_number,
                occupancy_rate=None,
                competitor_avg=None,
                reference_date=reference_date,
                exclude_booking_id=booking_id,
            )
            booking = self._repository.save_booking(
                Booking(
                    booking_id=existing.booking_id,
                    property_id=existing.property_id,
                    check_in=check_in,
                    check_out=check_out,
                    booking_type=existing.booking_type,
                    room_number=existing.room_number,
                    guests=existing.guests,
                    nightly_rate=quote.average_nightly,
                    total_price=quote.total,
                    guest_name=existing.guest_name,
                    guest_email=existing.guest_email,
                    created_at=existing.created_at,
                )
            )

        logger.info(
            "Booking rescheduled | booking_id=%s | check_in=%s | check_out=%s | total_price=%s",
            booking_id,
            check_in.isoformat(),
            check_out.isoformat(),
            booking.total_price,
        )
        return BookingConfirmation(booking=booking, quote=quote)

    def cancel_booking(self, booking_id: int) -> None:
        with self._lock:
            if not self._repository.delete_booking(booking_id):
                raise BookingNotFoundError(f"booking {booking_id} not found")
        logger.info("Booking cancelled | booking_id=%s", booking_id)

    def list_bookings(self, property_id: str) -> list[Booking]:
        if self._repository.get_property(property_id) is None:
            raise PropertyNotFoundError(f"property {property_id} not found")
        return self._repository.list_bookings_for_property(property_id)
