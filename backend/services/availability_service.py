"""Reservation conflict resolution for full-unit and per-room stays."""

from __future__ import annotations

from datetime import date
from typing import Iterable, Optional

from backend.domain.models import BOOKING_TYPE_FULL, AvailabilityResult, Booking, Property
from backend.repository.data_repository import DataRepository
from backend.services.pricing_service import PropertyNotFoundError
from backend.utils.config import Settings, get_settings
from backend.utils.logger import get_logger


logger = get_logger(__name__)


class AvailabilityValidationError(Exception):
    """Raised when an availability request has unusable dates."""


def find_conflicts(
    property_id: str,
    bookings: Iterable[Booking],
    check_in: date,
    check_out: date,
    exclude_booking_id: Optional[int] = None,
) -> list[Booking]:
    return [
        booking
        for booking in bookings
        if booking.property_id == property_id
        and not (exclude_booking_id is not None and booking.booking_id == exclude_booking_id)
        and booking.overlaps(check_in, check_out)
    ]


def check_availability(
    property_: Property,
    bookings: Iterable[Booking],
    check_in: date,
    check_out: date,
    exclude_booking_id: Optional[int] = None,
) -> AvailabilityResult:
    """Resolve which of the unit and its rooms are free for ``[check_in, check_out)``.

    A full-unit booking blocks every room and any room booking blocks the
    full unit, since the rooms sit inside the unit.
    """
    conflicts = find_conflicts(
        property_.property_id,
        bookings,
        check_in,
        check_out,
        exclude_booking_id,
    )

    if not conflicts:
        return AvailabilityResult(
            full_available=True,
            rooms_available=property_.room_numbers(),
            conflicts=[],
        )

    if any(booking.booking_type == BOOKING_TYPE_FULL for booking in conflicts):
        return AvailabilityResult(full_available=False, rooms_available=[], conflicts=conflicts)

    booked_rooms = {booking.room_number for booking in conflicts if booking.room_number}
    return AvailabilityResult(
        full_available=False,
        rooms_available=[
            room_number
            for room_number in property_.room_numbers()
            if room_number not in booked_rooms
        ],
        conflicts=conflicts,
    )


class AvailabilityService:
    """Checks availability against a fresh booking snapshot on every call."""

    def __init__(
        self,
        repository: Optional[DataRepository] = None,
        settings: Optional[Settings] = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._repository = repository or DataRepository(self._settings)

    def check(
        self,
        *,
        property_id: str,
        check_in: date,
        check_out: date,
        exclude_booking_id: Optional[int] = None,
    ) -> AvailabilityResult:
        if check_out <= check_in:
            raise AvailabilityValidationError("check_out must be after check_in")
        property_ = self._repository.get_property(property_id)
        if property_ is None:
            raise PropertyNotFoundError(f"property {property_id} not found")

        bookings = self._repository.list_bookings_for_property(property_id)
        result = check_availability(
            property_,
            bookings,
            check_in,
            check_out,
            exclude_booking_id=exclude_booking_id,
        )
        logger.info(
            (
                "Availability checked | property_id=%s | check_in=%s | check_out=%s | "
                "full_available=%s | rooms_available=%s | conflicts=%s"
            ),
            property_id,
            check_in.isoformat(),
            check_out.isoformat(),
            result.full_available,
            result.rooms_available,
            len(result.conflicts),
        )
        return result
