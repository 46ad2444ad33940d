from __future__ import annotations

from dataclasses import replace
from datetime import date

import pytest

from backend.domain.models import Booking, Property
from backend.repository.data_repository import DataRepository
from backend.services.availability_service import (
    AvailabilityService,
    AvailabilityValidationError,
    check_availability,
    find_conflicts,
)
from backend.services.pricing_service import PropertyNotFoundError
from backend.utils.config import get_settings


TWO_ROOM_UNIT = Property(
    property_id="duplex-1",
    name="Duplex",
    nightly_full=200.0,
    nightly_room=90.0,
    rentable_rooms=2,
)
WHOLE_UNIT_ONLY = Property(property_id="loft-1", name="Loft", nightly_full=180.0)


def _room_booking(room_number: int, check_in: date, check_out: date, **overrides) -> Booking:
    values = {
        "property_id": "duplex-1",
        "check_in": check_in,
        "check_out": check_out,
        "booking_type": "room",
        "room_number": room_number,
    }
    values.update(overrides)
    return Booking(**values)


def test_empty_calendar_is_fully_available() -> None:
    result = check_availability(TWO_ROOM_UNIT, [], date(2025, 12, 19), date(2025, 12, 21))
    assert result.full_available is True
    assert result.rooms_available == [1, 2]
    assert result.conflicts == []


def test_room_booking_blocks_full_unit_but_not_other_rooms() -> None:
    bookings = [_room_booking(1, date(2025, 12, 18), date(2025, 12, 20), booking_id=7)]
    result = check_availability(TWO_ROOM_UNIT, bookings, date(2025, 12, 19), date(2025, 12, 21))
    assert result.full_available is False
    assert result.rooms_available == [2]
    assert [booking.booking_id for booking in result.conflicts] == [7]


def test_full_booking_blocks_every_room() -> None:
    bookings = [
        Booking(
            property_id="duplex-1",
            check_in=date(2025, 12, 20),
            check_out=date(2025, 12, 23),
        )
    ]
    result = check_availability(TWO_ROOM_UNIT, bookings, date(2025, 12, 19), date(2025, 12, 21))
    assert result.full_available is False
    assert result.rooms_available == []


def test_touching_stays_do_not_conflict() -> None:
    bookings = [_room_booking(1, date(2025, 12, 18), date(2025, 12, 20))]
    result = check_availability(TWO_ROOM_UNIT, bookings, date(2025, 12, 20), date(2025, 12, 22))
    assert result.full_available is True
    assert result.rooms_available == [1, 2]


def test_whole_unit_listing_has_no_rooms() -> None:
    result = check_availability(WHOLE_UNIT_ONLY, [], date(2025, 12, 19), date(2025, 12, 21))
    assert result.full_available is True
    assert result.rooms_available == []


def test_other_property_bookings_are_ignored() -> None:
    bookings = [
        Booking(
            property_id="loft-1",
            check_in=date(2025, 12, 19),
            check_out=date(2025, 12, 21),
        )
    ]
    assert find_conflicts("duplex-1", bookings, date(2025, 12, 19), date(2025, 12, 21)) == []


def test_excluded_booking_is_ignored() -> None:
    bookings = [_room_booking(1, date(2025, 12, 18), date(2025, 12, 20), booking_id=3)]
    result = check_availability(
        TWO_ROOM_UNIT,
        bookings,
        date(2025, 12, 19),
        date(2025, 12, 21),
        exclude_booking_id=3,
    )
    assert result.full_available is True


def test_exclude_zero_only_skips_booking_zero() -> None:
    bookings = [_room_booking(1, date(2025, 12, 18), date(2025, 12, 20), booking_id=5)]
    conflicts = find_conflicts(
        "duplex-1",
        bookings,
        date(2025, 12, 19),
        date(2025, 12, 21),
        exclude_booking_id=0,
    )
    assert len(conflicts) == 1


# --- service ---

def _build_service(tmp_path) -> tuple[AvailabilityService, DataRepository]:
    settings = replace(get_settings(), database_path=tmp_path / "availability.db")
    repository = DataRepository(settings)
    repository.initialize_database()
    repository.seed_default_properties()
    return AvailabilityService(repository=repository, settings=settings), repository


def test_service_reads_sample_bookings(tmp_path) -> None:
    service, repository = _build_service(tmp_path)
    repository.seed_sample_bookings()

    result = service.check(
        property_id="peachtree-407",
        check_in=date(2025, 12, 20),
        check_out=date(2025, 12, 21),
    )
    assert result.full_available is False
    assert result.rooms_available == [3]


def test_service_sees_new_bookings_immediately(tmp_path) -> None:
    service, repository = _build_service(tmp_path)
    before = service.check(
        property_id="pharr-2505",
        check_in=date(2026, 3, 1),
        check_out=date(2026, 3, 4),
    )
    assert before.full_available is True

    repository.save_booking(
        Booking(
            property_id="pharr-2505",
            check_in=date(2026, 3, 2),
            check_out=date(2026, 3, 3),
        )
    )
    after = service.check(
        property_id="pharr-2505",
        check_in=date(2026, 3, 1),
        check_out=date(2026, 3, 4),
    )
    assert after.full_available is False


def test_service_rejects_reversed_dates(tmp_path) -> None:
    service, _ = _build_service(tmp_path)
    with pytest.raises(AvailabilityValidationError):
        service.check(
            property_id="peachtree-407",
            check_in=date(2025, 12, 21),
            check_out=date(2025, 12, 21),
        )


def test_service_rejects_unknown_property(tmp_path) -> None:
    service, _ = _build_service(tmp_path)
    with pytest.raises(PropertyNotFoundError):
        service.check(
            property_id="missing",
            check_in=date(2025, 12, 19),
            check_out=date(2025, 12, 21),
        )
