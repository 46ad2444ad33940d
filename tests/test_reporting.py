from __future__ import annotations

from dataclasses import replace
from datetime import date

import pytest

from backend.domain.constraints import PricingConfig
from backend.domain.models import Booking, Event, Property
from backend.repository.data_repository import DataRepository
from backend.services.pricing_service import PropertyNotFoundError, round_half_up
from backend.services.reporting_service import (
    ReportingService,
    ReportingValidationError,
    monthly_report,
    preview_pricing,
)
from backend.utils.config import get_settings


CONFIG = PricingConfig()
REFERENCE_DATE = date(2025, 11, 1)
UNIT = Property(
    property_id="peachtree-407",
    name="Peachtree UNIT 407",
    nightly_full=275.0,
    nightly_room=95.0,
    rentable_rooms=3,
    area="buckhead",
)


def _december_bookings() -> list[Booking]:
    return [
        Booking(
            booking_id=1,
            property_id="peachtree-407",
            check_in=date(2025, 12, 18),
            check_out=date(2025, 12, 22),
            booking_type="room",
            room_number=1,
        ),
        Booking(
            booking_id=2,
            property_id="peachtree-407",
            check_in=date(2025, 12, 30),
            check_out=date(2026, 1, 2),
        ),
        Booking(
            booking_id=3,
            property_id="pharr-2505",
            check_in=date(2025, 12, 1),
            check_out=date(2025, 12, 10),
        ),
    ]


# --- preview ---

def test_preview_includes_end_date() -> None:
    nights = preview_pricing(UNIT, date(2025, 12, 19), date(2025, 12, 21), [], CONFIG, REFERENCE_DATE)
    assert [night.date for night in nights] == ["2025-12-19", "2025-12-20", "2025-12-21"]
    assert [night.final_rate for night in nights] == [282, 309, 303]


def test_preview_single_day_window() -> None:
    nights = preview_pricing(UNIT, date(2025, 12, 19), date(2025, 12, 19), [], CONFIG, REFERENCE_DATE)
    assert len(nights) == 1


def test_preview_applies_events() -> None:
    events = [Event(name="Summit", event_date=date(2025, 12, 16), impact="high", distance_miles=9.0)]
    plain = preview_pricing(UNIT, date(2025, 12, 16), date(2025, 12, 16), [], CONFIG, REFERENCE_DATE)
    busy = preview_pricing(UNIT, date(2025, 12, 16), date(2025, 12, 16), events, CONFIG, REFERENCE_DATE)
    assert busy[0].final_rate > plain[0].final_rate


# --- monthly report ---

def test_monthly_report_covers_every_day() -> None:
    report = monthly_report(UNIT, 2025, 12, [], _december_bookings(), CONFIG, REFERENCE_DATE)
    assert report.month_label == "December 2025"
    assert len(report.days) == 31
    assert report.days[0].pricing.date == "2025-12-01"
    assert report.days[-1].pricing.date == "2025-12-31"


def test_monthly_report_marks_booked_nights() -> None:
    report = monthly_report(UNIT, 2025, 12, [], _december_bookings(), CONFIG, REFERENCE_DATE)
    booked = [day.pricing.date for day in report.days if day.is_booked]
    assert booked == [
        "2025-12-18",
        "2025-12-19",
        "2025-12-20",
        "2025-12-21",
        "2025-12-30",
        "2025-12-31",
    ]
    # Checkout day is free
    assert report.days[21].is_booked is False
    assert report.days[17].booking.booking_id == 1


def test_monthly_summary_values() -> None:
    report = monthly_report(UNIT, 2025, 12, [], _december_bookings(), CONFIG, REFERENCE_DATE)
    summary = report.summary
    rates = [day.pricing.final_rate for day in report.days]

    assert summary.booked_nights == 6
    assert summary.occupancy_rate == pytest.approx(6 / 31)
    assert summary.potential_revenue == sum(rates)
    assert summary.avg_rate == round_half_up(sum(rates) / 31)
    assert summary.peak_rate == 309
    assert summary.lowest_rate == 272
    assert summary.revenue == 276 + 282 + 309 + 303 + 299 + 299


def test_february_has_28_days() -> None:
    report = monthly_report(UNIT, 2026, 2, [], [], CONFIG, REFERENCE_DATE)
    assert len(report.days) == 28
    assert report.summary.booked_nights == 0
    assert report.summary.revenue == 0


# --- service ---

def _build_service(tmp_path) -> tuple[ReportingService, DataRepository]:
    settings = replace(get_settings(), database_path=tmp_path / "reporting.db")
    repository = DataRepository(settings)
    repository.initialize_database()
    repository.seed_default_properties()
    return ReportingService(repository=repository, settings=settings), repository


def test_service_monthly_uses_stored_bookings(tmp_path) -> None:
    service, repository = _build_service(tmp_path)
    repository.seed_sample_bookings()

    report = service.monthly(
        property_id="peachtree-407",
        year=2025,
        month=12,
        reference_date=REFERENCE_DATE,
    )
    # Two room bookings cover the 18th through the 23rd
    assert report.summary.booked_nights == 6


def test_service_preview_matches_pure_function(tmp_path) -> None:
    service, _ = _build_service(tmp_path)
    nights = service.preview(
        property_id="peachtree-407",
        start_date=date(2025, 12, 19),
        end_date=date(2025, 12, 21),
        reference_date=REFERENCE_DATE,
    )
    assert [night.final_rate for night in nights] == [282, 309, 303]


def test_service_handles_the_last_calendar_month(tmp_path) -> None:
    service, repository = _build_service(tmp_path)
    repository.save_event(
        Event(name="Countdown", event_date=date(9999, 12, 31), event_type="concert", impact="high")
    )

    report = service.monthly(
        property_id="peachtree-407",
        year=9999,
        month=12,
        reference_date=REFERENCE_DATE,
    )
    assert len(report.days) == 31
    assert report.days[-1].pricing.date == "9999-12-31"

    nights = service.preview(
        property_id="peachtree-407",
        start_date=date(9999, 12, 30),
        end_date=date(9999, 12, 31),
        reference_date=REFERENCE_DATE,
    )
    assert [night.date for night in nights] == ["9999-12-30", "9999-12-31"]
    last_events = next(item for item in nights[-1].factors if item.factor_type == "events")
    assert [event.name for event in last_events.events] == ["Countdown"]


def test_service_rejects_reversed_window(tmp_path) -> None:
    service, _ = _build_service(tmp_path)
    with pytest.raises(ReportingValidationError):
        service.preview(
            property_id="peachtree-407",
            start_date=date(2025, 12, 21),
            end_date=date(2025, 12, 19),
        )


@pytest.mark.parametrize("month", [0, 13])
def test_service_rejects_bad_month(tmp_path, month: int) -> None:
    service, _ = _build_service(tmp_path)
    with pytest.raises(ReportingValidationError):
        service.monthly(property_id="peachtree-407", year=2025, month=month)


def test_service_rejects_unknown_property(tmp_path) -> None:
    service, _ = _build_service(tmp_path)
    with pytest.raises(PropertyNotFoundError):
        service.monthly(property_id="missing", year=2025, month=12)
