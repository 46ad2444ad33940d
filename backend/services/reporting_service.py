"""Read-only operator reports built on the night rate calculator."""

from __future__ import annotations

import calendar
from datetime import date
from typing import Iterator, Optional, Sequence

import pandas as pd

from backend.domain.constraints import PricingConfig, build_pricing_config
from backend.domain.models import (
    Booking,
    Event,
    MonthlyReport,
    MonthlySummary,
    PricedNight,
    Property,
    ReportDay,
)
from backend.repository.data_repository import DataRepository
from backend.services.factors import NightContext
from backend.services.pricing_service import (
    PropertyNotFoundError,
    calculate_night_rate,
    round_half_up,
    utc_today,
)
from backend.utils.config import Settings, get_settings
from backend.utils.logger import get_logger


logger = get_logger(__name__)


class ReportingValidationError(Exception):
    """Raised when a report window is invalid."""


def _iter_days(first_day: date, last_day: date) -> Iterator[date]:
    for ordinal in range(first_day.toordinal(), last_day.toordinal() + 1):
        yield date.fromordinal(ordinal)


def preview_pricing(
    property_: Property,
    start_date: date,
    end_date: date,
    events: Sequence[Event],
    config: PricingConfig,
    reference_date: date,
) -> list[PricedNight]:
    """Full-unit rates for every day from ``start_date`` through ``end_date``.

    Lead time is measured from ``start_date``; occupancy is pinned to the
    configured report default and no competitor data is used.
    """
    return [
        calculate_night_rate(
            NightContext(
                night=night,
                base_rate=property_.nightly_full,
                check_in=start_date,
                reference_date=reference_date,
                events=events,
                occupancy_rate=config.report_occupancy_rate,
            ),
            property_,
            config,
        )
        for night in _iter_days(start_date, end_date)
    ]


def _covering_booking(
    property_id: str,
    night: date,
    bookings: Sequence[Booking],
) -> Optional[Booking]:
    return next(
        (
            booking
            for booking in bookings
            if booking.property_id == property_id and booking.occupies(night)
        ),
        None,
    )


def _summarize(days: list[ReportDay], days_in_month: int) -> MonthlySummary:
    frame = pd.DataFrame(
        {
            "final_rate": [day.pricing.final_rate for day in days],
            "is_booked": [day.is_booked for day in days],
        }
    )
    booked_nights = int(frame["is_booked"].sum())
    potential_revenue = int(frame["final_rate"].sum())
    return MonthlySummary(
        avg_rate=round_half_up(potential_revenue / days_in_month),
        peak_rate=int(frame["final_rate"].max()),
        lowest_rate=int(frame["final_rate"].min()),
        booked_nights=booked_nights,
        revenue=int(frame.loc[frame["is_booked"], "final_rate"].sum()),
        potential_revenue=potential_revenue,
        occupancy_rate=booked_nights / days_in_month,
    )


def monthly_report(
    property_: Property,
    year: int,
    month: int,
    events: Sequence[Event],
    bookings: Sequence[Booking],
    config: PricingConfig,
    reference_date: date,
) -> MonthlyReport:
    """Price each day of a month and cross-reference it with bookings.

    ``month`` is 1-based. Each day is priced as if it were its own check-in.
    Only bookings belonging to ``property_`` count toward occupancy.
    """
    days_in_month = calendar.monthrange(year, month)[1]
    days: list[ReportDay] = []
    for day_number in range(1, days_in_month + 1):
        night = date(year, month, day_number)
        pricing = calculate_night_rate(
            NightContext(
                night=night,
                base_rate=property_.nightly_full,
                check_in=night,
                reference_date=reference_date,
                events=events,
                occupancy_rate=config.report_occupancy_rate,
            ),
            property_,
            config,
        )
        booking = _covering_booking(property_.property_id, night, bookings)
        days.append(ReportDay(pricing=pricing, is_booked=booking is not None, booking=booking))

    return MonthlyReport(
        property_id=property_.property_id,
        year=year,
        month=month,
        month_label=f"{calendar.month_name[month]} {year}",
        days=days,
        summary=_summarize(days, days_in_month),
    )


class ReportingService:
    """Loads report inputs from the store for operator tooling."""

    def __init__(
        self,
        repository: Optional[DataRepository] = None,
        settings: Optional[Settings] = None,
        config: Optional[PricingConfig] = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._repository = repository or DataRepository(self._settings)
        self._config = config or build_pricing_config(self._settings)

    def _get_property(self, property_id: str) -> Property:
        property_ = self._repository.get_property(property_id)
        if property_ is None:
            raise PropertyNotFoundError(f"property {property_id} not found")
        return property_

    def preview(
        self,
        *,
        property_id: str,
        start_date: date,
        end_date: date,
        reference_date: Optional[date] = None,
    ) -> list[PricedNight]:
        if end_date < start_date:
            raise ReportingValidationError("end_date must not be before start_date")
        property_ = self._get_property(property_id)
        events = self._repository.list_events_through(start_date, end_date)
        nights = preview_pricing(
            property_,
            start_date,
            end_date,
            events,
            self._config,
            reference_date or utc_today(),
        )
        logger.info(
            "Pricing preview generated | property_id=%s | start=%s | end=%s | nights=%s",
            property_id,
            start_date.isoformat(),
            end_date.isoformat(),
            len(nights),
        )
        return nights

    def monthly(
        self,
        *,
        property_id: str,
        year: int,
        month: int,
        reference_date: Optional[date] = None,
    ) -> MonthlyReport:
        if not 1 <= month <= 12:
            raise ReportingValidationError("month must be between 1 and 12")
        property_ = self._get_property(property_id)
        first_day = date(year, month, 1)
        last_day = date(year, month, calendar.monthrange(year, month)[1])
        report = monthly_report(
            property_,
            year,
            month,
            self._repository.list_events_through(first_day, last_day),
            self._repository.list_bookings_for_property(property_id),
            self._config,
            reference_date or utc_today(),
        )
        logger.info(
            (
                "Monthly report generated | property_id=%s | month=%s | "
                "booked_nights=%s | occupancy_rate=%.4f | revenue=%s"
            ),
            property_id,
            report.month_label,
            report.summary.booked_nights,
            report.summary.occupancy_rate,
            report.summary.revenue,
        )
        return report
