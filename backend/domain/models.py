"""Domain models for stay pricing and availability."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Optional


BOOKING_TYPE_FULL = "full"
BOOKING_TYPE_ROOM = "room"
BOOKING_TYPES = (BOOKING_TYPE_FULL, BOOKING_TYPE_ROOM)

IMPACT_NORMAL = "normal"
IMPACT_HIGH = "high"


@dataclass(frozen=True)
class PricingConstraints:
    """Bounds on the blended multiplier.

    ``weekend_premium``, ``last_minute_discount`` and ``far_out_discount`` are
    recorded for operators but the blend already encodes day-of-week and lead
    time, so only the min/max bounds are applied.
    """

    min_multiplier: float
    max_multiplier: float
    weekend_premium: float = 1.15
    last_minute_discount: float = 0.90
    far_out_discount: float = 0.95

    def to_dict(self) -> dict[str, float]:
        return {
            "min_multiplier": self.min_multiplier,
            "max_multiplier": self.max_multiplier,
            "weekend_premium": self.weekend_premium,
            "last_minute_discount": self.last_minute_discount,
            "far_out_discount": self.far_out_discount,
        }


@dataclass(frozen=True)
class Property:
    property_id: str
    name: str
    nightly_full: float
    nightly_room: float = 0.0
    rentable_rooms: int = 0
    pricing_constraints: Optional[PricingConstraints] = None
    area: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    bedrooms: int = 0
    max_guests_full: int = 0
    max_guests_room: int = 0

    @property
    def is_subdivisible(self) -> bool:
        return self.rentable_rooms > 0

    def room_numbers(self) -> list[int]:
        return list(range(1, self.rentable_rooms + 1))

    def to_dict(self) -> dict[str, Any]:
        return {
            "property_id": self.property_id,
            "name": self.name,
            "nightly_full": self.nightly_full,
            "nightly_room": self.nightly_room,
            "rentable_rooms": self.rentable_rooms,
            "pricing_constraints": (
                self.pricing_constraints.to_dict()
                if self.pricing_constraints is not None
                else None
            ),
            "area": self.area,
            "address": self.address,
            "city": self.city,
            "bedrooms": self.bedrooms,
            "max_guests_full": self.max_guests_full,
            "max_guests_room": self.max_guests_room,
        }


@dataclass(frozen=True)
class Event:
    name: str
    event_date: date
    event_type: str = "other"
    impact: str = IMPACT_NORMAL
    distance_miles: Optional[float] = None
    venue: Optional[str] = None
    event_id: Optional[int] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "event_id": self.event_id,
            "name": self.name,
            "event_date": self.event_date.isoformat(),
            "event_type": self.event_type,
            "impact": self.impact,
            "distance_miles": self.distance_miles,
            "venue": self.venue,
        }


@dataclass(frozen=True)
class Booking:
    """A persisted reservation; rates are frozen at creation time."""

    property_id: str
    check_in: date
    check_out: date
    booking_type: str = BOOKING_TYPE_FULL
    room_number: Optional[int] = None
    guests: int = 1
    nightly_rate: float = 0.0
    total_price: float = 0.0
    guest_name: Optional[str] = None
    guest_email: Optional[str] = None
    booking_id: Optional[int] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @property
    def nights(self) -> int:
        return (self.check_out - self.check_in).days

    def overlaps(self, check_in: date, check_out: date) -> bool:
        """Half-open overlap; touching at a boundary is not an overlap."""
        return self.check_in < check_out and self.check_out > check_in

    def occupies(self, night: date) -> bool:
        return self.check_in <= night < self.check_out

    def to_dict(self) -> dict[str, Any]:
        return {
            "booking_id": self.booking_id,
            "property_id": self.property_id,
            "check_in": self.check_in.isoformat(),
            "check_out": self.check_out.isoformat(),
            "booking_type": self.booking_type,
            "room_number": self.room_number,
            "guests": self.guests,
            "nightly_rate": self.nightly_rate,
            "total_price": self.total_price,
            "guest_name": self.guest_name,
            "guest_email": self.guest_email,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }


@dataclass(frozen=True)
class FactorResult:
    factor_type: str
    multiplier: float
    reason: str
    events: tuple[Event, ...] = ()

    @property
    def is_neutral(self) -> bool:
        return self.multiplier == 1

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "type": self.factor_type,
            "multiplier": self.multiplier,
            "reason": self.reason,
        }
        if self.events:
            payload["events"] = [event.to_dict() for event in self.events]
        return payload


@dataclass(frozen=True)
class PricedNight:
    date: str
    day_of_week: str
    base_rate: float
    multiplier: float
    final_rate: int
    factors: list[FactorResult]
    adjustment: float
    adjustment_percent: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "date": self.date,
            "day_of_week": self.day_of_week,
            "base_rate": self.base_rate,
            "multiplier": self.multiplier,
            "final_rate": self.final_rate,
            "factors": [factor.to_dict() for factor in self.factors],
            "adjustment": self.adjustment,
            "adjustment_percent": self.adjustment_percent,
        }


@dataclass(frozen=True)
class QuoteFees:
    cleaning: float
    service: int
    taxes: int

    def to_dict(self) -> dict[str, float]:
        return {"cleaning": self.cleaning, "service": self.service, "taxes": self.taxes}


@dataclass(frozen=True)
class QuoteAnalysis:
    total_multiplier: float
    average_multiplier: float
    peak_night: Optional[PricedNight]
    lowest_night: Optional[PricedNight]
    savings_from_base: float
    surcharge_from_base: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "total_multiplier": self.total_multiplier,
            "average_multiplier": self.average_multiplier,
            "peak_night": self.peak_night.to_dict() if self.peak_night else None,
            "lowest_night": self.lowest_night.to_dict() if self.lowest_night else None,
            "savings_from_base": self.savings_from_base,
            "surcharge_from_base": self.surcharge_from_base,
        }


@dataclass(frozen=True)
class Quote:
    nights: int
    base_rate: float
    average_nightly: int
    subtotal: int
    fees: QuoteFees
    total: float
    breakdown: list[PricedNight]
    analysis: QuoteAnalysis

    @property
    def is_valid(self) -> bool:
        """A non-positive night count means the dates were out of order."""
        return self.nights > 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "nights": self.nights,
            "base_rate": self.base_rate,
            "average_nightly": self.average_nightly,
            "subtotal": self.subtotal,
            "fees": self.fees.to_dict(),
            "total": self.total,
            "breakdown": [night.to_dict() for night in self.breakdown],
            "analysis": self.analysis.to_dict(),
        }


@dataclass(frozen=True)
class AvailabilityResult:
    full_available: bool
    rooms_available: list[int]
    conflicts: list[Booking] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "full_available": self.full_available,
            "rooms_available": list(self.rooms_available),
            "conflicts": [booking.to_dict() for booking in self.conflicts],
        }


@dataclass(frozen=True)
class ReportDay:
    pricing: PricedNight
    is_booked: bool
    booking: Optional[Booking]

    def to_dict(self) -> dict[str, Any]:
        payload = self.pricing.to_dict()
        payload["is_booked"] = self.is_booked
        payload["booking"] = self.booking.to_dict() if self.booking else None
        return payload


@dataclass(frozen=True)
class MonthlySummary:
    avg_rate: int
    peak_rate: int
    lowest_rate: int
    booked_nights: int
    revenue: int
    potential_revenue: int
    occupancy_rate: float

    def to_dict(self) -> dict[str, float]:
        return {
            "avg_rate": self.avg_rate,
            "peak_rate": self.peak_rate,
            "lowest_rate": self.lowest_rate,
            "booked_nights": self.booked_nights,
            "revenue": self.revenue,
            "potential_revenue": self.potential_revenue,
            "occupancy_rate": self.occupancy_rate,
        }


@dataclass(frozen=True)
class MonthlyReport:
    property_id: str
    year: int
    month: int
    month_label: str
    days: list[ReportDay]
    summary: MonthlySummary

    def to_dict(self) -> dict[str, Any]:
        return {
            "property_id": self.property_id,
            "year": self.year,
            "month": self.month,
            "month_label": self.month_label,
            "days": [day.to_dict() for day in self.days],
            "summary": self.summary.to_dict(),
        }
