"""Night-rate blending and stay-level quote aggregation."""

from __future__ import annotations

import math
from datetime import date, datetime, timedelta, timezone
from typing import Iterator, Optional, Sequence

from backend.domain.constraints import PricingConfig, build_pricing_config
from backend.domain.models import (
    BOOKING_TYPE_ROOM,
    BOOKING_TYPES,
    Event,
    FactorResult,
    PricedNight,
    Property,
    Quote,
    QuoteAnalysis,
    QuoteFees,
)
from backend.repository.data_repository import DataRepository
from backend.services.factors import PRICING_FACTORS, NightContext
from backend.utils.config import Settings, get_settings
from backend.utils.logger import get_logger


logger = get_logger(__name__)

WEEKDAY_LABELS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")


class PricingError(Exception):
    """Base exception for pricing workflow failures."""


class PricingValidationError(PricingError):
    """Raised when a quote request is malformed."""


class PropertyNotFoundError(PricingError):
    """Raised when a property id does not exist in the store."""


def round_half_up(value: float) -> int:
    """Round halves away from negative infinity, unlike Python's ``round``."""
    return int(math.floor(value + 0.5))


def utc_today() -> date:
    return datetime.now(timezone.utc).date()


def iter_nights(check_in: date, check_out: date) -> Iterator[date]:
    current = check_in
    while current < check_out:
        yield current
        current += timedelta(days=1)


def select_base_rate(property_: Property, booking_type: str) -> float:
    if booking_type == BOOKING_TYPE_ROOM:
        return property_.nightly_room
    return property_.nightly_full


def calculate_night_rate(
    context: NightContext,
    property_: Property,
    config: PricingConfig,
) -> PricedNight:
    """Blend factor deviations from neutral, clamp, and price one night."""
    multiplier = 1.0
    factors: list[FactorResult] = []
    for weight_name, factor_fn in PRICING_FACTORS:
        result = factor_fn(context)
        if result.is_neutral:
            continue
        multiplier += (result.multiplier - 1) * getattr(config.weights, weight_name)
        factors.append(result)

    constraints = property_.pricing_constraints or config.default_constraints
    multiplier = max(constraints.min_multiplier, min(constraints.max_multiplier, multiplier))

    final_rate = round_half_up(context.base_rate * multiplier)
    return PricedNight(
        date=context.night.isoformat(),
        day_of_week=WEEKDAY_LABELS[context.night.weekday()],
        base_rate=context.base_rate,
        multiplier=round_half_up(multiplier * 100) / 100,
        final_rate=final_rate,
        factors=factors,
        adjustment=final_rate - context.base_rate,
        adjustment_percent=round_half_up((multiplier - 1) * 100),
    )


def _build_analysis(
    breakdown: list[PricedNight],
    base_rate: float,
    nights: int,
    subtotal: int,
) -> QuoteAnalysis:
    if not breakdown:
        return QuoteAnalysis(
            total_multiplier=0.0,
            average_multiplier=0.0,
            peak_night=None,
            lowest_night=None,
            savings_from_base=0,
            surcharge_from_base=0,
        )

    peak_night = breakdown[0]
    lowest_night = breakdown[0]
    for night in breakdown[1:]:
        if night.final_rate > peak_night.final_rate:
            peak_night = night
        if night.final_rate < lowest_night.final_rate:
            lowest_night = night

    flat_total = base_rate * nights
    savings = flat_total - subtotal
    return QuoteAnalysis(
        total_multiplier=subtotal / flat_total if flat_total else 0.0,
        average_multiplier=sum(night.multiplier for night in breakdown) / nights,
        peak_night=peak_night,
        lowest_night=lowest_night,
        savings_from_base=savings if savings > 0 else 0,
        surcharge_from_base=abs(savings) if savings < 0 else 0,
    )


def build_quote(
    *,
    property_: Property,
    check_in: date,
    check_out: date,
    booking_type: str,
    events: Sequence[Event],
    occupancy_rate: Optional[float],
    competitor_avg: Optional[float],
    config: PricingConfig,
    reference_date: date,
    room_number: Optional[int] = None,
) -> Quote:
    """Price every night of ``[check_in, check_out)`` and add platform fees.

    Dates are not validated here. ``check_out <= check_in`` yields a quote with
    a non-positive night count and an empty breakdown, which callers must treat
    as invalid input rather than a free stay.
    """
    base_rate = select_base_rate(property_, booking_type)
    nights = (check_out - check_in).days

    breakdown: list[PricedNight] = []
    for night in iter_nights(check_in, check_out):
        context = NightContext(
            night=night,
            base_rate=base_rate,
            check_in=check_in,
            reference_date=reference_date,
            events=events,
            occupancy_rate=occupancy_rate,
            competitor_avg=competitor_avg,
        )
        breakdown.append(calculate_night_rate(context, property_, config))
    subtotal = sum(night.final_rate for night in breakdown)

    # Each fee is rounded on its own, never the running total.
    cleaning_fee = config.fees.cleaning_fee_for(booking_type)
    service_fee = round_half_up(subtotal * config.fees.service_fee_percent)
    taxes = round_half_up(subtotal * config.fees.tax_rate)
    total = subtotal + cleaning_fee + service_fee + taxes

    if nights <= 0:
        logger.warning(
            "Degenerate quote requested | property_id=%s | check_in=%s | check_out=%s",
            property_.property_id,
            check_in.isoformat(),
            check_out.isoformat(),
        )

    quote = Quote(
        nights=nights,
        base_rate=base_rate,
        average_nightly=round_half_up(subtotal / nights) if nights > 0 else 0,
        subtotal=subtotal,
        fees=QuoteFees(cleaning=cleaning_fee, service=service_fee, taxes=taxes),
        total=total,
        breakdown=breakdown,
        analysis=_build_analysis(breakdown, base_rate, nights, subtotal),
    )
    logger.debug(
        "Quote built | property_id=%s | booking_type=%s | room_number=%s | nights=%s | total=%s",
        property_.property_id,
        booking_type,
        room_number,
        nights,
        total,
    )
    return quote


def validate_stay_request(
    property_: Property,
    check_in: date,
    check_out: date,
    booking_type: str,
    room_number: Optional[int],
) -> None:
    if check_out <= check_in:
        raise PricingValidationError("check_out must be after check_in")
    if booking_type not in BOOKING_TYPES:
        raise PricingValidationError(
            f"booking_type must be one of {', '.join(BOOKING_TYPES)}"
        )
    if booking_type == BOOKING_TYPE_ROOM:
        if not property_.is_subdivisible:
            raise PricingValidationError(
                f"property {property_.property_id} does not rent individual rooms"
            )
        if room_number is not None and room_number not in property_.room_numbers():
            raise PricingValidationError(
                f"room_number must be between 1 and {property_.rentable_rooms}"
            )
    elif room_number is not None:
        raise PricingValidationError("room_number is only valid for room bookings")


class PricingService:
    """Loads quote inputs from the store and runs the stay aggregator."""

    def __init__(
        self,
        repository: Optional[DataRepository] = None,
        settings: Optional[Settings] = None,
        config: Optional[PricingConfig] = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._repository = repository or DataRepository(self._settings)
        self._config = config or build_pricing_config(self._settings)

    @property
    def config(self) -> PricingConfig:
        return self._config

    def get_property(self, property_id: str) -> Property:
        property_ = self._repository.get_property(property_id)
        if property_ is None:
            raise PropertyNotFoundError(f"property {property_id} not found")
        return property_

    def _resolve_competitor_avg(
        self,
        property_: Property,
        competitor_avg: Optional[float],
    ) -> Optional[float]:
        if competitor_avg is not None or not property_.area:
            return competitor_avg
        stored = self._repository.get_setting(f"competitor_average:{property_.area}")
        if stored is None:
            return None
        return float(stored)

    def quote_stay(
        self,
        *,
        property_id: str,
        check_in: date,
        check_out: date,
        booking_type: str = "full",
        room_number: Optional[int] = None,
        occupancy_rate: Optional[float] = None,
        competitor_avg: Optional[float] = None,
        reference_date: Optional[date] = None,
    ) -> Quote:
        property_ = self.get_property(property_id)
        validate_stay_request(property_, check_in, check_out, booking_type, room_number)
        if occupancy_rate is not None and not 0.0 <= occupancy_rate <= 1.0:
            raise PricingValidationError("occupancy_rate must be between 0 and 1")

        events = self._repository.list_events_between(check_in, check_out)
        quote = build_quote(
            property_=property_,
            check_in=check_in,
            check_out=check_out,
            booking_type=booking_type,
            events=events,
            occupancy_rate=occupancy_rate,
            competitor_avg=self._resolve_competitor_avg(property_, competitor_avg),
            config=self._config,
            reference_date=reference_date or utc_today(),
            room_number=room_number,
        )
        logger.info(
            "Stay quoted | property_id=%s | check_in=%s | nights=%s | subtotal=%s | total=%s",
            property_id,
            check_in.isoformat(),
            quote.nights,
            quote.subtotal,
            quote.total,
        )
        return quote
