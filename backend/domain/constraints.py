"""Pricing configuration and its validation rules."""

from __future__ import annotations

import math
from dataclasses import dataclass

from backend.domain.models import BOOKING_TYPE_ROOM, PricingConstraints
from backend.utils.config import Settings


@dataclass(frozen=True)
class FactorWeights:
    events: float = 0.30
    seasonality: float = 0.25
    day_of_week: float = 0.15
    lead_time: float = 0.10
    occupancy: float = 0.10
    competition: float = 0.10

    def total(self) -> float:
        return (
            self.events
            + self.seasonality
            + self.day_of_week
            + self.lead_time
            + self.occupancy
            + self.competition
        )


@dataclass(frozen=True)
class PlatformFees:
    cleaning_fee_full: float = 75.0
    cleaning_fee_room: float = 35.0
    service_fee_percent: float = 0.12
    tax_rate: float = 0.08

    def cleaning_fee_for(self, booking_type: str) -> float:
        if booking_type == BOOKING_TYPE_ROOM:
            return self.cleaning_fee_room
        return self.cleaning_fee_full


@dataclass(frozen=True)
class PricingConfig:
    weights: FactorWeights = FactorWeights()
    fees: PlatformFees = PlatformFees()
    default_constraints: PricingConstraints = PricingConstraints(
        min_multiplier=0.70,
        max_multiplier=2.00,
    )
    report_occupancy_rate: float = 0.5


def validate_pricing_constraints(constraints: PricingConstraints) -> None:
    if constraints.min_multiplier <= 0.0:
        raise ValueError("min_multiplier must be > 0")
    if constraints.min_multiplier > constraints.max_multiplier:
        raise ValueError("min_multiplier must be <= max_multiplier")


def validate_pricing_config(config: PricingConfig) -> None:
    weights = config.weights
    for name in ("events", "seasonality", "day_of_week", "lead_time", "occupancy", "competition"):
        if getattr(weights, name) < 0.0:
            raise ValueError(f"weight {name} must be >= 0")
    if not math.isclose(weights.total(), 1.0, abs_tol=1e-9):
        raise ValueError("factor weights must sum to 1.0")
    if not 0.0 <= config.fees.service_fee_percent <= 1.0:
        raise ValueError("service_fee_percent must be between 0 and 1")
    if not 0.0 <= config.fees.tax_rate <= 1.0:
        raise ValueError("tax_rate must be between 0 and 1")
    if config.fees.cleaning_fee_full < 0.0 or config.fees.cleaning_fee_room < 0.0:
        raise ValueError("cleaning fees must be >= 0")
    if not 0.0 <= config.report_occupancy_rate <= 1.0:
        raise ValueError("report_occupancy_rate must be between 0 and 1")
    validate_pricing_constraints(config.default_constraints)


def build_pricing_config(settings: Settings) -> PricingConfig:
    """Freeze the pricing-relevant settings into a validated config value."""
    config = PricingConfig(
        weights=FactorWeights(
            events=settings.weight_events,
            seasonality=settings.weight_seasonality,
            day_of_week=settings.weight_day_of_week,
            lead_time=settings.weight_lead_time,
            occupancy=settings.weight_occupancy,
            competition=settings.weight_competition,
        ),
        fees=PlatformFees(
            cleaning_fee_full=settings.cleaning_fee_full,
            cleaning_fee_room=settings.cleaning_fee_room,
            service_fee_percent=settings.service_fee_percent,
            tax_rate=settings.tax_rate,
        ),
        default_constraints=PricingConstraints(
            min_multiplier=settings.default_min_multiplier,
            max_multiplier=settings.default_max_multiplier,
            weekend_premium=settings.default_weekend_premium,
            last_minute_discount=settings.default_last_minute_discount,
            far_out_discount=settings.default_far_out_discount,
        ),
        report_occupancy_rate=settings.report_default_occupancy_rate,
    )
    validate_pricing_config(config)
    return config
