"""Pricing signals that each map one night to a named multiplier.

Every factor is a pure function of a :class:`NightContext`. ``PRICING_FACTORS``
fixes the order in which the night rate calculator blends them, and pairs each
factor with the name of its weight on :class:`FactorWeights`.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Callable, Optional, Sequence

from backend.domain.models import IMPACT_HIGH, Event, FactorResult


@dataclass(frozen=True)
class NightContext:
    night: date
    base_rate: float
    check_in: date
    reference_date: date
    events: Sequence[Event] = ()
    occupancy_rate: Optional[float] = None
    competitor_avg: Optional[float] = None


FactorFn = Callable[[NightContext], FactorResult]


def _events_on(night: date, events: Sequence[Event]) -> list[Event]:
    night_key = night.isoformat()
    return [event for event in events if event.event_date.isoformat() == night_key]


def _within(event: Event, miles: float) -> bool:
    return not event.distance_miles or event.distance_miles < miles


def event_factor(context: NightContext) -> FactorResult:
    day_events = _events_on(context.night, context.events)
    if not day_events:
        return FactorResult("events", 1.0, "No events")

    major_event = next(
        (
            event
            for event in day_events
            if (event.event_type == "sports" or event.impact == IMPACT_HIGH)
            and _within(event, 5)
        ),
        None,
    )
    if major_event is not None:
        multiplier, reason = 1.50, f"Major event: {major_event.name}"
    elif len(day_events) >= 3:
        multiplier, reason = 1.30, f"{len(day_events)} events nearby"
    elif any(event.impact == IMPACT_HIGH for event in day_events):
        multiplier, reason = 1.25, "High-demand event"
    elif any(_within(event, 3) for event in day_events):
        multiplier, reason = 1.15, "Event within 3 miles"
    else:
        multiplier, reason = 1.10, "Local events"
    return FactorResult("events", multiplier, reason, tuple(day_events))


def season_factor(context: NightContext) -> FactorResult:
    month = context.night.month
    day = context.night.day

    is_christmas = month == 12 and day >= 20
    is_new_years = month == 1 and day <= 3
    is_thanksgiving = month == 11 and 20 <= day <= 30
    is_july_4th = month == 7 and day <= 7
    is_memorial_day = month == 5 and day >= 25
    is_labor_day = month == 9 and day <= 7

    if is_christmas or is_new_years:
        return FactorResult("season", 1.40, "Holiday peak season")
    if is_thanksgiving or is_july_4th:
        return FactorResult("season", 1.30, "Holiday weekend")
    if is_memorial_day or is_labor_day:
        return FactorResult("season", 1.20, "Holiday weekend")
    if 6 <= month <= 8:
        return FactorResult("season", 1.15, "Summer season")
    if month in (1, 2):
        return FactorResult("season", 0.90, "Off-season")
    return FactorResult("season", 1.0, "Regular season")


def day_of_week_factor(context: NightContext) -> FactorResult:
    weekday = context.night.weekday()  # Monday == 0

    if weekday in (4, 5):
        return FactorResult("day_of_week", 1.20, "Weekend premium")
    if weekday == 6:
        return FactorResult("day_of_week", 1.05, "Sunday")
    if weekday == 3:
        return FactorResult("day_of_week", 1.05, "Thursday")
    if weekday in (1, 2):
        return FactorResult("day_of_week", 0.95, "Midweek discount")
    return FactorResult("day_of_week", 1.0, "Regular day")


def lead_time_factor(context: NightContext) -> FactorResult:
    # Measured from the stay's check-in, so every night of a stay agrees.
    days_out = (context.check_in - context.reference_date).days

    if days_out <= 2:
        return FactorResult("lead_time", 1.15, "Last-minute booking")
    if days_out <= 7:
        return FactorResult("lead_time", 1.05, "Short notice")
    if days_out > 90:
        return FactorResult("lead_time", 0.95, "Early bird discount")
    if days_out > 60:
        return FactorResult("lead_time", 0.98, "Advance booking")
    return FactorResult("lead_time", 1.0, "Standard booking window")


def occupancy_factor(context: NightContext) -> FactorResult:
    occupancy_rate = context.occupancy_rate
    if occupancy_rate is None:
        return FactorResult("occupancy", 1.0, "No occupancy data")

    if occupancy_rate >= 0.9:
        return FactorResult("occupancy", 1.25, "High demand (90%+ booked)")
    if occupancy_rate >= 0.75:
        return FactorResult("occupancy", 1.15, "Strong demand (75%+ booked)")
    if occupancy_rate <= 0.3:
        return FactorResult("occupancy", 0.90, "Low occupancy discount")
    if occupancy_rate <= 0.5:
        return FactorResult("occupancy", 0.95, "Moderate occupancy")
    return FactorResult("occupancy", 1.0, "Normal occupancy")


def competition_factor(context: NightContext) -> FactorResult:
    if not context.competitor_avg:
        return FactorResult("competition", 1.0, "No competitor data")

    ratio = context.base_rate / context.competitor_avg
    if ratio > 1.2:
        return FactorResult("competition", 0.95, "Market adjustment")
    if ratio < 0.8:
        return FactorResult("competition", 1.10, "Below market rate")
    return FactorResult("competition", 1.0, "Competitive rate")


PRICING_FACTORS: tuple[tuple[str, FactorFn], ...] = (
    ("events", event_factor),
    ("seasonality", season_factor),
    ("day_of_week", day_of_week_factor),
    ("lead_time", lead_time_factor),
    ("occupancy", occupancy_factor),
    ("competition", competition_factor),
)
