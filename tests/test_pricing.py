from __future__ import annotations

from dataclasses import replace
from datetime import date

import pytest

from backend.domain.constraints import PricingConfig
from backend.domain.models import Event, PricingConstraints, Property
from backend.repository.data_repository import DataRepository
from backend.services.factors import NightContext
from backend.services.pricing_service import (
    PricingService,
    PricingValidationError,
    PropertyNotFoundError,
    build_quote,
    calculate_night_rate,
    round_half_up,
)
from backend.utils.config import get_settings


CONFIG = PricingConfig()
REFERENCE_DATE = date(2025, 11, 1)


def _property(**overrides) -> Property:
    values = {
        "property_id": "test-unit",
        "name": "Test Unit",
        "nightly_full": 275.0,
        "nightly_room": 95.0,
        "rentable_rooms": 3,
        "area": "buckhead",
    }
    values.update(overrides)
    return Property(**values)


def _night(night: date, **overrides) -> NightContext:
    values = {
        "night": night,
        "base_rate": 275.0,
        "check_in": night,
        "reference_date": REFERENCE_DATE,
        "occupancy_rate": 0.5,
    }
    values.update(overrides)
    return NightContext(**values)


def _quote(check_in: date, check_out: date, **overrides):
    values = {
        "property_": _property(),
        "check_in": check_in,
        "check_out": check_out,
        "booking_type": "full",
        "events": (),
        "occupancy_rate": 0.5,
        "competitor_avg": None,
        "config": CONFIG,
        "reference_date": REFERENCE_DATE,
    }
    values.update(overrides)
    return build_quote(**values)


def _build_service(tmp_path) -> tuple[PricingService, DataRepository]:
    settings = replace(get_settings(), database_path=tmp_path / "pricing.db")
    repository = DataRepository(settings)
    repository.initialize_database()
    repository.seed_default_properties()
    return PricingService(repository=repository, settings=settings), repository


def test_round_half_up_matches_half_up_semantics() -> None:
    assert round_half_up(2.5) == 3
    assert round_half_up(3.5) == 4
    assert round_half_up(-0.5) == 0
    assert round_half_up(70.92) == 71


# --- night rate calculator ---

def test_neutral_night_keeps_base_rate() -> None:
    # Monday, regular season, 46 days out, normal occupancy
    priced = calculate_night_rate(
        _night(date(2025, 12, 15), reference_date=date(2025, 10, 30), occupancy_rate=0.6),
        _property(),
        CONFIG,
    )
    assert priced.final_rate == 275
    assert priced.multiplier == 1.0
    assert priced.factors == []
    assert priced.adjustment == 0
    assert priced.adjustment_percent == 0
    assert priced.day_of_week == "Mon"


def test_weighted_deviations_are_summed() -> None:
    priced = calculate_night_rate(_night(date(2025, 12, 20)), _property(), CONFIG)
    # 1 + 0.40 * 0.25 + 0.20 * 0.15 - 0.05 * 0.10
    assert priced.final_rate == 309
    assert priced.adjustment == 34
    assert [factor.factor_type for factor in priced.factors] == [
        "season",
        "day_of_week",
        "occupancy",
    ]


def test_factor_payload_only_lists_events_when_present() -> None:
    night = date(2025, 12, 20)
    events = (Event(name="Bowl Game", event_date=night, event_type="sports", distance_miles=1.0),)
    priced = calculate_night_rate(_night(night, events=events), _property(), CONFIG)
    payload = priced.to_dict()
    event_payload = next(item for item in payload["factors"] if item["type"] == "events")
    season_payload = next(item for item in payload["factors"] if item["type"] == "season")
    assert event_payload["events"][0]["name"] == "Bowl Game"
    assert "events" not in season_payload
    # 1.125 + 0.50 * 0.30
    assert priced.final_rate == 351


def test_property_max_multiplier_clamps_rate() -> None:
    constrained = _property(
        pricing_constraints=PricingConstraints(min_multiplier=0.8, max_multiplier=1.05),
    )
    priced = calculate_night_rate(_night(date(2025, 12, 20)), constrained, CONFIG)
    assert priced.final_rate == 289
    assert priced.multiplier == 1.05


def test_property_min_multiplier_clamps_rate() -> None:
    constrained = _property(
        pricing_constraints=PricingConstraints(min_multiplier=1.0, max_multiplier=1.5),
    )
    # Tuesday in February: off-season and midweek both discount
    priced = calculate_night_rate(_night(date(2026, 2, 10)), constrained, CONFIG)
    assert priced.final_rate == 275
    assert priced.multiplier == 1.0


def test_default_bounds_apply_without_property_constraints() -> None:
    config = replace(
        CONFIG,
        default_constraints=PricingConstraints(min_multiplier=0.7, max_multiplier=1.02),
    )
    priced = calculate_night_rate(_night(date(2025, 12, 20)), _property(), config)
    assert priced.final_rate == round_half_up(275 * 1.02)


def test_night_rate_is_deterministic() -> None:
    context = _night(date(2025, 12, 19))
    first = calculate_night_rate(context, _property(), CONFIG)
    second = calculate_night_rate(context, _property(), CONFIG)
    assert first == second


# --- stay aggregator ---

def test_two_night_quote_end_to_end() -> None:
    quote = _quote(date(2025, 12, 19), date(2025, 12, 21))

    assert quote.is_valid
    assert quote.nights == 2
    assert [night.final_rate for night in quote.breakdown] == [282, 309]
    assert [night.date for night in quote.breakdown] == ["2025-12-19", "2025-12-20"]
    assert quote.subtotal == 591
    assert quote.average_nightly == 296
    assert quote.fees.cleaning == 75
    assert quote.fees.service == 71
    assert quote.fees.taxes == 47
    assert quote.total == 784

    analysis = quote.analysis
    assert analysis.peak_night.date == "2025-12-20"
    assert analysis.lowest_night.date == "2025-12-19"
    assert analysis.surcharge_from_base == 41
    assert analysis.savings_from_base == 0
    assert analysis.total_multiplier == pytest.approx(591 / 550)


def test_discounted_stay_reports_savings() -> None:
    # Tuesday and Wednesday in February
    quote = _quote(date(2026, 2, 10), date(2026, 2, 12))
    assert quote.subtotal < 550
    assert quote.analysis.savings_from_base == 550 - quote.subtotal
    assert quote.analysis.surcharge_from_base == 0


def test_equal_nights_keep_first_as_peak_and_lowest() -> None:
    quote = _quote(date(2026, 2, 10), date(2026, 2, 12))
    assert quote.breakdown[0].final_rate == quote.breakdown[1].final_rate
    assert quote.analysis.peak_night.date == "2026-02-10"
    assert quote.analysis.lowest_night.date == "2026-02-10"


def test_room_quote_uses_room_rate_and_fee() -> None:
    quote = _quote(date(2025, 12, 15), date(2025, 12, 16), booking_type="room")
    assert quote.base_rate == 95.0
    assert quote.fees.cleaning == 35


def test_lead_time_is_shared_across_the_stay() -> None:
    quote = _quote(
        date(2025, 11, 3),
        date(2025, 11, 6),
        reference_date=date(2025, 11, 2),
    )
    for night in quote.breakdown:
        assert "lead_time" in [factor.factor_type for factor in night.factors]


def test_reversed_dates_give_degenerate_quote() -> None:
    quote = _quote(date(2025, 12, 21), date(2025, 12, 19))
    assert not quote.is_valid
    assert quote.nights == -2
    assert quote.breakdown == []
    assert quote.subtotal == 0
    assert quote.total == 75
    assert quote.analysis.peak_night is None


def test_quote_is_deterministic() -> None:
    assert _quote(date(2025, 12, 19), date(2025, 12, 23)) == _quote(
        date(2025, 12, 19),
        date(2025, 12, 23),
    )


# --- pricing service ---

def test_service_quotes_with_stored_events(tmp_path) -> None:
    service, repository = _build_service(tmp_path)
    repository.save_event(
        Event(
            name="Championship",
            event_date=date(2025, 12, 20),
            event_type="sports",
            distance_miles=2.0,
        )
    )
    with_event = service.quote_stay(
        property_id="peachtree-407",
        check_in=date(2025, 12, 19),
        check_out=date(2025, 12, 21),
        occupancy_rate=0.5,
        reference_date=REFERENCE_DATE,
    )
    assert with_event.breakdown[0].final_rate == 282
    assert with_event.breakdown[1].final_rate == 351


def test_service_reads_competitor_average_setting(tmp_path) -> None:
    service, repository = _build_service(tmp_path)
    repository.set_setting("competitor_average:buckhead", 400)
    quote = service.quote_stay(
        property_id="peachtree-407",
        check_in=date(2025, 12, 15),
        check_out=date(2025, 12, 16),
        occupancy_rate=0.6,
        reference_date=date(2025, 10, 30),
    )
    # 275 / 400 is below market, so competition lifts the rate
    assert quote.breakdown[0].final_rate == 278


def test_service_rejects_unknown_property(tmp_path) -> None:
    service, _ = _build_service(tmp_path)
    with pytest.raises(PropertyNotFoundError):
        service.quote_stay(
            property_id="missing",
            check_in=date(2025, 12, 19),
            check_out=date(2025, 12, 21),
        )


@pytest.mark.parametrize(
    ("overrides", "message"),
    [
        ({"check_out": date(2025, 12, 19)}, "check_out"),
        ({"booking_type": "suite"}, "booking_type"),
        ({"booking_type": "room", "room_number": 4}, "room_number"),
        ({"room_number": 1}, "room_number"),
        ({"occupancy_rate": 1.5}, "occupancy_rate"),
    ],
)
def test_service_validates_requests(tmp_path, overrides: dict, message: str) -> None:
    service, _ = _build_service(tmp_path)
    request = {
        "property_id": "peachtree-407",
        "check_in": date(2025, 12, 19),
        "check_out": date(2025, 12, 21),
    }
    request.update(overrides)
    with pytest.raises(PricingValidationError, match=message):
        service.quote_stay(**request)


def test_room_quote_rejected_for_whole_unit_listing(tmp_path) -> None:
    service, _ = _build_service(tmp_path)
    with pytest.raises(PricingValidationError):
        service.quote_stay(
            property_id="roswell-510",
            check_in=date(2025, 12, 19),
            check_out=date(2025, 12, 21),
            booking_type="room",
            room_number=1,
        )
