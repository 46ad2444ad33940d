"""Environment-driven application settings."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path


def _env_str(name: str, default: str) -> str:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    return value.strip()


def _env_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    try:
        return float(value)
    except ValueError as exc:
        raise ValueError(f"{name} must be a number, got {value!r}") from exc


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Settings:
    app_name: str
    app_version: str
    log_level: str
    log_format: str
    database_path: Path
    seed_on_startup: bool

    # Platform fees
    cleaning_fee_full: float
    cleaning_fee_room: float
    service_fee_percent: float
    tax_rate: float

    # Blend weights, must sum to 1.0
    weight_events: float
    weight_seasonality: float
    weight_day_of_week: float
    weight_lead_time: float
    weight_occupancy: float
    weight_competition: float

    # Default multiplier bounds when a property has none of its own
    default_min_multiplier: float
    default_max_multiplier: float
    default_weekend_premium: float
    default_last_minute_discount: float
    default_far_out_discount: float

    report_default_occupancy_rate: float


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Read settings from the environment once per process."""
    project_root = Path(__file__).resolve().parents[2]
    return Settings(
        app_name=_env_str("APP_NAME", "Stay Pricing Service"),
        app_version=_env_str("APP_VERSION", "1.0.0"),
        log_level=_env_str("LOG_LEVEL", "INFO"),
        log_format=_env_str(
            "LOG_FORMAT",
            "%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        ),
        database_path=Path(
            _env_str("DATABASE_PATH", str(project_root / "data" / "stays.db"))
        ),
        seed_on_startup=_env_bool("SEED_ON_STARTUP", True),
        cleaning_fee_full=_env_float("CLEANING_FEE_FULL", 75.0),
        cleaning_fee_room=_env_float("CLEANING_FEE_ROOM", 35.0),
        service_fee_percent=_env_float("SERVICE_FEE_PERCENT", 0.12),
        tax_rate=_env_float("TAX_RATE", 0.08),
        weight_events=_env_float("WEIGHT_EVENTS", 0.30),
        weight_seasonality=_env_float("WEIGHT_SEASONALITY", 0.25),
        weight_day_of_week=_env_float("WEIGHT_DAY_OF_WEEK", 0.15),
        weight_lead_time=_env_float("WEIGHT_LEAD_TIME", 0.10),
        weight_occupancy=_env_float("WEIGHT_OCCUPANCY", 0.10),
        weight_competition=_env_float("WEIGHT_COMPETITION", 0.10),
        default_min_multiplier=_env_float("DEFAULT_MIN_MULTIPLIER", 0.70),
        default_max_multiplier=_env_float("DEFAULT_MAX_MULTIPLIER", 2.00),
        default_weekend_premium=_env_float("DEFAULT_WEEKEND_PREMIUM", 1.15),
        default_last_minute_discount=_env_float("DEFAULT_LAST_MINUTE_DISCOUNT", 0.90),
        default_far_out_discount=_env_float("DEFAULT_FAR_OUT_DISCOUNT", 0.95),
        report_default_occupancy_rate=_env_float("REPORT_DEFAULT_OCCUPANCY_RATE", 0.5),
    )
