"""HTTP controller layer for quotes and operator pricing reports."""

from __future__ import annotations

from datetime import date
from typing import Literal, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import BaseModel, Field, model_validator

from backend.controllers.dependencies import get_pricing_service, get_reporting_service
from backend.services.pricing_service import (
    PricingService,
    PricingValidationError,
    PropertyNotFoundError,
)
from backend.services.reporting_service import ReportingService, ReportingValidationError
from backend.utils.logger import get_logger


logger = get_logger(__name__)

router = APIRouter(tags=["pricing"])


class EventResponse(BaseModel):
    event_id: Optional[int] = None
    name: str
    event_date: date
    event_type: str
    impact: str
    distance_miles: Optional[float] = None
    venue: Optional[str] = None


class FactorResponse(BaseModel):
    type: str
    multiplier: float = Field(gt=0.0)
    reason: str
    events: list[EventResponse] = Field(default_factory=list)


class PricedNightResponse(BaseModel):
    date: str
    day_of_week: str
    base_rate: float
    multiplier: float = Field(gt=0.0)
    final_rate: int
    factors: list[FactorResponse]
    adjustment: float
    adjustment_percent: int


class QuoteFeesResponse(BaseModel):
    cleaning: float = Field(ge=0.0)
    service: int = Field(ge=0)
    taxes: int = Field(ge=0)


class QuoteAnalysisResponse(BaseModel):
    total_multiplier: float
    average_multiplier: float
    peak_night: Optional[PricedNightResponse] = None
    lowest_night: Optional[PricedNightResponse] = None
    savings_from_base: float = Field(ge=0.0)
    surcharge_from_base: float = Field(ge=0.0)


class QuoteResponse(BaseModel):
    nights: int
    base_rate: float
    average_nightly: int
    subtotal: int
    fees: QuoteFeesResponse
    total: float
    breakdown: list[PricedNightResponse]
    analysis: QuoteAnalysisResponse


class QuoteRequest(BaseModel):
    """Input DTO validated before entering service layer."""

    property_id: str = Field(min_length=1)
    check_in: date
    check_out: date
    booking_type: Literal["full", "room"] = "full"
    room_number: Optional[int] = Field(default=None, gt=0)
    occupancy_rate: Optional[float] = Field(default=None, ge=0.0, le=1.0)
    competitor_avg: Optional[float] = Field(default=None, gt=0.0)
    reference_date: Optional[date] = None

    @model_validator(mode="after")
    def validate_date_order(self) -> "QuoteRequest":
        if self.check_out <= self.check_in:
            raise ValueError("check_out must be after check_in")
        return self


class PreviewPricingRequest(BaseModel):
    property_id: str = Field(min_length=1)
    start_date: date
    end_date: date
    reference_date: Optional[date] = None

    @model_validator(mode="after")
    def validate_window(self) -> "PreviewPricingRequest":
        if self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self


class PreviewPricingResponse(BaseModel):
    property_id: str
    nights: list[PricedNightResponse]


class BookingResponse(BaseModel):
    booking_id: Optional[int] = None
    property_id: str
    check_in: date
    check_out: date
    booking_type: str
    room_number: Optional[int] = None
    guests: int = Field(gt=0)
    nightly_rate: float
    total_price: float
    guest_name: Optional[str] = None
    guest_email: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class ReportDayResponse(PricedNightResponse):
    is_booked: bool
    booking: Optional[BookingResponse] = None


class MonthlySummaryResponse(BaseModel):
    avg_rate: int
    peak_rate: int
    lowest_rate: int
    booked_nights: int = Field(ge=0)
    revenue: int = Field(ge=0)
    potential_revenue: int = Field(ge=0)
    occupancy_rate: float = Field(ge=0.0, le=1.0)


class MonthlyReportResponse(BaseModel):
    property_id: str
    year: int
    month: int = Field(ge=1, le=12)
    month_label: str
    days: list[ReportDayResponse]
    summary: MonthlySummaryResponse


@router.post("/quote", response_model=QuoteResponse, status_code=status.HTTP_200_OK)
async def quote(
    payload: QuoteRequest,
    service: PricingService = Depends(get_pricing_service),
) -> QuoteResponse:
    """Price a stay night by night and add platform fees."""
    try:
        result = service.quote_stay(
            property_id=payload.property_id,
            check_in=payload.check_in,
            check_out=payload.check_out,
            booking_type=payload.booking_type,
            room_number=payload.room_number,
            occupancy_rate=payload.occupancy_rate,
            competitor_avg=payload.competitor_avg,
            reference_date=payload.reference_date,
        )
        return QuoteResponse(**result.to_dict())
    except PricingValidationError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from exc
    except PropertyNotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(exc),
        ) from exc
    except Exception as exc:  # pragma: no cover - defensive fallback
        logger.exception("Unexpected quote failure")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to build quote",
        ) from exc


@router.post(
    "/preview_pricing",
    response_model=PreviewPricingResponse,
    status_code=status.HTTP_200_OK,
)
async def preview_pricing(
    payload: PreviewPricingRequest,
    service: ReportingService = Depends(get_reporting_service),
) -> PreviewPricingResponse:
    try:
        nights = service.preview(
            property_id=payload.property_id,
            start_date=payload.start_date,
            end_date=payload.end_date,
            reference_date=payload.reference_date,
        )
        return PreviewPricingResponse(
            property_id=payload.property_id,
            nights=[PricedNightResponse(**night.to_dict()) for night in nights],
        )
    except ReportingValidationError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from exc
    except PropertyNotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(exc),
        ) from exc
    except Exception as exc:  # pragma: no cover - defensive fallback
        logger.exception("Unexpected pricing preview failure")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to preview pricing",
        ) from exc


@router.get(
    "/monthly_report/{property_id}",
    response_model=MonthlyReportResponse,
    status_code=status.HTTP_200_OK,
)
async def monthly_report(
    property_id: str,
    year: int = Query(ge=1970, le=9999),
    month: int = Query(ge=1, le=12),
    reference_date: Optional[date] = None,
    service: ReportingService = Depends(get_reporting_service),
) -> MonthlyReportResponse:
    try:
        report = service.monthly(
            property_id=property_id,
            year=year,
            month=month,
            reference_date=reference_date,
        )
        return MonthlyReportResponse(**report.to_dict())
    except ReportingValidationError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from exc
    except PropertyNotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(exc),
        ) from exc
    except Exception as exc:  # pragma: no cover - defensive fallback
        logger.exception("Unexpected monthly report failure")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to build monthly report",
        ) from exc
