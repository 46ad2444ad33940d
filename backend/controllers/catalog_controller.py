"""HTTP controller for the property catalogue and local event calendar."""

from __future__ import annotations

from datetime import date
from typing import Literal, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from pydantic import BaseModel, Field, field_validator, model_validator

from backend.controllers.dependencies import get_repository
from backend.controllers.pricing_controller import EventResponse
from backend.domain.constraints import validate_pricing_constraints
from backend.domain.models import Event, PricingConstraints, Property
from backend.repository.data_repository import DataRepository
from backend.utils.logger import get_logger


logger = get_logger(__name__)

router = APIRouter(tags=["catalog"])


class HealthResponse(BaseModel):
    status: str
    app_name: str
    version: str
    properties: int = Field(ge=0)


class PricingConstraintsPayload(BaseModel):
    min_multiplier: float = Field(gt=0.0)
    max_multiplier: float = Field(gt=0.0)
    weekend_premium: float = Field(default=1.15, gt=0.0)
    last_minute_discount: float = Field(default=0.90, gt=0.0)
    far_out_discount: float = Field(default=0.95, gt=0.0)

    @model_validator(mode="after")
    def validate_bounds(self) -> "PricingConstraintsPayload":
        if self.min_multiplier > self.max_multiplier:
            raise ValueError("min_multiplier must be <= max_multiplier")
        return self


class PropertyPayload(BaseModel):
    name: str = Field(min_length=1)
    nightly_full: float = Field(ge=0.0)
    nightly_room: float = Field(default=0.0, ge=0.0)
    rentable_rooms: int = Field(default=0, ge=0)
    pricing_constraints: Optional[PricingConstraintsPayload] = None
    area: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    bedrooms: int = Field(default=0, ge=0)
    max_guests_full: int = Field(default=0, ge=0)
    max_guests_room: int = Field(default=0, ge=0)


class PropertyResponse(PropertyPayload):
    property_id: str


class EventRequest(BaseModel):
    name: str = Field(min_length=1)
    event_date: date
    event_type: str = Field(default="other", min_length=1)
    impact: Literal["normal", "high"] = "normal"
    distance_miles: Optional[float] = Field(default=None, ge=0.0)
    venue: Optional[str] = None

    @field_validator("name", "event_type")
    @classmethod
    def strip_text(cls, value: str) -> str:
        stripped = value.strip()
        if not stripped:
            raise ValueError("must not be blank")
        return stripped


def _get_property_or_404(repository: DataRepository, property_id: str) -> Property:
    property_ = repository.get_property(property_id)
    if property_ is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"property {property_id} not found",
        )
    return property_


@router.get("/health", response_model=HealthResponse, status_code=status.HTTP_200_OK)
async def health(
    request: Request,
    repository: DataRepository = Depends(get_repository),
) -> HealthResponse:
    return HealthResponse(
        status="ok",
        app_name=request.app.title,
        version=request.app.version,
        properties=len(repository.list_properties()),
    )


@router.get(
    "/properties",
    response_model=list[PropertyResponse],
    status_code=status.HTTP_200_OK,
)
async def list_properties(
    area: Optional[str] = None,
    repository: DataRepository = Depends(get_repository),
) -> list[PropertyResponse]:
    properties = (
        repository.list_properties_by_area(area) if area else repository.list_properties()
    )
    return [PropertyResponse(**item.to_dict()) for item in properties]


@router.get(
    "/properties/{property_id}",
    response_model=PropertyResponse,
    status_code=status.HTTP_200_OK,
)
async def get_property(
    property_id: str,
    repository: DataRepository = Depends(get_repository),
) -> PropertyResponse:
    return PropertyResponse(**_get_property_or_404(repository, property_id).to_dict())


@router.put(
    "/properties/{property_id}",
    response_model=PropertyResponse,
    status_code=status.HTTP_200_OK,
)
async def save_property(
    property_id: str,
    payload: PropertyPayload,
    repository: DataRepository = Depends(get_repository),
) -> PropertyResponse:
    """Create or replace a property; listed rates apply to future quotes only."""
    constraints = None
    if payload.pricing_constraints is not None:
        constraints = PricingConstraints(**payload.pricing_constraints.model_dump())
    try:
        if constraints is not None:
            validate_pricing_constraints(constraints)
        saved = repository.save_property(
            Property(
                property_id=property_id,
                name=payload.name,
                nightly_full=payload.nightly_full,
                nightly_room=payload.nightly_room,
                rentable_rooms=payload.rentable_rooms,
                pricing_constraints=constraints,
                area=payload.area,
                address=payload.address,
                city=payload.city,
                bedrooms=payload.bedrooms,
                max_guests_full=payload.max_guests_full,
                max_guests_room=payload.max_guests_room,
            )
        )
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from exc
    except Exception as exc:  # pragma: no cover - defensive fallback
        logger.exception("Unexpected property save failure")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to save property",
        ) from exc

    logger.info("Property saved | property_id=%s | nightly_full=%s", property_id, saved.nightly_full)
    return PropertyResponse(**saved.to_dict())


@router.post("/events", response_model=EventResponse, status_code=status.HTTP_201_CREATED)
async def create_event(
    payload: EventRequest,
    repository: DataRepository = Depends(get_repository),
) -> EventResponse:
    try:
        saved = repository.save_event(Event(**payload.model_dump()))
    except Exception as exc:  # pragma: no cover - defensive fallback
        logger.exception("Unexpected event save failure")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to save event",
        ) from exc

    logger.info(
        "Event saved | event_id=%s | event_date=%s | impact=%s",
        saved.event_id,
        saved.event_date.isoformat(),
        saved.impact,
    )
    return EventResponse(**saved.to_dict())


@router.get("/events", response_model=list[EventResponse], status_code=status.HTTP_200_OK)
async def list_events(
    event_date: Optional[date] = Query(default=None, alias="date"),
    repository: DataRepository = Depends(get_repository),
) -> list[EventResponse]:
    events = (
        repository.list_events_by_date(event_date) if event_date else repository.list_events()
    )
    return [EventResponse(**event.to_dict()) for event in events]
