"""Pydantic request / response schemas for the REST API."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from src.domain.enums import (
    AlertType,
    CoordinationSignal,
    Frequency,
    TrackingHealth,
    TripStatus,
    UserRole,
)


# ── Requests ──────────────────────────────────────────────────────────


class TripCreateRequest(BaseModel):
    child_id: str
    is_recurring: bool = False
    frequency: Optional[Frequency] = None
    pickup_lat: Optional[float] = Field(None, ge=-90, le=90)
    pickup_lng: Optional[float] = Field(None, ge=-180, le=180)
    auto_match: bool = Field(
        False, description="Parent booking: match a driver immediately."
    )


class AdvanceRequest(BaseModel):
    actor_role: UserRole


class VerifyRequest(BaseModel):
    pin: str = Field(..., min_length=1, max_length=8)


class OfferRequest(BaseModel):
    driver_id: str


class RejectRequest(BaseModel):
    reason: str = Field(..., min_length=1, max_length=200)


class DeclineRequest(RejectRequest):
    driver_id: str


class SignalRequest(BaseModel):
    signal: CoordinationSignal


class DeviationRequest(BaseModel):
    message: str = Field("Route deviation detected.", max_length=200)


class AlertCreateRequest(BaseModel):
    type: AlertType
    message: str = Field(..., min_length=1, max_length=200)


# ── Responses ─────────────────────────────────────────────────────────


class AlertResponse(BaseModel):
    id: str
    trip_id: str
    type: AlertType
    message: str
    timestamp: datetime
    resolved: bool

    model_config = {"from_attributes": True}


class TripResponse(BaseModel):
    id: str
    child_id: str
    driver_id: Optional[str] = None
    status: TripStatus
    start_time: datetime
    end_time: Optional[datetime] = None
    estimated_arrival: Optional[datetime] = None
    current_lat: float
    current_lng: float
    route_deviation: bool
    alerts: list[AlertResponse] = []
    tracking_health: TrackingHealth
    driver_location_authorized: bool
    last_updated: datetime
    coordination_signal: Optional[CoordinationSignal] = None
    rejection_reason: Optional[str] = None
    is_recurring: bool = False
    frequency: Optional[Frequency] = None

    model_config = {"from_attributes": True}


class BookingResponse(TripResponse):
    """Returned once to the booking guardian; carries the boarding PIN."""

    verification_pin: Optional[str] = None


class StatusCardResponse(BaseModel):
    trip_id: str
    label: str
    message: str
    update: str


class QuickRepliesResponse(BaseModel):
    replies: list[str]


class SafetyResponse(BaseModel):
    is_safe: bool
    alert_message: Optional[str] = None
    recommendation: str

    model_config = {"from_attributes": True}


class HealthResponse(BaseModel):
    status: str = "ok"
    trips: int = 0
    tracking: bool = False


class ErrorResponse(BaseModel):
    detail: str
    code: str
