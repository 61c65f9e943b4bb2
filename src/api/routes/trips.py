"""
Trip endpoints
==============

GET   /api/v1/trips                      -- trips visible to a role / actor
POST  /api/v1/trips                      -- request a trip (returns 202 Accepted)
GET   /api/v1/trips/{trip_id}            -- one trip
POST  /api/v1/trips/{trip_id}/advance    -- next step of the workflow
POST  /api/v1/trips/{trip_id}/verify     -- boarding PIN check
POST  /api/v1/trips/{trip_id}/cancel     -- explicit cancellation
POST  /api/v1/trips/{trip_id}/signal     -- toggle a coordination signal
POST  /api/v1/trips/{trip_id}/arrival    -- staff confirms the child arrived
POST  /api/v1/trips/{trip_id}/panic      -- guardian SOS
POST  /api/v1/trips/{trip_id}/deviation  -- external route-deviation report
POST  /api/v1/trips/{trip_id}/alerts     -- operator raises an alert
GET   /api/v1/trips/{trip_id}/status     -- guardian status card
GET   /api/v1/trips/{trip_id}/quick-replies
GET   /api/v1/trips/{trip_id}/safety
"""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Request, Response

from src.advisory.guarded import GuardedAdvisory
from src.api.dependencies import get_advisory, get_service
from src.api.middleware import limiter
from src.api.schemas import (
    AdvanceRequest,
    AlertCreateRequest,
    AlertResponse,
    BookingResponse,
    DeviationRequest,
    ErrorResponse,
    QuickRepliesResponse,
    SafetyResponse,
    SignalRequest,
    StatusCardResponse,
    TripCreateRequest,
    TripResponse,
    VerifyRequest,
)
from src.config import settings
from src.domain.dispatch import TripOptions
from src.domain.enums import UserRole
from src.services.trip_service import TripService

router = APIRouter(prefix="/trips", tags=["trips"])


@router.get("", response_model=list[TripResponse], summary="List trips for a viewer")
@limiter.limit(settings.rate_limit)
async def list_trips(
    request: Request,
    role: UserRole,
    actor_id: Optional[str] = None,
    service: TripService = Depends(get_service),
):
    return service.list_trips(role, actor_id)


@router.post(
    "",
    status_code=202,
    response_model=BookingResponse,
    summary="Request a trip",
    responses={202: {"description": "Request accepted; matching may be pending."}},
)
@limiter.limit(settings.rate_limit)
async def request_trip(
    request: Request,
    body: TripCreateRequest,
    service: TripService = Depends(get_service),
):
    options = TripOptions(
        is_recurring=body.is_recurring,
        frequency=body.frequency,
        pickup_lat=body.pickup_lat,
        pickup_lng=body.pickup_lng,
        auto_match=body.auto_match,
    )
    return await service.request_trip(body.child_id, options)


@router.get(
    "/{trip_id}",
    response_model=TripResponse,
    summary="Get a trip",
    responses={404: {"model": ErrorResponse}},
)
@limiter.limit(settings.rate_limit)
async def get_trip(
    request: Request, trip_id: str, service: TripService = Depends(get_service)
):
    return service.get_trip(trip_id)


# ── Workflow ──────────────────────────────────────────────────────────


@router.post(
    "/{trip_id}/advance",
    response_model=TripResponse,
    summary="Advance the trip one step",
    description="ARRIVED_AT_PICKUP only moves on through /verify.",
)
@limiter.limit(settings.rate_limit)
async def advance_trip(
    request: Request,
    trip_id: str,
    body: AdvanceRequest,
    service: TripService = Depends(get_service),
):
    return await service.advance(trip_id, body.actor_role)


@router.post("/{trip_id}/verify", response_model=TripResponse, summary="Verify boarding PIN")
@limiter.limit(settings.rate_limit)
async def verify_pin(
    request: Request,
    trip_id: str,
    body: VerifyRequest,
    service: TripService = Depends(get_service),
):
    return await service.verify(trip_id, body.pin)


@router.post("/{trip_id}/cancel", response_model=TripResponse, summary="Cancel a trip")
@limiter.limit(settings.rate_limit)
async def cancel_trip(
    request: Request, trip_id: str, service: TripService = Depends(get_service)
):
    return await service.cancel(trip_id)


# ── Coordination ──────────────────────────────────────────────────────


@router.post(
    "/{trip_id}/signal",
    response_model=TripResponse,
    summary="Toggle a coordination signal",
)
@limiter.limit(settings.rate_limit)
async def set_signal(
    request: Request,
    trip_id: str,
    body: SignalRequest,
    service: TripService = Depends(get_service),
):
    return await service.set_signal(trip_id, body.signal)


@router.post(
    "/{trip_id}/arrival",
    response_model=TripResponse,
    summary="Staff confirms the child was received",
)
@limiter.limit(settings.rate_limit)
async def confirm_arrival(
    request: Request, trip_id: str, service: TripService = Depends(get_service)
):
    return await service.confirm_arrival(trip_id)


# ── Alerts ────────────────────────────────────────────────────────────


@router.post("/{trip_id}/panic", response_model=TripResponse, summary="Guardian SOS")
@limiter.limit(settings.rate_limit)
async def panic(
    request: Request, trip_id: str, service: TripService = Depends(get_service)
):
    return await service.raise_panic(trip_id)


@router.post(
    "/{trip_id}/deviation", response_model=TripResponse, summary="Report a route deviation"
)
@limiter.limit(settings.rate_limit)
async def report_deviation(
    request: Request,
    trip_id: str,
    body: DeviationRequest,
    service: TripService = Depends(get_service),
):
    return await service.flag_deviation(trip_id, body.message)


@router.post(
    "/{trip_id}/alerts",
    status_code=201,
    response_model=AlertResponse,
    summary="Raise an alert",
    responses={204: {"description": "An unresolved alert of this type already exists."}},
)
@limiter.limit(settings.rate_limit)
async def create_alert(
    request: Request,
    trip_id: str,
    body: AlertCreateRequest,
    service: TripService = Depends(get_service),
):
    alert = await service.raise_alert(trip_id, body.type, body.message)
    if alert is None:
        return Response(status_code=204)
    return alert


# ── Views backed by the advisory service ──────────────────────────────


@router.get("/{trip_id}/status", response_model=StatusCardResponse, summary="Status card")
@limiter.limit(settings.rate_limit)
async def status_card(
    request: Request,
    trip_id: str,
    service: TripService = Depends(get_service),
    advisory: GuardedAdvisory = Depends(get_advisory),
):
    card = service.status_summary(trip_id)
    trip = service.get_trip(trip_id)
    eta = trip.estimated_arrival.strftime("%H:%M") if trip.estimated_arrival else "--:--"
    update = await advisory.compose_status_update(trip.status.value, eta)
    return StatusCardResponse(
        trip_id=trip_id, label=card.label, message=card.message, update=update
    )


@router.get(
    "/{trip_id}/quick-replies",
    response_model=QuickRepliesResponse,
    summary="Suggested chat replies",
)
@limiter.limit(settings.rate_limit)
async def quick_replies(
    request: Request,
    trip_id: str,
    service: TripService = Depends(get_service),
    advisory: GuardedAdvisory = Depends(get_advisory),
):
    trip, child, _ = service.trip_context(trip_id)
    return QuickRepliesResponse(
        replies=await advisory.suggest_quick_replies(trip, child.name)
    )


@router.get("/{trip_id}/safety", response_model=SafetyResponse, summary="Safety analysis")
@limiter.limit(settings.rate_limit)
async def safety(
    request: Request,
    trip_id: str,
    service: TripService = Depends(get_service),
    advisory: GuardedAdvisory = Depends(get_advisory),
):
    trip, child, driver = service.trip_context(trip_id)
    return await advisory.analyze_safety(trip, child, driver)
