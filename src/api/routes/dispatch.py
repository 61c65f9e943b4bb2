"""
Dispatch endpoints
==================

POST   /api/v1/trips/{trip_id}/approve  -- operator approves and matches a driver
POST   /api/v1/trips/{trip_id}/reject   -- operator rejects; back to the pool with a reason
DELETE /api/v1/trips/{trip_id}          -- withdraw an unmatched request (deleted)
POST   /api/v1/trips/{trip_id}/offer    -- soft-assign a request to one driver
POST   /api/v1/trips/{trip_id}/decline  -- that driver declines; back to the pool
GET    /api/v1/dispatch/decline-reasons -- reasons offered to drivers
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request

from src.api.dependencies import get_service
from src.api.middleware import limiter
from src.api.schemas import DeclineRequest, OfferRequest, RejectRequest, TripResponse
from src.config import settings
from src.domain.dispatch import DECLINE_REASONS
from src.services.trip_service import TripService

router = APIRouter(tags=["dispatch"])


@router.post(
    "/trips/{trip_id}/approve",
    response_model=TripResponse,
    summary="Approve a request and match an approved driver",
)
@limiter.limit(settings.rate_limit)
async def approve_match(
    request: Request, trip_id: str, service: TripService = Depends(get_service)
):
    return await service.approve_match(trip_id)


@router.post(
    "/trips/{trip_id}/reject",
    response_model=TripResponse,
    summary="Reject a pending match",
    description="Clears any offered driver, keeps the reason, stays MATCHING.",
)
@limiter.limit(settings.rate_limit)
async def reject_match(
    request: Request,
    trip_id: str,
    body: RejectRequest,
    service: TripService = Depends(get_service),
):
    return await service.reject_match(trip_id, body.reason)


@router.delete(
    "/trips/{trip_id}",
    response_model=TripResponse,
    summary="Withdraw an unmatched request",
    description="Removes the request entirely. Only valid while MATCHING.",
)
@limiter.limit(settings.rate_limit)
async def discard_request(
    request: Request, trip_id: str, service: TripService = Depends(get_service)
):
    return await service.discard_request(trip_id)


@router.post(
    "/trips/{trip_id}/offer",
    response_model=TripResponse,
    summary="Offer a pending request to a driver",
)
@limiter.limit(settings.rate_limit)
async def offer_trip(
    request: Request,
    trip_id: str,
    body: OfferRequest,
    service: TripService = Depends(get_service),
):
    return await service.offer_trip(trip_id, body.driver_id)


@router.post(
    "/trips/{trip_id}/decline",
    response_model=TripResponse,
    summary="Driver declines an offered request",
    description="Clears the driver, keeps the reason, returns the trip to MATCHING.",
)
@limiter.limit(settings.rate_limit)
async def decline_offer(
    request: Request,
    trip_id: str,
    body: DeclineRequest,
    service: TripService = Depends(get_service),
):
    return await service.decline_offer(trip_id, body.driver_id, body.reason)


@router.get(
    "/dispatch/decline-reasons",
    response_model=list[str],
    summary="Reasons a driver can give when declining",
)
async def decline_reasons():
    return list(DECLINE_REASONS)
