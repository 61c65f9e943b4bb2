"""
Alert endpoints
===============

POST /api/v1/alerts/{alert_id}/resolve -- mark an alert resolved (final)
"""

from fastapi import APIRouter, Depends, Request

from src.api.dependencies import get_service
from src.api.middleware import limiter
from src.api.schemas import AlertResponse
from src.config import settings
from src.services.trip_service import TripService

router = APIRouter(prefix="/alerts", tags=["alerts"])


@router.post(
    "/{alert_id}/resolve",
    response_model=AlertResponse,
    summary="Resolve an alert",
    description=(
        "Resolution is final. Resolving a MISSING_CHECKIN alert also lifts "
        "the boarding PIN lockout of its trip."
    ),
)
@limiter.limit(settings.rate_limit)
async def resolve_alert(
    request: Request, alert_id: str, service: TripService = Depends(get_service)
):
    return await service.resolve_alert(alert_id)
