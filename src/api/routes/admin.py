"""
Admin / observability endpoints
===============================

GET /api/v1/admin/pending -- unmatched requests awaiting approval
GET /api/v1/admin/health  -- simple health check
"""

from fastapi import APIRouter, Depends, Request

from src.api.dependencies import get_service
from src.api.middleware import limiter
from src.api.schemas import HealthResponse, TripResponse
from src.config import settings
from src.services.trip_service import TripService

router = APIRouter(prefix="/admin", tags=["admin"])


@router.get(
    "/pending",
    response_model=list[TripResponse],
    summary="List requests waiting for a driver",
)
@limiter.limit(settings.rate_limit)
async def pending_requests(
    request: Request, service: TripService = Depends(get_service)
):
    return service.pending_requests()


@router.get("/health", response_model=HealthResponse, summary="Health check")
async def health(request: Request, service: TripService = Depends(get_service)):
    worker = request.app.state.tracking_worker
    return HealthResponse(trips=len(service.store), tracking=worker.running)
