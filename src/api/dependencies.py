"""FastAPI dependency injection helpers."""

from fastapi import Request

from src.advisory.guarded import GuardedAdvisory
from src.services.trip_service import TripService


def get_service(request: Request) -> TripService:
    """The trip service built during app startup."""
    return request.app.state.trip_service


def get_advisory(request: Request) -> GuardedAdvisory:
    return request.app.state.advisory
