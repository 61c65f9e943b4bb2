"""
FastAPI application factory.

* Registers routes for trips, dispatch, alerts and admin.
* Builds the trip service on startup from the persisted snapshot (or the
  demo roster when the database is empty).
* Starts / stops the background tracking worker via lifespan events.
* Maps domain errors to JSON responses and applies rate limiting.
* Swagger / OpenAPI UI available at ``/docs``.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from src.advisory.client import HttpAdvisoryClient
from src.advisory.guarded import GuardedAdvisory
from src.api.middleware import limiter
from src.api.routes import admin, alerts, dispatch, trips
from src.config import settings
from src.domain.entities import utcnow
from src.domain.errors import TripError
from src.domain.matching import build_selector
from src.infrastructure import seed_data
from src.infrastructure.database import async_session_factory, engine, init_models
from src.infrastructure.redis_client import get_redis
from src.infrastructure.repositories import SnapshotStore
from src.infrastructure.roster import InMemoryRoster
from src.infrastructure.store import TripStore
from src.services.trip_service import TripService
from src.workers.tracker import TrackingWorker

logging.basicConfig(level=settings.log_level.upper())
logger = logging.getLogger(__name__)


async def build_service() -> TripService:
    """Trip service wired to the snapshot database configured in settings."""
    await init_models(engine)
    snapshots = SnapshotStore(async_session_factory)
    trips, children = await snapshots.load()

    if trips is None and settings.seed_demo_data:
        logger.info("Empty snapshot database; loading demo roster and trips")
        trips = seed_data.demo_trips(utcnow())
    if children is None:
        children = list(seed_data.CHILDREN) if settings.seed_demo_data else []

    roster = InMemoryRoster(
        children=children,
        drivers=seed_data.DRIVERS if settings.seed_demo_data else (),
        users=seed_data.USERS if settings.seed_demo_data else (),
    )
    service = TripService(roster, store=TripStore(trips or ()), snapshots=snapshots)
    service.selector = build_selector(
        settings.driver_selection, service.rng, settings.h3_resolution
    )
    logger.info("Loaded %d trips, %d children", len(service.store), len(children))
    return service


def build_advisory() -> GuardedAdvisory:
    client = None
    if settings.advisory_url:
        client = HttpAdvisoryClient(settings.advisory_url, settings.advisory_api_key)
    return GuardedAdvisory(client, timeout=settings.advisory_timeout_seconds)


async def trip_error_handler(request: Request, exc: TripError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message, "code": exc.code, **exc.details},
    )


def create_app(
    service: Optional[TripService] = None,
    advisory: Optional[GuardedAdvisory] = None,
) -> FastAPI:
    def _wire(app: FastAPI, trip_service: TripService, guarded: GuardedAdvisory) -> None:
        app.state.trip_service = trip_service
        app.state.advisory = guarded
        app.state.tracking_worker = TrackingWorker(
            trip_service,
            interval_seconds=settings.tracking_interval_seconds,
            redis_factory=get_redis if settings.redis_url and service is None else None,
        )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Build the service and start tracking on startup; stop on shutdown."""
        if not hasattr(app.state, "trip_service"):
            _wire(app, await build_service(), advisory or build_advisory())
        app.state.tracking_worker.ensure_running()
        yield
        await app.state.tracking_worker.stop()

    app = FastAPI(
        title="School Transport Trip Coordination API",
        description=(
            "Tracks school-transport trips from request to drop-off: driver "
            "matching, PIN-verified boarding, simulated live tracking, "
            "safety alerts and coordination signals between guardians, "
            "drivers and school staff."
        ),
        version="1.0.0",
        lifespan=lifespan,
    )

    # Rate limiter
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
    app.add_exception_handler(TripError, trip_error_handler)

    # Routers
    app.include_router(trips.router, prefix="/api/v1")
    app.include_router(dispatch.router, prefix="/api/v1")
    app.include_router(alerts.router, prefix="/api/v1")
    app.include_router(admin.router, prefix="/api/v1")

    # Injected service (tests, embedding): wire now, lifespan may never run
    if service is not None:
        _wire(app, service, advisory or GuardedAdvisory(None))

    return app
