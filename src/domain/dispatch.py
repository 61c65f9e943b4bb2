"""
Dispatch rules: creating requests, matching drivers, and the two rejection
flows.

Lifecycle around ``MATCHING``
-----------------------------
* ``new_trip``  -- a fresh request, unassigned, with its boarding PIN.
* ``assign``    -- operator approval or auto-match: driver set, status
  ``EN_ROUTE_TO_PICKUP``, ETA = now + lookahead.
* ``offer``     -- soft assignment: the trip stays ``MATCHING`` with a
  pending driver who may accept (workflow ``advance``) or decline.
* ``reject``    -- operator rejection or a driver declining an offer: the
  driver is cleared, the reason kept, the trip goes back to the pool.
* ``ensure_pending`` -- guard for approval and for withdrawing an unmatched
  request, which deletes it from the store altogether.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from .entities import Driver, Trip
from .enums import Frequency, TripStatus
from .errors import InvalidTransition

logger = logging.getLogger(__name__)

# Kuala Lumpur city centre; used when a booking carries no pickup point.
DEFAULT_ORIGIN = (3.1390, 101.6869)

DECLINE_REASONS = (
    "Too far from location",
    "Heavy traffic zone",
    "Ending my shift",
    "Vehicle maintenance",
    "Personal emergency",
)


@dataclass
class TripOptions:
    is_recurring: bool = False
    frequency: Optional[Frequency] = None
    pickup_lat: Optional[float] = None
    pickup_lng: Optional[float] = None
    auto_match: bool = False


def new_trip(
    trip_id: str, child_id: str, pin: str, now: datetime, options: TripOptions
) -> Trip:
    lat, lng = DEFAULT_ORIGIN
    if options.pickup_lat is not None and options.pickup_lng is not None:
        lat, lng = options.pickup_lat, options.pickup_lng
    return Trip(
        id=trip_id,
        child_id=child_id,
        status=TripStatus.MATCHING,
        start_time=now,
        last_updated=now,
        current_lat=lat,
        current_lng=lng,
        verification_pin=pin,
        is_recurring=options.is_recurring,
        frequency=options.frequency,
        pickup_lat=options.pickup_lat,
        pickup_lng=options.pickup_lng,
    )


def _require_matching(trip: Trip, action: str) -> None:
    if trip.status != TripStatus.MATCHING:
        raise InvalidTransition(
            f"Cannot {action} trip {trip.id} in status {trip.status.value}",
            status=trip.status.value,
        )


def assign(trip: Trip, driver: Driver, now: datetime, eta_minutes: int) -> None:
    _require_matching(trip, "match")
    trip.driver_id = driver.id
    trip.status = TripStatus.EN_ROUTE_TO_PICKUP
    trip.estimated_arrival = now + timedelta(minutes=eta_minutes)
    trip.touch(now)
    logger.info(
        "Trip %s matched to driver %s (ETA %d min)", trip.id, driver.id, eta_minutes
    )


def offer(trip: Trip, driver: Driver, now: datetime) -> None:
    _require_matching(trip, "offer")
    if trip.driver_id and trip.driver_id != driver.id:
        raise InvalidTransition(
            f"Trip {trip.id} is already offered to driver {trip.driver_id}",
            status=trip.status.value,
        )
    trip.driver_id = driver.id
    trip.touch(now)
    logger.info("Trip %s offered to driver %s", trip.id, driver.id)


def reject(
    trip: Trip, reason: str, now: datetime, driver_id: Optional[str] = None
) -> None:
    """Recycle *trip* to the pool; *driver_id* restricts it to that driver's offer."""
    _require_matching(trip, "reject")
    if driver_id is not None and trip.driver_id != driver_id:
        raise InvalidTransition(
            f"Trip {trip.id} is not offered to driver {driver_id}",
            status=trip.status.value,
        )
    previous = trip.driver_id
    trip.driver_id = None
    trip.rejection_reason = reason
    trip.touch(now)
    logger.info(
        "Trip %s rejected (driver %s): %s", trip.id, previous or "-", reason
    )


def ensure_pending(trip: Trip) -> None:
    """Raise unless *trip* is still waiting for a driver."""
    _require_matching(trip, "dispatch")
