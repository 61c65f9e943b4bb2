"""
Trip status workflow.

Forward chain (one successor per status, no skipping)::

    MATCHING -> EN_ROUTE_TO_PICKUP -> ARRIVED_AT_PICKUP -> CHECKED_IN
             -> PICKED_UP -> IN_PROGRESS -> COMPLETED

``successor`` is a partial function returning a tagged outcome instead of
``None`` holes:

* ``Step``              -- a plain forward move is available.
* ``NeedsVerification`` -- ARRIVED_AT_PICKUP; only the PIN check may move on.
* ``NoSuccessor``       -- COMPLETED, CANCELLED and SCHEDULED.

``advance`` applies a ``Step`` and rejects the other two outcomes with
``InvalidTransition``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Union

from .entities import Trip
from .enums import TripStatus, UserRole
from .errors import InvalidTransition

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Step:
    current: TripStatus
    next: TripStatus


@dataclass(frozen=True)
class NeedsVerification:
    current: TripStatus = TripStatus.ARRIVED_AT_PICKUP


@dataclass(frozen=True)
class NoSuccessor:
    current: TripStatus


Outcome = Union[Step, NeedsVerification, NoSuccessor]


_FORWARD: dict[TripStatus, TripStatus] = {
    TripStatus.MATCHING: TripStatus.EN_ROUTE_TO_PICKUP,
    TripStatus.EN_ROUTE_TO_PICKUP: TripStatus.ARRIVED_AT_PICKUP,
    TripStatus.CHECKED_IN: TripStatus.PICKED_UP,
    TripStatus.PICKED_UP: TripStatus.IN_PROGRESS,
    TripStatus.IN_PROGRESS: TripStatus.COMPLETED,
}

# Accepting an offer is the driver's call; operators may push later steps.
_STEP_ROLES: dict[TripStatus, frozenset[UserRole]] = {
    TripStatus.MATCHING: frozenset({UserRole.DRIVER}),
}
_DEFAULT_ROLES = frozenset({UserRole.DRIVER, UserRole.ADMIN})


def successor(status: TripStatus) -> Outcome:
    if status == TripStatus.ARRIVED_AT_PICKUP:
        return NeedsVerification()
    nxt = _FORWARD.get(status)
    if nxt is None:
        return NoSuccessor(status)
    return Step(status, nxt)


def allowed_roles(status: TripStatus) -> frozenset[UserRole]:
    return _STEP_ROLES.get(status, _DEFAULT_ROLES)


def advance(trip: Trip, actor_role: UserRole, now: datetime) -> TripStatus:
    """Move *trip* one step along the chain and return the new status."""
    outcome = successor(trip.status)

    if isinstance(outcome, NeedsVerification):
        raise InvalidTransition(
            f"Trip {trip.id} is waiting for boarding PIN verification",
            status=trip.status.value,
        )
    if isinstance(outcome, NoSuccessor):
        raise InvalidTransition(
            f"Trip {trip.id} has no next status from {trip.status.value}",
            status=trip.status.value,
        )

    if actor_role not in allowed_roles(outcome.current):
        raise InvalidTransition(
            f"{actor_role.value} cannot move trip {trip.id} "
            f"from {outcome.current.value}",
            status=trip.status.value,
        )
    if outcome.current == TripStatus.MATCHING and not trip.driver_id:
        raise InvalidTransition(
            f"Trip {trip.id} has no driver offer to accept",
            status=trip.status.value,
        )

    trip.status = outcome.next
    trip.touch(now)
    logger.info(
        "Trip %s: %s -> %s (%s)",
        trip.id, outcome.current.value, outcome.next.value, actor_role.value,
    )
    return trip.status


def cancel(trip: Trip, now: datetime) -> None:
    """Explicit cancellation of a matched, non-terminal trip.

    An unmatched request has no driver to release; it is withdrawn with
    ``discard_request`` instead, so a cancelled trip always keeps its driver.
    """
    if trip.is_terminal:
        raise InvalidTransition(
            f"Trip {trip.id} is already {trip.status.value}",
            status=trip.status.value,
        )
    if trip.status == TripStatus.MATCHING:
        raise InvalidTransition(
            f"Trip {trip.id} is still unmatched; discard the request instead",
            status=trip.status.value,
        )
    trip.status = TripStatus.CANCELLED
    trip.end_time = now
    trip.touch(now)
    logger.info("Trip %s cancelled", trip.id)
