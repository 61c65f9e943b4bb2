"""
Boarding PIN verification.

The only way into ``CHECKED_IN`` is a matching PIN while the trip is
``ARRIVED_AT_PICKUP``.  The PIN is issued once when the trip is requested.

Wrong entries are counted on the trip.  When ``max_attempts`` is reached a
``MISSING_CHECKIN`` alert is raised and further entries are refused until
that alert is resolved (``clear_lockout``).  ``max_attempts = 0`` disables
the lockout entirely.
"""

from __future__ import annotations

import enum
import hmac
import logging
from datetime import datetime

import numpy as np

from .alerts import raise_alert
from .entities import Trip
from .enums import AlertType, TripStatus
from .errors import InvalidTransition

logger = logging.getLogger(__name__)

PIN_LENGTH = 4


class VerificationResult(str, enum.Enum):
    VERIFIED = "VERIFIED"
    MISMATCH = "MISMATCH"
    LOCKED = "LOCKED"


def generate_pin(rng: np.random.Generator) -> str:
    return f"{int(rng.integers(0, 10 ** PIN_LENGTH)):0{PIN_LENGTH}d}"


def is_locked(trip: Trip, max_attempts: int) -> bool:
    return max_attempts > 0 and trip.pin_attempts >= max_attempts


def verify(
    trip: Trip,
    entered_pin: str,
    now: datetime,
    *,
    max_attempts: int,
    alert_id: str,
) -> VerificationResult:
    if trip.status != TripStatus.ARRIVED_AT_PICKUP:
        raise InvalidTransition(
            f"Trip {trip.id} is not awaiting boarding verification",
            status=trip.status.value,
        )
    if is_locked(trip, max_attempts):
        return VerificationResult.LOCKED

    expected = trip.verification_pin or ""
    if expected and hmac.compare_digest(entered_pin.encode(), expected.encode()):
        trip.status = TripStatus.CHECKED_IN
        trip.pin_attempts = 0
        trip.touch(now)
        logger.info("Trip %s: boarding PIN verified", trip.id)
        return VerificationResult.VERIFIED

    trip.pin_attempts += 1
    trip.touch(now)
    logger.info("Trip %s: PIN mismatch (attempt %d)", trip.id, trip.pin_attempts)

    if is_locked(trip, max_attempts):
        raise_alert(
            trip,
            AlertType.MISSING_CHECKIN,
            f"Boarding check-in locked after {trip.pin_attempts} wrong PIN entries.",
            now,
            alert_id,
        )
    return VerificationResult.MISMATCH


def clear_lockout(trip: Trip) -> None:
    trip.pin_attempts = 0
