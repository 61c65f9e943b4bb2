"""
Coordination signals: one transient situational flag per trip, orthogonal to
its status.

Setting the signal that is already active clears it; any other value
replaces it.  No status check is made here; offering sensible signals is the
caller's job.

Staff confirming that the child arrived (``confirm_arrival``) is the one
operation that both sets a signal and forces ``COMPLETED``.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Optional

from .alerts import raise_alert
from .entities import Trip
from .enums import AlertType, CoordinationSignal, TripStatus
from .errors import InvalidTransition

logger = logging.getLogger(__name__)

# Signals that also leave a trace in the alert ledger
_SIGNAL_ALERTS: dict[CoordinationSignal, tuple[AlertType, str]] = {
    CoordinationSignal.CHANGE_PICKUP: (
        AlertType.PICKUP_CHANGE,
        "Guardian requested a pickup change.",
    ),
    CoordinationSignal.CHILD_NOT_FOUND: (
        AlertType.COORDINATION_SIGNAL,
        "Driver cannot locate child at pickup point.",
    ),
}


def set_signal(
    trip: Trip,
    signal: CoordinationSignal,
    now: datetime,
    new_alert_id: Callable[[], str],
) -> Optional[CoordinationSignal]:
    """Toggle *signal* on *trip* and return the signal now active."""
    if trip.coordination_signal == signal:
        trip.coordination_signal = None
        logger.info("Trip %s: signal %s cleared", trip.id, signal.value)
    else:
        trip.coordination_signal = signal
        logger.info("Trip %s: signal %s set", trip.id, signal.value)
        if signal in _SIGNAL_ALERTS:
            alert_type, message = _SIGNAL_ALERTS[signal]
            if trip.open_alert(alert_type) is None:
                raise_alert(trip, alert_type, message, now, new_alert_id())
    trip.touch(now)
    return trip.coordination_signal


def confirm_arrival(trip: Trip, now: datetime) -> None:
    if trip.is_terminal or trip.status in (TripStatus.MATCHING, TripStatus.SCHEDULED):
        raise InvalidTransition(
            f"Trip {trip.id} cannot be received in status {trip.status.value}",
            status=trip.status.value,
        )
    previous = trip.status
    trip.coordination_signal = CoordinationSignal.TEACHER_RECEIVED
    trip.status = TripStatus.COMPLETED
    trip.end_time = now
    trip.touch(now)
    logger.info(
        "Trip %s: arrival confirmed by staff (%s -> COMPLETED)", trip.id, previous.value
    )
