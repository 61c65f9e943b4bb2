"""
Alert ledger per trip.

Alerts are prepended (newest first) and never removed.  Creation is
idempotent per type: while an unresolved alert of a type exists on the trip,
raising another of that type is a no-op.  Resolution only flips
``resolved`` to ``True`` and is final.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from .entities import Alert, Trip
from .enums import AlertType
from .errors import UnknownAlert

logger = logging.getLogger(__name__)

_WARN_TYPES = {
    AlertType.PANIC,
    AlertType.TRACKING_OFF,
    AlertType.MISSING_CHILD,
    AlertType.MISSING_CHECKIN,
}


def raise_alert(
    trip: Trip,
    alert_type: AlertType,
    message: str,
    now: datetime,
    alert_id: str,
) -> Optional[Alert]:
    """Prepend a new alert, or return ``None`` if one is already open."""
    if trip.open_alert(alert_type) is not None:
        return None

    alert = Alert(
        id=alert_id,
        trip_id=trip.id,
        type=alert_type,
        message=message,
        timestamp=now,
    )
    trip.alerts.insert(0, alert)
    trip.touch(now)

    level = logging.WARNING if alert_type in _WARN_TYPES else logging.INFO
    logger.log(level, "Trip %s alert %s: %s", trip.id, alert_type.value, message)
    return alert


def resolve(trip: Trip, alert_id: str, now: datetime) -> Alert:
    alert = trip.find_alert(alert_id)
    if alert is None:
        raise UnknownAlert(alert_id)
    if not alert.resolved:
        alert.resolved = True
        trip.touch(now)
        logger.info("Trip %s alert %s resolved", trip.id, alert_id)
    return alert
