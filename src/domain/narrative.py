"""Guardian-facing status card derived from a trip."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from .entities import Passenger, Trip
from .enums import CoordinationSignal, TripStatus

SAFE = "SAFE"
DELAYED = "DELAYED"
ACTION_NEEDED = "ACTION NEEDED"


@dataclass(frozen=True)
class StatusCard:
    label: str
    message: str


def minutes_until(when: Optional[datetime], now: datetime) -> int:
    if when is None:
        return 0
    return max(0, round((when - now).total_seconds() / 60))


def _clock(when: Optional[datetime]) -> str:
    return when.strftime("%H:%M") if when else "--:--"


def status_card(trip: Trip, child: Passenger, now: datetime) -> StatusCard:
    if trip.coordination_signal == CoordinationSignal.CHILD_NOT_FOUND:
        return StatusCard(
            ACTION_NEEDED, "Driver cannot locate child. Please call immediately."
        )
    if not trip.driver_location_authorized:
        return StatusCard(ACTION_NEEDED, "Driver signal lost. Tracking protocol active.")

    open_alert = next((a for a in trip.alerts if not a.resolved), None)
    if open_alert is not None:
        return StatusCard(ACTION_NEEDED, open_alert.message)
    if trip.route_deviation:
        return StatusCard(
            DELAYED, f"Heavy traffic, new ETA {_clock(trip.estimated_arrival)}"
        )

    if trip.status == TripStatus.EN_ROUTE_TO_PICKUP:
        mins = minutes_until(trip.estimated_arrival, now)
        if mins <= 2:
            return StatusCard(SAFE, "Driver is turning into your street")
        return StatusCard(SAFE, f"Driver arriving in {mins} min")
    if trip.status == TripStatus.ARRIVED_AT_PICKUP:
        return StatusCard(SAFE, "Driver waiting outside pickup point")
    if trip.status == TripStatus.CHECKED_IN:
        return StatusCard(SAFE, f"{child.name} is verifying ID with driver")
    if trip.status == TripStatus.PICKED_UP:
        return StatusCard(SAFE, f"{child.name} is safely in the vehicle")
    if trip.status == TripStatus.IN_PROGRESS:
        return StatusCard(
            SAFE,
            f"En route to {child.school}. ETA {_clock(trip.estimated_arrival)}",
        )
    return StatusCard(SAFE, "Active Monitoring Enabled")
