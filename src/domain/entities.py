"""
Domain entities.

``Trip`` is the only entity the core mutates.  ``Passenger``, ``Driver`` and
``User`` are owned by the roster and treated as read-only lookups.
"""

from __future__ import annotations

import string
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional

import numpy as np

from .enums import (
    AlertType,
    CoordinationSignal,
    Frequency,
    IN_MOTION_STATUSES,
    OnboardingStatus,
    TERMINAL_STATUSES,
    TrackingHealth,
    TripStatus,
    UserRole,
)

_ID_ALPHABET = string.ascii_uppercase + string.digits


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def generate_id(prefix: str, rng: np.random.Generator, length: int = 8) -> str:
    """Short uppercase identifier, e.g. ``T_VWV8LW2Q``."""
    picks = rng.integers(0, len(_ID_ALPHABET), size=length)
    return prefix + "".join(_ID_ALPHABET[int(i)] for i in picks)


# ── Entities ──────────────────────────────────────────────────────────


@dataclass
class Alert:
    id: str
    trip_id: str
    type: AlertType
    message: str
    timestamp: datetime
    resolved: bool = False


@dataclass
class Trip:
    id: str
    child_id: str
    status: TripStatus
    start_time: datetime
    last_updated: datetime
    current_lat: float = 0.0
    current_lng: float = 0.0
    driver_id: Optional[str] = None
    end_time: Optional[datetime] = None
    estimated_arrival: Optional[datetime] = None
    route_deviation: bool = False
    alerts: list[Alert] = field(default_factory=list)
    tracking_health: TrackingHealth = TrackingHealth.OPTIMAL
    driver_location_authorized: bool = True
    coordination_signal: Optional[CoordinationSignal] = None
    rejection_reason: Optional[str] = None
    verification_pin: Optional[str] = None
    pin_attempts: int = 0
    is_recurring: bool = False
    frequency: Optional[Frequency] = None
    pickup_lat: Optional[float] = None
    pickup_lng: Optional[float] = None

    @property
    def in_motion(self) -> bool:
        return self.status in IN_MOTION_STATUSES

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES

    def touch(self, now: datetime) -> None:
        """Stamp ``last_updated`` without ever moving it backwards."""
        if now > self.last_updated:
            self.last_updated = now

    def open_alert(self, alert_type: AlertType) -> Optional[Alert]:
        for alert in self.alerts:
            if alert.type == alert_type and not alert.resolved:
                return alert
        return None

    def find_alert(self, alert_id: str) -> Optional[Alert]:
        return next((a for a in self.alerts if a.id == alert_id), None)


@dataclass
class Passenger:
    id: str
    parent_id: str
    name: str
    age: int = 0
    school: str = ""
    pickup_address: str = ""
    drop_address: str = ""
    photo: Optional[str] = None


@dataclass
class Driver:
    id: str
    name: str
    rating: float = 5.0
    vehicle: str = ""
    plate: str = ""
    license_id: str = ""
    is_verified: bool = False
    onboarding_status: OnboardingStatus = OnboardingStatus.PENDING
    current_lat: Optional[float] = None
    current_lng: Optional[float] = None

    @property
    def is_available(self) -> bool:
        return self.onboarding_status == OnboardingStatus.APPROVED


@dataclass
class User:
    id: str
    name: str
    role: UserRole
    phone: str = ""
    email: Optional[str] = None
    school_id: Optional[str] = None
    gate: Optional[str] = None
