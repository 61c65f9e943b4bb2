"""Domain enumerations for trips, alerts and the people around them."""

import enum


class TripStatus(str, enum.Enum):
    SCHEDULED = "SCHEDULED"
    MATCHING = "MATCHING"
    EN_ROUTE_TO_PICKUP = "EN_ROUTE_TO_PICKUP"
    ARRIVED_AT_PICKUP = "ARRIVED_AT_PICKUP"
    CHECKED_IN = "CHECKED_IN"
    PICKED_UP = "PICKED_UP"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


# Statuses the tracking simulator moves the vehicle for
IN_MOTION_STATUSES: frozenset[TripStatus] = frozenset(
    {
        TripStatus.EN_ROUTE_TO_PICKUP,
        TripStatus.PICKED_UP,
        TripStatus.IN_PROGRESS,
    }
)

TERMINAL_STATUSES: frozenset[TripStatus] = frozenset(
    {TripStatus.COMPLETED, TripStatus.CANCELLED}
)


class TrackingHealth(str, enum.Enum):
    OPTIMAL = "OPTIMAL"
    STALE = "STALE"
    CRITICAL = "CRITICAL"


class AlertType(str, enum.Enum):
    DEVIATION = "DEVIATION"
    DELAY = "DELAY"
    STATIONARY = "STATIONARY"
    MISSING_CHECKIN = "MISSING_CHECKIN"
    MISSING_CHILD = "MISSING_CHILD"
    PANIC = "PANIC"
    TRACKING_OFF = "TRACKING_OFF"
    COORDINATION_SIGNAL = "COORDINATION_SIGNAL"
    PICKUP_CHANGE = "PICKUP_CHANGE"


class CoordinationSignal(str, enum.Enum):
    PARENT_LATE = "PARENT_LATE"
    DRIVER_WAITING = "DRIVER_WAITING"
    CHILD_NOT_FOUND = "CHILD_NOT_FOUND"
    TEACHER_RECEIVED = "TEACHER_RECEIVED"
    CHANGE_PICKUP = "CHANGE_PICKUP"
    TRAFFIC_DELAY = "TRAFFIC_DELAY"


class UserRole(str, enum.Enum):
    PARENT = "PARENT"
    DRIVER = "DRIVER"
    TEACHER = "TEACHER"
    ADMIN = "ADMIN"


class OnboardingStatus(str, enum.Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    SUSPENDED = "SUSPENDED"


class Frequency(str, enum.Enum):
    DAILY = "DAILY"
    WEEKLY = "WEEKLY"
    ADHOC = "ADHOC"
