"""
Domain errors.

Every failure of a trip operation is raised synchronously as a subclass of
``TripError``.  Each carries a stable ``code`` and the HTTP status the API
layer answers with, so the exception handler stays a single mapping.
"""

from __future__ import annotations

from typing import Any


class TripError(Exception):
    """Base class for recoverable trip-operation failures."""

    code = "TRIP_ERROR"
    status_code = 400

    def __init__(self, message: str, **details: Any):
        self.message = message
        self.details = details
        super().__init__(message)


class InvalidTransition(TripError):
    """The trip has no legal move for the requested operation."""

    code = "INVALID_TRANSITION"
    status_code = 409


class PinMismatch(TripError):
    code = "PIN_MISMATCH"
    status_code = 422


class PinLockedOut(TripError):
    """Too many wrong PIN entries; an operator has to clear the lockout."""

    code = "PIN_LOCKED_OUT"
    status_code = 423


class NoDriverAvailable(TripError):
    code = "NO_DRIVER_AVAILABLE"
    status_code = 409


class _NotFound(TripError):
    status_code = 404
    resource = "Resource"

    def __init__(self, resource_id: str):
        self.resource_id = resource_id
        super().__init__(f"{self.resource} {resource_id} not found", id=resource_id)


class UnknownTrip(_NotFound):
    code = "UNKNOWN_TRIP"
    resource = "Trip"


class UnknownChild(_NotFound):
    code = "UNKNOWN_CHILD"
    resource = "Child"


class UnknownDriver(_NotFound):
    code = "UNKNOWN_DRIVER"
    resource = "Driver"


class UnknownAlert(_NotFound):
    code = "UNKNOWN_ALERT"
    resource = "Alert"
