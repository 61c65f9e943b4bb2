"""
Simulated live tracking.

There is no GPS feed: each tick nudges the vehicle position of every
in-motion trip and rolls whether the driver's device is still sharing its
location.

Per trip and tick
-----------------
1. ``lat += (u - bias) * magnitude`` and the same for ``lng`` with fresh
   draws, ``u ~ U[0, 1)``.  With the default bias of 0.6 the mean step is
   ``-0.1 * magnitude`` (slightly negative) and no step exceeds ``magnitude``
   degrees.
2. ``authorized = u >= loss_probability``.
3. Unauthorized -> ``CRITICAL`` health, plus one ``TRACKING_OFF`` alert unless
   an unresolved one already exists.  Authorized -> ``OPTIMAL``.
   Regaining the signal does not resolve the alert; a person has to.
4. ``last_updated`` is stamped.

The random source is injected so tests can script every draw.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Protocol

from .alerts import raise_alert
from .entities import Trip
from .enums import AlertType, TrackingHealth

logger = logging.getLogger(__name__)

TRACKING_LOST_MESSAGE = "CRITICAL: Driver signal lost mid-trip."


class RandomSource(Protocol):
    def random(self) -> float: ...


class TrackingSimulator:
    def __init__(
        self,
        rng: RandomSource,
        *,
        loss_probability: float = 0.02,
        jitter_magnitude: float = 0.0005,
        jitter_bias: float = 0.6,
    ):
        self.rng = rng
        self.loss_probability = loss_probability
        self.jitter_magnitude = jitter_magnitude
        self.jitter_bias = jitter_bias

    def _jitter(self) -> float:
        return (float(self.rng.random()) - self.jitter_bias) * self.jitter_magnitude

    def step(
        self,
        trip: Trip,
        now: datetime,
        new_alert_id: Callable[[], str],
    ) -> bool:
        """Advance one trip by one tick.  Returns ``False`` if it was skipped."""
        if not trip.in_motion:
            return False

        trip.current_lat += self._jitter()
        trip.current_lng += self._jitter()

        authorized = float(self.rng.random()) >= self.loss_probability
        was_authorized = trip.driver_location_authorized
        trip.driver_location_authorized = authorized

        if authorized:
            trip.tracking_health = TrackingHealth.OPTIMAL
            if not was_authorized:
                logger.info("Trip %s: driver location sharing restored", trip.id)
        else:
            trip.tracking_health = TrackingHealth.CRITICAL
            if trip.open_alert(AlertType.TRACKING_OFF) is None:
                raise_alert(
                    trip,
                    AlertType.TRACKING_OFF,
                    TRACKING_LOST_MESSAGE,
                    now,
                    new_alert_id(),
                )

        trip.touch(now)
        return True
