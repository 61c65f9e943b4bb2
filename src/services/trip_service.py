"""
Trip service
============

The single owner of the trip store.  Every user intent and every tracking
tick goes through here, so this is where mutations are serialized and the
snapshot is written.

Concurrency safety
------------------
* Each operation runs inside ``TripStore.mutate(trip_id)``: same-trip
  intents queue on that trip's lock, other trips are unaffected.
* Domain rules raise before or instead of committing, so a failed intent
  never leaves a half-applied trip behind.
* The tick takes each in-motion trip's lock in turn, so it interleaves with
  user intents trip by trip rather than overwriting them.
* Callers only ever receive copies.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime
from typing import Callable, Optional

import numpy as np

from src.config import settings
from src.domain import alerts as alert_rules
from src.domain import coordination, dispatch, verification, workflow
from src.domain.entities import Alert, Driver, Passenger, Trip, generate_id, utcnow
from src.domain.enums import AlertType, CoordinationSignal, TripStatus, UserRole
from src.domain.errors import (
    InvalidTransition,
    NoDriverAvailable,
    PinLockedOut,
    PinMismatch,
    UnknownAlert,
    UnknownChild,
    UnknownDriver,
    UnknownTrip,
)
from src.domain.matching import DriverSelector, RandomDriverSelector
from src.domain.narrative import StatusCard, status_card
from src.domain.tracking import TrackingSimulator
from src.domain.verification import VerificationResult
from src.infrastructure.repositories import SnapshotStore
from src.infrastructure.roster import InMemoryRoster
from src.infrastructure.store import TripStore

logger = logging.getLogger(__name__)

PANIC_MESSAGE = "Guardian triggered Panic Button. Protocol active."


class TripService:
    def __init__(
        self,
        roster: InMemoryRoster,
        *,
        store: Optional[TripStore] = None,
        rng: Optional[np.random.Generator] = None,
        simulator: Optional[TrackingSimulator] = None,
        selector: Optional[DriverSelector] = None,
        snapshots: Optional[SnapshotStore] = None,
        clock: Callable[[], datetime] = utcnow,
        pin_max_attempts: int = settings.pin_max_attempts,
        operator_eta_minutes: int = settings.operator_eta_minutes,
        auto_match_eta_minutes: int = settings.auto_match_eta_minutes,
    ):
        self.roster = roster
        self.store = store or TripStore()
        self.rng = rng if rng is not None else np.random.default_rng(settings.random_seed)
        self.simulator = simulator or TrackingSimulator(
            self.rng,
            loss_probability=settings.tracking_loss_probability,
            jitter_magnitude=settings.jitter_magnitude,
            jitter_bias=settings.jitter_bias,
        )
        self.selector = selector or RandomDriverSelector(self.rng)
        self.snapshots = snapshots
        self.clock = clock
        self.pin_max_attempts = pin_max_attempts
        self.operator_eta_minutes = operator_eta_minutes
        self.auto_match_eta_minutes = auto_match_eta_minutes
        self._motion_listeners: list[Callable[[], None]] = []

    # ── Helpers ───────────────────────────────────────────────────────

    def _alert_id(self) -> str:
        return generate_id("A_", self.rng)

    def _trip_id(self) -> str:
        while True:
            trip_id = generate_id("T_", self.rng)
            if trip_id not in self.store:
                return trip_id

    def add_motion_listener(self, listener: Callable[[], None]) -> None:
        """*listener* is called whenever a trip may have started moving."""
        self._motion_listeners.append(listener)

    def _notify_motion(self, trip: Trip) -> None:
        if trip.in_motion:
            for listener in self._motion_listeners:
                listener()

    def has_trips_in_motion(self) -> bool:
        return bool(self.store.in_motion_ids())

    async def _persist(self) -> None:
        if self.snapshots is not None:
            await self.snapshots.save(self.store.snapshot(), self.roster.children())

    def _child(self, child_id: str) -> Passenger:
        child = self.roster.lookup_child(child_id)
        if child is None:
            raise UnknownChild(child_id)
        return child

    def _driver(self, driver_id: str) -> Driver:
        driver = self.roster.lookup_driver(driver_id)
        if driver is None:
            raise UnknownDriver(driver_id)
        return driver

    # ── Queries ───────────────────────────────────────────────────────

    def get_trip(self, trip_id: str) -> Trip:
        return self.store.get(trip_id)

    def list_trips(self, role: UserRole, actor_id: Optional[str] = None) -> list[Trip]:
        trips = self.store.list()
        if role == UserRole.ADMIN:
            return trips
        if actor_id is None:
            return []

        if role == UserRole.DRIVER:
            return [t for t in trips if t.driver_id == actor_id]
        if role == UserRole.PARENT:
            child_ids = {c.id for c in self.roster.children_of(actor_id)}
            return [t for t in trips if t.child_id in child_ids]
        if role == UserRole.TEACHER:
            user = self.roster.lookup_user(actor_id)
            if user is None or not user.school_id:
                return []
            child_ids = {c.id for c in self.roster.children_at(user.school_id)}
            return [t for t in trips if t.child_id in child_ids]
        return []

    def pending_requests(self) -> list[Trip]:
        return [t for t in self.store.list() if t.status == TripStatus.MATCHING]

    def trip_context(
        self, trip_id: str
    ) -> tuple[Trip, Passenger, Optional[Driver]]:
        trip = self.store.get(trip_id)
        child = self._child(trip.child_id)
        driver = self.roster.lookup_driver(trip.driver_id) if trip.driver_id else None
        return trip, child, driver

    def status_summary(self, trip_id: str) -> StatusCard:
        trip, child, _ = self.trip_context(trip_id)
        return status_card(trip, child, self.clock())

    # ── Dispatch ──────────────────────────────────────────────────────

    async def request_trip(
        self, child_id: str, options: Optional[dispatch.TripOptions] = None
    ) -> Trip:
        options = options or dispatch.TripOptions()
        self._child(child_id)

        now = self.clock()
        trip = dispatch.new_trip(
            self._trip_id(), child_id, verification.generate_pin(self.rng), now, options
        )
        await self.store.add(trip)
        logger.info("Trip %s requested for child %s", trip.id, child_id)

        if options.auto_match:
            pool = self.roster.list_available_drivers()
            if pool:
                async with self.store.mutate(trip.id) as live:
                    driver = self.selector.select(live, pool)
                    dispatch.assign(live, driver, now, self.auto_match_eta_minutes)
                    trip = live
                self._notify_motion(trip)
            else:
                logger.warning(
                    "Trip %s: no approved driver for auto-match, left pending", trip.id
                )

        await self._persist()
        return self.store.get(trip.id)

    async def approve_match(self, trip_id: str) -> Trip:
        async with self.store.mutate(trip_id) as trip:
            dispatch.ensure_pending(trip)
            pool = self.roster.list_available_drivers()
            if not pool:
                raise NoDriverAvailable(
                    f"No approved driver available for trip {trip_id}"
                )
            driver = self.selector.select(trip, pool)
            dispatch.assign(trip, driver, self.clock(), self.operator_eta_minutes)
            result = trip
        self._notify_motion(result)
        await self._persist()
        return self.store.get(trip_id)

    async def offer_trip(self, trip_id: str, driver_id: str) -> Trip:
        driver = self._driver(driver_id)
        if not driver.is_available:
            raise InvalidTransition(
                f"Driver {driver_id} is not approved for dispatch",
                onboarding_status=driver.onboarding_status.value,
            )
        async with self.store.mutate(trip_id) as trip:
            dispatch.offer(trip, driver, self.clock())
        await self._persist()
        return self.store.get(trip_id)

    async def reject_match(self, trip_id: str, reason: str) -> Trip:
        """Operator rejection: the request goes back to the pool with *reason*."""
        async with self.store.mutate(trip_id) as trip:
            dispatch.reject(trip, reason, self.clock())
        await self._persist()
        return self.store.get(trip_id)

    async def decline_offer(self, trip_id: str, driver_id: str, reason: str) -> Trip:
        async with self.store.mutate(trip_id) as trip:
            dispatch.reject(trip, reason, self.clock(), driver_id=driver_id)
        await self._persist()
        return self.store.get(trip_id)

    async def discard_request(self, trip_id: str) -> Trip:
        """Withdraw an unmatched request; unlike a rejection this deletes it."""
        removed = await self.store.remove(trip_id, guard=dispatch.ensure_pending)
        logger.warning("Trip %s request discarded and removed from the store", trip_id)
        await self._persist()
        return removed

    # ── Workflow ──────────────────────────────────────────────────────

    async def advance(self, trip_id: str, actor_role: UserRole) -> Trip:
        async with self.store.mutate(trip_id) as trip:
            workflow.advance(trip, actor_role, self.clock())
            result = trip
        self._notify_motion(result)
        await self._persist()
        return self.store.get(trip_id)

    async def verify(self, trip_id: str, pin: str) -> Trip:
        async with self.store.mutate(trip_id) as trip:
            outcome = verification.verify(
                trip,
                pin,
                self.clock(),
                max_attempts=self.pin_max_attempts,
                alert_id=self._alert_id(),
            )
            attempts = trip.pin_attempts
        await self._persist()

        if outcome == VerificationResult.LOCKED:
            logger.warning("Trip %s: PIN entry locked out", trip_id)
            raise PinLockedOut(
                f"Trip {trip_id} is locked after too many wrong PIN entries",
                attempts=attempts,
            )
        if outcome == VerificationResult.MISMATCH:
            raise PinMismatch(
                f"PIN does not match for trip {trip_id}", attempts=attempts
            )
        return self.store.get(trip_id)

    async def cancel(self, trip_id: str) -> Trip:
        async with self.store.mutate(trip_id) as trip:
            workflow.cancel(trip, self.clock())
        await self._persist()
        return self.store.get(trip_id)

    # ── Coordination ──────────────────────────────────────────────────

    async def set_signal(self, trip_id: str, signal: CoordinationSignal) -> Trip:
        async with self.store.mutate(trip_id) as trip:
            coordination.set_signal(trip, signal, self.clock(), self._alert_id)
        await self._persist()
        return self.store.get(trip_id)

    async def confirm_arrival(self, trip_id: str) -> Trip:
        async with self.store.mutate(trip_id) as trip:
            coordination.confirm_arrival(trip, self.clock())
        await self._persist()
        return self.store.get(trip_id)

    # ── Alerts ────────────────────────────────────────────────────────

    async def raise_alert(
        self, trip_id: str, alert_type: AlertType, message: str
    ) -> Optional[Alert]:
        async with self.store.mutate(trip_id) as trip:
            alert = alert_rules.raise_alert(
                trip, alert_type, message, self.clock(), self._alert_id()
            )
        if alert is not None:
            await self._persist()
        return alert

    async def raise_panic(self, trip_id: str) -> Trip:
        await self.raise_alert(trip_id, AlertType.PANIC, PANIC_MESSAGE)
        return self.store.get(trip_id)

    async def flag_deviation(self, trip_id: str, message: str) -> Trip:
        async with self.store.mutate(trip_id) as trip:
            now = self.clock()
            trip.route_deviation = True
            trip.touch(now)
            alert_rules.raise_alert(
                trip, AlertType.DEVIATION, message, now, self._alert_id()
            )
        await self._persist()
        return self.store.get(trip_id)

    async def resolve_alert(self, alert_id: str) -> Alert:
        trip_id = self.store.trip_id_for_alert(alert_id)
        if trip_id is None:
            raise UnknownAlert(alert_id)
        async with self.store.mutate(trip_id) as trip:
            alert = alert_rules.resolve(trip, alert_id, self.clock())
            if alert.type == AlertType.MISSING_CHECKIN and verification.is_locked(
                trip, self.pin_max_attempts
            ):
                verification.clear_lockout(trip)
        await self._persist()
        return alert

    # ── Tracking ──────────────────────────────────────────────────────

    async def tick(self) -> int:
        """Run one simulator tick over all in-motion trips."""
        moved = 0
        for trip_id in self.store.in_motion_ids():
            try:
                async with self.store.mutate(trip_id) as trip:
                    if self.simulator.step(trip, self.clock(), self._alert_id):
                        moved += 1
            except UnknownTrip:
                logger.debug("Trip %s removed before tick reached it", trip_id)
            # Yield so queued intents interleave between trips
            await asyncio.sleep(0)
        if moved:
            await self._persist()
        return moved
