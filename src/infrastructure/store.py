"""
In-process trip store.

Concurrency model
-----------------
* One ``asyncio.Lock`` per stored trip: two mutations of the same trip never
  interleave, mutations of different trips do not wait on each other.
* ``mutate`` hands the caller a private copy and commits it only when the
  block exits cleanly; an exception leaves the stored trip untouched.
* Readers always receive deep copies, never the stored objects.
"""

from __future__ import annotations

import asyncio
import copy
from contextlib import asynccontextmanager
from typing import AsyncIterator, Callable, Iterable, Optional

from src.domain.entities import Trip
from src.domain.errors import UnknownTrip


class TripStore:
    def __init__(self, trips: Iterable[Trip] = ()):
        self._trips: dict[str, Trip] = {t.id: copy.deepcopy(t) for t in trips}
        self._locks: dict[str, asyncio.Lock] = {}

    def _lock_for(self, trip_id: str) -> asyncio.Lock:
        """Lock of a stored trip; unknown ids never get an entry."""
        if trip_id not in self._trips:
            raise UnknownTrip(trip_id)
        lock = self._locks.get(trip_id)
        if lock is None:
            lock = self._locks[trip_id] = asyncio.Lock()
        return lock

    # ── Reads (copies only) ───────────────────────────────────────────

    def __contains__(self, trip_id: str) -> bool:
        return trip_id in self._trips

    def __len__(self) -> int:
        return len(self._trips)

    def get(self, trip_id: str) -> Trip:
        trip = self._trips.get(trip_id)
        if trip is None:
            raise UnknownTrip(trip_id)
        return copy.deepcopy(trip)

    def list(self) -> list[Trip]:
        return [copy.deepcopy(t) for t in self._trips.values()]

    def in_motion_ids(self) -> list[str]:
        return [t.id for t in self._trips.values() if t.in_motion]

    def trip_id_for_alert(self, alert_id: str) -> Optional[str]:
        for trip in self._trips.values():
            if trip.find_alert(alert_id) is not None:
                return trip.id
        return None

    def snapshot(self) -> list[Trip]:
        return self.list()

    # ── Writes ────────────────────────────────────────────────────────

    async def add(self, trip: Trip) -> Trip:
        # No await between the check and the insert
        if trip.id in self._trips:
            raise ValueError(f"Trip {trip.id} already exists")
        self._trips[trip.id] = copy.deepcopy(trip)
        return copy.deepcopy(trip)

    @asynccontextmanager
    async def mutate(self, trip_id: str) -> AsyncIterator[Trip]:
        """Serialized read-modify-write of one trip."""
        async with self._lock_for(trip_id):
            current = self._trips.get(trip_id)
            if current is None:
                raise UnknownTrip(trip_id)
            working = copy.deepcopy(current)
            yield working
            self._trips[trip_id] = working

    async def remove(
        self, trip_id: str, guard: Optional[Callable[[Trip], None]] = None
    ) -> Trip:
        """Delete a trip; *guard* may raise to veto the removal."""
        async with self._lock_for(trip_id):
            current = self._trips.get(trip_id)
            if current is None:
                raise UnknownTrip(trip_id)
            if guard is not None:
                guard(copy.deepcopy(current))
            del self._trips[trip_id]
        self._locks.pop(trip_id, None)
        return current
