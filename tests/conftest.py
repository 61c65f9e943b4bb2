"""
Shared test fixtures.

Everything runs in-process: an in-memory roster, a fixed clock and seeded or
scripted random sources, so ticks, PINs and driver picks are reproducible.
Persistence tests use an aiosqlite file under ``tmp_path``.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Iterable, Optional

import numpy as np
import pytest

from src.domain.entities import Driver, Passenger, Trip, User
from src.domain.enums import OnboardingStatus, TripStatus, UserRole
from src.infrastructure.roster import InMemoryRoster
from src.services.trip_service import TripService

T0 = datetime(2026, 3, 2, 7, 30, tzinfo=timezone.utc)


class FixedClock:
    """Manually advanced clock."""

    def __init__(self, start: datetime = T0):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> datetime:
        self.now += timedelta(seconds=seconds)
        return self.now


class ScriptedRandom:
    """Returns scripted draws in order, then ``default`` forever."""

    def __init__(self, draws: Iterable[float] = (), default: float = 0.5):
        self.draws = list(draws)
        self.default = default

    def random(self) -> float:
        if self.draws:
            return self.draws.pop(0)
        return self.default


def make_trip(
    status: TripStatus = TripStatus.IN_PROGRESS,
    *,
    trip_id: str = "T_TEST0001",
    child_id: str = "C_HAZIQ",
    driver_id: Optional[str] = "",
    pin: str = "4821",
    at: datetime = T0,
    **overrides,
) -> Trip:
    if driver_id == "":
        driver_id = None if status == TripStatus.MATCHING else "D_ALYA"
    return Trip(
        id=trip_id,
        child_id=child_id,
        driver_id=driver_id,
        status=status,
        start_time=at,
        last_updated=at,
        current_lat=3.1306,
        current_lng=101.6673,
        verification_pin=pin,
        **overrides,
    )


CHILDREN = [
    Passenger(id="C_HAZIQ", parent_id="P_SITI", name="Haziq", age=9,
              school="SK Bangsar", pickup_address="Lucky Garden"),
    Passenger(id="C_CHLOE", parent_id="P_OTHER", name="Chloe", age=14,
              school="SMK Damansara", pickup_address="Jalan Maarof"),
]

DRIVERS = [
    Driver(id="D_ALYA", name="Alya Aziz", vehicle="Toyota Innova",
           onboarding_status=OnboardingStatus.APPROVED,
           current_lat=3.1306, current_lng=101.6673),
    Driver(id="D_NADIA", name="Nadia Zulkifli", vehicle="Perodua Aruz",
           onboarding_status=OnboardingStatus.PENDING),
]

USERS = [
    User(id="P_SITI", name="Siti Zulkifli", role=UserRole.PARENT),
    User(id="T_HENDERSON", name="Mr. Henderson", role=UserRole.TEACHER,
         school_id="SK Bangsar"),
]


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock()


@pytest.fixture
def roster() -> InMemoryRoster:
    return InMemoryRoster(children=CHILDREN, drivers=DRIVERS, users=USERS)


@pytest.fixture
def empty_pool_roster() -> InMemoryRoster:
    return InMemoryRoster(children=CHILDREN, drivers=DRIVERS[1:], users=USERS)


@pytest.fixture
def service(roster: InMemoryRoster, clock: FixedClock) -> TripService:
    return TripService(roster, rng=np.random.default_rng(7), clock=clock)
