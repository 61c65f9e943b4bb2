"""Snapshot persistence against a throwaway SQLite file."""

from datetime import timedelta

import pytest
import pytest_asyncio

from src.domain.entities import Alert
from src.domain.enums import AlertType, CoordinationSignal, Frequency, TripStatus
from src.infrastructure.database import build_engine, build_session_factory, init_models
from src.infrastructure.repositories import SnapshotStore
from src.infrastructure.store import TripStore
from src.services.trip_service import TripService
from tests.conftest import CHILDREN, T0, make_trip


@pytest_asyncio.fixture
async def snapshots(tmp_path):
    engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'snapshots.db'}")
    await init_models(engine)
    yield SnapshotStore(build_session_factory(engine))
    await engine.dispose()


class TestSnapshotStore:
    @pytest.mark.asyncio
    async def test_empty_database(self, snapshots):
        assert await snapshots.load() == (None, None)

    @pytest.mark.asyncio
    async def test_round_trip_keeps_every_field(self, snapshots):
        trip = make_trip(
            TripStatus.ARRIVED_AT_PICKUP,
            estimated_arrival=T0 + timedelta(minutes=15),
            coordination_signal=CoordinationSignal.DRIVER_WAITING,
            is_recurring=True,
            frequency=Frequency.WEEKLY,
            pin_attempts=2,
            alerts=[
                Alert(
                    id="A_00000001",
                    trip_id="T_TEST0001",
                    type=AlertType.DELAY,
                    message="Jam on Federal Highway",
                    timestamp=T0,
                )
            ],
        )

        await snapshots.save([trip], CHILDREN)
        trips, children = await snapshots.load()

        assert trips == [trip]
        assert children == CHILDREN

    @pytest.mark.asyncio
    async def test_save_overwrites(self, snapshots):
        await snapshots.save([make_trip(trip_id="T_FIRST001")], CHILDREN)
        await snapshots.save([], CHILDREN[:1])
        trips, children = await snapshots.load()
        assert trips == []
        assert [c.id for c in children] == ["C_HAZIQ"]


class TestServicePersistence:
    @pytest.mark.asyncio
    async def test_mutations_are_written(self, roster, clock, snapshots):
        service = TripService(roster, clock=clock, snapshots=snapshots)
        booked = await service.request_trip("C_HAZIQ")
        await service.approve_match(booked.id)

        trips, _ = await snapshots.load()
        assert [(t.id, t.status) for t in trips] == [
            (booked.id, TripStatus.EN_ROUTE_TO_PICKUP)
        ]

    @pytest.mark.asyncio
    async def test_restart_picks_up_where_it_left_off(self, roster, clock, snapshots):
        first = TripService(roster, clock=clock, snapshots=snapshots)
        await first.store.add(make_trip(TripStatus.ARRIVED_AT_PICKUP, pin="4821"))
        await first.verify("T_TEST0001", "4821")

        trips, _ = await snapshots.load()
        second = TripService(roster, store=TripStore(trips), clock=clock)
        assert second.get_trip("T_TEST0001").status == TripStatus.CHECKED_IN
