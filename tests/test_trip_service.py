"""Trip service queries: role-scoped listing, status cards and context."""

from datetime import timedelta

import pytest
import pytest_asyncio

from src.domain.entities import Passenger
from src.domain.enums import CoordinationSignal, TripStatus, UserRole
from src.domain.errors import UnknownTrip
from src.domain.narrative import ACTION_NEEDED, DELAYED, SAFE, status_card
from tests.conftest import T0, make_trip


@pytest_asyncio.fixture
async def populated(service):
    await service.store.add(make_trip(TripStatus.IN_PROGRESS, trip_id="T_HAZIQ001"))
    await service.store.add(
        make_trip(
            TripStatus.EN_ROUTE_TO_PICKUP,
            trip_id="T_CHLOE001",
            child_id="C_CHLOE",
            driver_id="D_OTHER",
        )
    )
    return service


class TestListTrips:
    @pytest.mark.asyncio
    async def test_admin_sees_everything(self, populated):
        ids = {t.id for t in populated.list_trips(UserRole.ADMIN)}
        assert ids == {"T_HAZIQ001", "T_CHLOE001"}

    @pytest.mark.asyncio
    async def test_parent_sees_own_children(self, populated):
        trips = populated.list_trips(UserRole.PARENT, "P_SITI")
        assert [t.id for t in trips] == ["T_HAZIQ001"]

    @pytest.mark.asyncio
    async def test_driver_sees_assigned(self, populated):
        trips = populated.list_trips(UserRole.DRIVER, "D_OTHER")
        assert [t.id for t in trips] == ["T_CHLOE001"]

    @pytest.mark.asyncio
    async def test_teacher_sees_school(self, populated):
        trips = populated.list_trips(UserRole.TEACHER, "T_HENDERSON")
        assert [t.id for t in trips] == ["T_HAZIQ001"]

    @pytest.mark.asyncio
    async def test_no_actor_sees_nothing(self, populated):
        assert populated.list_trips(UserRole.PARENT) == []
        assert populated.list_trips(UserRole.TEACHER, "T_UNKNOWN") == []

    @pytest.mark.asyncio
    async def test_returns_copies(self, populated):
        populated.list_trips(UserRole.ADMIN)[0].status = TripStatus.CANCELLED
        statuses = {t.status for t in populated.list_trips(UserRole.ADMIN)}
        assert TripStatus.CANCELLED not in statuses

    def test_get_unknown(self, service):
        with pytest.raises(UnknownTrip):
            service.get_trip("T_NOPE0000")


HAZIQ = Passenger(id="C_HAZIQ", parent_id="P_SITI", name="Haziq", school="SK Bangsar")


class TestStatusCard:
    def test_en_route_counts_down(self):
        trip = make_trip(
            TripStatus.EN_ROUTE_TO_PICKUP, estimated_arrival=T0 + timedelta(minutes=9)
        )
        card = status_card(trip, HAZIQ, T0)
        assert card.label == SAFE
        assert card.message == "Driver arriving in 9 min"

    def test_en_route_almost_there(self):
        trip = make_trip(
            TripStatus.EN_ROUTE_TO_PICKUP, estimated_arrival=T0 + timedelta(minutes=1)
        )
        assert status_card(trip, HAZIQ, T0).message == "Driver is turning into your street"

    def test_child_not_found_wins(self):
        trip = make_trip(
            TripStatus.ARRIVED_AT_PICKUP,
            coordination_signal=CoordinationSignal.CHILD_NOT_FOUND,
            route_deviation=True,
        )
        assert status_card(trip, HAZIQ, T0).label == ACTION_NEEDED

    def test_signal_lost(self):
        trip = make_trip(TripStatus.IN_PROGRESS, driver_location_authorized=False)
        card = status_card(trip, HAZIQ, T0)
        assert card.label == ACTION_NEEDED
        assert "signal lost" in card.message

    def test_deviation_is_delayed(self):
        trip = make_trip(
            TripStatus.IN_PROGRESS,
            route_deviation=True,
            estimated_arrival=T0.replace(hour=8, minute=5),
        )
        card = status_card(trip, HAZIQ, T0)
        assert card.label == DELAYED
        assert card.message == "Heavy traffic, new ETA 08:05"

    def test_picked_up_names_child(self):
        card = status_card(make_trip(TripStatus.PICKED_UP), HAZIQ, T0)
        assert card.message == "Haziq is safely in the vehicle"

    @pytest.mark.asyncio
    async def test_service_summary(self, service):
        await service.store.add(make_trip(TripStatus.IN_PROGRESS))
        await service.raise_panic("T_TEST0001")
        card = service.status_summary("T_TEST0001")
        assert card.label == ACTION_NEEDED


class TestTripContext:
    @pytest.mark.asyncio
    async def test_unmatched_trip_has_no_driver(self, service):
        await service.store.add(make_trip(TripStatus.MATCHING))
        trip, child, driver = service.trip_context("T_TEST0001")
        assert child.name == "Haziq"
        assert driver is None

    @pytest.mark.asyncio
    async def test_matched_trip_has_driver(self, service):
        await service.store.add(make_trip(TripStatus.IN_PROGRESS))
        _, _, driver = service.trip_context("T_TEST0001")
        assert driver.id == "D_ALYA"
