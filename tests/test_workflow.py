"""Unit tests for the trip status workflow (partial transition function)."""

import pytest

from src.domain.enums import TripStatus, UserRole
from src.domain.errors import InvalidTransition
from src.domain.workflow import (
    NeedsVerification,
    NoSuccessor,
    Step,
    advance,
    cancel,
    successor,
)
from tests.conftest import T0, FixedClock, make_trip


class TestSuccessor:
    @pytest.mark.parametrize(
        "current, expected",
        [
            (TripStatus.MATCHING, TripStatus.EN_ROUTE_TO_PICKUP),
            (TripStatus.EN_ROUTE_TO_PICKUP, TripStatus.ARRIVED_AT_PICKUP),
            (TripStatus.CHECKED_IN, TripStatus.PICKED_UP),
            (TripStatus.PICKED_UP, TripStatus.IN_PROGRESS),
            (TripStatus.IN_PROGRESS, TripStatus.COMPLETED),
        ],
    )
    def test_forward_chain(self, current, expected):
        assert successor(current) == Step(current, expected)

    def test_arrived_needs_verification(self):
        assert isinstance(successor(TripStatus.ARRIVED_AT_PICKUP), NeedsVerification)

    @pytest.mark.parametrize(
        "status",
        [TripStatus.COMPLETED, TripStatus.CANCELLED, TripStatus.SCHEDULED],
    )
    def test_no_successor(self, status):
        assert successor(status) == NoSuccessor(status)

    def test_checked_in_is_never_a_plain_step_target(self):
        for status in TripStatus:
            outcome = successor(status)
            if isinstance(outcome, Step):
                assert outcome.next != TripStatus.CHECKED_IN


class TestAdvance:
    def test_driver_walks_the_chain(self):
        clock = FixedClock()
        trip = make_trip(TripStatus.CHECKED_IN)
        for expected in (
            TripStatus.PICKED_UP,
            TripStatus.IN_PROGRESS,
            TripStatus.COMPLETED,
        ):
            assert advance(trip, UserRole.DRIVER, clock.advance(30)) == expected
        assert trip.status == TripStatus.COMPLETED

    def test_stamps_last_updated(self):
        trip = make_trip(TripStatus.EN_ROUTE_TO_PICKUP)
        clock = FixedClock()
        now = clock.advance(60)
        advance(trip, UserRole.DRIVER, now)
        assert trip.last_updated == now

    def test_last_updated_never_moves_backwards(self):
        trip = make_trip(TripStatus.EN_ROUTE_TO_PICKUP)
        clock = FixedClock()
        later = clock.advance(120)
        trip.last_updated = later
        advance(trip, UserRole.DRIVER, T0)
        assert trip.last_updated == later

    def test_advance_on_completed_fails(self):
        trip = make_trip(TripStatus.COMPLETED)
        with pytest.raises(InvalidTransition):
            advance(trip, UserRole.DRIVER, T0)
        assert trip.status == TripStatus.COMPLETED

    def test_advance_cannot_skip_pin_check(self):
        trip = make_trip(TripStatus.ARRIVED_AT_PICKUP)
        with pytest.raises(InvalidTransition, match="PIN"):
            advance(trip, UserRole.DRIVER, T0)
        assert trip.status == TripStatus.ARRIVED_AT_PICKUP

    def test_driver_accepts_offer(self):
        trip = make_trip(TripStatus.MATCHING, driver_id="D_ALYA")
        advance(trip, UserRole.DRIVER, T0)
        assert trip.status == TripStatus.EN_ROUTE_TO_PICKUP
        assert trip.driver_id == "D_ALYA"

    def test_accepting_without_offer_fails(self):
        trip = make_trip(TripStatus.MATCHING)
        with pytest.raises(InvalidTransition, match="no driver offer"):
            advance(trip, UserRole.DRIVER, T0)

    def test_operator_cannot_accept_on_behalf_of_driver(self):
        trip = make_trip(TripStatus.MATCHING, driver_id="D_ALYA")
        with pytest.raises(InvalidTransition):
            advance(trip, UserRole.ADMIN, T0)

    @pytest.mark.parametrize("role", [UserRole.PARENT, UserRole.TEACHER])
    def test_guardians_and_staff_cannot_advance(self, role):
        trip = make_trip(TripStatus.PICKED_UP)
        with pytest.raises(InvalidTransition):
            advance(trip, role, T0)
        assert trip.status == TripStatus.PICKED_UP

    def test_operator_may_push_later_steps(self):
        trip = make_trip(TripStatus.IN_PROGRESS)
        assert advance(trip, UserRole.ADMIN, T0) == TripStatus.COMPLETED


class TestCancel:
    def test_cancel_active_trip(self):
        trip = make_trip(TripStatus.EN_ROUTE_TO_PICKUP)
        cancel(trip, T0)
        assert trip.status == TripStatus.CANCELLED
        assert trip.end_time == T0

    @pytest.mark.parametrize("status", [TripStatus.COMPLETED, TripStatus.CANCELLED])
    def test_cancel_terminal_fails(self, status):
        trip = make_trip(status)
        with pytest.raises(InvalidTransition):
            cancel(trip, T0)

    def test_cancel_unmatched_request_fails(self):
        trip = make_trip(TripStatus.MATCHING)
        with pytest.raises(InvalidTransition):
            cancel(trip, T0)
        assert trip.status == TripStatus.MATCHING

    @pytest.mark.asyncio
    async def test_cancelled_trip_keeps_driver(self, service):
        booked = await service.request_trip("C_HAZIQ")
        with pytest.raises(InvalidTransition):
            await service.cancel(booked.id)

        await service.approve_match(booked.id)
        cancelled = await service.cancel(booked.id)
        assert cancelled.status == TripStatus.CANCELLED
        assert cancelled.driver_id == "D_ALYA"
