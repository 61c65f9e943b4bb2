"""Unit tests for driver selection and the geo helpers behind it."""

import numpy as np
import pytest

from src.domain.distance import distances_km, haversine_km
from src.domain.entities import Driver
from src.domain.enums import OnboardingStatus, TripStatus
from src.domain.matching import (
    NearestDriverSelector,
    RandomDriverSelector,
    build_selector,
    trip_h3_cell,
    trip_origin,
)
from tests.conftest import make_trip


def _driver(driver_id, lat=None, lng=None):
    return Driver(
        id=driver_id,
        name=driver_id,
        onboarding_status=OnboardingStatus.APPROVED,
        current_lat=lat,
        current_lng=lng,
    )


class TestHaversine:
    def test_same_point_is_zero(self):
        assert haversine_km(3.139, 101.687, 3.139, 101.687) == 0.0

    def test_known_distance(self):
        # KL Sentral -> Bangsar ~2 km (approx)
        d = haversine_km(3.1340, 101.6862, 3.1300, 101.6710)
        assert 1.0 < d < 3.0

    def test_symmetric(self):
        d1 = haversine_km(3.0, 101.0, 4.0, 102.0)
        d2 = haversine_km(4.0, 102.0, 3.0, 101.0)
        assert abs(d1 - d2) < 1e-6

    def test_antipodal_points_stay_finite(self):
        d = haversine_km(0.0, 0.0, 0.0, 180.0)
        assert d == pytest.approx(np.pi * 6_371.0)

    def test_pool_distances_match_pairwise(self):
        lats = [3.1300, 3.0, 5.4141]
        lngs = [101.6710, 101.0, 100.3288]
        pool = distances_km(3.1340, 101.6862, lats, lngs)
        assert pool.shape == (3,)
        for got, la, ln in zip(pool, lats, lngs):
            assert got == pytest.approx(haversine_km(3.1340, 101.6862, la, ln))

    def test_empty_pool(self):
        assert distances_km(3.0, 101.0, [], []).size == 0


class TestH3Cell:
    def test_returns_string(self):
        cell = trip_h3_cell(3.1390, 101.6869, 8)
        assert isinstance(cell, str)
        assert len(cell) > 0

    def test_nearby_points_same_cell(self):
        """Two points ~10m apart share a res-7 cell."""
        c1 = trip_h3_cell(3.1390, 101.6869, 7)
        c2 = trip_h3_cell(3.1391, 101.6870, 7)
        assert c1 == c2

    def test_distant_points_different_cell(self):
        """Kuala Lumpur vs Penang."""
        c1 = trip_h3_cell(3.1390, 101.6869, 7)
        c2 = trip_h3_cell(5.4141, 100.3288, 7)
        assert c1 != c2


class TestTripOrigin:
    def test_prefers_pickup_point(self):
        trip = make_trip(TripStatus.MATCHING, pickup_lat=3.2, pickup_lng=101.6)
        assert trip_origin(trip) == (3.2, 101.6)

    def test_falls_back_to_position(self):
        trip = make_trip(TripStatus.MATCHING)
        assert trip_origin(trip) == (trip.current_lat, trip.current_lng)


class TestRandomSelector:
    def test_picks_from_pool(self):
        pool = [_driver("D_1"), _driver("D_2"), _driver("D_3")]
        selector = RandomDriverSelector(np.random.default_rng(0))
        picks = {selector.select(make_trip(TripStatus.MATCHING), pool).id for _ in range(50)}
        assert picks <= {"D_1", "D_2", "D_3"}
        assert len(picks) > 1

    def test_single_driver(self):
        selector = RandomDriverSelector(np.random.default_rng(0))
        assert selector.select(make_trip(TripStatus.MATCHING), [_driver("D_1")]).id == "D_1"


class TestNearestSelector:
    def test_closest_driver_wins(self):
        trip = make_trip(TripStatus.MATCHING, pickup_lat=3.1306, pickup_lng=101.6673)
        pool = [
            _driver("D_FAR", 3.2000, 101.7500),
            _driver("D_NEAR", 3.1310, 101.6675),
            _driver("D_MID", 3.1500, 101.6900),
        ]
        assert NearestDriverSelector().select(trip, pool).id == "D_NEAR"

    def test_unlocated_drivers_rank_last(self):
        trip = make_trip(TripStatus.MATCHING)
        pool = [_driver("D_NOWHERE"), _driver("D_FAR", 5.4141, 100.3288)]
        assert NearestDriverSelector().select(trip, pool).id == "D_FAR"

    def test_all_unlocated_keeps_pool_order(self):
        trip = make_trip(TripStatus.MATCHING)
        pool = [_driver("D_A"), _driver("D_B")]
        assert NearestDriverSelector().select(trip, pool).id == "D_A"


class TestBuildSelector:
    @pytest.mark.parametrize(
        "name, expected",
        [("nearest", NearestDriverSelector), ("random", RandomDriverSelector)],
    )
    def test_by_name(self, name, expected):
        assert isinstance(build_selector(name, np.random.default_rng(0)), expected)
