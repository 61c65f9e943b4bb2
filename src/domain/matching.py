"""
Driver selection strategies  (Strategy Pattern)
===============================================

The dispatcher hands a non-empty pool of approved drivers to a
``DriverSelector`` and assigns whoever it returns.

* ``RandomDriverSelector``  -- uniform pick from the pool.
* ``NearestDriverSelector`` -- spatial binning with H3, then distance:

  1. Map the trip origin to an H3 cell and take its neighbourhood
     (``grid_disk`` of radius ``ring``).
  2. Drivers whose last known position falls in that neighbourhood are
     ranked first, by haversine distance.
  3. Then every other located driver by distance, then drivers with no
     known position in pool order.

Complexity: O(n log n) for n drivers in the pool.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Sequence

import h3
import numpy as np

from .distance import distances_km
from .entities import Driver, Trip


def trip_h3_cell(lat: float, lng: float, resolution: int = 8) -> str:
    """Map a geo-point to an H3 hexagonal cell index.  O(1)."""
    return h3.latlng_to_cell(lat, lng, resolution)


def trip_origin(trip: Trip) -> tuple[float, float]:
    if trip.pickup_lat is not None and trip.pickup_lng is not None:
        return trip.pickup_lat, trip.pickup_lng
    return trip.current_lat, trip.current_lng


class DriverSelector(ABC):
    @abstractmethod
    def select(self, trip: Trip, drivers: Sequence[Driver]) -> Driver: ...


class RandomDriverSelector(DriverSelector):
    def __init__(self, rng: np.random.Generator):
        self.rng = rng

    def select(self, trip: Trip, drivers: Sequence[Driver]) -> Driver:
        return drivers[int(self.rng.integers(0, len(drivers)))]


class NearestDriverSelector(DriverSelector):
    def __init__(self, resolution: int = 8, ring: int = 1):
        self.resolution = resolution
        self.ring = ring

    def select(self, trip: Trip, drivers: Sequence[Driver]) -> Driver:
        lat, lng = trip_origin(trip)
        nearby = set(h3.grid_disk(trip_h3_cell(lat, lng, self.resolution), self.ring))

        located = [
            (idx, d) for idx, d in enumerate(drivers)
            if d.current_lat is not None and d.current_lng is not None
        ]
        if not located:
            return drivers[0]

        dists = distances_km(
            lat, lng,
            [d.current_lat for _, d in located],
            [d.current_lng for _, d in located],
        )
        ranked = [
            (
                0 if trip_h3_cell(d.current_lat, d.current_lng, self.resolution) in nearby else 1,
                float(dist),
                idx,
                d,
            )
            for (idx, d), dist in zip(located, dists)
        ]
        return min(ranked, key=lambda r: r[:3])[3]


def build_selector(name: str, rng: np.random.Generator, resolution: int = 8) -> DriverSelector:
    if name == "nearest":
        return NearestDriverSelector(resolution=resolution)
    return RandomDriverSelector(rng)
