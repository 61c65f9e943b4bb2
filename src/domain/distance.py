"""
Great-circle distance from a pickup point to candidate positions.

There is no road network in the core, so straight-line (Haversine) distance
stands in for travel distance.  The dispatcher ranks a whole driver pool at
once, so the formula works on numpy arrays; ``haversine_km`` is the scalar
convenience over it.
"""

from __future__ import annotations

from typing import Sequence

import numpy as np

EARTH_RADIUS_KM = 6_371.0


def distances_km(
    lat: float, lng: float, lats: Sequence[float], lngs: Sequence[float]
) -> np.ndarray:
    """Distances in km from ``(lat, lng)`` to each ``(lats[i], lngs[i])``.  O(n)."""
    phi0 = np.radians(lat)
    phi = np.radians(np.asarray(lats, dtype=float))
    dphi = phi - phi0
    dlmb = np.radians(np.asarray(lngs, dtype=float) - lng)

    h = np.sin(dphi / 2) ** 2 + np.cos(phi0) * np.cos(phi) * np.sin(dlmb / 2) ** 2
    # Rounding can push h a hair past 1 for antipodal points
    return 2 * EARTH_RADIUS_KM * np.arcsin(np.sqrt(np.clip(h, 0.0, 1.0)))


def haversine_km(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    return float(distances_km(lat1, lng1, [lat2], [lng2])[0])
