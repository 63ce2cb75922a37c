"""Great-circle distance between two coordinates."""
from __future__ import annotations

from math import atan2, cos, radians, sin, sqrt

from catalog.schemas import Coordinate

EARTH_RADIUS_KM = 6371.0


def distance_km(a: Coordinate, b: Coordinate) -> float:
    """Compute haversine distance in kilometres between ``a`` and ``b``.

    Inputs are not range-checked; out-of-range degrees still yield a
    finite, non-negative result.
    """
    lat1 = radians(a.latitude)
    lat2 = radians(b.latitude)
    dlat = lat2 - lat1
    dlon = radians(b.longitude - a.longitude)

    h = sin(dlat / 2) ** 2 + cos(lat1) * cos(lat2) * sin(dlon / 2) ** 2
    # Rounding can push h a hair outside [0, 1].
    h = min(1.0, max(0.0, h))
    return EARTH_RADIUS_KM * 2 * atan2(sqrt(h), sqrt(1 - h))


def format_distance(km: float | None) -> str:
    """Return a short label such as ``"3.2km"`` or ``"Unknown"``."""
    if km is None:
        return "Unknown"
    return f"{km:.1f}km"
