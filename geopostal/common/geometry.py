"""Great-circle distance helpers."""

from __future__ import annotations

import math


def round_half_away(value: float, digits: int = 2) -> float:
    scale = 10**digits
    scaled = abs(value) * scale
    whole = math.floor(scaled)
    if scaled - whole >= 0.5:
        whole += 1
    return math.copysign(whole, value) / scale


def distance_between_points(lat1: float, lon1: float, lat2: float, lon2: float, radius: float) -> float:
    """Haversine distance between two points, rounded to 2 decimals.

    Inputs are decimal degrees; the result is in the unit of ``radius``.
    """
    rlat1, rlon1 = math.radians(lat1), math.radians(lon1)
    rlat2, rlon2 = math.radians(lat2), math.radians(lon2)

    dlat = rlat2 - rlat1
    dlon = rlon2 - rlon1

    a = math.sin(dlat / 2) ** 2 + math.cos(rlat1) * math.cos(rlat2) * math.sin(dlon / 2) ** 2
    a = min(a, 1.0)
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))

    return round_half_away(c * radius)
