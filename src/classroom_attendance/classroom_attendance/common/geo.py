from __future__ import annotations

import math
from dataclasses import dataclass

from ..core.constants import EARTH_RADIUS_METERS


@dataclass(frozen=True)
class Coordinates:
    latitude: float
    longitude: float


def haversine_distance(a: Coordinates, b: Coordinates) -> float:
    """Great-circle distance between two points, in meters."""
    lat1 = math.radians(a.latitude)
    lat2 = math.radians(b.latitude)
    d_lat = lat2 - lat1
    d_lon = math.radians(b.longitude - a.longitude)

    h = math.sin(d_lat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(d_lon / 2) ** 2
    return 2 * EARTH_RADIUS_METERS * math.asin(min(1.0, math.sqrt(h)))
