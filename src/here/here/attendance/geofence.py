from __future__ import annotations

import math
from typing import Optional

from ..core.constants import DEFAULT_GEOFENCE_RADIUS_METERS
from ..sections.model import GeoPoint
from .model import Location

EARTH_RADIUS_METERS = 6_371_000


def haversine_meters(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """Great-circle distance between two WGS84 points."""
    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lng2 - lng1)
    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    return 2 * EARTH_RADIUS_METERS * math.asin(math.sqrt(a))


def verify_location(
    location: Optional[Location],
    expected: Optional[GeoPoint],
    radius_meters: Optional[int] = None,
) -> Optional[bool]:
    """Soft geofence check.

    Returns None when there is nothing to compare, otherwise whether the
    reported point lies within the radius. Callers never block on the result.
    """

    if location is None or expected is None:
        return None
    radius = radius_meters or DEFAULT_GEOFENCE_RADIUS_METERS
    return haversine_meters(location.lat, location.lng, expected.lat, expected.lng) <= radius
