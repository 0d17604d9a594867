# flightsync/utils/geo.py

"""
Geospatial and unit utility functions.
"""

import math
from typing import Sequence, Tuple

FEET_TO_METRES = 0.3048
EARTH_RADIUS_M = 6371000.0

# top of the altitude colour scale, split into ALTITUDE_BANDS equal bands
ALTITUDE_SCALE_TOP_M = 15000.0
ALTITUDE_BANDS = 5


def feet_to_metres(feet: float) -> float:
    """Convert an altitude in feet to metres."""
    return feet * FEET_TO_METRES


def haversine(a: Tuple[float, float], b: Tuple[float, float]) -> float:
    """
    Compute the great-circle distance between two points on the Earth.

    Parameters
    ----------
    a
        (latitude, longitude) of point A, in decimal degrees.
    b
        (latitude, longitude) of point B, in decimal degrees.

    Returns
    -------
    float
        Distance between A and B in metres.
    """
    lat1, lon1 = a
    lat2, lon2 = b
    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    d_phi = phi2 - phi1
    d_lam = math.radians(lon2 - lon1)
    h = math.sin(d_phi/2)**2 + math.cos(phi1)*math.cos(phi2)*math.sin(d_lam/2)**2
    return 2 * EARTH_RADIUS_M * math.asin(math.sqrt(min(h, 1.0)))


def path_length(points: Sequence[Tuple[float, float]]) -> float:
    """
    Sum of great-circle legs along a (lat, lon) polyline, in metres.
    """
    return sum(haversine(a, b) for a, b in zip(points, points[1:]))


def altitude_band(height_m: float) -> int:
    """
    Bucket a height into one of the colour bands used to draw trails.

    Band 0 covers 0-3,000 m, band 4 covers 12,000 m and above.
    """
    normalized = min(max(height_m / ALTITUDE_SCALE_TOP_M, 0.0), 1.0)
    return min(int(normalized * ALTITUDE_BANDS), ALTITUDE_BANDS - 1)
