import math

from tracker.core.constants import EARTH_RADIUS_KM


def distance_meters(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Return great-circle distance in meters between two WGS84 points.

    Uses the standard haversine formula on a spherical Earth; sufficient for
    per-fix distances over a running route.
    """
    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    dphi = math.radians(lat2 - lat1)
    dlambda = math.radians(lon2 - lon1)
    a = math.sin(dphi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(dlambda / 2) ** 2
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c * 1000


def path_length_meters(points) -> float:
    """Sum of haversine legs along an ordered sequence of RoutePoints."""
    total = 0.0
    for a, b in zip(points, points[1:]):
        total += distance_meters(a.latitude, a.longitude, b.latitude, b.longitude)
    return total
