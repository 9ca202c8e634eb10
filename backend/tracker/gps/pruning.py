from typing import Sequence

from tracker.core.constants import ROUTE_PRUNE_M, STATIONARY_NOISE_M
from tracker.gps import kalman
from tracker.gps.geo import distance_meters
from tracker.schemas.tracking import CalibrationProfile, RoutePoint


def prune(points: Sequence[RoutePoint], min_distance_m: float = STATIONARY_NOISE_M) -> list[RoutePoint]:
    """Drop points that do not move at least `min_distance_m`.

    Each point is compared with the last *kept* point, so a long dwell
    collapses to a single point instead of one per update.
    """
    if len(points) <= 1:
        return list(points)

    kept = [points[0]]
    for point in points[1:]:
        last = kept[-1]
        if distance_meters(last.latitude, last.longitude, point.latitude, point.longitude) >= min_distance_m:
            kept.append(point)
    return kept


def filter_fully(
    points: Sequence[RoutePoint],
    calibration: CalibrationProfile,
    min_distance_m: float = ROUTE_PRUNE_M,
) -> list[RoutePoint]:
    # Smooth first; raw jitter would otherwise pass as movement
    return prune(kalman.filter_batch(points, calibration), min_distance_m)
