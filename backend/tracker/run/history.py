from typing import Optional

from tracker.core.config import settings
from tracker.gps import kalman
from tracker.gps.calibration import default_calibration
from tracker.gps.geo import distance_meters
from tracker.gps.pruning import filter_fully
from tracker.schemas.tracking import PaceSample, RoutePoint, RunSessionState
from tracker.stores.calibration import CalibrationStore
from tracker.stores.runs import RunStore


def pace_history_from_points(points: list[RoutePoint]) -> list[PaceSample]:
    """Per-leg pace between consecutive stored points.

    Legs with no elapsed time or no movement are skipped.
    """
    history = []
    for prev, cur in zip(points, points[1:]):
        leg_m = distance_meters(prev.latitude, prev.longitude, cur.latitude, cur.longitude)
        leg_min = (cur.timestamp_ms - prev.timestamp_ms) / 60000.0
        if leg_min > 0 and leg_m > 0:
            history.append(PaceSample(pace_min_per_km=leg_min / (leg_m / 1000.0), timestamp_ms=cur.timestamp_ms))
    return history


def completed_run(run_store: RunStore, run_id: int) -> Optional[RunSessionState]:
    """Rebuild the session view of a stored run, None if it does not exist."""
    record = run_store.get_run(run_id)
    if record is None:
        return None
    points = run_store.route_points_for_run(run_id)
    return RunSessionState(
        distance_meters=record.distance_m,
        pace_min_per_km=record.avg_pace_min_per_km,
        duration_ms=record.duration_ms,
        pace_history=pace_history_from_points(points),
        route_points=points,
        filtered_route_points=points,
    )


def display_route(
    run_store: RunStore,
    calibration_store: CalibrationStore,
    run_id: int,
    activity_type: Optional[str] = None,
    filtered: bool = True,
    prune: bool = True,
) -> list[RoutePoint]:
    """Stored route of a run, optionally Kalman-smoothed and pruned.

    Uses the activity's stored calibration, falling back to the default
    display profile.
    """
    points = run_store.route_points_for_run(run_id)
    if not filtered:
        return points

    activity_type = activity_type or settings.default_activity
    calibration = calibration_store.get_calibration(activity_type) or default_calibration(
        activity_type, kalman_process_noise=settings.default_process_noise
    )
    if prune:
        return filter_fully(points, calibration, settings.route_prune_m)
    return kalman.filter_batch(points, calibration)
