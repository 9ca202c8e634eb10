"""Kalman smoothing for GPS route points.

Latitude and longitude are filtered as two independent 1-D Kalman filters
(no cross-axis covariance). Noise parameters come from the activity's
calibration profile:

- initial variance: p95 accuracy squared
- process noise: calibrated baseline, scaled up for gaps longer than 1 s
- measurement noise: derived from the spread of reported accuracies

The same `step` drives both whole-route filtering and live, point-by-point
filtering where the caller holds the `KalmanState`.
"""
from dataclasses import dataclass
from typing import Sequence

from tracker.schemas.tracking import CalibrationProfile, RoutePoint


@dataclass(frozen=True)
class KalmanState:
    latitude: float
    longitude: float
    lat_variance: float
    lon_variance: float


def initialize(first_point: RoutePoint, calibration: CalibrationProfile) -> KalmanState:
    """Seed the filter at the raw first fix."""
    variance = calibration.p95_accuracy_m * calibration.p95_accuracy_m
    return KalmanState(
        latitude=first_point.latitude,
        longitude=first_point.longitude,
        lat_variance=variance,
        lon_variance=variance,
    )


def _update_axis(position, variance, measured, process_noise, measurement_noise):
    predicted = variance + process_noise
    gain = predicted / (predicted + measurement_noise)
    return position + gain * (measured - position), (1 - gain) * predicted


def step(
    state: KalmanState,
    previous_raw: RoutePoint,
    new_raw: RoutePoint,
    calibration: CalibrationProfile,
) -> tuple[RoutePoint, KalmanState]:
    """Filter one fix. Returns (filtered point, updated state).

    Only latitude/longitude of the returned point differ from `new_raw`.
    """
    dt = (new_raw.timestamp_ms - previous_raw.timestamp_ms) / 1000.0
    process_noise = calibration.kalman_process_noise * max(1.0, dt)
    measurement_noise = calibration.kalman_measurement_noise

    latitude, lat_variance = _update_axis(
        state.latitude, state.lat_variance, new_raw.latitude, process_noise, measurement_noise
    )
    longitude, lon_variance = _update_axis(
        state.longitude, state.lon_variance, new_raw.longitude, process_noise, measurement_noise
    )

    new_state = KalmanState(latitude, longitude, lat_variance, lon_variance)
    filtered = new_raw.model_copy(update={"latitude": latitude, "longitude": longitude})
    return filtered, new_state


def filter_batch(points: Sequence[RoutePoint], calibration: CalibrationProfile) -> list[RoutePoint]:
    """Smooth a whole route. Output has the same length and timestamps."""
    if len(points) <= 1:
        return list(points)

    state = initialize(points[0], calibration)
    filtered = [points[0]]
    for previous, current in zip(points, points[1:]):
        point, state = step(state, previous, current, calibration)
        filtered.append(point)
    return filtered
