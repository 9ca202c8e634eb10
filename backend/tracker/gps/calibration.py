"""GPS accuracy statistics and calibration merging.

A calibration profile is an online accumulator: each finished session
contributes its measurement summary weighted by sample count, so the order
in which sessions are merged does not matter (up to float rounding).
"""
import math
from typing import NamedTuple, Optional, Sequence

from tracker.core.config import settings
from tracker.core.constants import (
    ACCURACY_PERCENTILE,
    MEASUREMENT_NOISE_SCALE,
    UNCALIBRATED_MEASUREMENT_NOISE,
)
from tracker.schemas.tracking import CalibrationProfile, GpsMeasurement


class MeasurementStats(NamedTuple):
    avg_accuracy: float
    p95_accuracy: float
    avg_bearing_accuracy: float


def derive_measurement_noise(accuracies: Sequence[float]) -> float:
    """Kalman measurement noise from a batch of reported accuracies.

    Population standard deviation scaled by 2. An empty batch yields a loose
    default so an uncalibrated filter trusts measurements little.
    """
    if not accuracies:
        return UNCALIBRATED_MEASUREMENT_NOISE

    values = [float(a) for a in accuracies]
    mean = sum(values) / len(values)
    variance = sum((v - mean) ** 2 for v in values) / len(values)
    return math.sqrt(variance) * MEASUREMENT_NOISE_SCALE


def summarize(measurements: Sequence[GpsMeasurement]) -> MeasurementStats:
    """Return (avg_accuracy, p95_accuracy, avg_bearing_accuracy).

    p95 is the nearest-rank element at index floor(n * 0.95) of the sorted
    accuracies, not an interpolated percentile.
    """
    if not measurements:
        return MeasurementStats(0.0, 0.0, 0.0)

    accuracies = sorted(float(m.accuracy_m) for m in measurements)
    bearing_accuracies = [float(m.bearing_accuracy_deg) for m in measurements]

    n = len(accuracies)
    return MeasurementStats(
        avg_accuracy=sum(accuracies) / n,
        p95_accuracy=accuracies[int(n * ACCURACY_PERCENTILE)],
        avg_bearing_accuracy=sum(bearing_accuracies) / n,
    )


def weighted_average(current_avg: float, current_n: int, new_avg: float, new_n: int) -> float:
    if current_n == 0:
        return new_avg
    if new_n == 0:
        return current_avg

    total = current_n + new_n
    return current_avg * (current_n / total) + new_avg * (new_n / total)


def default_calibration(
    activity_type: str,
    kalman_process_noise: Optional[float] = None,
    now_ms: int = 0,
) -> CalibrationProfile:
    """Profile used for filtering until an activity has been calibrated."""
    if kalman_process_noise is None:
        kalman_process_noise = settings.default_live_process_noise
    return CalibrationProfile(
        activity_type=activity_type,
        avg_accuracy_m=settings.default_avg_accuracy_m,
        p95_accuracy_m=settings.default_p95_accuracy_m,
        avg_bearing_accuracy_deg=settings.default_avg_bearing_accuracy_deg,
        samples_collected=0,
        kalman_process_noise=kalman_process_noise,
        kalman_measurement_noise=settings.default_measurement_noise,
        last_updated_ms=now_ms,
    )


def merge_calibration(
    existing: Optional[CalibrationProfile],
    measurements: Sequence[GpsMeasurement],
    activity_type: str,
    now_ms: int,
) -> CalibrationProfile:
    """Fold a batch of measurements into `existing` (None = zero samples)."""
    stats = summarize(measurements)
    noise = derive_measurement_noise([m.accuracy_m for m in measurements])
    new_n = len(measurements)

    if existing is None:
        current_n = 0
        existing = default_calibration(
            activity_type, kalman_process_noise=settings.default_process_noise
        )
    else:
        current_n = existing.samples_collected

    def merge(current: float, new: float) -> float:
        return weighted_average(current, current_n, new, new_n)

    return CalibrationProfile(
        activity_type=activity_type,
        avg_accuracy_m=merge(existing.avg_accuracy_m, stats.avg_accuracy),
        p95_accuracy_m=merge(existing.p95_accuracy_m, stats.p95_accuracy),
        avg_bearing_accuracy_deg=merge(existing.avg_bearing_accuracy_deg, stats.avg_bearing_accuracy),
        samples_collected=current_n + new_n,
        kalman_process_noise=merge(existing.kalman_process_noise, settings.default_process_noise),
        kalman_measurement_noise=merge(existing.kalman_measurement_noise, noise),
        last_updated_ms=now_ms,
    )
