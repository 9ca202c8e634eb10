import math

from tracker.schemas.tracking import CalibrationProfile, GpsMeasurement, RoutePoint

# Meters per degree of latitude on the 6371 km sphere
M_PER_DEG = 6371000.0 * math.pi / 180.0

START_MS = 1_700_000_000_000


class FakeClock:
    def __init__(self, start_ms: int = START_MS):
        self.now = start_ms

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms


def offset(lat: float, lon: float, north_m: float, east_m: float) -> tuple[float, float]:
    """Coordinates `north_m`/`east_m` meters away from (lat, lon)."""
    new_lat = lat + north_m / M_PER_DEG
    new_lon = lon + east_m / (M_PER_DEG * math.cos(math.radians(lat)))
    return new_lat, new_lon


def point(lat: float, lon: float, ts: int = START_MS, accuracy: float = 5.0) -> RoutePoint:
    return RoutePoint(latitude=lat, longitude=lon, timestamp_ms=ts, accuracy_m=accuracy)


def rectangle_route(lat0=47.0, lon0=8.0, leg_m=250.0, step_m=10.0, start_ms=START_MS, step_ms=3000):
    """Closed rectangle N, E, S, W of four `leg_m` legs sampled every `step_m`."""
    steps = int(leg_m / step_m)
    points = [point(lat0, lon0, start_ms)]
    lat, lon = lat0, lon0
    ts = start_ms
    for north, east in [(1, 0), (0, 1), (-1, 0), (0, -1)]:
        for _ in range(steps):
            lat, lon = offset(lat, lon, north * step_m, east * step_m)
            ts += step_ms
            points.append(point(lat, lon, ts))
    return points


def measurement(accuracy: float, run_id=None, activity="running", ts=START_MS, bearing_accuracy=3.0):
    return GpsMeasurement(
        run_id=run_id,
        activity_type=activity,
        timestamp_ms=ts,
        accuracy_m=accuracy,
        bearing_accuracy_deg=bearing_accuracy,
    )


def calibration(p95=20.0, process=0.02, measurement_noise=40.0, samples=0, activity="running"):
    return CalibrationProfile(
        activity_type=activity,
        avg_accuracy_m=10.0,
        p95_accuracy_m=p95,
        avg_bearing_accuracy_deg=10.0,
        samples_collected=samples,
        kalman_process_noise=process,
        kalman_measurement_noise=measurement_noise,
        last_updated_ms=START_MS,
    )
