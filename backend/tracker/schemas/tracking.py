from typing import Optional

from pydantic import BaseModel, ConfigDict


class RoutePoint(BaseModel):
    """A single GPS fix. Immutable; filters return modified copies."""

    model_config = ConfigDict(frozen=True, from_attributes=True)

    latitude: float
    longitude: float
    timestamp_ms: int
    accuracy_m: float = 0.0
    bearing_deg: float = 0.0
    speed_mps: float = 0.0


class GpsMeasurement(BaseModel):
    """Raw accuracy sample logged for calibration (run_id None = pre-warmup)."""

    model_config = ConfigDict(frozen=True, from_attributes=True)

    run_id: Optional[int] = None
    activity_type: str
    timestamp_ms: int
    accuracy_m: float
    bearing_accuracy_deg: float = 0.0
    speed_mps: float = 0.0
    bearing_deg: float = 0.0


class CalibrationProfile(BaseModel):
    model_config = ConfigDict(frozen=True, from_attributes=True)

    activity_type: str
    avg_accuracy_m: float
    p95_accuracy_m: float
    avg_bearing_accuracy_deg: float
    samples_collected: int = 0
    kalman_process_noise: float
    kalman_measurement_noise: float
    last_updated_ms: int


class PaceSample(BaseModel):
    model_config = ConfigDict(frozen=True)

    pace_min_per_km: float
    timestamp_ms: int


class HeartRateSample(BaseModel):
    model_config = ConfigDict(frozen=True)

    bpm: int
    timestamp_ms: int


class RunSessionState(BaseModel):
    """Snapshot of an in-progress (or just stopped) run."""

    model_config = ConfigDict(frozen=True)

    is_running: bool = False
    is_paused: bool = False
    is_auto_paused: bool = False
    distance_meters: float = 0.0
    pace_min_per_km: float = 0.0
    duration_ms: int = 0
    pace_history: list[PaceSample] = []
    route_points: list[RoutePoint] = []
    filtered_route_points: list[RoutePoint] = []
    heart_rate_history: list[HeartRateSample] = []
