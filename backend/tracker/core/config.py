from pydantic_settings import BaseSettings
from pydantic import field_validator

from tracker.core.constants import (
    AUTO_PAUSE_AFTER_MS,
    AUTO_PAUSE_MIN_MOVEMENT_M,
    DEFAULT_MAX_ACCURACY_M,
    MIN_CALIBRATION_SESSION_MS,
    ROUTE_PRUNE_M,
)


class Settings(BaseSettings):
    database_url: str = "sqlite+pysqlite:///./tracker.db"
    log_level: str = "INFO"

    # Activity used when a caller does not name one ("running", "skiing", ...)
    default_activity: str = "running"

    # Point validation
    max_accuracy_m: float = DEFAULT_MAX_ACCURACY_M

    # Sessions shorter than this are too noisy to calibrate from
    min_calibration_session_ms: int = MIN_CALIBRATION_SESSION_MS

    # Pruning threshold for the displayed route (meters)
    route_prune_m: float = ROUTE_PRUNE_M

    # Auto-pause when standing still, off unless enabled
    auto_pause_enabled: bool = False
    auto_pause_after_ms: int = AUTO_PAUSE_AFTER_MS
    auto_pause_min_movement_m: float = AUTO_PAUSE_MIN_MOVEMENT_M

    # Fallback calibration used until an activity has been calibrated
    default_avg_accuracy_m: float = 10.0
    default_p95_accuracy_m: float = 20.0
    default_avg_bearing_accuracy_deg: float = 10.0
    default_live_process_noise: float = 0.02
    default_process_noise: float = 0.001
    default_measurement_noise: float = 40.0

    # Heart rate settings
    age: int = 30
    hr_max: int | None = None  # if None, computed as 220 - age

    # Allow empty env strings for optional fields
    @field_validator("hr_max", mode="before")
    @classmethod
    def _empty_to_none(cls, v):
        if v in ("", None, "null", "None"):
            return None
        return v

    class Config:
        env_file = ".env"


settings = Settings()
