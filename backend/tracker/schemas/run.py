from typing import Optional

from pydantic import BaseModel, ConfigDict


class RunRecord(BaseModel):
    """Persisted summary of a completed run."""

    model_config = ConfigDict(from_attributes=True)

    id: Optional[int] = None
    start_time_ms: int
    end_time_ms: int
    distance_m: float
    duration_ms: int
    avg_pace_min_per_km: float
    max_hr: int = 0
    min_hr: int = 0
    avg_hr: int = 0


class RunRead(RunRecord):
    """Schema returned to clients when reading a run."""

    id: int
    pace: str      # e.g. "5:30" per km
    duration: str  # "H:MM:SS"
    hr_zone: Optional[int] = None  # zone of the average heart rate
