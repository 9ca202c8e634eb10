import math
import time
from datetime import datetime, timezone

from tracker.core.constants import MAX_DISPLAY_PACE_MIN_PER_KM


def now_ms() -> int:
    """Wall-clock time as epoch milliseconds."""
    return int(time.time() * 1000)


def ms_to_datetime(timestamp_ms: int) -> datetime:
    """Convert epoch milliseconds -> aware UTC datetime."""
    return datetime.fromtimestamp(timestamp_ms / 1000.0, tz=timezone.utc)


def format_duration(duration_ms: int) -> str:
    """
    Convert milliseconds -> 'H:MM:SS'.
    Example: 2732000 -> '0:45:32'
    """
    total_seconds = duration_ms // 1000
    hours = total_seconds // 3600
    minutes = (total_seconds % 3600) // 60
    seconds = total_seconds % 60
    return f"{hours}:{minutes:02d}:{seconds:02d}"


def compute_pace(duration_ms: int, distance_m: float) -> float:
    """
    Pace in minutes per kilometer.
    Example: duration=1_800_000 ms, distance=6000 m -> 5.0
    Returns 0.0 when there is no distance yet.
    """
    if distance_m <= 0:
        return 0.0
    return (duration_ms / 60000.0) / (distance_m / 1000.0)


def format_pace(pace_min_per_km: float) -> str:
    """
    Format pace as 'M:SS' per km.
    Example: 5.5 -> '5:30'. Zero, non-finite or absurd paces render as '--'.
    """
    if (
        pace_min_per_km <= 0
        or not math.isfinite(pace_min_per_km)
        or pace_min_per_km > MAX_DISPLAY_PACE_MIN_PER_KM
    ):
        return "--"
    minutes = int(pace_min_per_km)
    seconds = int((pace_min_per_km - minutes) * 60)
    return f"{minutes}:{seconds:02d}"
