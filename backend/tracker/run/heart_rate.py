from typing import NamedTuple, Optional, Sequence

from tracker.core.config import settings
from tracker.core.constants import HR_ZONE_BOUNDS, HR_ZONE_NAMES


class HeartRateSummary(NamedTuple):
    avg_bpm: int
    min_bpm: int
    max_bpm: int


class HeartRateZone(NamedTuple):
    zone: int  # 1-based
    name: str
    min_bpm: int
    max_bpm: int


def summarize_bpm(measurements: Sequence[int]) -> HeartRateSummary:
    """Average/min/max of the samples; all zero when there are none."""
    if not measurements:
        return HeartRateSummary(0, 0, 0)
    return HeartRateSummary(
        avg_bpm=int(sum(measurements) / len(measurements)),
        min_bpm=min(measurements),
        max_bpm=max(measurements),
    )


def max_heart_rate(age: Optional[int] = None, hr_max: Optional[int] = None) -> int:
    if hr_max is None and age is None:
        hr_max = settings.hr_max
    if hr_max is not None:
        return hr_max
    return 220 - (age if age is not None else settings.age)


def heart_rate_zones(hr_max: int) -> list[HeartRateZone]:
    zones = []
    for idx, name in enumerate(HR_ZONE_NAMES):
        low = int(hr_max * HR_ZONE_BOUNDS[idx])
        high = int(hr_max * HR_ZONE_BOUNDS[idx + 1])
        zones.append(HeartRateZone(idx + 1, name, low + 1 if idx else 0, high))
    return zones


def zone_for_bpm(bpm: int, hr_max: Optional[int] = None) -> Optional[int]:
    """1-based zone number for `bpm`, or None when outside every zone."""
    if bpm <= 0:
        return None
    if hr_max is None:
        hr_max = max_heart_rate()
    for zone in heart_rate_zones(hr_max):
        if zone.min_bpm <= bpm <= zone.max_bpm:
            return zone.zone
    return None
