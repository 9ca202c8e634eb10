"""Feed recorded fixes through a RunTracker as if they arrived live."""
from typing import Optional, Sequence

from tracker.run.tracker import RunTracker
from tracker.schemas.run import RunRecord
from tracker.schemas.tracking import RoutePoint


class ReplayClock:
    """Clock that follows the timestamps of the fixes being replayed."""

    def __init__(self, start_ms: int):
        self.now = start_ms

    def __call__(self) -> int:
        return self.now


def replay(
    tracker: RunTracker, clock: ReplayClock, points: Sequence[RoutePoint], activity: str
) -> Optional[RunRecord]:
    tracker.start(activity)
    for p in points:
        clock.now = p.timestamp_ms
        tracker.on_location(p)
    return tracker.stop()
