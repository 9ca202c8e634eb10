"""Run session state machine.

    Idle --start--> Running --pause--> Paused --resume--> Running
    Running/Paused --stop--> Idle (final snapshot handed back to the caller)

Every transition is total: calls that make no sense in the current state
(pausing twice, resuming while running, stopping while idle) are ignored.
Elapsed time is wall-clock time from an injected clock with paused spans
removed by shifting the tracked start time forward on resume.

With auto-pause enabled, a running session pauses itself once fixes have
stayed within `min_movement_m` of the last filtered point for
`auto_pause_after_ms`, and resumes on the first fix that moves away again.
A manual pause() while auto-paused turns it into a regular pause.
"""
import logging
import threading
from enum import Enum
from typing import Callable, Optional, Sequence

from tracker.core.constants import AUTO_PAUSE_AFTER_MS, AUTO_PAUSE_MIN_MOVEMENT_M
from tracker.core.time_utils import compute_pace, now_ms
from tracker.gps import kalman
from tracker.gps.geo import distance_meters
from tracker.schemas.tracking import (
    CalibrationProfile,
    HeartRateSample,
    PaceSample,
    RoutePoint,
    RunSessionState,
)

logger = logging.getLogger(__name__)


class SessionStatus(str, Enum):
    idle = "idle"
    running = "running"
    paused = "paused"


class RunSession:
    def __init__(
        self,
        clock: Callable[[], int] = now_ms,
        auto_pause: bool = False,
        auto_pause_after_ms: int = AUTO_PAUSE_AFTER_MS,
        min_movement_m: float = AUTO_PAUSE_MIN_MOVEMENT_M,
    ):
        self._clock = clock
        self._auto_pause = auto_pause
        self._auto_pause_after_ms = auto_pause_after_ms
        self._min_movement_m = min_movement_m
        # One lock for every transition; on_location reads and writes
        # distance, pace history and last point as a unit.
        self._lock = threading.RLock()
        self._calibration: Optional[CalibrationProfile] = None
        self.current_position: Optional[RoutePoint] = None
        self._reset()

    def _reset(self) -> None:
        self._status = SessionStatus.idle
        self._auto_paused = False
        self._started_at_ms: Optional[int] = None
        self._adjusted_start_ms = 0
        self._paused_at_ms = 0
        self._last_movement_ms = 0
        self._distance_meters = 0.0
        self._pace_min_per_km = 0.0
        self._duration_ms = 0
        self._pace_history: list[PaceSample] = []
        self._route_points: list[RoutePoint] = []
        self._filtered_route_points: list[RoutePoint] = []
        self._heart_rate_history: list[HeartRateSample] = []
        self._last_raw_location: Optional[RoutePoint] = None
        self._kalman_state: Optional[kalman.KalmanState] = None

    # --------- State queries --------- #

    @property
    def status(self) -> SessionStatus:
        return self._status

    @property
    def is_running(self) -> bool:
        return self._status is SessionStatus.running

    @property
    def is_paused(self) -> bool:
        return self._status is SessionStatus.paused

    @property
    def is_auto_paused(self) -> bool:
        return self._auto_paused

    @property
    def distance_meters(self) -> float:
        return self._distance_meters

    @property
    def pace_min_per_km(self) -> float:
        return self._pace_min_per_km

    @property
    def duration_ms(self) -> int:
        return self._duration_ms

    @property
    def started_at_ms(self) -> Optional[int]:
        """Unadjusted wall-clock time of start(), None while idle."""
        return self._started_at_ms

    @property
    def pace_history(self) -> list[PaceSample]:
        return list(self._pace_history)

    @property
    def route_points(self) -> list[RoutePoint]:
        return list(self._route_points)

    def state(self) -> RunSessionState:
        with self._lock:
            return RunSessionState(
                is_running=self.is_running,
                is_paused=self.is_paused,
                is_auto_paused=self._auto_paused,
                distance_meters=self._distance_meters,
                pace_min_per_km=self._pace_min_per_km,
                duration_ms=self._duration_ms,
                pace_history=list(self._pace_history),
                route_points=list(self._route_points),
                filtered_route_points=list(self._filtered_route_points),
                heart_rate_history=list(self._heart_rate_history),
            )

    def set_calibration(self, calibration: Optional[CalibrationProfile]) -> None:
        """Calibration used for the live filtered route (None = raw copy)."""
        with self._lock:
            self._calibration = calibration

    # --------- Transitions --------- #

    def start(self) -> None:
        with self._lock:
            if self._status is not SessionStatus.idle:
                return
            self._reset()
            now = self._clock()
            self._started_at_ms = now
            self._adjusted_start_ms = now
            self._last_movement_ms = now
            self._status = SessionStatus.running
            logger.debug("Run session started at %s", now)

    def pause(self) -> None:
        with self._lock:
            if self._status is SessionStatus.paused:
                # A manual pause overrides auto-resume
                self._auto_paused = False
                return
            if self._status is SessionStatus.running:
                self._pause(auto=False)

    def _pause(self, auto: bool) -> None:
        self._paused_at_ms = self._clock()
        self._duration_ms = max(0, self._paused_at_ms - self._adjusted_start_ms)
        self._status = SessionStatus.paused
        self._auto_paused = auto

    def resume(self) -> None:
        with self._lock:
            if self._status is SessionStatus.paused:
                self._resume()

    def _resume(self) -> None:
        now = self._clock()
        self._adjusted_start_ms += now - self._paused_at_ms
        self._last_movement_ms = now
        self._auto_paused = False
        self._status = SessionStatus.running

    def stop(
        self, commit: Optional[Callable[[RunSessionState], None]] = None
    ) -> Optional[RunSessionState]:
        """End the session. Returns the final snapshot, None if idle.

        `commit` receives the snapshot before the session resets. If it
        raises, the exception propagates and the session keeps its run.
        """
        with self._lock:
            if self._status is SessionStatus.idle:
                return None
            if self._status is SessionStatus.running:
                self._duration_ms = max(0, self._clock() - self._adjusted_start_ms)
            snapshot = self.state().model_copy(
                update={"is_running": False, "is_paused": False, "is_auto_paused": False}
            )
            if commit is not None:
                commit(snapshot)
            logger.debug(
                "Run session stopped: %.1f m in %d ms", snapshot.distance_meters, snapshot.duration_ms
            )
            self._reset()
            return snapshot

    def tick(self) -> None:
        """Refresh the elapsed time between location fixes."""
        with self._lock:
            if self._status is SessionStatus.running:
                self._duration_ms = max(0, self._clock() - self._adjusted_start_ms)

    def on_location(self, point: RoutePoint) -> None:
        with self._lock:
            self.current_position = point
            if self._auto_pause and (self.is_running or self._auto_paused):
                self._check_movement(point)
            if self._status is not SessionStatus.running:
                return

            last = self._last_raw_location
            if last is not None:
                self._distance_meters += distance_meters(
                    last.latitude, last.longitude, point.latitude, point.longitude
                )

            self._duration_ms = max(0, self._clock() - self._adjusted_start_ms)
            self._pace_min_per_km = compute_pace(self._duration_ms, self._distance_meters)
            self._pace_history.append(
                PaceSample(pace_min_per_km=self._pace_min_per_km, timestamp_ms=point.timestamp_ms)
            )

            self._route_points.append(point)
            self._filtered_route_points.append(self._filter_live(last, point))
            self._last_raw_location = point

    def _check_movement(self, point: RoutePoint) -> None:
        now = self._clock()
        anchor = self._filtered_route_points[-1] if self._filtered_route_points else None
        moved = anchor is None or distance_meters(
            anchor.latitude, anchor.longitude, point.latitude, point.longitude
        ) >= self._min_movement_m

        if moved:
            self._last_movement_ms = now
            if self._auto_paused:
                self._resume()
                logger.debug("Auto-resumed at %s", now)
        elif self.is_running and now - self._last_movement_ms >= self._auto_pause_after_ms:
            self._pause(auto=True)
            logger.debug("Auto-paused at %s after %d ms without movement", now, now - self._last_movement_ms)

    def _filter_live(self, previous: Optional[RoutePoint], point: RoutePoint) -> RoutePoint:
        if self._calibration is None:
            return point
        if self._kalman_state is None or previous is None:
            self._kalman_state = kalman.initialize(point, self._calibration)
            return point
        filtered, self._kalman_state = kalman.step(self._kalman_state, previous, point, self._calibration)
        return filtered

    def on_heart_rate(self, bpm: int) -> None:
        with self._lock:
            if self._status is not SessionStatus.running or bpm <= 0:
                return
            self._heart_rate_history.append(HeartRateSample(bpm=bpm, timestamp_ms=self._clock()))

    def set_route_points(self, points: Sequence[RoutePoint]) -> None:
        """Replace the displayed route; distance and pace are untouched."""
        with self._lock:
            self._route_points = list(points)
