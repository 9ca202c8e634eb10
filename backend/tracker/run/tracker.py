import logging
from typing import Callable, Optional

from tracker.core.config import settings
from tracker.core.time_utils import compute_pace, now_ms
from tracker.gps.validation import is_valid_point
from tracker.run.calibration_lifecycle import CalibrationLifecycle
from tracker.run.heart_rate import summarize_bpm
from tracker.run.session import RunSession
from tracker.schemas.run import RunRecord
from tracker.schemas.tracking import RoutePoint, RunSessionState
from tracker.stores.calibration import CalibrationStore
from tracker.stores.runs import RunStore

logger = logging.getLogger(__name__)


def build_run_record(snapshot: RunSessionState, start_time_ms: int, end_time_ms: int) -> RunRecord:
    """Summarize a stopped session for persistence."""
    hr = summarize_bpm([s.bpm for s in snapshot.heart_rate_history])
    return RunRecord(
        start_time_ms=start_time_ms,
        end_time_ms=end_time_ms,
        distance_m=snapshot.distance_meters,
        duration_ms=snapshot.duration_ms,
        avg_pace_min_per_km=compute_pace(snapshot.duration_ms, snapshot.distance_meters),
        max_hr=hr.max_bpm,
        min_hr=hr.min_bpm,
        avg_hr=hr.avg_bpm,
    )


class RunTracker:
    """Drives one run at a time from location/heart-rate sources to storage.

    Every fix is logged as a calibration measurement (pre-warmup while no
    run is active); only valid fixes reach the session's route and distance.
    Pre-warmup fixes are tagged with the activity chosen by set_activity(),
    or the one used last, and are folded in when a run of that activity starts.
    """

    def __init__(
        self,
        run_store: RunStore,
        calibration_store: CalibrationStore,
        clock: Callable[[], int] = now_ms,
        max_accuracy_m: Optional[float] = None,
        auto_pause: Optional[bool] = None,
    ):
        self._runs = run_store
        self._clock = clock
        self._max_accuracy_m = settings.max_accuracy_m if max_accuracy_m is None else max_accuracy_m
        self.session = RunSession(
            clock=clock,
            auto_pause=settings.auto_pause_enabled if auto_pause is None else auto_pause,
            auto_pause_after_ms=settings.auto_pause_after_ms,
            min_movement_m=settings.auto_pause_min_movement_m,
        )
        self.calibration = CalibrationLifecycle(run_store, calibration_store, clock=clock)
        self.run_id: Optional[int] = None

    def set_activity(self, activity_type: str) -> None:
        """Choose the activity for pre-warmup fixes. Ignored while a run is active."""
        if self.run_id is None:
            self.calibration.activity_type = activity_type

    def start(self, activity_type: Optional[str] = None) -> int:
        """Start a run and return its id. Returns the current id if already started.

        The run row and calibration are set up before the session starts, so
        a store failure leaves the tracker idle.
        """
        if self.run_id is not None:
            return self.run_id
        activity_type = activity_type or self.calibration.activity_type
        run_id = self._runs.create_run(self._clock())
        profile = self.calibration.initialize_session(run_id, activity_type)
        self.session.set_calibration(profile)
        self.session.start()
        self.run_id = run_id
        logger.info("Started %s run %s", activity_type, run_id)
        return run_id

    def pause(self) -> None:
        self.session.pause()

    def resume(self) -> None:
        self.session.resume()

    def tick(self) -> None:
        self.session.tick()

    def on_location(self, point: RoutePoint, bearing_accuracy_deg: float = 0.0) -> bool:
        """Feed one fix. Returns False when it was rejected for the route."""
        self.calibration.record_measurement(point, bearing_accuracy_deg)
        if not is_valid_point(point.latitude, point.longitude, point.accuracy_m, self._max_accuracy_m):
            logger.debug(
                "Rejected fix at %s (accuracy %.1f m)", point.timestamp_ms, point.accuracy_m
            )
            return False
        self.session.on_location(point)
        return True

    def on_heart_rate(self, bpm: int) -> None:
        self.session.on_heart_rate(bpm)

    def state(self) -> RunSessionState:
        return self.session.state()

    def stop(self) -> Optional[RunRecord]:
        """Stop, persist the run and update calibration. None if nothing was running.

        If saving fails the error propagates and the run stays active, so
        stop() can be retried.
        """
        if self.run_id is None:
            return None
        run_id = self.run_id
        start_time_ms = self.session.started_at_ms
        saved: list[RunRecord] = []

        def commit(snapshot: RunSessionState) -> None:
            record = build_run_record(snapshot, start_time_ms, self._clock())
            self._runs.complete_run(run_id, record, snapshot.route_points)
            saved.append(record)

        snapshot = self.session.stop(commit=commit)
        self.run_id = None
        if snapshot is None:
            return None

        record = saved[0]
        logger.info(
            "Saved run %s: %.1f m in %d ms (%d points)",
            run_id,
            record.distance_m,
            record.duration_ms,
            len(snapshot.route_points),
        )
        self.calibration.finalize_session(run_id, self.calibration.activity_type, snapshot.duration_ms)
        return record.model_copy(update={"id": run_id})
