"""Calibration bookkeeping at run-session boundaries.

Measurements logged before a run carries an id are "pre-warmup" rows
(run_id NULL). Starting a session folds those into the activity's profile
and tags later measurements with the run id; finishing a long enough session
folds the run's own measurements in.
"""
import logging
import threading
from typing import Callable, Optional

from tracker.core.config import settings
from tracker.core.time_utils import now_ms
from tracker.gps.calibration import default_calibration, merge_calibration
from tracker.schemas.tracking import CalibrationProfile, GpsMeasurement, RoutePoint
from tracker.stores.calibration import CalibrationStore
from tracker.stores.runs import RunStore

logger = logging.getLogger(__name__)


class CalibrationLifecycle:
    def __init__(
        self,
        run_store: RunStore,
        calibration_store: CalibrationStore,
        clock: Callable[[], int] = now_ms,
        min_session_ms: Optional[int] = None,
    ):
        self._runs = run_store
        self._calibrations = calibration_store
        self._clock = clock
        self._min_session_ms = (
            settings.min_calibration_session_ms if min_session_ms is None else min_session_ms
        )
        self._activity_locks: dict[str, threading.Lock] = {}
        self._locks_guard = threading.Lock()
        self.run_id: Optional[int] = None
        self.activity_type: str = settings.default_activity
        self.calibration: Optional[CalibrationProfile] = None

    def _lock_for(self, activity_type: str) -> threading.Lock:
        with self._locks_guard:
            return self._activity_locks.setdefault(activity_type, threading.Lock())

    def calibration_for(self, activity_type: str) -> CalibrationProfile:
        """Stored profile for the activity, or the default one."""
        stored = self._calibrations.get_calibration(activity_type)
        if stored is not None:
            return stored
        return default_calibration(activity_type, now_ms=self._clock())

    def record_measurement(self, point: RoutePoint, bearing_accuracy_deg: float = 0.0) -> GpsMeasurement:
        """Log a raw fix for calibration, tagged with the current run (if any).

        Called for every fix, including those rejected for the route.
        """
        measurement = GpsMeasurement(
            run_id=self.run_id,
            activity_type=self.activity_type,
            timestamp_ms=point.timestamp_ms,
            accuracy_m=point.accuracy_m,
            bearing_accuracy_deg=bearing_accuracy_deg,
            speed_mps=point.speed_mps,
            bearing_deg=point.bearing_deg,
        )
        self._runs.insert_measurement(measurement)
        return measurement

    def prewarm(self, activity_type: str) -> Optional[CalibrationProfile]:
        """Fold pending pre-warmup measurements into the profile and purge them.

        Returns the updated profile, or None when there was nothing to fold.
        """
        with self._lock_for(activity_type):
            measurements = self._runs.prewarmup_measurements(activity_type)
            if not measurements:
                return None
            existing = self._calibrations.get_calibration(activity_type)
            profile = merge_calibration(existing, measurements, activity_type, self._clock())
            self._calibrations.upsert_calibration(profile)
            self._runs.delete_prewarmup(activity_type)
        logger.info(
            "Pre-warmed %s calibration with %d samples", activity_type, len(measurements)
        )
        return profile

    def initialize_session(
        self, run_id: int, activity_type: str, prewarm: bool = True
    ) -> CalibrationProfile:
        """Start tagging measurements with `run_id`; returns the profile to filter with."""
        if prewarm:
            self.prewarm(activity_type)
        calibration = self.calibration_for(activity_type)
        self.run_id = run_id
        self.activity_type = activity_type
        self.calibration = calibration
        return calibration

    def finalize_session(
        self, run_id: int, activity_type: str, session_duration_ms: int
    ) -> Optional[CalibrationProfile]:
        """Merge the run's measurements into the activity profile.

        Returns the stored profile, or None when the session was too short
        or logged no measurements.
        """
        if self.run_id == run_id:
            self.run_id = None
            self.calibration = None

        if session_duration_ms < self._min_session_ms:
            logger.info(
                "Skipping calibration for run %s: %d ms is under %d ms",
                run_id,
                session_duration_ms,
                self._min_session_ms,
            )
            return None

        with self._lock_for(activity_type):
            measurements = self._runs.measurements_for_run(run_id)
            if not measurements:
                return None
            existing = self._calibrations.get_calibration(activity_type)
            profile = merge_calibration(existing, measurements, activity_type, self._clock())
            self._calibrations.upsert_calibration(profile)

        logger.info(
            "Updated %s calibration: %d samples, p95 %.1f m",
            activity_type,
            profile.samples_collected,
            profile.p95_accuracy_m,
        )
        return profile
