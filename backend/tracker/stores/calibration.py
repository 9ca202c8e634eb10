from typing import Optional

from sqlalchemy import select, delete

from tracker.models.gps_calibration import GpsCalibrationRow
from tracker.schemas.tracking import CalibrationProfile


class CalibrationStore:
    """Per-activity GPS calibration profiles."""

    def __init__(self, session_factory):
        self._sessions = session_factory

    def get_calibration(self, activity_type: str) -> Optional[CalibrationProfile]:
        with self._sessions() as db:
            row = db.get(GpsCalibrationRow, activity_type)
            return CalibrationProfile.model_validate(row) if row is not None else None

    def upsert_calibration(self, profile: CalibrationProfile) -> None:
        # Replace on conflict by activity_type
        with self._sessions.begin() as db:
            db.merge(GpsCalibrationRow(**profile.model_dump()))

    def list_calibrations(self) -> list[CalibrationProfile]:
        with self._sessions() as db:
            rows = db.scalars(select(GpsCalibrationRow).order_by(GpsCalibrationRow.activity_type)).all()
            return [CalibrationProfile.model_validate(r) for r in rows]

    def delete_calibration(self, activity_type: str) -> None:
        with self._sessions.begin() as db:
            db.execute(delete(GpsCalibrationRow).where(GpsCalibrationRow.activity_type == activity_type))
