from typing import Optional, Sequence

from sqlalchemy import select, delete

from tracker.models.gps_measurement import GpsMeasurementRow
from tracker.models.route_point import RoutePointRow
from tracker.models.run import Run
from tracker.schemas.run import RunRecord
from tracker.schemas.tracking import GpsMeasurement, RoutePoint


def _route_point_row(run_id: int, point: RoutePoint) -> RoutePointRow:
    return RoutePointRow(
        run_id=run_id,
        latitude=point.latitude,
        longitude=point.longitude,
        timestamp_ms=point.timestamp_ms,
        accuracy_m=point.accuracy_m,
        bearing_deg=point.bearing_deg,
        speed_mps=point.speed_mps,
    )


class RunStore:
    """Runs, their route points and raw GPS measurements.

    Each call runs in its own transaction; database errors propagate.
    """

    def __init__(self, session_factory):
        self._sessions = session_factory

    # --------- Measurements --------- #

    def insert_measurement(self, measurement: GpsMeasurement) -> None:
        with self._sessions.begin() as db:
            db.add(GpsMeasurementRow(**measurement.model_dump()))

    def measurements_for_run(self, run_id: int) -> list[GpsMeasurement]:
        with self._sessions() as db:
            rows = db.scalars(
                select(GpsMeasurementRow)
                .where(GpsMeasurementRow.run_id == run_id)
                .order_by(GpsMeasurementRow.timestamp_ms, GpsMeasurementRow.id)
            ).all()
            return [GpsMeasurement.model_validate(r) for r in rows]

    def prewarmup_measurements(self, activity_type: str) -> list[GpsMeasurement]:
        with self._sessions() as db:
            rows = db.scalars(
                select(GpsMeasurementRow)
                .where(GpsMeasurementRow.run_id.is_(None))
                .where(GpsMeasurementRow.activity_type == activity_type)
                .order_by(GpsMeasurementRow.timestamp_ms, GpsMeasurementRow.id)
            ).all()
            return [GpsMeasurement.model_validate(r) for r in rows]

    def delete_prewarmup(self, activity_type: str) -> None:
        with self._sessions.begin() as db:
            db.execute(
                delete(GpsMeasurementRow)
                .where(GpsMeasurementRow.run_id.is_(None))
                .where(GpsMeasurementRow.activity_type == activity_type)
            )

    # --------- Runs --------- #

    def create_run(self, start_time_ms: int) -> int:
        """Open an empty run row so measurements can reference it."""
        record = RunRecord(
            start_time_ms=start_time_ms,
            end_time_ms=start_time_ms,
            distance_m=0.0,
            duration_ms=0,
            avg_pace_min_per_km=0.0,
        )
        return self.insert_run(record)

    def insert_run(self, record: RunRecord, route_points: Sequence[RoutePoint] = ()) -> int:
        """Insert a run and its route in one transaction. Returns the new id."""
        with self._sessions.begin() as db:
            run = Run(**record.model_dump(exclude={"id"}))
            db.add(run)
            db.flush()
            db.add_all(_route_point_row(run.id, p) for p in route_points)
            return run.id

    def complete_run(self, run_id: int, record: RunRecord, route_points: Sequence[RoutePoint]) -> None:
        """Write the final summary and route of a run opened with create_run."""
        with self._sessions.begin() as db:
            run = db.get(Run, run_id)
            if run is None:
                raise LookupError(f"Run {run_id} not found")
            for key, value in record.model_dump(exclude={"id"}).items():
                setattr(run, key, value)
            db.add_all(_route_point_row(run_id, p) for p in route_points)

    def get_run(self, run_id: int) -> Optional[RunRecord]:
        with self._sessions() as db:
            run = db.get(Run, run_id)
            return RunRecord.model_validate(run) if run is not None else None

    def list_runs(self) -> list[RunRecord]:
        # Most recent first
        with self._sessions() as db:
            rows = db.scalars(select(Run).order_by(Run.start_time_ms.desc(), Run.id.desc())).all()
            return [RunRecord.model_validate(r) for r in rows]

    def delete_run(self, run_id: int) -> bool:
        """Delete a run with its route points and measurements."""
        with self._sessions.begin() as db:
            run = db.get(Run, run_id)
            if run is None:
                return False
            db.delete(run)
            return True

    # --------- Route points --------- #

    def insert_route_points(self, run_id: int, points: Sequence[RoutePoint]) -> None:
        with self._sessions.begin() as db:
            db.add_all(_route_point_row(run_id, p) for p in points)

    def route_points_for_run(self, run_id: int) -> list[RoutePoint]:
        with self._sessions() as db:
            rows = db.scalars(
                select(RoutePointRow)
                .where(RoutePointRow.run_id == run_id)
                .order_by(RoutePointRow.timestamp_ms, RoutePointRow.id)
            ).all()
            return [RoutePoint.model_validate(r) for r in rows]
