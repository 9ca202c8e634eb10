from fastapi import APIRouter, Depends, HTTPException, Query, Response

from tracker.api.deps import get_calibration_store, get_run_store
from tracker.core.time_utils import format_duration, format_pace
from tracker.gpx_io import route_to_gpx
from tracker.run.heart_rate import zone_for_bpm
from tracker.run.history import display_route
from tracker.schemas.run import RunRead, RunRecord
from tracker.schemas.tracking import RoutePoint
from tracker.stores.calibration import CalibrationStore
from tracker.stores.runs import RunStore

router = APIRouter(prefix="/runs", tags=["runs"])


def _to_read(record: RunRecord) -> RunRead:
    return RunRead(
        **record.model_dump(),
        pace=format_pace(record.avg_pace_min_per_km),
        duration=format_duration(record.duration_ms),
        hr_zone=zone_for_bpm(record.avg_hr),
    )


@router.get("/", response_model=list[RunRead])
def list_runs(store: RunStore = Depends(get_run_store)):
    """List runs, most recent first."""
    return [_to_read(r) for r in store.list_runs()]


@router.get("/{run_id}", response_model=RunRead)
def get_run(run_id: int, store: RunStore = Depends(get_run_store)):
    record = store.get_run(run_id)
    if record is None:
        raise HTTPException(status_code=404, detail="Run not found")
    return _to_read(record)


@router.delete("/{run_id}", status_code=204)
def delete_run(run_id: int, store: RunStore = Depends(get_run_store)):
    if not store.delete_run(run_id):
        raise HTTPException(status_code=404, detail="Run not found")
    return Response(status_code=204)


@router.get("/{run_id}/route", response_model=list[RoutePoint])
def get_route(
    run_id: int,
    filtered: bool = Query(True),
    prune: bool = Query(True),
    activity: str | None = Query(None),
    store: RunStore = Depends(get_run_store),
    calibrations: CalibrationStore = Depends(get_calibration_store),
):
    """
    Route of a run. Smoothed with the activity's calibration unless
    `filtered=false`; stationary points dropped unless `prune=false`.
    """
    if store.get_run(run_id) is None:
        raise HTTPException(status_code=404, detail="Run not found")
    return display_route(store, calibrations, run_id, activity, filtered=filtered, prune=prune)


@router.get("/{run_id}/gpx")
def export_gpx(run_id: int, store: RunStore = Depends(get_run_store)):
    if store.get_run(run_id) is None:
        raise HTTPException(status_code=404, detail="Run not found")
    xml = route_to_gpx(store.route_points_for_run(run_id), name=f"Run {run_id}")
    return Response(
        content=xml,
        media_type="application/gpx+xml",
        headers={"Content-Disposition": f'attachment; filename="run-{run_id}.gpx"'},
    )
