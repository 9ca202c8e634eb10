from fastapi import APIRouter, Depends, HTTPException

from tracker.api.deps import get_calibration_store
from tracker.schemas.tracking import CalibrationProfile
from tracker.stores.calibration import CalibrationStore

router = APIRouter(prefix="/calibration", tags=["calibration"])


@router.get("/", response_model=list[CalibrationProfile])
def list_calibrations(store: CalibrationStore = Depends(get_calibration_store)):
    return store.list_calibrations()


@router.get("/{activity}", response_model=CalibrationProfile)
def get_calibration(activity: str, store: CalibrationStore = Depends(get_calibration_store)):
    row = store.get_calibration(activity)
    if not row:
        raise HTTPException(status_code=404, detail="Activity not calibrated")
    return row
