from fastapi import Request

from tracker.stores.calibration import CalibrationStore
from tracker.stores.runs import RunStore


# Dependencies we use in FastAPI routes; the session factory is created by create_app
def get_run_store(request: Request) -> RunStore:
    return RunStore(request.app.state.session_factory)


def get_calibration_store(request: Request) -> CalibrationStore:
    return CalibrationStore(request.app.state.session_factory)
