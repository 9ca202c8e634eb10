import pytest

from tracker.db import create_tables, make_engine, make_session_factory
from tracker.stores.calibration import CalibrationStore
from tracker.stores.runs import RunStore


@pytest.fixture
def sessions():
    # Use in-memory sqlite for tests
    engine = make_engine("sqlite+pysqlite:///:memory:")
    create_tables(engine)
    yield make_session_factory(engine)
    engine.dispose()


@pytest.fixture
def run_store(sessions):
    return RunStore(sessions)


@pytest.fixture
def calibration_store(sessions):
    return CalibrationStore(sessions)
