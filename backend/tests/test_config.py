from tracker.core.config import Settings
from tracker.core.constants import (
    AUTO_PAUSE_AFTER_MS,
    AUTO_PAUSE_MIN_MOVEMENT_M,
    DEFAULT_MAX_ACCURACY_M,
    MIN_CALIBRATION_SESSION_MS,
    ROUTE_PRUNE_M,
)


def test_defaults_come_from_constants():
    s = Settings(_env_file=None)
    assert s.max_accuracy_m == DEFAULT_MAX_ACCURACY_M
    assert s.min_calibration_session_ms == MIN_CALIBRATION_SESSION_MS
    assert s.route_prune_m == ROUTE_PRUNE_M
    assert s.auto_pause_after_ms == AUTO_PAUSE_AFTER_MS
    assert s.auto_pause_min_movement_m == AUTO_PAUSE_MIN_MOVEMENT_M
    assert s.auto_pause_enabled is False


def test_blank_hr_max_is_none(monkeypatch):
    monkeypatch.setenv("HR_MAX", "")
    assert Settings(_env_file=None).hr_max is None
