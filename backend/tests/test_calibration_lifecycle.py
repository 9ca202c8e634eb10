import threading

import pytest

from tracker.run.calibration_lifecycle import CalibrationLifecycle
from helpers import START_MS, FakeClock, calibration, measurement, point


def make_lifecycle(run_store, calibration_store):
    clock = FakeClock()
    return CalibrationLifecycle(run_store, calibration_store, clock=clock), clock


def log_measurements(run_store, run_id, accuracies, activity="running"):
    for i, acc in enumerate(accuracies):
        run_store.insert_measurement(measurement(acc, run_id=run_id, activity=activity, ts=START_MS + i * 1000))


def test_short_session_leaves_missing_profile_missing(run_store, calibration_store):
    lifecycle, _ = make_lifecycle(run_store, calibration_store)
    run_id = run_store.create_run(START_MS)
    log_measurements(run_store, run_id, [5.0, 6.0, 7.0])

    assert lifecycle.finalize_session(run_id, "running", 5000) is None
    assert calibration_store.get_calibration("running") is None


def test_short_session_leaves_existing_profile_identical(run_store, calibration_store):
    lifecycle, _ = make_lifecycle(run_store, calibration_store)
    existing = calibration(samples=12)
    calibration_store.upsert_calibration(existing)
    run_id = run_store.create_run(START_MS)
    log_measurements(run_store, run_id, [15.0, 16.0])

    lifecycle.finalize_session(run_id, "running", 5000)

    assert calibration_store.get_calibration("running") == existing


def test_two_runs_accumulate(run_store, calibration_store):
    lifecycle, clock = make_lifecycle(run_store, calibration_store)

    run_a = run_store.create_run(START_MS)
    log_measurements(run_store, run_a, [5.0, 6.0, 7.0])
    clock.advance(60_000)
    first = lifecycle.finalize_session(run_a, "running", 60_000)

    stored = calibration_store.get_calibration("running")
    assert stored == first
    assert stored.samples_collected == 3
    assert stored.avg_accuracy_m == 6.0
    assert stored.last_updated_ms == clock.now

    run_b = run_store.create_run(START_MS + 100_000)
    log_measurements(run_store, run_b, [7.0, 8.0])
    lifecycle.finalize_session(run_b, "running", 60_000)

    stored = calibration_store.get_calibration("running")
    assert stored.samples_collected == 5
    assert stored.avg_accuracy_m == pytest.approx((6.0 * 3 + 7.5 * 2) / 5)
    assert len(calibration_store.list_calibrations()) == 1


def test_activities_are_calibrated_separately(run_store, calibration_store):
    lifecycle, _ = make_lifecycle(run_store, calibration_store)
    run_id = run_store.create_run(START_MS)
    log_measurements(run_store, run_id, [3.0, 4.0], activity="skiing")
    lifecycle.finalize_session(run_id, "skiing", 45_000)
    assert calibration_store.get_calibration("running") is None
    assert calibration_store.get_calibration("skiing").samples_collected == 2


def test_session_without_measurements_changes_nothing(run_store, calibration_store):
    lifecycle, _ = make_lifecycle(run_store, calibration_store)
    run_id = run_store.create_run(START_MS)
    assert lifecycle.finalize_session(run_id, "running", 120_000) is None
    assert calibration_store.get_calibration("running") is None


def test_initialize_tags_measurements_with_run(run_store, calibration_store):
    lifecycle, _ = make_lifecycle(run_store, calibration_store)
    lifecycle.activity_type = "running"
    lifecycle.record_measurement(point(47.0, 8.0, accuracy=9.0))
    run_id = run_store.create_run(START_MS)

    profile = lifecycle.initialize_session(run_id, "running", prewarm=False)
    lifecycle.record_measurement(point(47.0, 8.0, accuracy=4.0), bearing_accuracy_deg=2.5)

    assert profile.samples_collected == 0  # default profile until calibrated
    assert [m.accuracy_m for m in run_store.prewarmup_measurements("running")] == [9.0]
    logged = run_store.measurements_for_run(run_id)
    assert len(logged) == 1
    assert logged[0].bearing_accuracy_deg == 2.5


def test_initialize_prewarms_from_pending_measurements(run_store, calibration_store):
    lifecycle, _ = make_lifecycle(run_store, calibration_store)
    log_measurements(run_store, None, [4.0, 6.0])
    run_id = run_store.create_run(START_MS)

    profile = lifecycle.initialize_session(run_id, "running")

    assert profile.samples_collected == 2
    assert profile.avg_accuracy_m == 5.0
    assert calibration_store.get_calibration("running") == profile
    assert run_store.prewarmup_measurements("running") == []


def test_prewarm_without_measurements(run_store, calibration_store):
    lifecycle, _ = make_lifecycle(run_store, calibration_store)
    assert lifecycle.prewarm("running") is None


def test_concurrent_finalizations_do_not_lose_samples(run_store, calibration_store):
    lifecycle, _ = make_lifecycle(run_store, calibration_store)
    run_ids = []
    for i in range(6):
        run_id = run_store.create_run(START_MS + i)
        log_measurements(run_store, run_id, [5.0, 6.0])
        run_ids.append(run_id)

    threads = [
        threading.Thread(target=lifecycle.finalize_session, args=(run_id, "running", 60_000))
        for run_id in run_ids
    ]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert calibration_store.get_calibration("running").samples_collected == 12
