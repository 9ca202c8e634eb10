import pytest

from tracker.gps import kalman
from helpers import START_MS, calibration, point, rectangle_route


def test_empty_and_single_point_unchanged():
    cal = calibration()
    assert kalman.filter_batch([], cal) == []
    single = [point(47.0, 8.0)]
    assert kalman.filter_batch(single, cal) == single


def test_length_and_timestamps_preserved():
    route = rectangle_route()
    filtered = kalman.filter_batch(route, calibration())
    assert len(filtered) == len(route)
    assert [p.timestamp_ms for p in filtered] == [p.timestamp_ms for p in route]


def test_only_coordinates_change():
    a = point(47.0, 8.0, START_MS)
    b = a.model_copy(update={"latitude": 47.0001, "timestamp_ms": START_MS + 1000, "bearing_deg": 90.0, "speed_mps": 3.2})
    filtered = kalman.filter_batch([a, b], calibration())
    assert filtered[0] == a
    assert filtered[1].bearing_deg == 90.0
    assert filtered[1].speed_mps == 3.2
    assert filtered[1].accuracy_m == b.accuracy_m
    assert filtered[1].latitude != b.latitude
    # input objects are untouched
    assert b.latitude == 47.0001


def test_initialize_seeds_variance_from_p95():
    state = kalman.initialize(point(47.0, 8.0), calibration(p95=12.0))
    assert state.latitude == 47.0
    assert state.longitude == 8.0
    assert state.lat_variance == 144.0
    assert state.lon_variance == 144.0


def test_step_matches_scalar_kalman_update():
    cal = calibration(p95=20.0, process=0.02, measurement_noise=40.0)
    prev = point(47.0, 8.0, START_MS)
    new = point(47.001, 8.002, START_MS + 1000)
    state = kalman.initialize(prev, cal)

    filtered, new_state = kalman.step(state, prev, new, cal)

    predicted = 400.0 + 0.02
    gain = predicted / (predicted + 40.0)
    assert filtered.latitude == pytest.approx(47.0 + gain * 0.001)
    assert filtered.longitude == pytest.approx(8.0 + gain * 0.002)
    assert new_state.lat_variance == pytest.approx((1 - gain) * predicted)
    assert new_state.lon_variance == pytest.approx((1 - gain) * predicted)


def test_process_noise_floored_at_one_second():
    cal = calibration(process=5.0)
    prev = point(47.0, 8.0, START_MS)
    state = kalman.initialize(prev, cal)
    quick, _ = kalman.step(state, prev, point(47.001, 8.0, START_MS + 200), cal)
    second, _ = kalman.step(state, prev, point(47.001, 8.0, START_MS + 1000), cal)
    slow, _ = kalman.step(state, prev, point(47.001, 8.0, START_MS + 10_000), cal)
    assert quick.latitude == pytest.approx(second.latitude)
    # longer gaps trust the new measurement more
    assert slow.latitude > second.latitude


def test_filtered_point_lies_between_estimate_and_measurement():
    cal = calibration()
    route = rectangle_route()
    filtered = kalman.filter_batch(route, cal)
    for raw, prev_est, est in zip(route[1:], filtered, filtered[1:]):
        low, high = sorted([prev_est.latitude, raw.latitude])
        assert low - 1e-12 <= est.latitude <= high + 1e-12


def test_incremental_matches_batch():
    cal = calibration()
    route = rectangle_route()
    state = kalman.initialize(route[0], cal)
    incremental = [route[0]]
    for prev, cur in zip(route, route[1:]):
        p, state = kalman.step(state, prev, cur, cal)
        incremental.append(p)
    assert incremental == kalman.filter_batch(route, cal)


def test_stationary_input_stays_put():
    cal = calibration()
    route = [point(47.0, 8.0, START_MS + i * 1000) for i in range(10)]
    for p in kalman.filter_batch(route, cal):
        assert p.latitude == pytest.approx(47.0)
        assert p.longitude == pytest.approx(8.0)
