"""Replay a recorded GPX track through the tracker as if it were live.

Usage:
    python scripts/replay_gpx.py path/to/run.gpx [--activity running] [--database-url URL]

Fix timestamps drive the session clock, so pace and duration come out as
they were recorded. The run is saved and the activity's calibration updated.
"""
import argparse
import logging

from tracker.core.config import settings
from tracker.core.time_utils import format_duration, format_pace
from tracker.db import create_tables, make_engine, make_session_factory
from tracker.gps.geo import path_length_meters
from tracker.gpx_io import points_from_gpx
from tracker.run.replay import ReplayClock, replay
from tracker.run.tracker import RunTracker
from tracker.stores.calibration import CalibrationStore
from tracker.stores.runs import RunStore

logger = logging.getLogger(__name__)


def main():
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("gpx_path")
    parser.add_argument("--activity", default=settings.default_activity)
    parser.add_argument("--database-url", default=settings.database_url)
    args = parser.parse_args()

    logging.basicConfig(level=settings.log_level, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")

    with open(args.gpx_path, "r", encoding="utf-8") as f:
        points = points_from_gpx(f)
    if not points:
        logger.error("No timestamped track points in %s", args.gpx_path)
        raise SystemExit(1)

    engine = make_engine(args.database_url)
    create_tables(engine)
    sessions = make_session_factory(engine)
    clock = ReplayClock(points[0].timestamp_ms)
    tracker = RunTracker(RunStore(sessions), CalibrationStore(sessions), clock=clock)

    try:
        record = replay(tracker, clock, points, args.activity)
    finally:
        engine.dispose()

    logger.info(
        "Run %s: %.2f km in %s, pace %s/km (GPX track %.2f km)",
        record.id,
        record.distance_m / 1000.0,
        format_duration(record.duration_ms),
        format_pace(record.avg_pace_min_per_km),
        path_length_meters(points) / 1000.0,
    )


if __name__ == "__main__":
    main()
