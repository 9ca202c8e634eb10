"""GPX conversion for stored routes (export) and recorded tracks (replay)."""
from typing import Sequence

import gpxpy
import gpxpy.gpx

from tracker.core.time_utils import ms_to_datetime
from tracker.schemas.tracking import RoutePoint


def route_to_gpx(points: Sequence[RoutePoint], name: str = "Run") -> str:
    """Serialize a route as a single-track, single-segment GPX document."""
    gpx = gpxpy.gpx.GPX()
    gpx.creator = "tracker"
    track = gpxpy.gpx.GPXTrack(name=name)
    gpx.tracks.append(track)
    segment = gpxpy.gpx.GPXTrackSegment()
    track.segments.append(segment)

    for p in points:
        segment.points.append(
            gpxpy.gpx.GPXTrackPoint(
                latitude=p.latitude,
                longitude=p.longitude,
                time=ms_to_datetime(p.timestamp_ms),
                horizontal_dilution=p.accuracy_m or None,
                speed=p.speed_mps or None,
            )
        )
    return gpx.to_xml()


def points_from_gpx(stream, default_accuracy_m: float = 5.0) -> list[RoutePoint]:
    """Read every track point of a GPX file as RoutePoints.

    GPX carries no accuracy estimate; horizontal dilution is used when
    present, `default_accuracy_m` otherwise. Points without a timestamp are
    skipped since the tracker needs time deltas.
    """
    gpx = gpxpy.parse(stream)
    points = []
    for track in gpx.tracks:
        for segment in track.segments:
            for p in segment.points:
                if p.time is None:
                    continue
                points.append(
                    RoutePoint(
                        latitude=p.latitude,
                        longitude=p.longitude,
                        timestamp_ms=int(p.time.timestamp() * 1000),
                        accuracy_m=p.horizontal_dilution or default_accuracy_m,
                        speed_mps=p.speed or 0.0,
                    )
                )
    return points
