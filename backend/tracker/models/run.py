from sqlalchemy import Column, Integer, BigInteger, Float
from sqlalchemy.orm import relationship
from tracker.db import Base


class Run(Base):
    __tablename__ = "runs"

    id = Column(Integer, primary_key=True, index=True)

    # Wall-clock bounds of the session, epoch milliseconds
    start_time_ms = Column(BigInteger, nullable=False, index=True)
    end_time_ms = Column(BigInteger, nullable=False)

    distance_m = Column(Float, nullable=False, default=0.0)

    # Elapsed time excluding pauses
    duration_ms = Column(BigInteger, nullable=False, default=0)

    # Overall pace: duration over distance
    avg_pace_min_per_km = Column(Float, nullable=False, default=0.0)

    # Heart rate summary (0 = no HRM connected)
    max_hr = Column(Integer, nullable=False, default=0)
    min_hr = Column(Integer, nullable=False, default=0)
    avg_hr = Column(Integer, nullable=False, default=0)

    # Deleting a run removes everything it owns
    route_points = relationship(
        "RoutePointRow",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="RoutePointRow.timestamp_ms",
    )
    measurements = relationship(
        "GpsMeasurementRow",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
