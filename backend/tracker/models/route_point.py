from sqlalchemy import Column, Integer, BigInteger, Float, ForeignKey
from tracker.db import Base


class RoutePointRow(Base):
    __tablename__ = "route_points"

    id = Column(Integer, primary_key=True, index=True)
    run_id = Column(Integer, ForeignKey("runs.id", ondelete="CASCADE"), nullable=False, index=True)

    latitude = Column(Float, nullable=False)
    longitude = Column(Float, nullable=False)
    timestamp_ms = Column(BigInteger, nullable=False)
    accuracy_m = Column(Float, nullable=False, default=0.0)
    bearing_deg = Column(Float, nullable=False, default=0.0)
    speed_mps = Column(Float, nullable=False, default=0.0)
