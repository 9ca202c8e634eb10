from sqlalchemy import Column, Integer, BigInteger, Float, String, ForeignKey
from tracker.db import Base


class GpsMeasurementRow(Base):
    __tablename__ = "gps_measurements"

    id = Column(Integer, primary_key=True, index=True)

    # NULL = pre-warmup (collected before the run started)
    run_id = Column(Integer, ForeignKey("runs.id", ondelete="CASCADE"), nullable=True, index=True)

    activity_type = Column(String(32), nullable=False, index=True)  # running, skiing, ...
    timestamp_ms = Column(BigInteger, nullable=False)

    accuracy_m = Column(Float, nullable=False)
    bearing_accuracy_deg = Column(Float, nullable=False, default=0.0)
    speed_mps = Column(Float, nullable=False, default=0.0)
    bearing_deg = Column(Float, nullable=False, default=0.0)
