from sqlalchemy import Column, Integer, BigInteger, Float, String
from tracker.db import Base


class GpsCalibrationRow(Base):
    __tablename__ = "gps_calibration"

    # One row per activity, unique
    activity_type = Column(String(32), primary_key=True, index=True, nullable=False)

    avg_accuracy_m = Column(Float, nullable=False)
    p95_accuracy_m = Column(Float, nullable=False)
    avg_bearing_accuracy_deg = Column(Float, nullable=False)
    samples_collected = Column(Integer, nullable=False, default=0)
    kalman_process_noise = Column(Float, nullable=False)
    kalman_measurement_noise = Column(Float, nullable=False)
    last_updated_ms = Column(BigInteger, nullable=False)
