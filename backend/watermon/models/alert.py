from sqlalchemy import Column, Integer, String, Float, ForeignKey, DateTime
from sqlalchemy.orm import relationship
from ..db.session import Base
from datetime import datetime
class Alert(Base):
    __tablename__ = "alerts"
    id = Column(Integer, primary_key=True, index=True)
    location_id = Column(Integer, ForeignKey("locations.id", ondelete="CASCADE"), index=True, nullable=False)
    parameter = Column(String, index=True, nullable=False)
    value = Column(Float, nullable=False)
    status = Column(String, nullable=False)
    # nullable for rows written before severity tiers existed, see backfill_missing_severity
    severity = Column(String, index=True, nullable=True)
    safe_min = Column(Float, nullable=False)
    safe_max = Column(Float, nullable=False)
    timestamp = Column(DateTime, nullable=False, default=datetime.utcnow, index=True)
    location = relationship("Location")
