from sqlalchemy import Column, Integer, Float, ForeignKey, DateTime
from sqlalchemy.orm import relationship
from ..db.session import Base
from datetime import datetime


class Reading(Base):
    """Append-only history row, one per ingested payload."""
    __tablename__ = "readings"
    id = Column(Integer, primary_key=True, index=True)
    location_id = Column(Integer, ForeignKey("locations.id", ondelete="CASCADE"), index=True, nullable=False)
    timestamp = Column(DateTime, nullable=False, default=datetime.utcnow, index=True)
    temperature = Column(Float, nullable=True)
    ph = Column(Float, nullable=True)
    tds = Column(Float, nullable=True)
    turbidity = Column(Float, nullable=True)
    orp = Column(Float, nullable=True)
    water_level = Column(Float, nullable=True)
    location = relationship("Location")


class LatestReading(Base):
    """Most recent reading per location, upserted on every ingest."""
    __tablename__ = "latest_readings"
    id = Column(Integer, primary_key=True, index=True)
    location_id = Column(Integer, ForeignKey("locations.id", ondelete="CASCADE"), unique=True, nullable=False)
    timestamp = Column(DateTime, nullable=False, default=datetime.utcnow)
    temperature = Column(Float, nullable=True)
    ph = Column(Float, nullable=True)
    tds = Column(Float, nullable=True)
    turbidity = Column(Float, nullable=True)
    orp = Column(Float, nullable=True)
    water_level = Column(Float, nullable=True)
    location = relationship("Location")


# Device wire name -> column attribute
PARAMETER_COLUMNS = {
    "temperature": "temperature",
    "pH": "ph",
    "TDS": "tds",
    "turbidity": "turbidity",
    "ORP": "orp",
    "waterLevel": "water_level",
}


def parameter_values(row) -> dict:
    return {name: getattr(row, column) for name, column in PARAMETER_COLUMNS.items()}
