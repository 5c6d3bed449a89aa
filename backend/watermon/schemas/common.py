from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, List
from datetime import datetime

class LocationCreate(BaseModel):
    id: Optional[int] = None
    name: str

class LocationOut(BaseModel):
    id: int; name: str
    class Config: from_attributes = True

class ReadingIn(BaseModel):
    """Device payload; field names follow the firmware's JSON."""
    model_config = ConfigDict(populate_by_name=True)

    location: int
    timestamp: Optional[datetime] = None
    temperature: Optional[float] = None
    ph: Optional[float] = Field(default=None, alias="pH")
    tds: Optional[float] = Field(default=None, alias="TDS")
    turbidity: Optional[float] = None
    orp: Optional[float] = Field(default=None, alias="ORP")
    water_level: Optional[float] = Field(default=None, alias="waterLevel")

    def parameter_values(self) -> dict:
        return {
            "temperature": self.temperature,
            "pH": self.ph,
            "TDS": self.tds,
            "turbidity": self.turbidity,
            "ORP": self.orp,
            "waterLevel": self.water_level,
        }

class ReadingBatch(BaseModel):
    items: List[ReadingIn]

class LatestReadingOut(BaseModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    location: int = Field(validation_alias="location_id")
    timestamp: datetime
    temperature: Optional[float] = None
    pH: Optional[float] = Field(default=None, validation_alias="ph")
    TDS: Optional[float] = Field(default=None, validation_alias="tds")
    turbidity: Optional[float] = None
    ORP: Optional[float] = Field(default=None, validation_alias="orp")
    waterLevel: Optional[float] = Field(default=None, validation_alias="water_level")

class IngestOut(BaseModel):
    message: str
    data: LatestReadingOut

class ErrorOut(BaseModel):
    error: str
    details: str

class SeriesPoint(BaseModel):
    timestamp: datetime
    value: float

class AlertOut(BaseModel):
    id: int
    location: int = Field(validation_alias="location_id")
    parameter: str; value: float; status: str
    severity: Optional[str] = None
    safe_min: float; safe_max: float; timestamp: datetime
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

class ParameterOut(BaseModel):
    name: str; unit: str
    valid_range: List[float]; safe_range: List[float]
    severity_thresholds: dict[str, List[float]]

class ColoredPoint(BaseModel):
    timestamp: datetime; value: float; rolling_mean: float; severity: str; color: str

class SeriesOut(BaseModel):
    location: int; parameter: str; unit: str
    safe_min: float; safe_max: float
    points: List[ColoredPoint]
