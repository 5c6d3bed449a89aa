from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from ..db.session import get_db
from ..models.location import Location
from ..schemas.common import LocationCreate, LocationOut, SeriesPoint
from ..services.history import readings_since
from ..services.ingest import as_utc_naive

router = APIRouter(prefix="/locations", tags=["locations"])

@router.get("/", response_model=List[LocationOut])
def list_locations(db: Session = Depends(get_db)):
    return db.query(Location).order_by(Location.id).all()

@router.post("/", response_model=LocationOut)
def create_location(payload: LocationCreate, db: Session = Depends(get_db)):
    if payload.id is not None and db.get(Location, payload.id) is not None:
        raise HTTPException(status_code=400, detail="Location already registered")
    loc = Location(id=payload.id, name=payload.name)
    db.add(loc); db.commit(); db.refresh(loc); return loc


@router.get("/{location_id}/readings", response_model=List[SeriesPoint])
def location_readings(
    location_id: int,
    parameter: str,
    since: Optional[datetime] = None,
    limit: int = 500,
    db: Session = Depends(get_db),
):
    if db.get(Location, location_id) is None:
        raise HTTPException(status_code=404, detail="Location not found")
    limit = max(1, min(limit, 5000))
    try:
        points = readings_since(db, location_id, parameter, since=as_utc_naive(since) if since else None, limit=limit)
    except ValueError as exc:
        raise HTTPException(status_code=404, detail=str(exc))
    return [SeriesPoint(timestamp=ts, value=value) for ts, value in points]
