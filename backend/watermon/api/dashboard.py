from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from ..db.session import get_db
from ..models.location import Location
from ..models.reading import LatestReading
from ..schemas.common import ParameterOut, SeriesOut
from ..services.dashboard import heatmap, series_points
from ..services.history import readings_since
from ..services.ingest import as_utc_naive
from ..services.parameters import PARAMETERS, get_parameter

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("/parameters", response_model=List[ParameterOut])
def list_parameters():
    return [
        ParameterOut(
            name=spec.name,
            unit=spec.unit,
            valid_range=list(spec.valid_range),
            safe_range=list(spec.safe_range),
            severity_thresholds={tier: list(th) for tier, th in spec.severity_thresholds.items()},
        )
        for spec in PARAMETERS.values()
    ]


@router.get("/heatmap")
def dashboard_heatmap(db: Session = Depends(get_db)):
    rows = db.query(LatestReading).order_by(LatestReading.location_id).all()
    return heatmap(rows)


@router.get("/series/{location_id}", response_model=SeriesOut)
def dashboard_series(
    location_id: int,
    parameter: str,
    since: Optional[datetime] = None,
    limit: int = 500,
    window: int = 5,
    db: Session = Depends(get_db),
):
    spec = get_parameter(parameter)
    if spec is None:
        raise HTTPException(status_code=404, detail=f"Unknown parameter {parameter!r}")
    if db.get(Location, location_id) is None:
        raise HTTPException(status_code=404, detail="Location not found")
    points = readings_since(
        db, location_id, parameter,
        since=as_utc_naive(since) if since else None,
        limit=max(1, min(limit, 5000)),
    )
    return SeriesOut(
        location=location_id,
        parameter=spec.name,
        unit=spec.unit,
        safe_min=spec.safe_min,
        safe_max=spec.safe_max,
        points=series_points(spec, points, window=max(1, window)),
    )
