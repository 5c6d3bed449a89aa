from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..db.session import get_db
from ..schemas.common import AlertOut
from ..services.alert_store import backfill_missing_severity, query_alerts
from ..services.ingest import as_utc_naive

router = APIRouter(prefix="/alerts", tags=["alerts"])


@router.get("/", response_model=List[AlertOut])
def list_alerts(
    location: Optional[int] = None,
    parameter: Optional[str] = None,
    severity: Optional[str] = None,
    since: Optional[datetime] = None,
    until: Optional[datetime] = None,
    limit: int = 100,
    db: Session = Depends(get_db),
):
    limit = max(1, min(limit, 1000))
    return query_alerts(
        db,
        location=location,
        parameter=parameter,
        severity=severity,
        since=as_utc_naive(since) if since else None,
        until=as_utc_naive(until) if until else None,
        limit=limit,
    )


@router.post("/backfill-severity")
def backfill_severity(db: Session = Depends(get_db)):
    return {"updated": backfill_missing_severity(db)}
