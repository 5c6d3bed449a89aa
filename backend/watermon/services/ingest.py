import logging
from datetime import datetime, timezone

from sqlalchemy.orm import Session

from ..models.location import Location
from ..models.reading import LatestReading, PARAMETER_COLUMNS, Reading

logger = logging.getLogger(__name__)


class UnknownLocation(Exception):
    """Raised when a reading names a location that has not been registered."""


def as_utc_naive(ts):
    if ts is None:
        return datetime.utcnow()
    if ts.tzinfo is not None:
        ts = ts.astimezone(timezone.utc).replace(tzinfo=None)
    return ts


def store_reading(db: Session, location: int, values: dict, timestamp=None, commit=True) -> LatestReading:
    """Upsert the latest reading for ``location`` and append it to the history.

    With ``commit=False`` the rows are only flushed; the caller owns the transaction.
    """
    if db.get(Location, location) is None:
        raise UnknownLocation(f"Invalid location {location}")

    ts = as_utc_naive(timestamp)
    columns = {PARAMETER_COLUMNS[name]: values.get(name) for name in PARAMETER_COLUMNS}

    latest = db.query(LatestReading).filter(LatestReading.location_id == location).first()
    if latest is None:
        latest = LatestReading(location_id=location)
        db.add(latest)
    latest.timestamp = ts
    for column, value in columns.items():
        setattr(latest, column, value)

    db.add(Reading(location_id=location, timestamp=ts, **columns))
    if not commit:
        db.flush()
        return latest
    try:
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(latest)
    logger.debug("Stored reading for location %s at %s", location, ts.isoformat())
    return latest
