import logging
from datetime import datetime
from typing import List, Optional

from sqlalchemy.orm import Session

from ..models.alert import Alert
from .parameters import get_parameter
from .severity import Severity, classify

logger = logging.getLogger(__name__)


class SqlAlertStore:
    """Alert history backed by the alerts table. SQLAlchemy errors propagate."""

    def __init__(self, db: Session):
        self.db = db

    def find_recent(self, location: int, parameter: str, severity: str, since: datetime) -> Optional[Alert]:
        return (
            self.db.query(Alert)
            .filter(
                Alert.location_id == location,
                Alert.parameter == parameter,
                Alert.severity == severity,
                Alert.timestamp >= since,
            )
            .order_by(Alert.timestamp.desc())
            .first()
        )

    def add(self, alert: Alert) -> Alert:
        self.db.add(alert)
        try:
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        self.db.refresh(alert)
        return alert


def query_alerts(
    db: Session,
    location: Optional[int] = None,
    parameter: Optional[str] = None,
    severity: Optional[str] = None,
    since: Optional[datetime] = None,
    until: Optional[datetime] = None,
    limit: int = 100,
) -> List[Alert]:
    q = db.query(Alert)
    if location is not None:
        q = q.filter(Alert.location_id == location)
    if parameter is not None:
        q = q.filter(Alert.parameter == parameter)
    if severity is not None:
        q = q.filter(Alert.severity == severity)
    if since is not None:
        q = q.filter(Alert.timestamp >= since)
    if until is not None:
        q = q.filter(Alert.timestamp <= until)
    return q.order_by(Alert.timestamp.desc(), Alert.id.desc()).limit(limit).all()


def backfill_missing_severity(db: Session) -> int:
    """One-time migration for alert rows stored without a severity."""
    rows = db.query(Alert).filter(Alert.severity.is_(None)).all()
    for row in rows:
        spec = get_parameter(row.parameter)
        row.severity = classify(spec, row.value).severity.value if spec else Severity.NONE.value
    if rows:
        db.commit()
        logger.info("Backfilled severity on %d legacy alert(s)", len(rows))
    return len(rows)
