import logging
from datetime import datetime, timedelta
from typing import Callable, List, Optional

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.config import settings
from ..db.session import SessionLocal
from ..models.alert import Alert
from ..models.reading import LatestReading, parameter_values
from .alert_store import SqlAlertStore
from .alerts import AlertDeduplicator, LastSeenCache, readings_from_values
from .notify import AlertNotifier, alert_payload
from .parameters import get_parameter

logger = logging.getLogger(__name__)

JOB_ID = "dashboard_poll"


class DashboardPoller:
    def __init__(
        self,
        session_factory: Callable[[], Session] = SessionLocal,
        notifier: Optional[AlertNotifier] = None,
        interval: Optional[float] = None,
        suppression_window: Optional[timedelta] = None,
        clock: Callable[[], datetime] = datetime.utcnow,
        cache: Optional[LastSeenCache] = None,
    ):
        self.session_factory = session_factory
        self.notifier = notifier or AlertNotifier.from_settings()
        self.interval = interval or settings.POLL_INTERVAL_SECONDS
        self.suppression_window = suppression_window
        self.clock = clock
        self.cache = cache if cache is not None else LastSeenCache()
        self.scheduler: Optional[AsyncIOScheduler] = None
        self.ticks = 0
        self.failures = 0

    def deduplicator(self, db: Session) -> AlertDeduplicator:
        return AlertDeduplicator(
            SqlAlertStore(db),
            notify=self.notifier,
            suppression_window=self.suppression_window,
            clock=self.clock,
            cache=self.cache,
        )

    def run_once(self, db: Session) -> List[Alert]:
        dedup = self.deduplicator(db)
        alerts = []
        for latest in db.query(LatestReading).order_by(LatestReading.location_id).all():
            location = latest.location_id
            for reading in readings_from_values(location, parameter_values(latest), latest.timestamp):
                try:
                    alert = dedup.evaluate(location, get_parameter(reading.parameter), reading)
                except SQLAlchemyError as exc:
                    self.failures += 1
                    db.rollback()
                    logger.error("Alert evaluation failed for location %s %s: %s", location, reading.parameter, exc)
                    continue
                if alert is not None:
                    alerts.append(alert)
        return alerts

    async def tick(self) -> List[dict]:
        self.ticks += 1
        alerts: List[dict] = []
        try:
            db = self.session_factory()
            try:
                alerts = [alert_payload(a) for a in self.run_once(db)]
            finally:
                db.close()
            await self.notifier.flush()
        except Exception:
            self.failures += 1
            logger.exception("Dashboard poll tick failed")
        return alerts

    def start(self):
        if self.scheduler is not None:
            return
        self.scheduler = AsyncIOScheduler()
        self.scheduler.add_job(
            self.tick,
            trigger=IntervalTrigger(seconds=self.interval),
            id=JOB_ID,
            max_instances=1,
            coalesce=True,
            replace_existing=True,
        )
        self.scheduler.start()
        logger.info("Dashboard poller started (interval: %ss)", self.interval)

    def shutdown(self):
        if self.scheduler is None:
            return
        try:
            self.scheduler.shutdown(wait=False)
        finally:
            self.scheduler = None
        logger.info("Dashboard poller stopped")
