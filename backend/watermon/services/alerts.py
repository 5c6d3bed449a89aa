import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable, Dict, Iterable, List, Optional, Protocol, Tuple

from ..core.config import settings
from ..models.alert import Alert
from .parameters import ParameterSpec, get_parameter
from .severity import Severity, classify

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ParameterReading:
    location: int
    parameter: str
    value: float
    timestamp: datetime


class AlertHistory(Protocol):
    def find_recent(self, location: int, parameter: str, severity: str, since: datetime) -> Optional[Alert]: ...
    def add(self, alert: Alert) -> Alert: ...


class LastSeenCache:
    """Most recently evaluated value per (location, parameter)."""

    UNKNOWN = object()

    def __init__(self):
        self._values: Dict[Tuple[int, str], float] = {}

    def get(self, location: int, parameter: str):
        return self._values.get((location, parameter), self.UNKNOWN)

    def update(self, location: int, parameter: str, value: float):
        self._values[(location, parameter)] = value

    def __len__(self):
        return len(self._values)


class AlertDeduplicator:
    """Skips unchanged values; suppresses repeats of the same severity inside the window."""

    def __init__(
        self,
        history: AlertHistory,
        notify: Optional[Callable[[Alert], None]] = None,
        suppression_window: Optional[timedelta] = None,
        clock: Callable[[], datetime] = datetime.utcnow,
        cache: Optional[LastSeenCache] = None,
    ):
        self.history = history
        self.notify = notify
        if suppression_window is None:
            suppression_window = timedelta(seconds=settings.ALERT_SUPPRESSION_SECONDS)
        self.suppression_window = suppression_window
        self.clock = clock
        self.cache = cache if cache is not None else LastSeenCache()

    def evaluate(self, location: int, spec: Optional[ParameterSpec], reading: ParameterReading) -> Optional[Alert]:
        if spec is None:
            return None
        if self.cache.get(location, spec.name) == reading.value:
            return None
        try:
            return self._evaluate(location, spec, reading)
        finally:
            self.cache.update(location, spec.name, reading.value)

    def _evaluate(self, location: int, spec: ParameterSpec, reading: ParameterReading) -> Optional[Alert]:
        result = classify(spec, reading.value)
        if result.severity is Severity.NONE:
            return None

        now = self.clock()
        recent = self.history.find_recent(location, spec.name, result.severity.value, now - self.suppression_window)
        if recent is not None:
            logger.debug(
                "Suppressed %s alert for location %s %s (last at %s)",
                result.severity.value, location, spec.name, recent.timestamp,
            )
            return None

        alert = self.history.add(Alert(
            location_id=location,
            parameter=spec.name,
            value=reading.value,
            status=result.status.label,
            severity=result.severity.value,
            safe_min=spec.safe_min,
            safe_max=spec.safe_max,
            timestamp=now,
        ))
        if self.notify is not None:
            self.notify(alert)
        return alert

    def evaluate_snapshot(self, location: int, values: dict, timestamp: datetime) -> List[Alert]:
        """Evaluate every monitored parameter of a multi-parameter reading."""
        alerts = []
        for reading in readings_from_values(location, values, timestamp):
            alert = self.evaluate(location, get_parameter(reading.parameter), reading)
            if alert is not None:
                alerts.append(alert)
        return alerts


def readings_from_values(location: int, values: dict, timestamp: datetime) -> Iterable[ParameterReading]:
    for name, value in values.items():
        if value is None:
            continue
        yield ParameterReading(location=location, parameter=name, value=float(value), timestamp=timestamp)
