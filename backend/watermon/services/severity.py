"""Single source of the severity ladder; alerts, chart colours and heatmap highlights all use classify()."""

from enum import Enum
from typing import NamedTuple

from .parameters import ParameterSpec


class Severity(str, Enum):
    NONE = "none"
    MINOR = "minor"
    AVERAGE = "average"
    MAJOR = "major"

    @property
    def rank(self) -> int:
        return _RANK[self]


_RANK = {Severity.NONE: 0, Severity.MINOR: 1, Severity.AVERAGE: 2, Severity.MAJOR: 3}


class Status(str, Enum):
    NORMAL = "normal"
    SLIGHTLY_LOW = "slightly_low"
    TOO_LOW = "too_low"
    CRITICALLY_LOW = "critically_low"
    SLIGHTLY_HIGH = "slightly_high"
    TOO_HIGH = "too_high"
    CRITICALLY_HIGH = "critically_high"

    @property
    def label(self) -> str:
        return self.value.replace("_", " ")


class Classification(NamedTuple):
    severity: Severity
    status: Status
    deviation: float = 0.0


# most severe first
_LADDER = (Severity.MAJOR, Severity.AVERAGE, Severity.MINOR)

_STATUS = {
    "low": {
        Severity.NONE: Status.SLIGHTLY_LOW,
        Severity.MINOR: Status.SLIGHTLY_LOW,
        Severity.AVERAGE: Status.TOO_LOW,
        Severity.MAJOR: Status.CRITICALLY_LOW,
    },
    "high": {
        Severity.NONE: Status.SLIGHTLY_HIGH,
        Severity.MINOR: Status.SLIGHTLY_HIGH,
        Severity.AVERAGE: Status.TOO_HIGH,
        Severity.MAJOR: Status.CRITICALLY_HIGH,
    },
}

NORMAL = Classification(Severity.NONE, Status.NORMAL, 0.0)


def classify(spec: ParameterSpec, value: float) -> Classification:
    low, high = spec.safe_range
    if low <= value <= high:
        return NORMAL

    if value < low:
        side, deviation = "low", low - value
    else:
        side, deviation = "high", value - high

    severity = Severity.NONE
    for tier in _LADDER:
        threshold = getattr(spec.severity_thresholds[tier.value], side)
        if threshold > 0 and deviation >= threshold:
            severity = tier
            break
    # Outside the safe range but short of every tier: no severity, directional status only.
    return Classification(severity, _STATUS[side][severity], deviation)


def is_out_of_range(spec: ParameterSpec, value: float) -> bool:
    return classify(spec, value).status is not Status.NORMAL
