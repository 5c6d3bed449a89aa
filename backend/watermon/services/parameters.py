"""Monitored water-quality parameters. A 0 tier threshold disables that tier on its side."""

from dataclasses import dataclass, field
from typing import NamedTuple, Optional

TIERS = ("minor", "average", "major")


class Bounds(NamedTuple):
    low: float
    high: float


@dataclass(frozen=True)
class ParameterSpec:
    name: str
    unit: str
    valid_range: Bounds
    safe_range: Bounds
    severity_thresholds: dict[str, Bounds] = field(default_factory=dict)

    def __post_init__(self):
        if self.safe_range.low > self.safe_range.high:
            raise ValueError(f"{self.name}: safe range low bound exceeds high bound")
        if tuple(self.severity_thresholds) != TIERS:
            raise ValueError(f"{self.name}: thresholds must define {', '.join(TIERS)} in order")
        for side in ("low", "high"):
            values = [getattr(self.severity_thresholds[t], side) for t in TIERS]
            if any(v < 0 for v in values):
                raise ValueError(f"{self.name}: negative {side} threshold")
            if values != sorted(values):
                raise ValueError(f"{self.name}: {side} thresholds must be non-decreasing from minor to major")

    @property
    def safe_min(self) -> float:
        return self.safe_range.low

    @property
    def safe_max(self) -> float:
        return self.safe_range.high

    def normalize(self, value: float) -> float:
        """Position of ``value`` inside ``valid_range`` scaled to [0, 1]."""
        lo, hi = self.valid_range
        if hi <= lo:
            return 0.0
        return min(1.0, max(0.0, (value - lo) / (hi - lo)))


def _spec(name, unit, valid, safe, minor, average, major) -> ParameterSpec:
    return ParameterSpec(
        name=name,
        unit=unit,
        valid_range=Bounds(*valid),
        safe_range=Bounds(*safe),
        severity_thresholds={
            "minor": Bounds(*minor),
            "average": Bounds(*average),
            "major": Bounds(*major),
        },
    )


PARAMETERS: dict[str, ParameterSpec] = {
    spec.name: spec
    for spec in (
        _spec("temperature", "°C", (-10, 60), (5, 30), (1, 1), (5, 5), (10, 10)),
        _spec("pH", "pH", (0, 14), (6.5, 8.5), (0.25, 0.25), (0.5, 0.5), (2.5, 1.5)),
        _spec("TDS", "ppm", (0, 2000), (0, 400), (0, 50), (0, 300), (0, 600)),
        # no lower-bound concern for turbidity
        _spec("turbidity", "NTU", (0, 1000), (0, 5), (0, 1), (0, 45), (0, 195)),
        _spec("ORP", "mV", (-2000, 2000), (200, 800), (100, 100), (200, 200), (300, 300)),
        _spec("waterLevel", "cm", (0, 200), (20, 150), (5, 10), (10, 20), (15, 40)),
    )
}


def get_parameter(name: str) -> Optional[ParameterSpec]:
    return PARAMETERS.get(name)
