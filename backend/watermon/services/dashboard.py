import pandas as pd

from ..models.reading import parameter_values
from .history import build_series
from .parameters import PARAMETERS, get_parameter
from .severity import Severity, Status, classify

SEVERITY_COLORS = {
    Severity.NONE: "green",
    Severity.MINOR: "yellow",
    Severity.AVERAGE: "orange",
    Severity.MAJOR: "red",
}

CELL_COLUMNS = ["location", "parameter", "value", "normalized", "severity", "status", "out_of_range"]


def heatmap_cells(rows):
    cells = []
    for row in rows:
        for name, value in parameter_values(row).items():
            spec = get_parameter(name)
            if spec is None or value is None:
                continue
            result = classify(spec, value)
            cells.append({
                "location": row.location_id,
                "parameter": name,
                "value": value,
                "normalized": spec.normalize(value),
                "severity": result.severity.value,
                "status": result.status.value,
                "out_of_range": result.status is not Status.NORMAL,
            })
    return cells


def heatmap(rows):
    cells = heatmap_cells(rows)
    parameters = list(PARAMETERS)
    if not cells:
        return {"locations": [], "parameters": parameters, "normalized": [], "cells": []}

    df = pd.DataFrame(cells, columns=CELL_COLUMNS)
    grid = df.pivot(index="location", columns="parameter", values="normalized").reindex(columns=parameters)
    grid = grid.astype(object).where(grid.notna(), None)
    return {
        "locations": [int(i) for i in grid.index],
        "parameters": parameters,
        "normalized": grid.values.tolist(),
        "cells": cells,
    }


def series_points(spec, points, window=5):
    df = build_series(points, window=window)
    out = []
    for ts, value, mean in zip(df["timestamp"], df["value"], df["rolling_mean"]):
        severity = classify(spec, float(value)).severity
        out.append({
            "timestamp": pd.Timestamp(ts).to_pydatetime(),
            "value": float(value),
            "rolling_mean": float(mean),
            "severity": severity.value,
            "color": SEVERITY_COLORS[severity],
        })
    return out
