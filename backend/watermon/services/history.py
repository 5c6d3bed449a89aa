import pandas as pd
from sqlalchemy.orm import Session

from ..models.reading import PARAMETER_COLUMNS, Reading


def readings_since(db: Session, location, parameter, since=None, limit=500):
    column_name = PARAMETER_COLUMNS.get(parameter)
    if column_name is None:
        raise ValueError(f"Unknown parameter {parameter!r}")
    column = getattr(Reading, column_name)

    q = db.query(Reading.timestamp, column).filter(Reading.location_id == location, column.isnot(None))
    if since is not None:
        q = q.filter(Reading.timestamp >= since)
    # newest `limit` rows, returned oldest first
    rows = q.order_by(Reading.timestamp.desc(), Reading.id.desc()).limit(limit).all()
    return [(ts, value) for ts, value in reversed(rows)]


def build_series(points, window=5):
    df = pd.DataFrame(points, columns=["timestamp", "value"])
    df["value"] = df["value"].astype(float)
    df = df.sort_values("timestamp", kind="stable").reset_index(drop=True)
    df["rolling_mean"] = df["value"].rolling(window, min_periods=1).mean()
    return df
