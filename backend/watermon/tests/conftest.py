import os
import tempfile

_DB_DIR = tempfile.mkdtemp(prefix="watermon-test-")
os.environ["DB_URI"] = f"sqlite:///{os.path.join(_DB_DIR, 'test.db')}"
os.environ["POLLER_ENABLED"] = "false"
os.environ["LOCATIONS"] = "0:Doha,1:Al Khor,2:Al Wakrah"
os.environ["NOTIFY_WEBHOOK_URL"] = ""

import pytest

from watermon.core.config import settings
from watermon.db.session import SessionLocal, init_db, seed_locations
from watermon.models.alert import Alert
from watermon.models.location import Location
from watermon.models.reading import LatestReading, Reading


@pytest.fixture(autouse=True)
def _database():
    init_db()
    db = SessionLocal()
    try:
        seed_locations(db, settings.location_names())
    finally:
        db.close()
    yield
    db = SessionLocal()
    try:
        db.query(Alert).delete()
        db.query(Reading).delete()
        db.query(LatestReading).delete()
        db.query(Location).filter(Location.id.notin_(list(settings.location_names()))).delete(synchronize_session=False)
        db.commit()
    finally:
        db.close()


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
