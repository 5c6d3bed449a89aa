from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, DeclarativeBase
from ..core.config import settings

engine = create_engine(settings.DB_URI, connect_args={"check_same_thread": False} if settings.DB_URI.startswith("sqlite") else {})
SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False)

class Base(DeclarativeBase): pass

def init_db():
    from ..models import location, reading, alert  # noqa
    Base.metadata.create_all(bind=engine)


def seed_locations(db, locations: dict[int, str]) -> int:
    from ..models.location import Location
    added = 0
    for ident, name in locations.items():
        if db.get(Location, ident) is None:
            db.add(Location(id=ident, name=name))
            added += 1
    if added:
        db.commit()
    return added


def get_db():
    db = SessionLocal()
    try: yield db
    finally: db.close()
