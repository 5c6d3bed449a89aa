import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from .core.config import settings
from .db.session import init_db, seed_locations, SessionLocal
from .api import alerts, dashboard, locations, readings
from .services.poller import DashboardPoller

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="[%(asctime)s] %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Water Quality Monitoring API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=[o.strip() for o in settings.CORS_ORIGINS.split(",")],
    allow_credentials=True, allow_methods=["*"], allow_headers=["*"],
)

app.include_router(locations.router)
app.include_router(readings.router)
app.include_router(alerts.router)
app.include_router(dashboard.router)
# path used by deployed field devices
app.add_api_route("/api/mongodb", readings.ingest, methods=["POST"], tags=["readings"])

poller = None

@app.on_event("startup")
def on_startup():
    global poller
    init_db()
    db = SessionLocal()
    try:
        added = seed_locations(db, settings.location_names())
    finally:
        db.close()
    if added:
        logger.info("Registered %d monitoring location(s)", added)
    if settings.POLLER_ENABLED:
        poller = DashboardPoller()
        poller.start()

@app.on_event("shutdown")
def on_shutdown():
    if poller is not None:
        poller.shutdown()

@app.get("/health")
def health(): return {"ok": True}
