import logging
from typing import List

from fastapi import APIRouter, Depends, WebSocket
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..db.session import get_db
from ..models.reading import LatestReading
from ..schemas.common import ErrorOut, IngestOut, LatestReadingOut, ReadingBatch, ReadingIn
from ..services.ingest import UnknownLocation, store_reading
from ..services.notify import WS_CLIENTS, broadcast

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/readings", tags=["readings"])

ERROR_MESSAGE = "Failed to process sensor data"


def _error(status_code: int, exc: Exception) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": ERROR_MESSAGE, "details": str(exc)})


async def _process_reading(payload: ReadingIn, db: Session) -> LatestReadingOut:
    latest = store_reading(db, payload.location, payload.parameter_values(), payload.timestamp)
    out = LatestReadingOut.model_validate(latest)
    await broadcast({"type": "reading", "data": out.model_dump(mode="json")})
    return out


@router.websocket("/ws")
async def ws_endpoint(websocket: WebSocket):
    await websocket.accept(); WS_CLIENTS.add(websocket)
    try:
        while True: await websocket.receive_text()
    except Exception:
        WS_CLIENTS.discard(websocket)


@router.post("/", response_model=IngestOut, responses={400: {"model": ErrorOut}, 500: {"model": ErrorOut}})
async def ingest(payload: ReadingIn, db: Session = Depends(get_db)):
    try:
        data = await _process_reading(payload, db)
    except UnknownLocation as exc:
        return _error(400, exc)
    except SQLAlchemyError as exc:
        logger.error("Error processing sensor data: %s", exc)
        return _error(500, exc)
    return IngestOut(message="Data updated successfully", data=data)


@router.post("/batch", response_model=List[LatestReadingOut], responses={400: {"model": ErrorOut}, 500: {"model": ErrorOut}})
async def ingest_batch(batch: ReadingBatch, db: Session = Depends(get_db)):
    # one commit for the whole batch
    results = []
    try:
        for item in batch.items:
            latest = store_reading(db, item.location, item.parameter_values(), item.timestamp, commit=False)
            results.append(LatestReadingOut.model_validate(latest))
        db.commit()
    except UnknownLocation as exc:
        db.rollback()
        return _error(400, exc)
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("Error processing sensor batch: %s", exc)
        return _error(500, exc)
    for out in results:
        await broadcast({"type": "reading", "data": out.model_dump(mode="json")})
    return results


@router.get("/latest", response_model=List[LatestReadingOut])
def latest_readings(db: Session = Depends(get_db)):
    return db.query(LatestReading).order_by(LatestReading.location_id).all()
