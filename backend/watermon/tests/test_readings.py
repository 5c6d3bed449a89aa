import pytest
from httpx import ASGITransport, AsyncClient

from watermon.main import app
from watermon.models.reading import LatestReading, Reading


def _client():
    return AsyncClient(transport=ASGITransport(app=app), base_url="http://test")


def _payload(location=0, **overrides):
    payload = {
        "location": location,
        "temperature": 24.5,
        "pH": 7.2,
        "TDS": 310.0,
        "turbidity": 1.8,
        "ORP": 420.0,
        "waterLevel": 75.0,
    }
    payload.update(overrides)
    return payload


@pytest.mark.asyncio
async def test_ingest_upserts_latest_and_appends_history(db):
    async with _client() as ac:
        r = await ac.post("/readings/", json=_payload(timestamp="2025-03-01T10:00:00Z"))
        assert r.status_code == 200
        body = r.json()
        assert body["data"]["location"] == 0
        assert body["data"]["pH"] == 7.2
        assert body["data"]["timestamp"].startswith("2025-03-01T10:00:00")

        r = await ac.post("/readings/", json=_payload(pH=6.9, timestamp="2025-03-01T10:00:05Z"))
        assert r.status_code == 200

    assert db.query(LatestReading).filter(LatestReading.location_id == 0).count() == 1
    assert db.query(LatestReading).filter(LatestReading.location_id == 0).one().ph == 6.9
    assert db.query(Reading).filter(Reading.location_id == 0).count() == 2


@pytest.mark.asyncio
async def test_ingest_defaults_timestamp_and_accepts_device_path(db):
    async with _client() as ac:
        r = await ac.post("/api/mongodb", json=_payload(location=2))
        assert r.status_code == 200
        assert r.json()["data"]["timestamp"]
    assert db.query(Reading).filter(Reading.location_id == 2).count() == 1


@pytest.mark.asyncio
async def test_unknown_location_returns_error_payload():
    async with _client() as ac:
        r = await ac.post("/readings/", json=_payload(location=7))
    assert r.status_code == 400
    body = r.json()
    assert body["error"] == "Failed to process sensor data"
    assert "7" in body["details"]


@pytest.mark.asyncio
async def test_missing_location_is_rejected():
    payload = _payload()
    del payload["location"]
    async with _client() as ac:
        r = await ac.post("/readings/", json=payload)
    assert r.status_code == 422


@pytest.mark.asyncio
async def test_batch_and_latest_listing():
    async with _client() as ac:
        r = await ac.post("/readings/batch", json={"items": [_payload(0), _payload(1, ORP=1150.0)]})
        assert r.status_code == 200
        assert [item["location"] for item in r.json()] == [0, 1]

        latest = await ac.get("/readings/latest")
        assert latest.status_code == 200
        assert {row["location"]: row["ORP"] for row in latest.json()} == {0: 420.0, 1: 1150.0}


@pytest.mark.asyncio
async def test_history_query_is_time_ordered():
    async with _client() as ac:
        for i, ph in enumerate([7.0, 7.1, 7.3]):
            await ac.post("/readings/", json=_payload(pH=ph, timestamp=f"2025-03-01T10:00:0{i}Z"))
        await ac.post("/readings/", json=_payload(location=1, pH=9.9, timestamp="2025-03-01T10:00:09Z"))

        r = await ac.get("/locations/0/readings", params={"parameter": "pH"})
        assert r.status_code == 200
        assert [p["value"] for p in r.json()] == [7.0, 7.1, 7.3]

        r = await ac.get("/locations/0/readings", params={"parameter": "pH", "since": "2025-03-01T10:00:01Z"})
        assert [p["value"] for p in r.json()] == [7.1, 7.3]

        r = await ac.get("/locations/0/readings", params={"parameter": "chlorine"})
        assert r.status_code == 404

        r = await ac.get("/locations/9/readings", params={"parameter": "pH"})
        assert r.status_code == 404


@pytest.mark.asyncio
async def test_register_location_then_ingest():
    async with _client() as ac:
        r = await ac.post("/locations/", json={"id": 5, "name": "Lusail"})
        assert r.status_code == 200
        dup = await ac.post("/locations/", json={"id": 5, "name": "Lusail"})
        assert dup.status_code == 400

        r = await ac.post("/readings/", json=_payload(location=5))
        assert r.status_code == 200

        names = {loc["id"]: loc["name"] for loc in (await ac.get("/locations/")).json()}
        assert names[5] == "Lusail" and names[0] == "Doha"


@pytest.mark.asyncio
async def test_batch_with_unknown_location_stores_nothing(db):
    async with _client() as ac:
        r = await ac.post("/readings/batch", json={"items": [_payload(0, pH=7.0), _payload(7, pH=7.0)]})
    assert r.status_code == 400
    assert r.json()["details"] == "Invalid location 7"
    assert db.query(Reading).count() == 0
    assert db.query(LatestReading).count() == 0


@pytest.mark.asyncio
async def test_batch_same_location_twice_keeps_one_latest_row(db):
    async with _client() as ac:
        r = await ac.post("/readings/batch", json={"items": [
            _payload(0, pH=7.0, timestamp="2025-03-01T10:00:00Z"),
            _payload(0, pH=7.4, timestamp="2025-03-01T10:00:01Z"),
        ]})
    assert r.status_code == 200
    assert [item["pH"] for item in r.json()] == [7.0, 7.4]
    assert db.query(LatestReading).one().ph == 7.4
    assert db.query(Reading).count() == 2
