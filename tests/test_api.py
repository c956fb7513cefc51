"""HTTP surface tests with the engine swapped through dependency overrides."""

import asyncio
import json

import pytest
from fastapi.testclient import TestClient

from camper_planner.ai.orchestrator import ResilientItineraryEngine
from camper_planner.ai.stub_engine import StubItineraryEngine
from camper_planner.dependencies import get_itinerary_engine, get_itinerary_repo
from camper_planner.domain.repositories import InMemoryItineraryRepository
from camper_planner.main import app
from conftest import ScriptedEngine

SUGGEST_URL = "/api/itineraries/suggest"


@pytest.fixture
def client():
    repo = InMemoryItineraryRepository()
    app.dependency_overrides[get_itinerary_repo] = lambda: repo
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def use_engine(location_catalog, fixed_clock):
    def _use(primary=None, secondary=None):
        engine = ResilientItineraryEngine(primary, secondary, StubItineraryEngine(location_catalog, now=fixed_clock))
        app.dependency_overrides[get_itinerary_engine] = lambda: engine
        return engine

    return _use


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_suggest_from_stub_sets_fallback_headers(client, use_engine):
    use_engine()
    response = client.post(SUGGEST_URL, json={"periodType": "Month", "month": 7, "year": 2025, "tripDurationDays": 5, "locationId": "it-tuscany"})

    assert response.status_code == 200
    assert response.headers["X-Itinerary-Tier"] == "stub"
    assert response.headers["X-Broccoli-Fallback"] == "true"
    assert "X-Json-Repair-Attempts" not in response.headers
    body = response.json()
    assert len(body["days"]) == 5
    assert body["days"][4]["overnightStopRecommendation"] is None


def test_suggest_from_provider_reports_repairs(client, use_engine, location_catalog, valid_json):
    use_engine(primary=ScriptedEngine(location_catalog, [valid_json[:-1], "}"]))
    response = client.post(SUGGEST_URL, json={"periodType": "Month", "month": 7, "year": 2025})

    assert response.status_code == 200
    assert response.headers["X-Itinerary-Tier"] == "primary"
    assert response.headers["X-Json-Repair-Attempts"] == "1"
    assert "X-Broccoli-Fallback" not in response.headers


def test_suggested_itinerary_can_be_fetched(client, use_engine):
    use_engine()
    created = client.post(SUGGEST_URL, json={"periodType": "SuggestedBest", "weekendTrip": True}).json()

    fetched = client.get(f"/api/itineraries/{created['id'].upper()}")
    assert fetched.status_code == 200
    assert fetched.json() == created


def test_unknown_itinerary_is_404_envelope(client):
    response = client.get("/api/itineraries/missing")
    assert response.status_code == 404
    assert response.json()["error"]["code"] == "NOT_FOUND"


@pytest.mark.parametrize(
    "payload, field",
    [
        ({"periodType": "FixedDates", "startDate": "2025-06-01"}, "startDate"),
        ({"periodType": "FixedDates", "startDate": "2025-06-05", "endDate": "2025-06-01"}, "startDate"),
        ({"periodType": "Month"}, "month"),
        ({"minDailyDriveHours": 5, "maxDailyDriveHours": 2}, "minDailyDriveHours"),
    ],
)
def test_inconsistent_preferences_are_rejected(client, use_engine, payload, field):
    use_engine()
    response = client.post(SUGGEST_URL, json=payload)
    assert response.status_code == 400
    error = response.json()["error"]
    assert error["code"] == "VALIDATION_ERROR"
    assert error["details"]["field"] == field


def test_schema_violation_is_400_with_field_path(client, use_engine):
    use_engine()
    response = client.post(SUGGEST_URL, json={"overtourismLevel": 9})
    assert response.status_code == 400
    assert response.json()["error"]["details"]["field"] == "overtourismLevel"


def test_legacy_overtourism_flag_is_accepted(client, use_engine):
    use_engine()
    response = client.post(SUGGEST_URL, json={"avoidOvertourism": True})
    assert response.status_code == 200
    assert response.json()["tips"][-1].startswith("Broccoli Tip")


def test_catalog_endpoints(client):
    locations = client.get("/api/locations").json()
    assert [loc["id"] for loc in locations][:2] == ["it-tuscany", "it-dolomites"]

    rentals = client.get("/api/rentallocations").json()
    assert rentals[0]["country"] == "Austria"
    assert len(rentals) > 50

    campers = client.get("/api/campers").json()
    assert len(campers) == 17
    assert {"id", "modelName", "category", "sleeps", "lengthMeters"} <= set(campers[0])


class HangingEngine(ScriptedEngine):
    """Provider double whose first call never returns on its own."""

    def __init__(self, locations, started):
        super().__init__(locations, [])
        self.started = started

    async def _complete(self, prompt, *, repair=False):
        self.prompts.append(prompt)
        self.started.set()
        await asyncio.sleep(30)
        raise AssertionError("call should have been cancelled")


class CountingStub(StubItineraryEngine):
    calls = 0

    async def generate(self, preferences, context=None):
        self.calls += 1
        return await super().generate(preferences, context)


@pytest.mark.asyncio
async def test_client_disconnect_cancels_suggestion(location_catalog, fixed_clock):
    started = asyncio.Event()
    primary = HangingEngine(location_catalog, started)
    secondary = ScriptedEngine(location_catalog, [])
    stub = CountingStub(location_catalog, now=fixed_clock)
    engine = ResilientItineraryEngine(primary, secondary, stub)
    app.dependency_overrides[get_itinerary_engine] = lambda: engine
    app.dependency_overrides[get_itinerary_repo] = InMemoryItineraryRepository

    body = json.dumps({"periodType": "Month", "month": 7, "year": 2025}).encode()
    sent_body = False

    async def receive():
        nonlocal sent_body
        if not sent_body:
            sent_body = True
            return {"type": "http.request", "body": body, "more_body": False}
        await started.wait()
        return {"type": "http.disconnect"}

    messages = []

    async def send(message):
        messages.append(message)

    scope = {
        "type": "http",
        "asgi": {"version": "3.0"},
        "http_version": "1.1",
        "method": "POST",
        "scheme": "http",
        "path": SUGGEST_URL,
        "raw_path": SUGGEST_URL.encode(),
        "root_path": "",
        "query_string": b"",
        "headers": [(b"content-type", b"application/json"), (b"host", b"testserver")],
        "server": ("testserver", 80),
        "client": ("testclient", 50000),
    }
    try:
        await asyncio.wait_for(app(scope, receive, send), timeout=5)
    finally:
        app.dependency_overrides.clear()

    start = next(m for m in messages if m["type"] == "http.response.start")
    payload = json.loads(b"".join(m.get("body", b"") for m in messages if m["type"] == "http.response.body"))
    assert start["status"] == 499
    assert payload["error"]["code"] == "REQUEST_CANCELLED"
    assert len(primary.prompts) == 1
    assert secondary.prompts == []
    assert stub.calls == 0
