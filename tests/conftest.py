"""Shared fixtures for the itinerary pipeline tests."""

import json
import random
from datetime import datetime, timezone
from typing import Any, Dict, List

import pytest

from camper_planner.ai.engine import AIItineraryEngine
from camper_planner.api.models.schemas import TravelPreferences
from camper_planner.domain.catalogs import InMemoryLocationCatalog, InMemoryRentalLocationCatalog

FIXED_NOW = datetime(2025, 3, 1, 9, 30, 0, tzinfo=timezone.utc)


def itinerary_payload(days: int = 2, **overrides: Any) -> Dict[str, Any]:
    """A well-formed provider payload with ``days`` days of two stops each."""
    payload: Dict[str, Any] = {
        "id": "iti-test-1",
        "title": "Toscana lenta",
        "summary": "Colline e borghi.",
        "period": {"type": "Month", "startDate": None, "endDate": None, "month": 7, "year": 2025},
        "days": [
            {
                "dayNumber": n,
                "date": None,
                "title": f"Giorno {n}",
                "stops": [
                    {"name": "Siena", "description": "Centro", "latitude": 43.3188, "longitude": 11.3308, "type": "village"},
                    {"name": "Area camper", "description": None, "latitude": 43.30, "longitude": 11.30, "type": "camper_area"},
                ],
                "activities": ["Passeggiata"],
                "driveHoursEstimate": 2.5,
                "overnightStopRecommendation": "Area camper" if n < days else None,
            }
            for n in range(1, days + 1)
        ],
        "tips": ["Parti presto."],
        "generatedAtUtc": "2025-03-01T09:30:00Z",
    }
    payload.update(overrides)
    return payload


class ScriptedEngine(AIItineraryEngine):
    """Provider double that replays canned responses and records every prompt."""

    name = "scripted"

    def __init__(self, locations, responses: List[Any], rental_locations=None, strategy: str = "positional"):
        super().__init__(locations, rental_locations, random.Random(7))
        self.backfill_strategy = strategy
        self._responses = list(responses)
        self.prompts: List[str] = []
        self.repair_flags: List[bool] = []

    async def _complete(self, prompt: str, *, repair: bool = False) -> str:
        self.prompts.append(prompt)
        self.repair_flags.append(repair)
        response = self._responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


@pytest.fixture
def location_catalog() -> InMemoryLocationCatalog:
    return InMemoryLocationCatalog()


@pytest.fixture
def rental_catalog() -> InMemoryRentalLocationCatalog:
    return InMemoryRentalLocationCatalog()


@pytest.fixture
def make_preferences():
    def _make(**fields: Any) -> TravelPreferences:
        data: Dict[str, Any] = {"periodType": "Month", "month": 7, "year": 2025, "locationId": "it-tuscany"}
        data.update(fields)
        return TravelPreferences(**data)

    return _make


@pytest.fixture
def valid_json() -> str:
    return json.dumps(itinerary_payload())


@pytest.fixture
def fixed_clock():
    return lambda: FIXED_NOW
