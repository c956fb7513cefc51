"""Tests for the request context and the preference/itinerary models."""

import asyncio

import pytest
from pydantic import ValidationError

from camper_planner.api.models.schemas import DEFAULT_OVERTOURISM_LEVEL, TravelPreferences
from camper_planner.core.context import RequestContext
from camper_planner.core.errors import RequestCancelled


def test_check_raises_once_cancelled():
    ctx = RequestContext("req-1")
    ctx.check("start")
    ctx.cancel()
    assert ctx.is_cancelled
    with pytest.raises(RequestCancelled) as exc_info:
        ctx.check("provider call")
    assert exc_info.value.stage == "provider call"


@pytest.mark.asyncio
async def test_guard_returns_result():
    async def work():
        return 42

    assert await RequestContext().guard(work(), "work") == 42


@pytest.mark.asyncio
async def test_guard_cancels_in_flight_call():
    ctx = RequestContext()
    finished = []

    async def slow():
        await asyncio.sleep(30)
        finished.append(True)

    async def cancel_later():
        await asyncio.sleep(0.01)
        ctx.cancel()

    with pytest.raises(RequestCancelled):
        await asyncio.gather(ctx.guard(slow(), "slow call"), cancel_later())
    assert finished == []


@pytest.mark.asyncio
async def test_guard_refuses_to_start_when_cancelled():
    ctx = RequestContext()
    ctx.cancel()
    with pytest.raises(RequestCancelled):
        await ctx.guard(asyncio.sleep(0), "never")


@pytest.mark.asyncio
async def test_guard_propagates_call_errors():
    async def broken():
        raise ValueError("bad")

    with pytest.raises(ValueError):
        await RequestContext().guard(broken(), "broken")


@pytest.mark.parametrize(
    "data, level",
    [
        ({}, DEFAULT_OVERTOURISM_LEVEL),
        ({"avoidOvertourism": True}, 4),
        ({"avoidOvertourism": False}, 2),
        ({"avoidOvertourism": True, "overtourismLevel": 1}, 1),
        ({"overtourismLevel": None, "avoidOvertourism": False}, 2),
    ],
)
def test_overtourism_level_mapping(data, level):
    assert TravelPreferences(**data).overtourismLevel == level


@pytest.mark.parametrize("data", [{"overtourismLevel": 0}, {"month": 13}, {"tripDurationDays": 0}, {"partySize": 0}])
def test_preference_bounds(data):
    with pytest.raises(ValidationError):
        TravelPreferences(**data)


def test_preferences_are_immutable():
    prefs = TravelPreferences()
    with pytest.raises(ValidationError):
        prefs.weekendTrip = True


def test_vehicle_model_prefers_owned_model():
    assert TravelPreferences(isOwnedCamper=True, ownedCamperModel="Hymer", camperModelName="Other").vehicle_model == "Hymer"
    assert TravelPreferences(camperModelName="Surfer Suite").vehicle_model == "Surfer Suite"
