"""Tests for the offline stub itinerary generator."""

from datetime import date

import pytest

from camper_planner.ai.backfill import is_null_island
from camper_planner.ai.stub_engine import BASE_TIPS, OVERTOURISM_TIP, WEEKEND_TIP, StubItineraryEngine, day_count
from camper_planner.api.models.schemas import TravelPreferences
from camper_planner.core.context import RequestContext
from camper_planner.core.errors import RequestCancelled
from conftest import FIXED_NOW


@pytest.fixture
def stub(location_catalog, fixed_clock):
    return StubItineraryEngine(location_catalog, now=fixed_clock)


@pytest.mark.asyncio
async def test_month_trip_in_tuscany(stub):
    prefs = {"periodType": "Month", "month": 7, "year": 2025, "weekendTrip": False, "tripDurationDays": 5, "locationId": "it-tuscany"}
    itinerary = await stub.suggest(TravelPreferences(**prefs))

    assert len(itinerary.days) == 5
    assert [d.dayNumber for d in itinerary.days] == [1, 2, 3, 4, 5]
    assert all(len(d.stops) == 3 for d in itinerary.days)
    assert all(d.overnightStopRecommendation for d in itinerary.days[:4])
    assert itinerary.days[4].overnightStopRecommendation is None
    assert itinerary.period.type == "Month"
    assert (itinerary.period.month, itinerary.period.year) == (7, 2025)
    assert all(d.date is None for d in itinerary.days)
    assert itinerary.title == "Toscana Slow Roads in camper — Broccoli Picks"
    assert itinerary.generatedAtUtc == FIXED_NOW


def test_stop_templates_follow_day_offsets(stub, make_preferences):
    itinerary = stub.build(make_preferences(tripDurationDays=2))
    viewpoint, area, village = itinerary.days[1].stops
    assert [s.type for s in (viewpoint, area, village)] == ["viewpoint", "camper_area", "village"]
    assert viewpoint.name == "Punto panoramico — Toscana"
    assert viewpoint.latitude == pytest.approx(43.7711 + 0.10)
    assert area.longitude == pytest.approx(11.2486 - 0.04)
    assert village.latitude == pytest.approx(43.7711 - 0.06)


@pytest.mark.parametrize(
    "fields, expected",
    [
        ({"tripDurationDays": 1}, 2),
        ({"tripDurationDays": 30}, 21),
        ({"tripDurationDays": 9}, 9),
        ({"weekendTrip": True}, 2),
        ({}, 3),
    ],
)
def test_day_count_rules(make_preferences, fields, expected):
    assert day_count(make_preferences(**fields)) == expected


def test_fixed_dates_are_assigned_per_day(stub, make_preferences):
    prefs = make_preferences(periodType="FixedDates", startDate=date(2025, 6, 1), endDate=date(2025, 6, 3), tripDurationDays=3)
    itinerary = stub.build(prefs)
    assert [d.date for d in itinerary.days] == [date(2025, 6, 1), date(2025, 6, 2), date(2025, 6, 3)]
    assert itinerary.period.startDate == date(2025, 6, 1)


def test_tips_follow_weekend_and_overtourism(stub, make_preferences):
    tips = stub.build(make_preferences(weekendTrip=True, overtourismLevel=5)).tips
    assert tips[0] == WEEKEND_TIP
    assert tips[-1] == OVERTOURISM_TIP
    assert stub.build(make_preferences(overtourismLevel=2)).tips == BASE_TIPS


def test_output_is_deterministic_for_fixed_clock(stub, make_preferences):
    prefs = make_preferences(tripDurationDays=4)
    assert stub.build(prefs) == stub.build(prefs)
    assert stub.build(prefs).id != stub.build(make_preferences(tripDurationDays=5)).id


def test_unknown_destination_uses_synthesized_anchor(stub, make_preferences):
    itinerary = stub.build(make_preferences(locationId=None, locationQuery="Atlantis"))
    assert itinerary.title.startswith("Atlantis in camper")
    for day in itinerary.days:
        for stop in day.stops:
            assert not is_null_island(stop.latitude, stop.longitude)


@pytest.mark.asyncio
async def test_stub_respects_cancellation(stub, make_preferences):
    ctx = RequestContext()
    ctx.cancel()
    with pytest.raises(RequestCancelled):
        await stub.generate(make_preferences(), ctx)
