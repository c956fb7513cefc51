from __future__ import annotations

import random
from typing import Literal, Optional

from camper_planner.api.models.schemas import Itinerary, ItineraryStop, Location

BackfillStrategy = Literal["random", "positional"]

EPSILON = 1e-5
MAX_NUDGE = 0.05


def is_null_island(lat: float, lng: float) -> bool:
    return abs(lat) < EPSILON and abs(lng) < EPSILON


def _random_nudge(anchor: Location, rng: random.Random) -> tuple[float, float]:
    return (
        anchor.latitude + (rng.random() - 0.5) * 2 * MAX_NUDGE,
        anchor.longitude + (rng.random() - 0.5) * 2 * MAX_NUDGE,
    )


def _positional_nudge(anchor: Location, day_idx: int, stop_idx: int) -> tuple[float, float]:
    # 1-based indices; spreads placeholder stops around the anchor in a stable pattern
    return (
        anchor.latitude + 0.03 * day_idx - 0.01 * stop_idx,
        anchor.longitude + 0.02 * stop_idx - 0.01 * day_idx,
    )


def ensure_coordinates(
    itinerary: Itinerary,
    anchor: Location,
    strategy: BackfillStrategy = "random",
    rng: Optional[random.Random] = None,
) -> Itinerary:
    """
    Replace every (0,0) stop with a point near the anchor.
    Returns a new Itinerary; stops with real coordinates are left untouched.
    """
    rng = rng or random.Random()
    changed = False
    days = []
    for day_idx, day in enumerate(itinerary.days, start=1):
        stops: list[ItineraryStop] = []
        for stop_idx, stop in enumerate(day.stops, start=1):
            if not is_null_island(stop.latitude, stop.longitude):
                stops.append(stop)
                continue
            if strategy == "positional":
                lat, lng = _positional_nudge(anchor, day_idx, stop_idx)
            else:
                lat, lng = _random_nudge(anchor, rng)
            if is_null_island(lat, lng):
                lat += 0.1
            stops.append(stop.model_copy(update={"latitude": lat, "longitude": lng}))
            changed = True
        days.append(day.model_copy(update={"stops": stops}))
    if not changed:
        return itinerary
    return itinerary.model_copy(update={"days": days})
