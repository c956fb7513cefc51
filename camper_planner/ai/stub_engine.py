from __future__ import annotations

import hashlib
import logging
from datetime import datetime, timedelta, timezone
from typing import Callable, List, Optional

from camper_planner.ai.backfill import ensure_coordinates
from camper_planner.ai.engine import ItineraryEngine
from camper_planner.api.models.schemas import (
    Itinerary,
    ItineraryDay,
    ItineraryStop,
    Location,
    TravelPeriod,
    TravelPreferences,
)
from camper_planner.core.context import RequestContext
from camper_planner.domain.catalogs import LocationCatalog
from camper_planner.domain.location_resolver import resolve_anchor
from camper_planner.domain.models import GenerationResult

logger = logging.getLogger(__name__)

MIN_DAYS = 2
MAX_DAYS = 21
WEEKEND_DAYS = 2
DEFAULT_DAYS = 3

STUB_SUMMARY = (
    "Un itinerario pensato per massimizzare panorami e soste facili, "
    "evitando (quando possibile) le ore e i luoghi di picco."
)

BASE_TIPS = [
    "Parti presto: arrivi in area sosta entro le 16:30 riduce lo stress.",
    "Evita centri storici stretti: usa parcheggi scambiatori dove possibile.",
    "Controlla sempre accessi ZTL e altezza/portata dei ponti.",
    "Alterna tappe iconiche a luoghi minori per ridurre overtourism.",
]
WEEKEND_TIP = "Modalità weekend: poche ore di guida e soste semplici."
OVERTOURISM_TIP = "Broccoli Tip: scegli attrazioni secondarie a 15–30 min dalle mete più note."

DAY_ACTIVITIES = [
    "Passeggiata breve e visita del centro",
    "Degustazione/mercato locale",
    "Cena in trattoria (prenotazione consigliata)",
]
OVERNIGHT_STOP = "Area sosta consigliata"
DRIVE_HOURS = 2.0


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def day_count(preferences: TravelPreferences) -> int:
    if preferences.tripDurationDays:
        return max(MIN_DAYS, min(MAX_DAYS, preferences.tripDurationDays))
    return WEEKEND_DAYS if preferences.weekendTrip else DEFAULT_DAYS


def build_period(preferences: TravelPreferences) -> TravelPeriod:
    if preferences.periodType == "FixedDates":
        return TravelPeriod(type="FixedDates", startDate=preferences.startDate, endDate=preferences.endDate)
    return TravelPeriod(type=preferences.periodType, month=preferences.month, year=preferences.year)


def _stops_for_day(location: Location, day: int) -> List[ItineraryStop]:
    lat, lng = location.latitude, location.longitude
    return [
        ItineraryStop(
            name=f"Punto panoramico — {location.region or location.name}",
            description="Sosta breve per foto e respiro.",
            latitude=lat + 0.05 * day,
            longitude=lng + 0.03 * day,
            type="viewpoint",
        ),
        ItineraryStop(
            name=OVERNIGHT_STOP,
            description="Area camper con servizi essenziali e facile accesso.",
            latitude=lat + 0.02 * day,
            longitude=lng - 0.02 * day,
            type="camper_area",
        ),
        ItineraryStop(
            name="Borgo fuori rotta",
            description="Piccolo borgo poco affollato, perfetto al tramonto.",
            latitude=lat - 0.03 * day,
            longitude=lng + 0.01 * day,
            type="village",
        ),
    ]


def _tips(preferences: TravelPreferences) -> List[str]:
    tips = list(BASE_TIPS)
    if preferences.weekendTrip:
        tips.insert(0, WEEKEND_TIP)
    if preferences.overtourismLevel >= 4:
        tips.append(OVERTOURISM_TIP)
    return tips


def _preferences_digest(preferences: TravelPreferences) -> str:
    payload = preferences.model_dump_json(exclude={"avoidOvertourism"})
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()[:8]


class StubItineraryEngine(ItineraryEngine):
    """
    Offline itinerary generator, used when no AI provider produced a result.

    Output is a pure function of the preferences, the catalog and the clock,
    so two calls with the same inputs and a fixed clock are identical.
    """

    name = "stub"

    def __init__(self, locations: LocationCatalog, now: Optional[Callable[[], datetime]] = None):
        self._locations = locations
        self._now = now or _utcnow

    async def generate(self, preferences: TravelPreferences, context: Optional[RequestContext] = None) -> GenerationResult:
        if context is not None:
            context.check("stub generation")
        return GenerationResult(itinerary=self.build(preferences), repair_attempts=0)

    def build(self, preferences: TravelPreferences) -> Itinerary:
        location = resolve_anchor(preferences, self._locations)
        period = build_period(preferences)
        generated_at = self._now()
        count = day_count(preferences)

        start = period.startDate if period.type == "FixedDates" else None
        days = [
            ItineraryDay(
                dayNumber=day,
                date=start + timedelta(days=day - 1) if start else None,
                title=f"Giorno {day}: {location.name}",
                stops=_stops_for_day(location, day),
                activities=list(DAY_ACTIVITIES),
                driveHoursEstimate=DRIVE_HOURS,
                overnightStopRecommendation=OVERNIGHT_STOP if day < count else None,
            )
            for day in range(1, count + 1)
        ]

        itinerary = Itinerary(
            id=f"iti-{generated_at:%Y%m%d%H%M%S}-{_preferences_digest(preferences)}",
            title=f"{location.name} in camper — Broccoli Picks",
            summary=STUB_SUMMARY,
            period=period,
            days=days,
            tips=_tips(preferences),
            generatedAtUtc=generated_at,
        )
        logger.info("Stub itinerary %s built for %s (%d days)", itinerary.id, location.name, count)
        # stop offsets grow with the day index, so only an anchor near (0,0) needs this
        return ensure_coordinates(itinerary, location, "positional")
