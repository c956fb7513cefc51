from __future__ import annotations

import logging
from typing import Optional

from camper_planner.ai.orchestrator import ResilientItineraryEngine
from camper_planner.api.models.schemas import Itinerary, TravelPreferences
from camper_planner.core.context import RequestContext
from camper_planner.core.errors import ValidationError
from camper_planner.domain.models import SuggestionResult
from camper_planner.domain.repositories import ItineraryRepository

logger = logging.getLogger(__name__)


class ItineraryService:
    def __init__(self, engine: ResilientItineraryEngine, repo: ItineraryRepository):
        self.engine = engine
        self.repo = repo

    async def suggest(self, preferences: TravelPreferences, context: Optional[RequestContext] = None) -> SuggestionResult:
        self._validate_preferences(preferences)
        ctx = context or RequestContext()
        result = await self.engine.run(preferences, ctx)
        await self.repo.save(result.itinerary)
        logger.info(
            "Itinerary %s stored [%s] (tier=%s, repairs=%d)",
            result.itinerary.id,
            ctx.request_id,
            result.tier.value,
            result.repair_attempts,
        )
        return result

    async def get_itinerary(self, itinerary_id: str) -> Optional[Itinerary]:
        return await self.repo.get(itinerary_id)

    def _validate_preferences(self, preferences: TravelPreferences) -> None:
        if preferences.periodType == "FixedDates":
            if preferences.startDate is None or preferences.endDate is None:
                raise ValidationError(
                    "startDate and endDate are required for FixedDates",
                    {"field": "startDate", "reason": "Both dates must be provided."},
                )
            if preferences.startDate > preferences.endDate:
                raise ValidationError(
                    "startDate must not be after endDate",
                    {"field": "startDate", "reason": "Check the departure and return dates."},
                )
        if preferences.periodType == "Month" and preferences.month is None:
            raise ValidationError(
                "month is required for Month period",
                {"field": "month", "reason": "Pick a month between 1 and 12."},
            )
        low, high = preferences.minDailyDriveHours, preferences.maxDailyDriveHours
        if low is not None and high is not None and low > high:
            raise ValidationError(
                "minDailyDriveHours must not exceed maxDailyDriveHours",
                {"field": "minDailyDriveHours", "reason": "Minimum drive time is above the maximum."},
            )
