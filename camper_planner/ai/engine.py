from __future__ import annotations

import logging
import random
from abc import ABC, abstractmethod
from typing import Optional

from camper_planner.ai.backfill import BackfillStrategy, ensure_coordinates
from camper_planner.ai.itinerary_graph import build_repair_graph, parse_with_repair
from camper_planner.ai.parsing import remove_code_fences
from camper_planner.ai.prompts import build_itinerary_prompt, build_repair_prompt
from camper_planner.api.models.schemas import Itinerary, RentalLocation, TravelPreferences
from camper_planner.core.context import RequestContext
from camper_planner.domain.catalogs import LocationCatalog, RentalLocationCatalog
from camper_planner.domain.location_resolver import resolve_location, synthesize_location
from camper_planner.domain.models import GenerationResult

logger = logging.getLogger(__name__)

# Fixed per-call timeout for provider HTTP requests
PROVIDER_TIMEOUT_S = 60.0


class ItineraryEngine(ABC):
    name: str = "engine"

    @abstractmethod
    async def generate(self, preferences: TravelPreferences, context: Optional[RequestContext] = None) -> GenerationResult:
        raise NotImplementedError

    async def suggest(self, preferences: TravelPreferences, context: Optional[RequestContext] = None) -> Itinerary:
        result = await self.generate(preferences, context)
        return result.itinerary


class AIItineraryEngine(ItineraryEngine):
    """
    Shared pipeline for text-generation providers:
    resolve anchor -> prompt -> provider call -> strip fences -> parse/repair -> backfill.

    Subclasses only implement ``_complete``, which sends one prompt and returns
    the raw assistant text from the provider's envelope.
    """

    backfill_strategy: BackfillStrategy = "random"

    def __init__(
        self,
        locations: LocationCatalog,
        rental_locations: Optional[RentalLocationCatalog] = None,
        rng: Optional[random.Random] = None,
    ):
        self._locations = locations
        self._rental_locations = rental_locations
        self._rng = rng or random.Random()
        self._repair_graph = build_repair_graph(self._request_continuation)

    @abstractmethod
    async def _complete(self, prompt: str, *, repair: bool = False) -> str:
        raise NotImplementedError

    async def generate(self, preferences: TravelPreferences, context: Optional[RequestContext] = None) -> GenerationResult:
        ctx = context or RequestContext()
        ctx.check(f"{self.name} request")

        location = resolve_location(preferences, self._locations)
        rental = self._rental_location_for(preferences)
        prompt = build_itinerary_prompt(preferences, location, rental)
        logger.debug("%s prompt [%s]:\n%s", self.name, ctx.request_id, prompt)

        raw = await ctx.guard(self._complete(prompt), f"{self.name} request")
        logger.debug("%s raw response [%s]:\n%s", self.name, ctx.request_id, raw)
        content = remove_code_fences(raw)

        ctx.check(f"{self.name} parse")
        itinerary, repairs = await parse_with_repair(self._repair_graph, content, preferences, ctx, self.name)
        if repairs:
            logger.info("%s itinerary recovered after %d repair attempt(s)", self.name, repairs)

        anchor = location or synthesize_location((preferences.locationQuery or "").strip())
        itinerary = ensure_coordinates(itinerary, anchor, self.backfill_strategy, self._rng)
        return GenerationResult(itinerary=itinerary, repair_attempts=repairs)

    async def _request_continuation(self, truncated: str, preferences: TravelPreferences, ctx: RequestContext) -> str:
        prompt = build_repair_prompt(truncated, preferences)
        raw = await ctx.guard(self._complete(prompt, repair=True), f"{self.name} json repair")
        return remove_code_fences(raw)

    def _rental_location_for(self, preferences: TravelPreferences) -> Optional[RentalLocation]:
        if preferences.isOwnedCamper or not preferences.rentalLocationId or self._rental_locations is None:
            return None
        rental = self._rental_locations.find_by_id(preferences.rentalLocationId)
        if rental is None:
            logger.warning("Unknown rental location id '%s'; omitting pickup constraint", preferences.rentalLocationId)
        return rental
