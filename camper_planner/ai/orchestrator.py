from __future__ import annotations

import asyncio
import logging
from typing import List, Optional, Tuple

from camper_planner.ai.engine import ItineraryEngine
from camper_planner.ai.stub_engine import StubItineraryEngine
from camper_planner.api.models.schemas import TravelPreferences
from camper_planner.core.context import RequestContext
from camper_planner.core.errors import RequestCancelled
from camper_planner.domain.models import GenerationResult, GenerationTier, SuggestionResult

logger = logging.getLogger(__name__)


class ResilientItineraryEngine(ItineraryEngine):
    """
    Primary provider -> secondary provider -> stub.

    Every provider failure is logged and swallowed so the caller always gets an
    itinerary. Cancellation is the only error that escapes.
    """

    name = "resilient"

    def __init__(
        self,
        primary: Optional[ItineraryEngine],
        secondary: Optional[ItineraryEngine],
        stub: StubItineraryEngine,
    ):
        self._tiers: List[Tuple[GenerationTier, ItineraryEngine]] = []
        if primary is not None:
            self._tiers.append((GenerationTier.PRIMARY, primary))
        if secondary is not None:
            self._tiers.append((GenerationTier.SECONDARY, secondary))
        self._stub = stub

    async def run(self, preferences: TravelPreferences, context: Optional[RequestContext] = None) -> SuggestionResult:
        ctx = context or RequestContext()
        repairs = 0

        for tier, engine in self._tiers:
            ctx.check(f"{tier.value} tier")
            try:
                result = await engine.generate(preferences, ctx)
            except (RequestCancelled, asyncio.CancelledError):
                raise
            except Exception as exc:
                repairs += getattr(exc, "repair_attempts", 0)
                logger.warning(
                    "Itinerary tier %s (%s) failed [%s]: %s: %s",
                    tier.value,
                    engine.name,
                    ctx.request_id,
                    type(exc).__name__,
                    exc,
                )
                continue
            return SuggestionResult(
                itinerary=result.itinerary,
                tier=tier,
                repair_attempts=repairs + result.repair_attempts,
            )

        if self._tiers:
            logger.warning("All AI providers failed [%s]; falling back to stub itinerary", ctx.request_id)
        else:
            logger.info("No AI provider configured [%s]; using stub itinerary", ctx.request_id)
        result = await self._stub.generate(preferences, ctx)
        return SuggestionResult(itinerary=result.itinerary, tier=GenerationTier.STUB, repair_attempts=repairs)

    async def generate(self, preferences: TravelPreferences, context: Optional[RequestContext] = None) -> GenerationResult:
        result = await self.run(preferences, context)
        return GenerationResult(itinerary=result.itinerary, repair_attempts=result.repair_attempts)
