import asyncio
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Header, Request, Response

from camper_planner.api.models.schemas import Itinerary, TravelPreferences
from camper_planner.core.context import RequestContext
from camper_planner.core.errors import NotFoundError
from camper_planner.dependencies import get_itinerary_service
from camper_planner.domain.models import GenerationTier
from camper_planner.domain.services.itinerary_service import ItineraryService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/itineraries", tags=["itineraries"])

TIER_HEADER = "X-Itinerary-Tier"
FALLBACK_HEADER = "X-Broccoli-Fallback"
REPAIR_HEADER = "X-Json-Repair-Attempts"

DISCONNECT_POLL_INTERVAL_S = 0.25


async def watch_disconnect(request: Request, ctx: RequestContext, interval: float = DISCONNECT_POLL_INTERVAL_S) -> None:
    """Cancel ``ctx`` once the client has gone away."""
    while not ctx.is_cancelled:
        if await request.is_disconnected():
            logger.info("Client disconnected [%s]; cancelling suggestion", ctx.request_id)
            ctx.cancel()
            return
        await asyncio.sleep(interval)


@router.post("/suggest", response_model=Itinerary)
async def suggest_itinerary(
    body: TravelPreferences,
    request: Request,
    response: Response,
    svc: ItineraryService = Depends(get_itinerary_service),
    x_request_id: Optional[str] = Header(default=None),
):
    ctx = RequestContext(request_id=x_request_id)
    watcher = asyncio.create_task(watch_disconnect(request, ctx))
    try:
        result = await svc.suggest(body, ctx)
    finally:
        watcher.cancel()
        await asyncio.gather(watcher, return_exceptions=True)

    response.headers[TIER_HEADER] = result.tier.value
    if result.tier is GenerationTier.STUB:
        response.headers[FALLBACK_HEADER] = "true"
    if result.repair_attempts > 0:
        response.headers[REPAIR_HEADER] = str(result.repair_attempts)
    return result.itinerary


@router.get("/{itinerary_id}", response_model=Itinerary)
async def get_itinerary(itinerary_id: str, svc: ItineraryService = Depends(get_itinerary_service)):
    itinerary = await svc.get_itinerary(itinerary_id)
    if itinerary is None:
        raise NotFoundError("Itinerary not found", {"id": itinerary_id})
    return itinerary
