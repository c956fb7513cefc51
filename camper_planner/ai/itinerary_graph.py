from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable, Dict, Optional, TypedDict

from langgraph.graph import END, StateGraph

from camper_planner.ai.parsing import MalformedJSONError, parse_itinerary, scan_structure
from camper_planner.api.models.schemas import Itinerary, TravelPreferences
from camper_planner.core.context import RequestContext
from camper_planner.core.errors import InvalidAiResponse, MissingFieldError

logger = logging.getLogger(__name__)

# Initial parse plus at most this many continuation requests.
MAX_REPAIR_ATTEMPTS = 3

ContinuationFn = Callable[[str, TravelPreferences, RequestContext], Awaitable[str]]


class RepairState(TypedDict):
    text: str
    preferences: TravelPreferences
    context: RequestContext
    provider: str
    repairs: int
    itinerary: Optional[Itinerary]
    last_error: Optional[str]


def build_repair_graph(request_continuation: ContinuationFn):
    """
    Parse -> (repair -> parse)* state machine for one provider.

    ``request_continuation`` asks the same provider for the missing tail of a
    truncated payload and returns it already normalised.
    """

    async def parse(state: RepairState) -> Dict[str, Any]:
        try:
            itinerary = parse_itinerary(state["text"], state["preferences"])
        except MissingFieldError as exc:
            exc.repair_attempts = state["repairs"]
            raise
        except MalformedJSONError as exc:
            logger.warning(
                "%s returned invalid JSON (repairs so far: %d): %s", state["provider"], state["repairs"], exc
            )
            if state["repairs"] >= MAX_REPAIR_ATTEMPTS:
                raise InvalidAiResponse(
                    f"{state['provider']} response is still invalid JSON after {state['repairs']} repair attempts",
                    last_error=str(exc),
                    repair_attempts=state["repairs"],
                ) from exc
            return {"itinerary": None, "last_error": str(exc)}
        return {"itinerary": itinerary, "last_error": None}

    async def repair(state: RepairState) -> Dict[str, Any]:
        ctx = state["context"]
        ctx.check("json repair")
        attempt = state["repairs"] + 1
        logger.info("Requesting JSON continuation from %s (attempt %d/%d)", state["provider"], attempt, MAX_REPAIR_ATTEMPTS)
        continuation = await request_continuation(state["text"], state["preferences"], ctx)
        repaired = state["text"] + continuation

        report = scan_structure(repaired)
        if not report.balanced:
            logger.warning(
                "Repaired JSON from %s still looks unbalanced (depth=%d, open string=%s)",
                state["provider"],
                report.depth,
                report.in_string,
            )
        return {"text": repaired, "repairs": attempt}

    def route_after_parse(state: RepairState) -> str:
        return END if state["itinerary"] is not None else "repair"

    builder = StateGraph(RepairState)
    builder.add_node("parse", parse)
    builder.add_node("repair", repair)

    builder.set_entry_point("parse")
    builder.add_conditional_edges("parse", route_after_parse, {"repair": "repair", END: END})
    builder.add_edge("repair", "parse")
    return builder.compile()


async def parse_with_repair(
    graph,
    text: str,
    preferences: TravelPreferences,
    context: RequestContext,
    provider: str,
) -> tuple[Itinerary, int]:
    """Run the repair graph and return the itinerary with the number of repair rounds used."""
    initial_state: RepairState = {
        "text": text,
        "preferences": preferences,
        "context": context,
        "provider": provider,
        "repairs": 0,
        "itinerary": None,
        "last_error": None,
    }
    result = await graph.ainvoke(initial_state)
    return result["itinerary"], result["repairs"]
