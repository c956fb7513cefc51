import logging
from typing import Optional

from fastapi import Depends

from camper_planner.ai.engine import ItineraryEngine
from camper_planner.ai.gemini_client import GeminiItineraryEngine
from camper_planner.ai.openai_client import OpenAIItineraryEngine, build_client
from camper_planner.ai.orchestrator import ResilientItineraryEngine
from camper_planner.ai.stub_engine import StubItineraryEngine
from camper_planner.core.config import Settings, settings
from camper_planner.domain.catalogs import (
    CamperCatalog,
    InMemoryCamperCatalog,
    InMemoryLocationCatalog,
    InMemoryRentalLocationCatalog,
    LocationCatalog,
    RentalLocationCatalog,
)
from camper_planner.domain.repositories import InMemoryItineraryRepository, ItineraryRepository
from camper_planner.domain.services.itinerary_service import ItineraryService

logger = logging.getLogger(__name__)


def build_engine(
    config: Settings,
    locations: LocationCatalog,
    rental_locations: RentalLocationCatalog,
) -> ResilientItineraryEngine:
    """Order the configured providers by ``primary_provider``; unset keys are skipped."""
    providers: dict[str, Optional[ItineraryEngine]] = {"gemini": None, "openai": None}
    if config.gemini_api_key:
        providers["gemini"] = GeminiItineraryEngine(
            locations,
            rental_locations,
            api_key=config.gemini_api_key,
            model=config.gemini_model,
            base_url=config.gemini_base_url,
            max_output_tokens=config.gemini_max_output_tokens,
            repair_max_output_tokens=config.repair_max_output_tokens,
        )
    if config.openai_api_key:
        providers["openai"] = OpenAIItineraryEngine(
            locations,
            rental_locations,
            client=build_client(config.openai_api_key, config.openai_base_url),
            model=config.openai_model,
            max_output_tokens=config.openai_max_output_tokens,
            repair_max_output_tokens=config.repair_max_output_tokens,
        )

    secondary_name = "openai" if config.primary_provider == "gemini" else "gemini"
    primary = providers[config.primary_provider]
    secondary = providers[secondary_name]
    if primary is None:
        primary, secondary = secondary, None
    logger.info(
        "Itinerary providers: primary=%s secondary=%s",
        primary.name if primary else "none",
        secondary.name if secondary else "none",
    )
    return ResilientItineraryEngine(primary, secondary, StubItineraryEngine(locations))


_locations: LocationCatalog = InMemoryLocationCatalog()
_rental_locations: RentalLocationCatalog = InMemoryRentalLocationCatalog()
_campers: CamperCatalog = InMemoryCamperCatalog()
_repo: ItineraryRepository = InMemoryItineraryRepository()
_engine = build_engine(settings, _locations, _rental_locations)


def get_location_catalog() -> LocationCatalog:
    return _locations


def get_rental_location_catalog() -> RentalLocationCatalog:
    return _rental_locations


def get_camper_catalog() -> CamperCatalog:
    return _campers


def get_itinerary_repo() -> ItineraryRepository:
    return _repo


def get_itinerary_engine() -> ResilientItineraryEngine:
    return _engine


def get_itinerary_service(
    engine: ResilientItineraryEngine = Depends(get_itinerary_engine),
    repo: ItineraryRepository = Depends(get_itinerary_repo),
) -> ItineraryService:
    return ItineraryService(engine=engine, repo=repo)


__all__ = [
    "build_engine",
    "get_camper_catalog",
    "get_itinerary_engine",
    "get_itinerary_repo",
    "get_itinerary_service",
    "get_location_catalog",
    "get_rental_location_catalog",
    "settings",
]
