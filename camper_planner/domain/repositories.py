from abc import ABC, abstractmethod
from typing import Dict, Optional

from camper_planner.api.models.schemas import Itinerary


class ItineraryRepository(ABC):
    @abstractmethod
    async def save(self, itinerary: Itinerary) -> Itinerary:
        raise NotImplementedError

    @abstractmethod
    async def get(self, itinerary_id: str) -> Optional[Itinerary]:
        raise NotImplementedError


class InMemoryItineraryRepository(ItineraryRepository):
    """Process-local store keyed by case-insensitive itinerary id."""

    def __init__(self):
        self._store: Dict[str, Itinerary] = {}

    async def save(self, itinerary: Itinerary) -> Itinerary:
        self._store[itinerary.id.casefold()] = itinerary
        return itinerary

    async def get(self, itinerary_id: str) -> Optional[Itinerary]:
        return self._store.get(itinerary_id.casefold())
