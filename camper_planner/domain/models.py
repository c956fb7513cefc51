from dataclasses import dataclass
from enum import Enum

from camper_planner.api.models.schemas import Itinerary


class GenerationTier(str, Enum):
    PRIMARY = "primary"
    SECONDARY = "secondary"
    STUB = "stub"


@dataclass(frozen=True)
class GenerationResult:
    """What a single engine produced, plus how many repair rounds it took."""

    itinerary: Itinerary
    repair_attempts: int = 0


@dataclass(frozen=True)
class SuggestionResult:
    itinerary: Itinerary
    tier: GenerationTier
    repair_attempts: int = 0

    @property
    def degraded(self) -> bool:
        return self.tier is GenerationTier.STUB
