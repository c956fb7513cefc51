from __future__ import annotations

import logging
import random
from typing import Any, Dict, Optional

import openai
from openai import AsyncOpenAI

from camper_planner.ai.engine import PROVIDER_TIMEOUT_S, AIItineraryEngine
from camper_planner.ai.prompts import REPAIR_SYSTEM_PROMPT, SYSTEM_PROMPT
from camper_planner.core.config import settings
from camper_planner.core.errors import ExtractionError, ProviderTransportError
from camper_planner.domain.catalogs import LocationCatalog, RentalLocationCatalog

logger = logging.getLogger(__name__)


def build_client(api_key: str, base_url: Optional[str] = None) -> AsyncOpenAI:
    return AsyncOpenAI(
        api_key=api_key,
        base_url=base_url,
        timeout=PROVIDER_TIMEOUT_S,
        # one call per attempt; failures go to the fallback chain
        max_retries=0,
    )


def extract_openai_text(completion: Any) -> str:
    """choices[0].message.content"""
    choices = getattr(completion, "choices", None)
    if not choices:
        raise ExtractionError("OpenAI response has no choices")
    message = getattr(choices[0], "message", None)
    content = getattr(message, "content", None)
    if not isinstance(content, str):
        raise ExtractionError("OpenAI response has no message content")
    return content


class OpenAIItineraryEngine(AIItineraryEngine):
    name = "openai"
    backfill_strategy = "positional"

    def __init__(
        self,
        locations: LocationCatalog,
        rental_locations: Optional[RentalLocationCatalog] = None,
        client: Optional[AsyncOpenAI] = None,
        model: Optional[str] = None,
        max_output_tokens: Optional[int] = None,
        repair_max_output_tokens: Optional[int] = None,
        rng: Optional[random.Random] = None,
    ):
        super().__init__(locations, rental_locations, rng)
        if client is None:
            if not settings.openai_api_key:
                raise ValueError("OpenAI client or OPENAI_API_KEY is required for OpenAIItineraryEngine")
            client = build_client(settings.openai_api_key, settings.openai_base_url)
        self._client = client
        self._model = model or settings.openai_model
        self._max_output_tokens = max_output_tokens or settings.openai_max_output_tokens
        self._repair_max_output_tokens = repair_max_output_tokens or settings.repair_max_output_tokens

    def _build_request(self, prompt: str, repair: bool) -> Dict[str, Any]:
        request: Dict[str, Any] = {
            "model": self._model,
            "temperature": 0.2 if repair else 0.6,
            "max_tokens": self._repair_max_output_tokens if repair else self._max_output_tokens,
            "messages": [
                {"role": "system", "content": REPAIR_SYSTEM_PROMPT if repair else SYSTEM_PROMPT},
                {"role": "user", "content": prompt},
            ],
        }
        if not repair:
            request["response_format"] = {"type": "json_object"}
        return request

    async def _complete(self, prompt: str, *, repair: bool = False) -> str:
        try:
            completion = await self._client.chat.completions.create(**self._build_request(prompt, repair))
        except openai.APIStatusError as exc:
            logger.error("OpenAI returned HTTP %s for model %s: %s", exc.status_code, self._model, exc.message)
            raise ProviderTransportError(f"OpenAI returned HTTP {exc.status_code}", status_code=exc.status_code) from exc
        except openai.APIError as exc:
            logger.warning("OpenAI request failed (%s): %s", self._model, exc)
            raise ProviderTransportError(f"OpenAI request failed: {exc}") from exc
        return extract_openai_text(completion)
