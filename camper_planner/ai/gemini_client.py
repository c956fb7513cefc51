from __future__ import annotations

import logging
import random
from typing import Any, Dict, Optional

import httpx

from camper_planner.ai.engine import PROVIDER_TIMEOUT_S, AIItineraryEngine
from camper_planner.core.config import settings
from camper_planner.core.errors import ExtractionError, ProviderTransportError
from camper_planner.domain.catalogs import LocationCatalog, RentalLocationCatalog

logger = logging.getLogger(__name__)

GENERATE_PATH = "/v1beta/models/{model}:generateContent"


def extract_gemini_text(payload: Any) -> str:
    """candidates[0].content.parts[0].text"""
    try:
        candidates = payload["candidates"]
        parts = candidates[0]["content"]["parts"]
        text = parts[0]["text"]
    except (KeyError, IndexError, TypeError) as exc:
        raise ExtractionError(f"Failed to extract content from Gemini response: missing {exc}") from exc
    if not isinstance(text, str):
        raise ExtractionError("Gemini response text is not a string")
    return text


class GeminiItineraryEngine(AIItineraryEngine):
    name = "gemini"
    backfill_strategy = "random"

    def __init__(
        self,
        locations: LocationCatalog,
        rental_locations: Optional[RentalLocationCatalog] = None,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        base_url: Optional[str] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        max_output_tokens: Optional[int] = None,
        repair_max_output_tokens: Optional[int] = None,
        rng: Optional[random.Random] = None,
    ):
        super().__init__(locations, rental_locations, rng)
        self._api_key = api_key or settings.gemini_api_key or ""
        self._model = model or settings.gemini_model
        self._base_url = (base_url or settings.gemini_base_url).rstrip("/")
        self._http = http_client
        self._max_output_tokens = max_output_tokens or settings.gemini_max_output_tokens
        self._repair_max_output_tokens = repair_max_output_tokens or settings.repair_max_output_tokens

    def _build_request(self, prompt: str, repair: bool) -> Dict[str, Any]:
        generation_config: Dict[str, Any] = {
            "temperature": 0.2 if repair else 0.6,
            "maxOutputTokens": self._repair_max_output_tokens if repair else self._max_output_tokens,
        }
        if not repair:
            # a bare continuation is not a JSON document, so JSON mode only applies to full requests
            generation_config["responseMimeType"] = "application/json"
        return {
            "contents": [{"parts": [{"text": prompt}]}],
            "generationConfig": generation_config,
        }

    async def _complete(self, prompt: str, *, repair: bool = False) -> str:
        url = self._base_url + GENERATE_PATH.format(model=self._model)
        body = self._build_request(prompt, repair)
        params = {"key": self._api_key}
        headers = {"Accept": "application/json"}

        try:
            if self._http is not None:
                resp = await self._http.post(url, params=params, json=body, headers=headers, timeout=PROVIDER_TIMEOUT_S)
            else:
                async with httpx.AsyncClient(timeout=PROVIDER_TIMEOUT_S) as client:
                    resp = await client.post(url, params=params, json=body, headers=headers)
        except httpx.HTTPError as exc:
            logger.warning("Gemini request failed (%s): %s", self._model, exc)
            raise ProviderTransportError(f"Gemini request failed: {exc}") from exc

        if resp.is_error:
            logger.error("Gemini returned HTTP %s for model %s: %s", resp.status_code, self._model, resp.text[:1000])
            raise ProviderTransportError(f"Gemini returned HTTP {resp.status_code}", status_code=resp.status_code)

        try:
            payload = resp.json()
        except ValueError as exc:
            raise ExtractionError("Gemini response body is not JSON") from exc
        return extract_gemini_text(payload)
