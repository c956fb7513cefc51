"""Tests for building the provider chain from settings."""

from camper_planner.core.config import Settings
from camper_planner.dependencies import build_engine
from camper_planner.domain.models import GenerationTier


def _chain(location_catalog, rental_catalog, **fields):
    config = Settings(_env_file=None, **fields)
    engine = build_engine(config, location_catalog, rental_catalog)
    return [(tier, provider.name) for tier, provider in engine._tiers]


def test_primary_provider_setting_orders_the_chain(location_catalog, rental_catalog):
    chain = _chain(location_catalog, rental_catalog, gemini_api_key="g", openai_api_key="o", primary_provider="openai")
    assert chain == [(GenerationTier.PRIMARY, "openai"), (GenerationTier.SECONDARY, "gemini")]


def test_only_configured_provider_becomes_primary(location_catalog, rental_catalog):
    chain = _chain(location_catalog, rental_catalog, gemini_api_key=None, openai_api_key="o", primary_provider="gemini")
    assert chain == [(GenerationTier.PRIMARY, "openai")]


def test_no_keys_means_stub_only(location_catalog, rental_catalog):
    assert _chain(location_catalog, rental_catalog, gemini_api_key=None, openai_api_key=None) == []
