from functools import lru_cache
from typing import List, Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    project_name: str = "Broccoli Tours Itinerary API"
    api_prefix: str = "/api"
    log_level: str = "INFO"

    gemini_api_key: str | None = Field(default=None, description="Optional Gemini API key")
    gemini_model: str = "gemini-1.5-flash"
    gemini_base_url: str = "https://generativelanguage.googleapis.com"
    gemini_max_output_tokens: int = 8192

    openai_api_key: str | None = Field(default=None, description="Optional OpenAI API key")
    openai_model: str = "gpt-4o-mini"
    openai_base_url: str | None = None
    openai_max_output_tokens: int = 1400

    repair_max_output_tokens: int = 1024

    primary_provider: Literal["gemini", "openai"] = "gemini"

    cors_origins: List[str] = Field(default_factory=lambda: ["*"])

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


@lru_cache
def get_settings() -> Settings:
    return Settings()  # type: ignore[arg-type]


settings = get_settings()
