"""
Centralized configuration for the Bizplan Assistant core.

All settings are loaded from environment variables via .env file.
"""

from functools import lru_cache
from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from dotenv import load_dotenv

load_dotenv()


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Model routing
    llm_default_model: str = Field(default="nvidia/llama-3.1-nemotron-ultra-253b-v1")
    llm_plan_model: Optional[str] = Field(default=None)
    llm_cost_mode_model: Optional[str] = Field(default=None)
    llm_fast_model: str = Field(default="nvidia/llama-3.1-nemotron-nano-4b-v1.1")

    # NVIDIA NIM (OpenAI-compatible endpoint)
    nvidia_api_key: Optional[str] = Field(default=None)
    nvidia_api_url: str = Field(default="https://integrate.api.nvidia.com/v1")
    nim_timeout_seconds: float = Field(default=30.0)
    nim_max_retries: int = Field(default=2)

    # Lead scoring
    lead_score_threshold_hot: int = Field(default=70)
    lead_score_threshold_warm: int = Field(default=50)

    # Database
    database_url: Optional[str] = Field(default=None)

    # API
    api_title: str = Field(default="Bizplan Assistant API")
    api_version: str = Field(default="1.0.0")
    cors_origins: str = Field(default="*")

    # Logging
    log_level: str = Field(default="INFO")

    @property
    def cors_origins_list(self) -> List[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]


@lru_cache()
def get_settings() -> Settings:
    """Get cached application settings."""
    return Settings()
