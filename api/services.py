"""
Service initialization and dependency injection for the Bizplan Assistant API.

Creates and manages all service instances used by the API.
"""

import logging
from typing import Any, Optional

from config.settings import get_settings, Settings
from lead_scoring.extractor import LeadSignalsExtractor
from lead_scoring.scoring_model import LeadScorer
from llm.providers.nim import NIMProvider
from llm.router import ModelConfig, ModelRouter

logger = logging.getLogger(__name__)


class Services:
    """Container for all application services."""

    def __init__(self):
        self.settings: Optional[Settings] = None
        self.provider: Optional[Any] = None
        self.model_router: Optional[ModelRouter] = None
        self.lead_scorer: Optional[LeadScorer] = None
        self._initialized = False

    def initialize(self, provider: Optional[Any] = None):
        """
        Initialize all services.

        Args:
            provider: Generation provider override (defaults to NIM)
        """
        if self._initialized:
            return

        self.settings = get_settings()
        logger.info(f"Initializing services with default model: {self.settings.llm_default_model}")

        self._init_router()
        self._init_lead_scoring()
        self._init_provider(provider)
        self._initialized = True
        logger.info("All services initialized successfully")

    def _init_router(self):
        """Initialize the model router from configured identifiers."""
        self.model_router = ModelRouter(ModelConfig.from_settings(self.settings))
        logger.info("Model router ready")

    def _init_lead_scoring(self):
        """Initialize lead scoring components."""
        self.lead_scorer = LeadScorer(
            hot_threshold=self.settings.lead_score_threshold_hot,
            warm_threshold=self.settings.lead_score_threshold_warm,
        )
        logger.info("Lead scoring services ready")

    def _init_provider(self, provider: Optional[Any]):
        """Initialize the generation provider."""
        s = self.settings
        self.provider = provider or NIMProvider(
            api_key=s.nvidia_api_key,
            base_url=s.nvidia_api_url,
            timeout=s.nim_timeout_seconds,
            max_retries=s.nim_max_retries,
        )

    def extractor_for(self, model_id: Optional[str] = None) -> LeadSignalsExtractor:
        """Lead signal extractor bound to a model (default model if omitted)."""
        return LeadSignalsExtractor(
            provider=self.provider,
            model_id=model_id or self.model_router.config.default,
        )

    def reset(self):
        """Drop all service instances (used by tests)."""
        self.__init__()

    @property
    def is_ready(self) -> bool:
        return self._initialized and self.provider is not None

    def health(self) -> dict:
        """Return health status of all services."""
        return {
            "initialized": self._initialized,
            "provider": self.provider is not None,
            "model_router": self.model_router is not None,
            "lead_scoring": self.lead_scorer is not None,
        }


# Singleton
_services = Services()


def get_services() -> Services:
    """Get the global services instance."""
    return _services


def initialize_services(provider: Optional[Any] = None):
    """Initialize all services (called at startup)."""
    _services.initialize(provider=provider)
