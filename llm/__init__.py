"""
LLM Module for the Bizplan Assistant.

This module handles:
- NVIDIA NIM provider (OpenAI-compatible, guided JSON)
- Phase/model routing and research triggering
- Guided JSON completion with a single bounded retry
- Output safety filtering
"""

from .guardrails import FilterResult, filter_output
from .guided import GuidedOutputError, guided_json_completion
from .router import DocStats, ModelConfig, ModelRouter, Phase, RoutingDecision, UserFlags

__all__ = [
    "DocStats",
    "FilterResult",
    "GuidedOutputError",
    "ModelConfig",
    "ModelRouter",
    "Phase",
    "RoutingDecision",
    "UserFlags",
    "filter_output",
    "guided_json_completion",
]
