"""
Lead Scoring Module for the Bizplan Assistant.

This module provides lead qualification and scoring capabilities:
- LeadSignals schema (strict, all-or-nothing validation)
- Guided-JSON signal extraction with a single retry
- Rule-based lead scoring (0-100 scale)
"""

from .signals import LeadSignals, LeadSignalsValidationError, LEAD_SIGNALS_JSON_SCHEMA, parse_lead_signals
from .extractor import LeadSignalsExtractor, LeadSignalsInput
from .scoring_model import LeadScorer, LeadScore, LeadPriority, compute_lead_score

__all__ = [
    "LEAD_SIGNALS_JSON_SCHEMA",
    "LeadSignals",
    "LeadSignalsValidationError",
    "parse_lead_signals",
    "LeadSignalsExtractor",
    "LeadSignalsInput",
    "LeadScorer",
    "LeadScore",
    "LeadPriority",
    "compute_lead_score",
]
