"""
Lead Scoring Model for the Bizplan Assistant.

Deterministic rule-based scoring of validated LeadSignals records.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional

from .signals import LeadSignals

logger = logging.getLogger(__name__)


class LeadPriority(Enum):
    """Lead priority levels."""
    HOT = "hot"      # Score >= 70 - Immediate follow-up
    WARM = "warm"    # Score 50-69 - Standard follow-up
    COLD = "cold"    # Score < 50 - Nurture


@dataclass
class LeadScore:
    """Lead score result."""
    score: int  # 0-100, rule-computed
    priority: LeadPriority
    score_breakdown: Dict[str, int] = field(default_factory=dict)
    model_score: Optional[float] = None  # LeadSignals.score, kept separate
    timestamp: datetime = field(default_factory=datetime.utcnow)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "score": self.score,
            "priority": self.priority.value,
            "score_breakdown": self.score_breakdown,
            "model_score": self.model_score,
            "timestamp": self.timestamp.isoformat(),
        }


class LeadScorer:
    """
    Scores leads from extracted signals.

    Scoring Rules (0-100):
    - Authority Owner/Partner: +20
    - Budget $5k–$20k: +15
    - Budget $20k–$50k or >$50k: +30
    - Urgency Now or Soon: +15
    - Data readiness Medium: +10
    - Data readiness High: +20
    - Stack Basic SaaS or Integrated: +10
    - Research coverage >= 60: +5

    Thresholds:
    - Score >= 70: Hot Lead
    - Score 50-69: Warm Lead
    - Score < 50: Cold Lead
    """

    SCORING_RULES = {
        "authority_owner": 20,
        "budget_mid": 15,
        "budget_high": 30,
        "urgency_near_term": 15,
        "data_readiness_medium": 10,
        "data_readiness_high": 20,
        "stack_modern": 10,
        "research_coverage": 5,
    }

    HIGH_BUDGET_BANDS = ("$20k–$50k", ">$50k")
    NEAR_TERM_URGENCY = ("Now (0–30d)", "Soon (31–90d)")
    MODERN_STACKS = ("Basic SaaS", "Integrated")
    RESEARCH_COVERAGE_MIN = 60

    def __init__(self, hot_threshold: int = 70, warm_threshold: int = 50):
        """
        Args:
            hot_threshold: Minimum score for a hot lead
            warm_threshold: Minimum score for a warm lead
        """
        self.hot_threshold = hot_threshold
        self.warm_threshold = warm_threshold

    def score(self, signals: LeadSignals) -> LeadScore:
        """
        Calculate the rule-based score for a signals record.

        Args:
            signals: Validated lead signals

        Returns:
            LeadScore with score, breakdown and priority
        """
        breakdown = self._breakdown(signals)
        score = max(0, min(100, sum(breakdown.values())))

        if score >= self.hot_threshold:
            priority = LeadPriority.HOT
        elif score >= self.warm_threshold:
            priority = LeadPriority.WARM
        else:
            priority = LeadPriority.COLD

        return LeadScore(
            score=score,
            priority=priority,
            score_breakdown=breakdown,
            model_score=signals.score,
        )

    def _breakdown(self, signals: LeadSignals) -> Dict[str, int]:
        rules = self.SCORING_RULES
        breakdown: Dict[str, int] = {}

        if signals.authority == "Owner/Partner":
            breakdown["authority_owner"] = rules["authority_owner"]

        if signals.budget_band == "$5k–$20k":
            breakdown["budget_mid"] = rules["budget_mid"]
        if signals.budget_band in self.HIGH_BUDGET_BANDS:
            breakdown["budget_high"] = rules["budget_high"]

        if signals.urgency in self.NEAR_TERM_URGENCY:
            breakdown["urgency_near_term"] = rules["urgency_near_term"]

        if signals.data_readiness == "Medium":
            breakdown["data_readiness_medium"] = rules["data_readiness_medium"]
        if signals.data_readiness == "High":
            breakdown["data_readiness_high"] = rules["data_readiness_high"]

        if signals.stack_maturity in self.MODERN_STACKS:
            breakdown["stack_modern"] = rules["stack_modern"]

        if (signals.research_coverage or 0) >= self.RESEARCH_COVERAGE_MIN:
            breakdown["research_coverage"] = rules["research_coverage"]

        return breakdown


_default_scorer = LeadScorer()


def compute_lead_score(signals: LeadSignals) -> int:
    """Deterministic 0-100 lead score for a validated signals record."""
    return _default_scorer.score(signals).score
