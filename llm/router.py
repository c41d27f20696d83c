"""
Phase/Model Router for the Bizplan Assistant.

Maps the conversation phase and the complexity of gathered documents to a
model identifier, and decides when a supplementary research step is needed.
"""

import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional

logger = logging.getLogger(__name__)


class Phase(str, Enum):
    """Conversation phases."""
    INTAKE = "intake"      # Initial context gathering
    PLAN = "plan"          # Business-plan drafting
    RESEARCH = "research"  # Supplementary research step


@dataclass(frozen=True)
class DocStats:
    """Complexity profile of the documents gathered so far."""
    pages: int = 0
    sources: int = 0
    conflicts: bool = False


@dataclass(frozen=True)
class UserFlags:
    """User-chosen behaviour toggles."""
    cost_mode: bool = False


@dataclass(frozen=True)
class ModelConfig:
    """
    Configured model identifiers.

    ``plan`` and ``cost_mode`` fall back to ``default`` when unset. ``fast``
    is reserved and not selected by any routing branch.
    """
    default: str
    plan: Optional[str] = None
    cost_mode: Optional[str] = None
    fast: Optional[str] = None

    @property
    def plan_model(self) -> str:
        return self.plan or self.default

    @property
    def cost_mode_model(self) -> str:
        return self.cost_mode or self.default

    @classmethod
    def from_settings(cls, settings) -> "ModelConfig":
        return cls(
            default=settings.llm_default_model,
            plan=settings.llm_plan_model,
            cost_mode=settings.llm_cost_mode_model,
            fast=settings.llm_fast_model,
        )


@dataclass(frozen=True)
class RoutingDecision:
    """Model choice plus research trigger for a single turn."""
    model: str
    trigger_research: bool

    def to_dict(self):
        return {"model": self.model, "triggerResearch": self.trigger_research}


class ModelRouter:
    """
    Chooses which model to invoke for a conversational turn.

    Routing:
    - intake:   cost-mode model if the user asked for it, else default
    - plan:     plan model (falls back to default)
    - research: plan model when documents are large or conflicting, else default

    Research is triggered by an explicit keyword in the user query or by
    document volume / conflicts.
    """

    RESEARCH_KEYWORDS = re.compile(
        r"competitor|market review|benchmark|compare|research",
        re.IGNORECASE,
    )

    # Research trigger thresholds
    RESEARCH_PAGES_THRESHOLD = 20
    RESEARCH_SOURCES_THRESHOLD = 3

    # Research-phase escalation thresholds
    ESCALATION_PAGES_THRESHOLD = 40
    ESCALATION_SOURCES_THRESHOLD = 6

    def __init__(self, config: ModelConfig):
        self.config = config

    def choose_model(
        self,
        phase: Phase,
        doc_stats: DocStats,
        user_flags: Optional[UserFlags] = None,
    ) -> str:
        """
        Select the model identifier for a phase.

        Args:
            phase: Conversation phase
            doc_stats: Document complexity profile
            user_flags: User toggles (absent flags are False)

        Returns:
            Model identifier

        Raises:
            ValueError: unknown phase value
        """
        phase = Phase(phase)
        flags = user_flags or UserFlags()

        if phase == Phase.INTAKE:
            # The default model does not emit <think> markup during intake
            if flags.cost_mode:
                return self.config.cost_mode_model
            return self.config.default

        if phase == Phase.PLAN:
            return self.config.plan_model

        # research
        if self._needs_escalation(doc_stats):
            return self.config.plan_model
        return self.config.default

    def should_trigger_research(
        self,
        doc_stats: DocStats,
        user_query: Optional[str],
    ) -> bool:
        """Decide whether to run the research step for this turn."""
        if self.RESEARCH_KEYWORDS.search(user_query or ""):
            return True
        if doc_stats.pages > self.RESEARCH_PAGES_THRESHOLD:
            return True
        if doc_stats.sources > self.RESEARCH_SOURCES_THRESHOLD:
            return True
        if doc_stats.conflicts:
            return True
        return False

    def route(
        self,
        phase: Phase,
        doc_stats: DocStats,
        user_flags: Optional[UserFlags] = None,
        user_query: Optional[str] = None,
    ) -> RoutingDecision:
        """Model choice and research trigger in one call."""
        phase = Phase(phase)
        decision = RoutingDecision(
            model=self.choose_model(phase, doc_stats, user_flags),
            trigger_research=self.should_trigger_research(doc_stats, user_query),
        )
        logger.debug(
            f"Routing: phase={phase.value} pages={doc_stats.pages} "
            f"sources={doc_stats.sources} conflicts={doc_stats.conflicts} "
            f"→ {decision.model} (research={decision.trigger_research})"
        )
        return decision

    def _needs_escalation(self, doc_stats: DocStats) -> bool:
        return (
            doc_stats.conflicts
            or doc_stats.pages > self.ESCALATION_PAGES_THRESHOLD
            or doc_stats.sources > self.ESCALATION_SOURCES_THRESHOLD
        )
