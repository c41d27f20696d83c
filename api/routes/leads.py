"""
Lead Signal API Routes for the Bizplan Assistant.
"""

import logging
import time
import uuid
from typing import Any, Dict, Optional

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, ConfigDict, Field

from ..middleware.metrics import record_extraction, record_lead_score, record_llm_latency
from ..services import get_services
from database import session as db_session
from database.repositories import LeadSignalsRepository
from lead_scoring.extractor import LeadSignalsInput
from lead_scoring.scoring_model import LeadScore
from lead_scoring.signals import LeadSignals, LeadSignalsValidationError

logger = logging.getLogger(__name__)

router = APIRouter()


# ── Request / Response Models ─────────────────────────────────────

class ExtractSignalsRequest(BaseModel):
    """Materials for lead signal extraction."""
    model_config = ConfigDict(populate_by_name=True)

    conversation_text: str = Field(..., min_length=1, max_length=50_000, alias="conversationText")
    session_id: Optional[str] = Field(default=None, max_length=64, alias="sessionId")
    context_summary_json: Optional[str] = Field(default=None, alias="contextSummaryJSON")
    website_analysis: Optional[str] = Field(default=None, alias="websiteAnalysis")
    financials_analysis: Optional[str] = Field(default=None, alias="financialsAnalysis")
    research_brief: Optional[str] = Field(default=None, alias="researchBrief")
    docs_count: Optional[int] = Field(default=None, ge=0, alias="docsCount")
    website_found: Optional[bool] = Field(default=None, alias="websiteFound")
    research_coverage: Optional[float] = Field(default=None, ge=0, le=100, alias="researchCoverage")

    def to_input(self) -> LeadSignalsInput:
        return LeadSignalsInput(
            conversation_text=self.conversation_text,
            context_summary_json=self.context_summary_json,
            website_analysis=self.website_analysis,
            financials_analysis=self.financials_analysis,
            research_brief=self.research_brief,
            docs_count=self.docs_count,
            website_found=self.website_found,
            research_coverage=self.research_coverage,
        )


class LeadScoreResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True, protected_namespaces=())

    lead_score: int = Field(alias="leadScore")
    priority: str
    breakdown: Dict[str, int] = {}
    model_score: Optional[float] = Field(default=None, alias="modelScore")


class LeadSignalsResponse(BaseModel):
    """Signals plus rule-based score; signals are null when unavailable."""
    model_config = ConfigDict(populate_by_name=True, protected_namespaces=())

    session_id: str = Field(alias="sessionId")
    signals: Optional[Dict[str, Any]] = None
    lead_score: Optional[int] = Field(default=None, alias="leadScore")
    priority: Optional[str] = None
    breakdown: Dict[str, int] = {}
    model_score: Optional[float] = Field(default=None, alias="modelScore")
    error: Optional[str] = None


# ── Endpoints ─────────────────────────────────────────────────────

@router.post("/leads/signals", response_model=LeadSignalsResponse)
async def extract_lead_signals(request: ExtractSignalsRequest):
    """
    Extract lead signals from the conversation and score them.

    Extraction failures never block the conversation: the lead is
    returned unscored with an error message instead.
    """
    services = get_services()
    session_id = request.session_id or str(uuid.uuid4())
    extractor = services.extractor_for()

    start = time.time()
    try:
        signals = await extractor.extract(request.to_input())
    except LeadSignalsValidationError as e:
        record_extraction("invalid")
        logger.warning(
            f"Lead signals unavailable for session {session_id}: {e} "
            f"(raw={e.raw_content[:200]!r})"
        )
        return LeadSignalsResponse(session_id=session_id, error="signals_unavailable")
    except Exception as e:
        record_extraction("provider_error")
        logger.error(f"Lead signal extraction failed for session {session_id}: {e}")
        return LeadSignalsResponse(session_id=session_id, error="provider_unavailable")
    finally:
        record_llm_latency(time.time() - start)

    record_extraction("success")
    result = services.lead_scorer.score(signals)
    record_lead_score(result.score)

    await _persist(session_id, signals, result, extractor.model_id)

    return LeadSignalsResponse(
        session_id=session_id,
        signals=signals.to_dict(),
        lead_score=result.score,
        priority=result.priority.value,
        breakdown=result.score_breakdown,
        model_score=result.model_score,
    )


@router.post("/leads/score", response_model=LeadScoreResponse)
async def score_lead_signals(signals: LeadSignals):
    """Score an already-validated LeadSignals record (no model call)."""
    result = get_services().lead_scorer.score(signals)
    return LeadScoreResponse(
        lead_score=result.score,
        priority=result.priority.value,
        breakdown=result.score_breakdown,
        model_score=result.model_score,
    )


@router.get("/leads/signals/{session_id}", response_model=LeadSignalsResponse)
async def get_lead_signals(session_id: str):
    """Most recent stored signals for a session."""
    if not db_session.is_initialized():
        raise HTTPException(status_code=404, detail="Lead signals not found")

    async with db_session.session_scope() as session:
        record = await LeadSignalsRepository(session).get_latest(session_id)

    if not record:
        raise HTTPException(status_code=404, detail="Lead signals not found")

    # Breakdown is not stored; rebuild it from the stored signals
    stored = LeadSignals.model_validate(record.signals_json)
    breakdown = get_services().lead_scorer.score(stored).score_breakdown

    return LeadSignalsResponse(
        session_id=record.session_id,
        signals=record.signals_json,
        lead_score=record.lead_score,
        priority=record.priority,
        breakdown=breakdown,
        model_score=record.model_score,
    )


# ── Helpers ───────────────────────────────────────────────────────

async def _persist(
    session_id: str,
    signals: LeadSignals,
    result: LeadScore,
    model_id: str,
) -> None:
    """Store the snapshot when a database is configured; never fails the request."""
    if not db_session.is_initialized():
        return
    try:
        async with db_session.session_scope() as session:
            await LeadSignalsRepository(session).save(
                session_id=session_id,
                signals_json=signals.to_dict(),
                lead_score=result.score,
                model_score=result.model_score,
                priority=result.priority.value,
                model_id=model_id,
            )
    except Exception as e:
        logger.warning(f"Failed to persist lead signals for session {session_id}: {e}")
