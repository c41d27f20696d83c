"""
Model Routing API Routes for the Bizplan Assistant.
"""

import logging
from typing import Optional

from fastapi import APIRouter
from pydantic import BaseModel, ConfigDict, Field

from ..middleware.metrics import record_model_route
from ..services import get_services
from llm.router import DocStats, Phase, UserFlags

logger = logging.getLogger(__name__)

router = APIRouter()


# ── Request / Response Models ─────────────────────────────────────

class DocStatsModel(BaseModel):
    pages: int = Field(default=0, ge=0)
    sources: int = Field(default=0, ge=0)
    conflicts: bool = False

    def to_doc_stats(self) -> DocStats:
        return DocStats(pages=self.pages, sources=self.sources, conflicts=self.conflicts)


class UserFlagsModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    cost_mode: bool = Field(default=False, alias="costMode")

    def to_user_flags(self) -> UserFlags:
        return UserFlags(cost_mode=self.cost_mode)


class RouteRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    phase: Phase
    doc_stats: DocStatsModel = Field(default_factory=DocStatsModel, alias="docStats")
    user_flags: UserFlagsModel = Field(default_factory=UserFlagsModel, alias="userFlags")
    user_query: Optional[str] = Field(default=None, alias="userQuery", max_length=4000)


class RouteResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    phase: Phase
    model: str
    trigger_research: bool = Field(alias="triggerResearch")


# ── Endpoints ─────────────────────────────────────────────────────

@router.post("/route", response_model=RouteResponse, response_model_by_alias=True)
async def route_turn(request: RouteRequest):
    """
    Choose the model for a conversational turn and decide whether to run research.
    """
    services = get_services()
    decision = services.model_router.route(
        phase=request.phase,
        doc_stats=request.doc_stats.to_doc_stats(),
        user_flags=request.user_flags.to_user_flags(),
        user_query=request.user_query,
    )
    record_model_route(request.phase.value, decision.model)

    return RouteResponse(
        phase=request.phase,
        model=decision.model,
        trigger_research=decision.trigger_research,
    )
