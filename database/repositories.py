"""
Repository classes for the Bizplan Assistant data access layer.
"""

import logging
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from .models import LeadSignalsRecord

logger = logging.getLogger(__name__)


class LeadSignalsRepository:
    """Save/query sink for extracted lead signals."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def save(
        self,
        session_id: str,
        signals_json: dict,
        lead_score: int,
        model_score: Optional[float] = None,
        priority: str = "cold",
        model_id: Optional[str] = None,
    ) -> LeadSignalsRecord:
        record = LeadSignalsRecord(
            session_id=session_id,
            signals_json=signals_json,
            lead_score=lead_score,
            model_score=model_score,
            priority=priority,
            model_id=model_id,
        )
        self.session.add(record)
        await self.session.flush()
        logger.info(f"Lead signals saved: session={session_id}, score={lead_score}")
        return record

    async def get_latest(self, session_id: str) -> Optional[LeadSignalsRecord]:
        result = await self.session.execute(
            select(LeadSignalsRecord)
            .where(LeadSignalsRecord.session_id == session_id)
            .order_by(LeadSignalsRecord.created_at.desc())
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def list_by_min_score(
        self, min_score: int = 0, limit: int = 50
    ) -> List[LeadSignalsRecord]:
        result = await self.session.execute(
            select(LeadSignalsRecord)
            .where(LeadSignalsRecord.lead_score >= min_score)
            .order_by(LeadSignalsRecord.lead_score.desc())
            .limit(limit)
        )
        return list(result.scalars().all())
