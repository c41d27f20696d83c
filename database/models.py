"""
SQLAlchemy ORM models for the Bizplan Assistant.

Persistent lead-signal snapshots, one row per extraction.
"""

import uuid
from datetime import datetime

from sqlalchemy import Column, String, Integer, Float, DateTime, JSON, Index
from sqlalchemy.orm import DeclarativeBase


def _uuid() -> str:
    return str(uuid.uuid4())


class Base(DeclarativeBase):
    pass


class LeadSignalsRecord(Base):
    __tablename__ = "lead_signals"

    id = Column(String(36), primary_key=True, default=_uuid)
    session_id = Column(String(64), nullable=False, index=True)
    model_id = Column(String(255), nullable=True)
    signals_json = Column(JSON, nullable=False)
    lead_score = Column(Integer, nullable=False)  # rule-computed
    model_score = Column(Float, nullable=True)    # LeadSignals.score
    priority = Column(String(10), default="cold")  # hot, warm, cold
    created_at = Column(DateTime, default=datetime.utcnow)

    __table_args__ = (
        Index("ix_lead_signals_session_created", "session_id", "created_at"),
    )
